"""Parser for Doxygen client-side search data files."""

import ast
import html
import re
from pathlib import Path
from typing import Any

from docsearch_index.exceptions import FormatError

_SEARCH_DATA_RE = re.compile(r"^\s*var\s+searchData\s*=\s*(?P<array>.*?)\s*;?\s*$", re.DOTALL)
_ENTRY_ID_RE = re.compile(r"[0-9]+")


class SearchDataParser:
    """Parses ``search/<category>_<n>.js`` files into serialized index tables.

    Doxygen rows look like::

        ['exact_743',['exact',['../page.html#a7e76',1,'examples::test_pycompadre']]]

    The row id carries the entry id after its last underscore, the second
    element holds the display name followed by one ``[url, target, scope]``
    reference per documentation target.
    """

    PARENT_PREFIX = "../"

    def parse_file(self, file_path: Path) -> list[list[Any]]:
        """Parse a search data file.

        Args:
            file_path: Path to the JavaScript file.

        Returns:
            Serialized table accepted by ``IndexStore.load``.

        Raises:
            FormatError: If the file cannot be decoded or is malformed.
        """
        try:
            source = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Search data file is not valid UTF-8: {file_path}"
            raise FormatError(msg) from exc
        return self.parse_text(source)

    def parse_text(self, source: str) -> list[list[Any]]:
        """Parse the text of a search data file.

        Args:
            source: JavaScript source assigning ``var searchData``.

        Returns:
            Serialized table accepted by ``IndexStore.load``.

        Raises:
            FormatError: If the source is not a ``searchData`` array literal
                or any row is malformed.
        """
        rows = self._read_array(source)
        return [self._convert_row(position, row) for position, row in enumerate(rows)]

    def _read_array(self, source: str) -> list[Any]:
        """Extract the array literal assigned to ``searchData``.

        The literal only uses quoted strings, integers and nested arrays, so
        it is also a valid Python literal.
        """
        match = _SEARCH_DATA_RE.match(source)
        if match is None:
            msg = "Source does not assign var searchData"
            raise FormatError(msg)

        try:
            rows = ast.literal_eval(match.group("array"))
        except (ValueError, SyntaxError) as exc:
            msg = f"searchData is not an array literal: {exc}"
            raise FormatError(msg) from exc

        if not isinstance(rows, list):
            msg = "searchData must be an array"
            raise FormatError(msg)
        return rows

    def _convert_row(self, position: int, row: Any) -> list[Any]:
        """Convert one Doxygen row to a serialized index record."""
        if not isinstance(row, list) or len(row) != 2:
            msg = f"Row {position}: expected [row_id, [name, references...]]"
            raise FormatError(msg)

        row_id, body = row
        entry_id = self._extract_entry_id(position, row_id)
        if not isinstance(body, list) or len(body) < 2 or not isinstance(body[0], str):
            msg = f"Row {position} ({row_id!r}): expected a name followed by references"
            raise FormatError(msg)

        name = html.unescape(body[0])
        references = body[1:]
        single = len(references) == 1
        results = [
            self._convert_reference(position, number, name, reference, single)
            for number, reference in enumerate(references)
        ]
        return [name, [entry_id, results]]

    def _extract_entry_id(self, position: int, row_id: Any) -> int:
        """Return the numeric suffix of a row id such as ``evaluate_738``."""
        if not isinstance(row_id, str) or "_" not in row_id:
            msg = f"Row {position}: row id must look like name_<number>"
            raise FormatError(msg)
        suffix = row_id.rsplit("_", 1)[1]
        if not _ENTRY_ID_RE.fullmatch(suffix):
            msg = f"Row {position}: row id {row_id!r} has no numeric entry id"
            raise FormatError(msg)
        return int(suffix)

    def _convert_reference(self, position: int, number: int, name: str, reference: Any, single: bool) -> list[str]:
        """Convert a ``[url, target, scope]`` reference to a serialized result.

        Args:
            position: Row index, for error messages.
            number: Reference index within the row, for error messages.
            name: Display name of the row.
            reference: The raw reference.
            single: Whether this is the only reference of the row.

        Returns:
            ``[display_label, target_path, anchor, container_label]``.
        """
        where = f"Row {position}, reference {number}"
        if (
            not isinstance(reference, list)
            or len(reference) != 3
            or not isinstance(reference[0], str)
            or not isinstance(reference[2], str)
        ):
            msg = f"{where}: expected [url, target, scope]"
            raise FormatError(msg)

        url, _target, scope = reference
        if url.count("#") != 1:
            msg = f"{where}: reference {url!r} must contain exactly one '#'"
            raise FormatError(msg)

        target_path, anchor = url.split("#")
        target_path = target_path.removeprefix(self.PARENT_PREFIX)
        if not target_path or not anchor:
            msg = f"{where}: reference {url!r} has an empty page or anchor"
            raise FormatError(msg)

        scope = html.unescape(scope)
        # Lone references show the name with the scope as context; overloads
        # list the qualified signature of each target instead.
        if single:
            return [name, target_path, anchor, scope]
        return [scope, target_path, anchor, self._qualifier(scope)]

    @staticmethod
    def _qualifier(qualified_name: str) -> str:
        """Return the enclosing scope of a qualified name.

        Args:
            qualified_name: Name such as ``A::B::f(int x)``.

        Returns:
            The qualifier (``A::B``), or an empty string if unqualified.
        """
        head = qualified_name.split("(", 1)[0]
        if "::" not in head:
            return ""
        return head.rsplit("::", 1)[0]
