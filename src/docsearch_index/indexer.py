"""Indexer for Doxygen generated ``search/`` directories."""

import logging
import re
from pathlib import Path
from typing import Any

from docsearch_index.parser import SearchDataParser
from docsearch_index.store import IndexStore

logger = logging.getLogger(__name__)


class SearchDataIndexer:
    """Builds an IndexStore from the search data files of one category."""

    FILE_PATTERN = re.compile(r"^(?P<category>[a-z]+)_(?P<number>[0-9a-f]+)\.js$")

    def __init__(self, parser: SearchDataParser | None = None) -> None:
        """Initialise indexer with a parser instance.

        Args:
            parser: Parser for individual search data files.
        """
        self.parser = parser or SearchDataParser()

    def index_from_path(self, search_dir: Path, category: str = "functions") -> IndexStore:
        """Load every search data file of a category into one store.

        Files are read in the order of their hexadecimal suffix, so
        ``functions_a.js`` follows ``functions_9.js``.

        Args:
            search_dir: Path to the generated ``search`` directory.
            category: File prefix such as ``functions`` or ``classes``.

        Returns:
            IndexStore with the entries of every file, in file order.

        Raises:
            ValueError: If the search directory does not exist.
            FormatError: If any file is malformed.
        """
        if not search_dir.is_dir():
            msg = f"Search directory does not exist: {search_dir}"
            raise ValueError(msg)

        files = self._category_files(search_dir, category)
        logger.info("Found %d %s search data files", len(files), category)

        table: list[list[Any]] = []
        for file_path in files:
            rows = self.parser.parse_file(file_path)
            logger.debug("Parsed %d rows from %s", len(rows), file_path.name)
            table.extend(rows)

        return IndexStore.load(table)

    def categories(self, search_dir: Path) -> list[str]:
        """Return the sorted category names present in a search directory.

        Only file names are inspected. Categories such as ``classes`` or
        ``all`` usually link whole pages without an anchor, and loading them
        with :meth:`index_from_path` then raises ``FormatError``.

        Args:
            search_dir: Path to the generated ``search`` directory.

        Returns:
            Distinct category prefixes.
        """
        found: set[str] = set()
        for file_path in search_dir.glob("*.js"):
            match = self.FILE_PATTERN.match(file_path.name)
            if match:
                found.add(match.group("category"))
        return sorted(found)

    def _category_files(self, search_dir: Path, category: str) -> list[Path]:
        numbered = []
        for file_path in search_dir.glob(f"{category}_*.js"):
            match = self.FILE_PATTERN.match(file_path.name)
            if match and match.group("category") == category:
                # Doxygen numbers files in hexadecimal
                numbered.append((int(match.group("number"), 16), file_path))
        return [file_path for _, file_path in sorted(numbered)]
