"""Immutable in-memory store for documentation search index entries."""

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from docsearch_index.exceptions import FormatError, NotFoundError
from docsearch_index.models import Entry, Result
from docsearch_index.parser import SearchDataParser

logger = logging.getLogger(__name__)

_RESULT_FIELDS = ("display_label", "target_path", "anchor", "container_label")


def _is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


class IndexStore:
    """Holds the entry table of one generated search index.

    A store is built once by :meth:`load` (or one of its variants) and is
    read-only afterwards, so any number of threads may query it without
    locking.
    """

    def __init__(self, entries: Sequence[Entry]) -> None:
        """Initialise the store from already validated entries.

        Args:
            entries: Entries in load order.

        Raises:
            FormatError: If two entries share an id or an entry has no results.
        """
        by_id: dict[int, Entry] = {}
        for entry in entries:
            if not entry.results:
                msg = f"Entry {entry.entry_id} ({entry.key!r}) has no results"
                raise FormatError(msg)
            if entry.entry_id in by_id:
                msg = f"Duplicate entry id {entry.entry_id} for key {entry.key!r}"
                raise FormatError(msg)
            by_id[entry.entry_id] = entry
        self._entries = tuple(entries)
        self._by_id: Mapping[int, Entry] = MappingProxyType(by_id)

    @classmethod
    def load(cls, serialized_table: Sequence[Any]) -> "IndexStore":
        """Parse a serialized table into a store.

        Each record has the shape
        ``[key, [entry_id, [[display_label, target_path, anchor, container_label], ...]]]``.

        Args:
            serialized_table: Ordered sequence of records.

        Returns:
            New IndexStore holding one Entry per record.

        Raises:
            FormatError: If any record is malformed or an id is repeated.
        """
        if not _is_array(serialized_table):
            msg = f"Serialized table must be a sequence of records, got {type(serialized_table).__name__}"
            raise FormatError(msg)

        entries = [cls._parse_record(position, record) for position, record in enumerate(serialized_table)]
        store = cls(entries)
        logger.info("Loaded search index with %d entries", len(store))
        return store

    @classmethod
    def load_json(cls, text: str) -> "IndexStore":
        """Load a store from a serialized table encoded as JSON.

        Args:
            text: JSON document holding the table.

        Returns:
            New IndexStore.

        Raises:
            FormatError: If the text is not valid JSON or the table is malformed.
        """
        try:
            table = json.loads(text)
        except json.JSONDecodeError as exc:
            msg = f"Search index is not valid JSON: {exc}"
            raise FormatError(msg) from exc
        return cls.load(table)

    @classmethod
    def from_search_data(cls, source: str) -> "IndexStore":
        """Load a store from the text of a Doxygen ``searchData`` file."""
        return cls.load(SearchDataParser().parse_text(source))

    @staticmethod
    def _parse_record(position: int, record: Any) -> Entry:
        """Validate one serialized record and build its Entry.

        Args:
            position: Index of the record in the table, for error messages.
            record: The serialized record.

        Returns:
            Entry built from the record.

        Raises:
            FormatError: If the record does not have the required shape.
        """
        if not _is_array(record) or len(record) != 2:
            msg = f"Record {position}: expected [key, [entry_id, results]]"
            raise FormatError(msg)

        key, body = record
        if not isinstance(key, str):
            msg = f"Record {position}: key must be a string"
            raise FormatError(msg)
        if not _is_array(body) or len(body) != 2:
            msg = f"Record {position} ({key!r}): expected [entry_id, results]"
            raise FormatError(msg)

        entry_id, raw_results = body
        # bool is an int subclass but never a valid id
        if isinstance(entry_id, bool) or not isinstance(entry_id, int):
            msg = f"Record {position} ({key!r}): entry id must be an integer"
            raise FormatError(msg)
        if not _is_array(raw_results) or not raw_results:
            msg = f"Record {position} ({key!r}): results must be a non-empty sequence"
            raise FormatError(msg)

        results = tuple(
            IndexStore._parse_result(position, key, number, raw) for number, raw in enumerate(raw_results)
        )
        return Entry(key=key, entry_id=entry_id, results=results)

    @staticmethod
    def _parse_result(position: int, key: str, number: int, raw: Any) -> Result:
        where = f"Record {position} ({key!r}), result {number}"
        if not _is_array(raw) or len(raw) != len(_RESULT_FIELDS):
            msg = f"{where}: expected [display_label, target_path, anchor, container_label]"
            raise FormatError(msg)

        for name, value in zip(_RESULT_FIELDS, raw, strict=True):
            if not isinstance(value, str):
                msg = f"{where}: {name} must be a string"
                raise FormatError(msg)

        display_label, target_path, anchor, container_label = raw
        if not target_path or not anchor:
            msg = f"{where}: target path and anchor must not be empty"
            raise FormatError(msg)
        if "#" in target_path or "#" in anchor:
            msg = f"{where}: target path and anchor must not contain '#'"
            raise FormatError(msg)

        return Result(
            display_label=display_label,
            target_path=target_path,
            anchor=anchor,
            container_label=container_label,
        )

    def all_entries(self) -> tuple[Entry, ...]:
        """Return every entry in load order."""
        return self._entries

    def entry_by_id(self, entry_id: int) -> Entry:
        """Retrieve an entry by its id.

        Args:
            entry_id: Internal handle assigned when the index was generated.

        Returns:
            The matching Entry.

        Raises:
            NotFoundError: If no entry has this id.
        """
        # ids are plain ints; True or 1.0 would otherwise hash to entry 1
        if isinstance(entry_id, bool) or not isinstance(entry_id, int):
            msg = f"No entry with id {entry_id!r}"
            raise NotFoundError(msg)
        try:
            return self._by_id[entry_id]
        except KeyError:
            msg = f"No entry with id {entry_id!r}"
            raise NotFoundError(msg) from None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)
