"""Typed-ahead substring search over a documentation search index."""

from docsearch_index.exceptions import InvalidArgument
from docsearch_index.models import Entry, Result
from docsearch_index.store import IndexStore


class QueryEngine:
    """Answers case-insensitive substring queries against an IndexStore.

    Matching entries are ordered deterministically:

    1. keys starting with the query before keys matching mid-string,
    2. shorter keys first,
    3. case-insensitive key order,
    4. ascending entry id.

    Results of one entry keep their stored order and are never deduplicated.
    """

    @staticmethod
    def _validate_query(query: object) -> str:
        if not isinstance(query, str):
            msg = f"Query must be a string, got {type(query).__name__}"
            raise InvalidArgument(msg)
        return query

    def search_entries(self, store: IndexStore, query: str) -> list[Entry]:
        """Return the entries whose key contains the query, in ranked order.

        Args:
            store: Loaded index to search.
            query: Partial or full identifier; empty means no input yet.

        Returns:
            Matching entries, empty for an empty query.

        Raises:
            InvalidArgument: If query is not a string.
        """
        needle = self._validate_query(query).lower()
        if not needle:
            return []

        ranked: list[tuple[tuple[int, int, str, int], Entry]] = []
        for entry in store.all_entries():
            folded = entry.key.lower()
            position = folded.find(needle)
            if position < 0:
                continue
            tier = 0 if position == 0 else 1
            ranked.append(((tier, len(entry.key), folded, entry.entry_id), entry))

        ranked.sort(key=lambda item: item[0])
        return [entry for _, entry in ranked]

    def search(
        self,
        store: IndexStore,
        query: str,
        limit: int | None = None,
        container: str | None = None,
    ) -> list[Result]:
        """Search the index and flatten matches into documentation targets.

        Args:
            store: Loaded index to search.
            query: Partial or full identifier; empty means no input yet.
            limit: Optional maximum number of results.
            container: Optional exact container label to keep.

        Returns:
            Results of every matching entry, in ranked entry order.

        Raises:
            InvalidArgument: If query is not a string or limit is not a
                non-negative integer.
        """
        if limit is not None:
            if isinstance(limit, bool) or not isinstance(limit, int):
                msg = f"Limit must be an integer, got {type(limit).__name__}"
                raise InvalidArgument(msg)
            if limit < 0:
                msg = f"Limit must not be negative, got {limit}"
                raise InvalidArgument(msg)

        results: list[Result] = []
        for entry in self.search_entries(store, query):
            for result in entry.results:
                if container is not None and result.container_label != container:
                    continue
                if limit is not None and len(results) >= limit:
                    return results
                results.append(result)
        return results
