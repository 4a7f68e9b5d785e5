"""Exceptions raised by the documentation search index."""


class SearchIndexError(Exception):
    """Base exception for all search index errors."""


class FormatError(SearchIndexError, ValueError):
    """Serialized index data does not have the required shape."""


class NotFoundError(SearchIndexError, LookupError):
    """No entry exists with the requested id."""


class InvalidArgument(SearchIndexError, TypeError):  # noqa: N818
    """A query was called with an argument it does not accept."""
