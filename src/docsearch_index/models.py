"""Data models for the documentation search index."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Result:
    """One documentation target for an index entry."""

    display_label: str
    target_path: str
    anchor: str
    container_label: str

    @property
    def url(self) -> str:
        """Return the page link, ``target_path#anchor``."""
        return f"{self.target_path}#{self.anchor}"


@dataclass(frozen=True)
class Entry:
    """Represents one search key and its documentation targets."""

    key: str
    entry_id: int
    results: tuple[Result, ...]
