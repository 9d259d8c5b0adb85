"""Domain models for categories."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CategoryRecord:
    """Represents a globally shared category."""

    id: int
    name: str
    thumbnail: str | None = None


@dataclass(frozen=True)
class CategoryDetail:
    """Category with the number of photos linked to it."""

    category_id: int
    name: str
    thumbnail: str | None
    count: int
