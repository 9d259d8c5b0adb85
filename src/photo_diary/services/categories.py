"""Category lookup, race-safe creation and listing."""

import logging
from dataclasses import dataclass
from typing import Protocol

from photo_diary.domain.categories import CategoryDetail, CategoryRecord
from photo_diary.errors import ConflictRetry, NotFoundError

_logger = logging.getLogger(__name__)


class CategoryRepository(Protocol):
    """Persistence interface for categories and photo associations."""

    def find_by_name(self, name: str) -> CategoryRecord | None:
        """Return the category with exactly this name, if present."""

    def get_category(self, category_id: int) -> CategoryRecord | None:
        """Return a category by id, if present."""

    def create_category(self, name: str, thumbnail: str | None) -> CategoryRecord:
        """Insert a category; raise ConflictRetry if the name already exists."""

    def add_photo_category(self, photo_id: int, category_id: int) -> None:
        """Link a photo to a category."""

    def list_category_ids_for_photo(self, photo_id: int) -> list[int]:
        """Return ids of categories linked to a photo."""

    def list_photo_ids_for_category(
        self, category_id: int, limit: int, offset: int
    ) -> list[int]:
        """Return ids of photos linked to a category, newest first."""

    def list_categories(self) -> list[CategoryRecord]:
        """Return all categories ordered by id."""

    def count_photos_by_category(self) -> dict[int, int]:
        """Return the number of linked photos per category id."""


@dataclass
class CategoryService:
    """Application service for categories."""

    repository: CategoryRepository

    def resolve_or_create(self, name: str) -> CategoryRecord:
        """Return the category named `name`, creating it on first sight."""
        existing = self.repository.find_by_name(name)
        if existing is not None:
            return existing
        try:
            created = self.repository.create_category(name, thumbnail=None)
        except ConflictRetry:
            _logger.info("Category created concurrently, re-fetching: %s", name)
            winner = self.repository.find_by_name(name)
            if winner is None:
                raise NotFoundError("category", name) from None
            return winner
        _logger.info("Category created: id=%s name=%s", created.id, name)
        return created

    def link(self, photo_id: int, category: CategoryRecord) -> None:
        """Associate a photo with a category."""
        self.repository.add_photo_category(photo_id, category.id)

    def names_for_photo(self, photo_id: int) -> list[str]:
        """Resolve category names linked to a photo.

        A dangling association is a data-integrity fault and raises
        NotFoundError rather than being skipped.
        """
        names = []
        for category_id in self.repository.list_category_ids_for_photo(photo_id):
            category = self.repository.get_category(category_id)
            if category is None:
                raise NotFoundError("category", category_id)
            names.append(category.name)
        return names

    def get_category(self, category_id: int) -> CategoryRecord:
        """Return a category or raise NotFoundError."""
        category = self.repository.get_category(category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    def photo_ids_in_category(
        self, category_id: int, limit: int, offset: int
    ) -> list[int]:
        """Return ids of photos linked to an existing category."""
        self.get_category(category_id)
        return self.repository.list_photo_ids_for_category(category_id, limit, offset)

    def list_categories(self) -> list[CategoryDetail]:
        """Return every category with its photo count."""
        counts = self.repository.count_photos_by_category()
        return [
            CategoryDetail(
                category_id=category.id,
                name=category.name,
                thumbnail=category.thumbnail,
                count=counts.get(category.id, 0),
            )
            for category in self.repository.list_categories()
        ]
