"""Supabase implementation for categories and photo associations."""

from collections import Counter
from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from photo_diary.adapters.supabase_rows import is_unique_violation
from photo_diary.domain.categories import CategoryRecord
from photo_diary.errors import ConflictRetry
from photo_diary.services.categories import CategoryRepository


@dataclass
class SupabaseCategoryRepository(CategoryRepository):
    """Supabase-backed repository for the shared category namespace."""

    client: Client

    def find_by_name(self, name: str) -> CategoryRecord | None:
        """Return the category with exactly this name, if present."""
        response = (
            self.client.table("categories")
            .select("*")
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_category(response.data[0])

    def get_category(self, category_id: int) -> CategoryRecord | None:
        """Return a category by id, if present."""
        response = (
            self.client.table("categories")
            .select("*")
            .eq("id", category_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_category(response.data[0])

    def create_category(self, name: str, thumbnail: str | None) -> CategoryRecord:
        """Insert a category, relying on the unique name constraint."""
        try:
            response = (
                self.client.table("categories")
                .insert({"name": name, "thumbnail": thumbnail})
                .execute()
            )
        except APIError as exc:
            if is_unique_violation(exc):
                raise ConflictRetry("categories", name) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create category")
        return _parse_category(response.data[0])

    def add_photo_category(self, photo_id: int, category_id: int) -> None:
        """Link a photo to a category."""
        self.client.table("photo_categories").insert(
            {"photo_id": photo_id, "category_id": category_id}
        ).execute()

    def list_category_ids_for_photo(self, photo_id: int) -> list[int]:
        """Return ids of categories linked to a photo."""
        response = (
            self.client.table("photo_categories")
            .select("category_id")
            .eq("photo_id", photo_id)
            .order("id")
            .execute()
        )
        return [int(row["category_id"]) for row in response.data or []]

    def list_photo_ids_for_category(
        self, category_id: int, limit: int, offset: int
    ) -> list[int]:
        """Return ids of photos linked to a category, newest first."""
        response = (
            self.client.table("photo_categories")
            .select("photo_id")
            .eq("category_id", category_id)
            .order("photo_id", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [int(row["photo_id"]) for row in response.data or []]

    def list_categories(self) -> list[CategoryRecord]:
        """Return all categories ordered by id."""
        response = self.client.table("categories").select("*").order("id").execute()
        return [_parse_category(row) for row in response.data or []]

    def count_photos_by_category(self) -> dict[int, int]:
        """Return the number of linked photos per category id."""
        response = self.client.table("photo_categories").select("category_id").execute()
        return dict(Counter(int(row["category_id"]) for row in response.data or []))


def _parse_category(row: dict[str, object]) -> CategoryRecord:
    return CategoryRecord(
        id=int(row["id"]),
        name=str(row["name"]),
        thumbnail=row.get("thumbnail"),
    )
