"""Supabase-backed diary repository."""

from dataclasses import dataclass

from postgrest.exceptions import APIError
from supabase import Client

from photo_diary.adapters.supabase_rows import is_unique_violation
from photo_diary.domain.photos import DiaryRecord
from photo_diary.errors import ConflictRetry
from photo_diary.services.photos import DiaryRepository


@dataclass
class SupabaseDiaryRepository(DiaryRepository):
    """Supabase implementation for diaries, one per photo."""

    client: Client

    def get_by_photo_id(self, photo_id: int) -> DiaryRecord | None:
        """Return the diary owned by a photo, if present."""
        response = (
            self.client.table("diaries")
            .select("*")
            .eq("photo_id", photo_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_diary(response.data[0])

    def create_diary(self, photo_id: int, content: str | None) -> DiaryRecord:
        """Insert a diary, relying on the unique photo_id constraint."""
        try:
            response = (
                self.client.table("diaries")
                .insert({"photo_id": photo_id, "content": content})
                .execute()
            )
        except APIError as exc:
            if is_unique_violation(exc):
                raise ConflictRetry("diaries", photo_id) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create diary")
        return _parse_diary(response.data[0])


def _parse_diary(row: dict[str, object]) -> DiaryRecord:
    return DiaryRecord(
        id=int(row["id"]),
        photo_id=int(row["photo_id"]),
        content=row.get("content"),
    )
