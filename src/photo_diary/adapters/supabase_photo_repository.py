"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from photo_diary.adapters.supabase_rows import format_timestamp, parse_timestamp
from photo_diary.domain.photos import NewPhoto, PhotoRecord
from photo_diary.services.photos import PhotoRepository


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo rows."""

    client: Client

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a photo row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "name": photo.name,
                    "caption": photo.caption,
                    "signed_url": photo.signed_url,
                    "signed_url_expires_at": format_timestamp(
                        photo.signed_url_expires_at
                    ),
                    "thumbnail_signed_url": photo.thumbnail_signed_url,
                    "thumbnail_signed_url_expires_at": format_timestamp(
                        photo.thumbnail_signed_url_expires_at
                    ),
                    "snapped_at": format_timestamp(photo.snapped_at),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo")
        return _parse_photo(response.data[0])

    def get_photo(self, photo_id: int) -> PhotoRecord | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select("*")
            .eq("id", photo_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def delete_photo(self, photo_id: int) -> None:
        """Delete a photo row."""
        self.client.table("photos").delete().eq("id", photo_id).execute()

    def update_signed_urls(  # noqa: PLR0913
        self,
        photo_id: int,
        signed_url: str,
        signed_url_expires_at: datetime,
        thumbnail_signed_url: str,
        thumbnail_signed_url_expires_at: datetime,
    ) -> PhotoRecord:
        """Overwrite both signed URL pairs of a photo and return it."""
        response = (
            self.client.table("photos")
            .update(
                {
                    "signed_url": signed_url,
                    "signed_url_expires_at": format_timestamp(signed_url_expires_at),
                    "thumbnail_signed_url": thumbnail_signed_url,
                    "thumbnail_signed_url_expires_at": format_timestamp(
                        thumbnail_signed_url_expires_at
                    ),
                }
            )
            .eq("id", photo_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update photo signed URLs")
        return _parse_photo(response.data[0])

    def list_photos(self, limit: int, offset: int) -> list[PhotoRecord]:
        """Return photos newest first."""
        response = (
            self.client.table("photos")
            .select("*")
            .order("id", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [_parse_photo(row) for row in response.data or []]


def _parse_photo(row: dict[str, object]) -> PhotoRecord:
    """Parse a photo row into a domain model."""
    return PhotoRecord(
        id=int(row["id"]),
        name=str(row["name"]),
        caption=row.get("caption"),
        signed_url=row.get("signed_url"),
        signed_url_expires_at=parse_timestamp(row.get("signed_url_expires_at")),
        thumbnail_signed_url=row.get("thumbnail_signed_url"),
        thumbnail_signed_url_expires_at=parse_timestamp(
            row.get("thumbnail_signed_url_expires_at")
        ),
        snapped_at=parse_timestamp(row.get("snapped_at")),
        created_at=parse_timestamp(row.get("created_at")),
    )
