"""Read-side assembly of annotated photos."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from photo_diary.domain.photos import (
    DiaryRecord,
    NewPhoto,
    PhotoInformation,
    PhotoRecord,
    PhotoSummary,
)
from photo_diary.errors import ConflictRetry, NotFoundError
from photo_diary.services.categories import CategoryService
from photo_diary.services.emotions import EmotionService
from photo_diary.services.signing import SignedUrlService, is_expired

UPLOAD_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logger = logging.getLogger(__name__)


class PhotoRepository(Protocol):
    """Persistence interface for photo rows."""

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        """Insert a photo row and return it."""

    def get_photo(self, photo_id: int) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def delete_photo(self, photo_id: int) -> None:
        """Delete a photo row."""

    def update_signed_urls(  # noqa: PLR0913
        self,
        photo_id: int,
        signed_url: str,
        signed_url_expires_at: datetime,
        thumbnail_signed_url: str,
        thumbnail_signed_url_expires_at: datetime,
    ) -> PhotoRecord:
        """Overwrite both signed URL pairs of a photo and return it."""

    def list_photos(self, limit: int, offset: int) -> list[PhotoRecord]:
        """Return photos newest first."""


class DiaryRepository(Protocol):
    """Persistence interface for diaries."""

    def get_by_photo_id(self, photo_id: int) -> DiaryRecord | None:
        """Return the diary owned by a photo, if present."""

    def create_diary(self, photo_id: int, content: str | None) -> DiaryRecord:
        """Insert a diary; raise ConflictRetry if the photo already has one."""


@dataclass
class PhotoService:
    """Assembles photo views and keeps their signed URLs fresh."""

    photo_repository: PhotoRepository
    diary_repository: DiaryRepository
    category_service: CategoryService
    emotion_service: EmotionService
    signed_url_service: SignedUrlService

    def get_photo_information(self, photo_id: int) -> PhotoInformation:
        """Return the full annotated view of a photo."""
        photo = self._load(photo_id)
        diary = self.ensure_diary(photo.id)
        categories = self.category_service.names_for_photo(photo.id)
        emotions = self.emotion_service.summary_for_photo(photo.id)
        return PhotoInformation(
            photo_id=photo.id,
            signed_url=photo.signed_url or "",
            upload_date_time=(
                photo.snapped_at.strftime(UPLOAD_DATE_FORMAT)
                if photo.snapped_at
                else None
            ),
            diary_id=diary.id,
            diary_content=diary.content or "",
            categories=categories,
            emotions=emotions,
        )

    def ensure_diary(self, photo_id: int) -> DiaryRecord:
        """Return the photo's diary, creating an empty one if none exists."""
        diary = self.diary_repository.get_by_photo_id(photo_id)
        if diary is not None:
            return diary
        try:
            return self.diary_repository.create_diary(photo_id, content=None)
        except ConflictRetry:
            _logger.info("Diary created concurrently, re-fetching: photo=%s", photo_id)
            diary = self.diary_repository.get_by_photo_id(photo_id)
            if diary is None:
                raise NotFoundError("diary", photo_id) from None
            return diary

    def list_photos(self, limit: int = 20, offset: int = 0) -> list[PhotoSummary]:
        """Return summaries of all photos, newest first."""
        return [
            self._summarize(self.refresh_signed_urls(photo))
            for photo in self.photo_repository.list_photos(limit, offset)
        ]

    def list_photos_in_category(
        self, category_id: int, limit: int = 20, offset: int = 0
    ) -> list[PhotoSummary]:
        """Return summaries of photos linked to a category."""
        photo_ids = self.category_service.photo_ids_in_category(
            category_id, limit, offset
        )
        return [self._summarize(self._load(photo_id)) for photo_id in photo_ids]

    def refresh_signed_urls(self, photo: PhotoRecord) -> PhotoRecord:
        """Re-sign both URLs of a photo when either has expired."""
        now = self.signed_url_service.now()
        if not (
            is_expired(photo.signed_url_expires_at, now)
            or is_expired(photo.thumbnail_signed_url_expires_at, now)
        ):
            return photo
        _logger.info("Re-signing expired URLs: photo=%s", photo.id)
        primary = self.signed_url_service.obtain(photo.name)
        thumbnail = self.signed_url_service.obtain(photo.thumbnail_name)
        return self.photo_repository.update_signed_urls(
            photo.id,
            signed_url=primary.url,
            signed_url_expires_at=primary.expires_at,
            thumbnail_signed_url=thumbnail.url,
            thumbnail_signed_url_expires_at=thumbnail.expires_at,
        )

    def _load(self, photo_id: int) -> PhotoRecord:
        photo = self.photo_repository.get_photo(photo_id)
        if photo is None:
            raise NotFoundError("photo", photo_id)
        return self.refresh_signed_urls(photo)

    def _summarize(self, photo: PhotoRecord) -> PhotoSummary:
        return PhotoSummary(
            photo_id=photo.id,
            thumbnail_signed_url=photo.thumbnail_signed_url or "",
            categories=self.category_service.names_for_photo(photo.id),
            emotions=self.emotion_service.summary_for_photo(photo.id),
        )
