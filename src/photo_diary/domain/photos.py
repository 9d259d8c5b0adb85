"""Domain models for photos and their diaries."""

from dataclasses import dataclass, field
from datetime import datetime

from photo_diary.domain.emotions import EmotionSummary


@dataclass(frozen=True)
class PhotoRecord:
    """Represents a stored photo row."""

    id: int
    name: str
    caption: str | None
    signed_url: str | None
    signed_url_expires_at: datetime | None
    thumbnail_signed_url: str | None
    thumbnail_signed_url_expires_at: datetime | None
    snapped_at: datetime | None = None
    created_at: datetime | None = None

    @property
    def thumbnail_name(self) -> str:
        """Object key of the thumbnail variant."""
        return thumbnail_key(self.name)


@dataclass(frozen=True)
class NewPhoto:
    """Values for a photo row that has not been inserted yet."""

    name: str
    caption: str
    signed_url: str
    signed_url_expires_at: datetime
    thumbnail_signed_url: str
    thumbnail_signed_url_expires_at: datetime
    snapped_at: datetime | None = None


@dataclass(frozen=True)
class DiaryRecord:
    """Represents the diary entry owned by a photo."""

    id: int
    photo_id: int
    content: str | None


@dataclass(frozen=True)
class PhotoUploadResult:
    """Outcome of an upload, including any degraded annotation work."""

    photo_id: int
    thumbnail_signed_url: str
    skipped_labels: list[str] = field(default_factory=list)
    degraded_stages: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class PhotoInformation:
    """Denormalized read view of a single photo."""

    photo_id: int
    signed_url: str
    upload_date_time: str | None
    diary_id: int
    diary_content: str
    categories: list[str]
    emotions: EmotionSummary


@dataclass(frozen=True)
class PhotoSummary:
    """Compact view of a photo used in listings."""

    photo_id: int
    thumbnail_signed_url: str
    categories: list[str]
    emotions: EmotionSummary


def thumbnail_key(name: str) -> str:
    """Return the object key of the thumbnail for a stored photo name."""
    return f"thumbnail/{name}"
