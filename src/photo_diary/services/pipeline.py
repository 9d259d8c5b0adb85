"""Ingestion pipeline that stores, annotates and persists an uploaded photo.

The upload runs as an ordered list of stages. Stages tagged FATAL abort the
whole upload and re-raise; everything up to and including ``persist`` is
fatal, so a failed upload never leaves a photo row behind. Stages after the
``persist`` commit point are tagged DEGRADE: their failures are logged and
reported on the result while the upload itself still succeeds.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Protocol, TypeVar
from zoneinfo import ZoneInfo

from photo_diary.domain.photos import (
    NewPhoto,
    PhotoRecord,
    PhotoUploadResult,
    thumbnail_key,
)
from photo_diary.errors import StorageError
from photo_diary.services.categories import CategoryService
from photo_diary.services.images import (
    THUMBNAIL_CONTENT_TYPE,
    read_capture_time,
    render_thumbnail,
)
from photo_diary.services.inference import InferenceService
from photo_diary.services.photos import DiaryRepository, PhotoRepository
from photo_diary.services.signing import SignedUrl, SignedUrlService
from photo_diary.services.translation import TranslationKind, TranslationService

_logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class ObjectStore(Protocol):
    """Interface for writing raw objects to storage."""

    def put(self, object_key: str, data: bytes, content_type: str) -> None:
        """Store bytes under the given key."""


class StagePolicy(StrEnum):
    """How a stage failure affects the upload."""

    FATAL = "fatal"
    DEGRADE = "degrade"


@dataclass
class UploadContext:
    """Mutable state threaded through the stages of one upload."""

    image_bytes: bytes
    content_type: str
    object_name: str = ""
    snapped_at: datetime | None = None
    signed_url: SignedUrl | None = None
    thumbnail_signed_url: SignedUrl | None = None
    caption: str = ""
    translated_caption: str = ""
    photo: PhotoRecord | None = None
    raw_labels: list[str] = field(default_factory=list)
    skipped_labels: list[str] = field(default_factory=list)
    degraded_stages: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class Stage:
    """A named pipeline step and its failure policy."""

    name: str
    policy: StagePolicy
    run: Callable[[UploadContext], Awaitable[None]]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AnnotationPipeline:
    """Drives one upload from raw bytes to an annotated photo record."""

    object_store: ObjectStore
    signed_url_service: SignedUrlService
    inference_service: InferenceService
    translation_service: TranslationService
    category_service: CategoryService
    photo_repository: PhotoRepository
    diary_repository: DiaryRepository
    owner_id: int = 1
    timezone: str = "Asia/Seoul"
    thumbnail_renderer: Callable[[bytes], bytes] = field(default=render_thumbnail)
    clock: Callable[[], datetime] = field(default=_utc_now)

    def stages(self) -> list[Stage]:
        """Return the upload stages in execution order."""
        return [
            Stage("store", StagePolicy.FATAL, self._store),
            Stage("sign", StagePolicy.FATAL, self._sign),
            Stage("caption", StagePolicy.FATAL, self._caption),
            Stage("translate_caption", StagePolicy.FATAL, self._translate_caption),
            Stage("persist", StagePolicy.FATAL, self._persist),
            Stage("categorize", StagePolicy.DEGRADE, self._categorize),
            Stage(
                "resolve_categories", StagePolicy.DEGRADE, self._resolve_categories
            ),
        ]

    async def upload(
        self, image_bytes: bytes, content_type: str = "image/jpeg"
    ) -> PhotoUploadResult:
        """Run every stage for an uploaded image and return the new photo."""
        context = UploadContext(image_bytes=image_bytes, content_type=content_type)
        for stage in self.stages():
            try:
                await stage.run(context)
            except Exception as exc:
                if stage.policy is StagePolicy.FATAL:
                    _logger.exception(
                        "Upload aborted at %s: object=%s",
                        stage.name,
                        context.object_name,
                    )
                    raise
                _logger.warning(
                    "Upload degraded at %s: photo=%s error=%s",
                    stage.name,
                    context.photo.id if context.photo else None,
                    exc,
                )
                context.degraded_stages.append(stage.name)

        if context.photo is None or context.thumbnail_signed_url is None:
            raise RuntimeError("Upload finished without a persisted photo")
        _logger.info(
            "Upload complete: photo=%s skipped_labels=%s",
            context.photo.id,
            len(context.skipped_labels),
        )
        return PhotoUploadResult(
            photo_id=context.photo.id,
            thumbnail_signed_url=context.thumbnail_signed_url.url,
            skipped_labels=list(context.skipped_labels),
            degraded_stages=list(context.degraded_stages),
        )

    def object_name(self) -> str:
        """Compose a fresh object name from the local time and owner id."""
        now = self.clock().astimezone(ZoneInfo(self.timezone))
        millis = now.microsecond // 1000
        return f"{now:%Y%m%d%H%M%S}{millis:03d}{self.owner_id}"

    async def _store(self, context: UploadContext) -> None:
        context.object_name = self.object_name()
        thumbnail_name = thumbnail_key(context.object_name)
        try:
            thumbnail = self.thumbnail_renderer(context.image_bytes)
        except Exception as exc:
            raise StorageError(thumbnail_name) from exc
        context.snapped_at = read_capture_time(context.image_bytes)
        self._put(context.object_name, context.image_bytes, context.content_type)
        self._put(thumbnail_name, thumbnail, THUMBNAIL_CONTENT_TYPE)

    def _put(self, object_key: str, data: bytes, content_type: str) -> None:
        try:
            self.object_store.put(object_key, data, content_type)
        except Exception as exc:
            raise StorageError(object_key) from exc

    async def _sign(self, context: UploadContext) -> None:
        context.signed_url = self.signed_url_service.obtain(context.object_name)
        context.thumbnail_signed_url = self.signed_url_service.obtain(
            thumbnail_key(context.object_name)
        )

    async def _caption(self, context: UploadContext) -> None:
        context.caption = await self.inference_service.request_caption(
            _require(context.signed_url).url
        )

    async def _translate_caption(self, context: UploadContext) -> None:
        context.translated_caption = await self.translation_service.translate(
            context.caption, TranslationKind.CAPTION
        )

    async def _persist(self, context: UploadContext) -> None:
        signed = _require(context.signed_url)
        thumbnail = _require(context.thumbnail_signed_url)
        context.photo = self.photo_repository.create_photo(
            NewPhoto(
                name=context.object_name,
                caption=context.translated_caption,
                signed_url=signed.url,
                signed_url_expires_at=signed.expires_at,
                thumbnail_signed_url=thumbnail.url,
                thumbnail_signed_url_expires_at=thumbnail.expires_at,
                snapped_at=context.snapped_at,
            )
        )
        try:
            self.diary_repository.create_diary(
                context.photo.id, content=context.translated_caption
            )
        except Exception:
            self.photo_repository.delete_photo(context.photo.id)
            context.photo = None
            raise

    async def _categorize(self, context: UploadContext) -> None:
        labels = await self.inference_service.request_categories(
            _require(context.signed_url).url
        )
        context.raw_labels = _unique(labels)

    async def _resolve_categories(self, context: UploadContext) -> None:
        photo = _require(context.photo)
        linked: set[int] = set()
        for label in context.raw_labels:
            try:
                name = await self.translation_service.translate(
                    label, TranslationKind.LABEL
                )
                category = self.category_service.resolve_or_create(name)
                if category.id in linked:
                    continue
                self.category_service.link(photo.id, category)
                linked.add(category.id)
            except Exception as exc:
                _logger.warning(
                    "Skipping label: photo=%s label=%s error=%s", photo.id, label, exc
                )
                context.skipped_labels.append(label)


def _unique(labels: list[str]) -> list[str]:
    """Drop blanks and repeats while keeping first-seen order."""
    seen: dict[str, None] = {}
    for label in labels:
        cleaned = label.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)


def _require(value: _T | None) -> _T:
    if value is None:
        raise RuntimeError("Pipeline stage ran out of order")
    return value
