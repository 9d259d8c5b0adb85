"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from io import BytesIO

import pytest
from PIL import Image

from photo_diary.config import Settings
from photo_diary.containers import AppContainer
from photo_diary.domain.categories import CategoryRecord
from photo_diary.domain.emotions import EmotionRecord
from photo_diary.domain.photos import DiaryRecord, NewPhoto, PhotoRecord
from photo_diary.errors import ConflictRetry
from photo_diary.services.categories import CategoryRepository, CategoryService
from photo_diary.services.emotions import EmotionRepository, EmotionService
from photo_diary.services.inference import InferenceClient, InferenceService
from photo_diary.services.photos import DiaryRepository, PhotoRepository, PhotoService
from photo_diary.services.pipeline import AnnotationPipeline, ObjectStore
from photo_diary.services.signing import SignedUrlProvider, SignedUrlService
from photo_diary.services.translation import TranslationService, Translator

FIXED_NOW = datetime(2024, 5, 1, 3, 4, 5, 678000, tzinfo=UTC)


@dataclass
class FakeClock:
    """Settable clock for deterministic expiry checks."""

    now: datetime = FIXED_NOW

    def __call__(self) -> datetime:
        return self.now


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[int, PhotoRecord] = field(default_factory=dict)
    updates: list[int] = field(default_factory=list)
    deleted: list[int] = field(default_factory=list)
    next_id: int = 1

    def create_photo(self, photo: NewPhoto) -> PhotoRecord:
        record = PhotoRecord(
            id=self.next_id,
            name=photo.name,
            caption=photo.caption,
            signed_url=photo.signed_url,
            signed_url_expires_at=photo.signed_url_expires_at,
            thumbnail_signed_url=photo.thumbnail_signed_url,
            thumbnail_signed_url_expires_at=photo.thumbnail_signed_url_expires_at,
            snapped_at=photo.snapped_at,
        )
        self.photos[record.id] = record
        self.next_id += 1
        return record

    def get_photo(self, photo_id: int) -> PhotoRecord | None:
        return self.photos.get(photo_id)

    def delete_photo(self, photo_id: int) -> None:
        self.photos.pop(photo_id, None)
        self.deleted.append(photo_id)

    def update_signed_urls(  # noqa: PLR0913
        self,
        photo_id: int,
        signed_url: str,
        signed_url_expires_at: datetime,
        thumbnail_signed_url: str,
        thumbnail_signed_url_expires_at: datetime,
    ) -> PhotoRecord:
        current = self.photos[photo_id]
        updated = PhotoRecord(
            id=current.id,
            name=current.name,
            caption=current.caption,
            signed_url=signed_url,
            signed_url_expires_at=signed_url_expires_at,
            thumbnail_signed_url=thumbnail_signed_url,
            thumbnail_signed_url_expires_at=thumbnail_signed_url_expires_at,
            snapped_at=current.snapped_at,
        )
        self.photos[photo_id] = updated
        self.updates.append(photo_id)
        return updated

    def list_photos(self, limit: int, offset: int) -> list[PhotoRecord]:
        ordered = sorted(self.photos.values(), key=lambda photo: photo.id, reverse=True)
        return ordered[offset : offset + limit]


@dataclass
class InMemoryDiaryRepository(DiaryRepository):
    """In-memory diary repository enforcing one diary per photo."""

    diaries: dict[int, DiaryRecord] = field(default_factory=dict)

    def get_by_photo_id(self, photo_id: int) -> DiaryRecord | None:
        return self.diaries.get(photo_id)

    def create_diary(self, photo_id: int, content: str | None) -> DiaryRecord:
        if photo_id in self.diaries:
            raise ConflictRetry("diaries", photo_id)
        diary = DiaryRecord(id=len(self.diaries) + 1, photo_id=photo_id, content=content)
        self.diaries[photo_id] = diary
        return diary


@dataclass
class InMemoryCategoryRepository(CategoryRepository):
    """In-memory category repository enforcing unique names."""

    categories: dict[int, CategoryRecord] = field(default_factory=dict)
    links: list[tuple[int, int]] = field(default_factory=list)

    def find_by_name(self, name: str) -> CategoryRecord | None:
        for category in self.categories.values():
            if category.name == name:
                return category
        return None

    def get_category(self, category_id: int) -> CategoryRecord | None:
        return self.categories.get(category_id)

    def create_category(self, name: str, thumbnail: str | None) -> CategoryRecord:
        if any(category.name == name for category in self.categories.values()):
            raise ConflictRetry("categories", name)
        category = CategoryRecord(
            id=len(self.categories) + 1, name=name, thumbnail=thumbnail
        )
        self.categories[category.id] = category
        return category

    def add_photo_category(self, photo_id: int, category_id: int) -> None:
        self.links.append((photo_id, category_id))

    def list_category_ids_for_photo(self, photo_id: int) -> list[int]:
        return [cid for pid, cid in self.links if pid == photo_id]

    def list_photo_ids_for_category(
        self, category_id: int, limit: int, offset: int
    ) -> list[int]:
        ids = sorted({pid for pid, cid in self.links if cid == category_id}, reverse=True)
        return ids[offset : offset + limit]

    def list_categories(self) -> list[CategoryRecord]:
        return [self.categories[key] for key in sorted(self.categories)]

    def count_photos_by_category(self) -> dict[int, int]:
        counts: dict[int, int] = {}
        for _pid, cid in self.links:
            counts[cid] = counts.get(cid, 0) + 1
        return counts


@dataclass
class InMemoryEmotionRepository(EmotionRepository):
    """In-memory emotion repository for tests."""

    emotions: dict[int, EmotionRecord] = field(default_factory=dict)
    links: list[tuple[int, int]] = field(default_factory=list)

    def get_emotion(self, emotion_id: int) -> EmotionRecord | None:
        return self.emotions.get(emotion_id)

    def list_emotion_ids_for_photo(self, photo_id: int) -> list[int]:
        return [eid for pid, eid in self.links if pid == photo_id]


@dataclass
class FakeObjectStore(ObjectStore):
    """Object store that keeps uploads in a dict."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)
    fail: bool = False

    def put(self, object_key: str, data: bytes, content_type: str) -> None:
        if self.fail:
            raise OSError("bucket unavailable")
        self.objects[object_key] = (data, content_type)


@dataclass
class FakeSignedUrlProvider(SignedUrlProvider):
    """Provider returning predictable URLs and counting calls."""

    signed: list[str] = field(default_factory=list)
    fail: bool = False

    def sign(self, object_key: str, expires_in_seconds: int) -> str:
        if self.fail:
            raise OSError("signing backend down")
        self.signed.append(object_key)
        return f"https://storage.test/{object_key}?v={len(self.signed)}"


@dataclass
class FakeInferenceClient(InferenceClient):
    """Inference client with canned payloads."""

    caption_payload: dict[str, object] = field(
        default_factory=lambda: {"caption": "a dog on grass"}
    )
    categories_payload: dict[str, object] = field(
        default_factory=lambda: {"categories": ["dog", "outdoor"]}
    )
    caption_error: Exception | None = None
    classify_error: Exception | None = None
    calls: list[tuple[str, str]] = field(default_factory=list)

    async def caption(self, signed_url: str) -> dict[str, object]:
        self.calls.append(("caption", signed_url))
        if self.caption_error:
            raise self.caption_error
        return self.caption_payload

    async def classify(self, signed_url: str) -> dict[str, object]:
        self.calls.append(("classify", signed_url))
        if self.classify_error:
            raise self.classify_error
        return self.categories_payload


@dataclass
class FakeTranslator(Translator):
    """Dictionary-backed translator that can be told to fail on inputs."""

    mapping: dict[str, str] = field(default_factory=dict)
    failing: set[str] = field(default_factory=set)
    calls: list[str] = field(default_factory=list)

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        if text in self.failing:
            raise RuntimeError(f"cannot translate {text}")
        return self.mapping.get(text, text)


@dataclass
class Harness:
    """Bundle of fakes and services wired the way the container wires them."""

    clock: FakeClock
    object_store: FakeObjectStore
    provider: FakeSignedUrlProvider
    inference_client: FakeInferenceClient
    caption_translator: FakeTranslator
    label_translator: FakeTranslator
    photo_repository: InMemoryPhotoRepository
    diary_repository: InMemoryDiaryRepository
    category_repository: InMemoryCategoryRepository
    emotion_repository: InMemoryEmotionRepository
    signed_url_service: SignedUrlService
    category_service: CategoryService
    photo_service: PhotoService
    pipeline: AnnotationPipeline


def build_harness() -> Harness:
    clock = FakeClock()
    object_store = FakeObjectStore()
    provider = FakeSignedUrlProvider()
    inference_client = FakeInferenceClient()
    caption_translator = FakeTranslator(mapping={"a dog on grass": "잔디 위의 개"})
    label_translator = FakeTranslator(mapping={"dog": "개", "outdoor": "야외"})
    photo_repository = InMemoryPhotoRepository()
    diary_repository = InMemoryDiaryRepository()
    category_repository = InMemoryCategoryRepository()
    emotion_repository = InMemoryEmotionRepository()
    signed_url_service = SignedUrlService(
        provider=provider, duration_minutes=60, clock=clock
    )
    category_service = CategoryService(category_repository)
    photo_service = PhotoService(
        photo_repository=photo_repository,
        diary_repository=diary_repository,
        category_service=category_service,
        emotion_service=EmotionService(emotion_repository),
        signed_url_service=signed_url_service,
    )
    pipeline = AnnotationPipeline(
        object_store=object_store,
        signed_url_service=signed_url_service,
        inference_service=InferenceService(inference_client),
        translation_service=TranslationService(
            caption_translator=caption_translator,
            label_translator=label_translator,
        ),
        category_service=category_service,
        photo_repository=photo_repository,
        diary_repository=diary_repository,
        clock=clock,
    )
    return Harness(
        clock=clock,
        object_store=object_store,
        provider=provider,
        inference_client=inference_client,
        caption_translator=caption_translator,
        label_translator=label_translator,
        photo_repository=photo_repository,
        diary_repository=diary_repository,
        category_repository=category_repository,
        emotion_repository=emotion_repository,
        signed_url_service=signed_url_service,
        category_service=category_service,
        photo_service=photo_service,
        pipeline=pipeline,
    )


def make_png(size: tuple[int, int] = (800, 600)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(30, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def harness() -> Harness:
    return build_harness()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        inference_base_url="https://inference.test",
        deepl_auth_key="deepl-key:fx",
        papago_client_id="papago-id",
        papago_client_secret="papago-secret",
    )


@pytest.fixture
def container(settings: Settings, harness: Harness) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        annotation_pipeline=harness.pipeline,
        photo_service=harness.photo_service,
        category_service=harness.category_service,
        close_resources=close_resources,
    )
