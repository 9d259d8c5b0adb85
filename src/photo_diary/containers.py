"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_diary.adapters.deepl_translator import DeepLTranslator
from photo_diary.adapters.inference_client import HttpxInferenceClient
from photo_diary.adapters.papago_translator import PapagoTranslator
from photo_diary.adapters.supabase_category_repository import (
    SupabaseCategoryRepository,
)
from photo_diary.adapters.supabase_diary_repository import SupabaseDiaryRepository
from photo_diary.adapters.supabase_emotion_repository import (
    SupabaseEmotionRepository,
)
from photo_diary.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_diary.adapters.supabase_storage import (
    SupabaseObjectStore,
    SupabaseSignedUrlProvider,
)
from photo_diary.config import Settings
from photo_diary.services.categories import CategoryService
from photo_diary.services.emotions import EmotionService
from photo_diary.services.inference import InferenceService
from photo_diary.services.photos import PhotoService
from photo_diary.services.pipeline import AnnotationPipeline
from photo_diary.services.signing import SignedUrlService
from photo_diary.services.translation import TranslationService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    annotation_pipeline: AnnotationPipeline
    photo_service: PhotoService
    category_service: CategoryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    diary_repository = SupabaseDiaryRepository(supabase_client)
    category_repository = SupabaseCategoryRepository(supabase_client)
    emotion_repository = SupabaseEmotionRepository(supabase_client)
    signed_url_service = SignedUrlService(
        provider=SupabaseSignedUrlProvider(
            supabase_client, resolved_settings.storage_bucket
        ),
        duration_minutes=resolved_settings.signed_url_duration_minutes,
    )
    inference_client = HttpxInferenceClient.create(
        resolved_settings.inference_base_url,
        timeout=resolved_settings.inference_timeout_seconds,
    )
    papago_translator = PapagoTranslator.create(
        url=resolved_settings.papago_url,
        client_id=resolved_settings.papago_client_id,
        client_secret=resolved_settings.papago_client_secret,
        source_lang=resolved_settings.source_language,
        target_lang=resolved_settings.target_language,
    )
    translation_service = TranslationService(
        caption_translator=DeepLTranslator.create(
            resolved_settings.deepl_auth_key,
            source_lang=resolved_settings.source_language,
            target_lang=resolved_settings.target_language,
        ),
        label_translator=papago_translator,
    )
    category_service = CategoryService(category_repository)
    photo_service = PhotoService(
        photo_repository=photo_repository,
        diary_repository=diary_repository,
        category_service=category_service,
        emotion_service=EmotionService(emotion_repository),
        signed_url_service=signed_url_service,
    )
    annotation_pipeline = AnnotationPipeline(
        object_store=SupabaseObjectStore(
            supabase_client, resolved_settings.storage_bucket
        ),
        signed_url_service=signed_url_service,
        inference_service=InferenceService(inference_client),
        translation_service=translation_service,
        category_service=category_service,
        photo_repository=photo_repository,
        diary_repository=diary_repository,
        owner_id=resolved_settings.default_owner_id,
        timezone=resolved_settings.object_name_timezone,
    )

    async def close_resources() -> None:
        await inference_client.close()
        await papago_translator.close()

    return AppContainer(
        settings=resolved_settings,
        annotation_pipeline=annotation_pipeline,
        photo_service=photo_service,
        category_service=category_service,
        close_resources=close_resources,
    )
