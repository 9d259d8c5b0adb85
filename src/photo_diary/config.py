"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    storage_bucket: str = "photos"
    signed_url_duration_minutes: int = 60
    inference_base_url: str
    inference_timeout_seconds: float = 60.0
    deepl_auth_key: str
    papago_client_id: str
    papago_client_secret: str
    papago_url: str = "https://naveropenapi.apigw.ntruss.com/nmt/v1/translation"
    source_language: str = "en"
    target_language: str = "ko"
    object_name_timezone: str = "Asia/Seoul"
    default_owner_id: int = 1
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
        frozen=True,
    )
