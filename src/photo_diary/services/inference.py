"""Caption and classification requests against the inference servers."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from photo_diary.domain.inference import CaptionInference, CategoryInference
from photo_diary.errors import InferenceError

CAPTIONING = "captioning"
CLASSIFICATION = "classification"

_logger = logging.getLogger(__name__)


class InferenceClient(Protocol):
    """Interface for the remote inference endpoints."""

    async def caption(self, signed_url: str) -> dict[str, object]:
        """Return the raw captioning response body."""

    async def classify(self, signed_url: str) -> dict[str, object]:
        """Return the raw classification response body."""


@dataclass
class InferenceService:
    """Validates inference responses and normalizes their failures."""

    client: InferenceClient

    async def request_caption(self, signed_url: str) -> str:
        """Ask the captioning server to describe the image at the URL."""
        try:
            raw = await self.client.caption(signed_url)
            result = CaptionInference.model_validate(raw)
        except ValidationError as exc:
            raise InferenceError(CAPTIONING, "unexpected response body") from exc
        except Exception as exc:
            raise InferenceError(CAPTIONING, str(exc)) from exc
        _logger.info("Caption received: %s", result.caption)
        return result.caption

    async def request_categories(self, signed_url: str) -> list[str]:
        """Ask the classification server for scene labels of the image."""
        try:
            raw = await self.client.classify(signed_url)
            result = CategoryInference.model_validate(raw)
        except ValidationError as exc:
            raise InferenceError(CLASSIFICATION, "unexpected response body") from exc
        except Exception as exc:
            raise InferenceError(CLASSIFICATION, str(exc)) from exc
        return result.categories
