"""Translation of captions and category labels into the user's language."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from photo_diary.errors import TranslationError

_logger = logging.getLogger(__name__)


class TranslationKind(StrEnum):
    """Backend profile to translate with."""

    CAPTION = "caption"
    LABEL = "label"


class Translator(Protocol):
    """Interface for a single translation backend."""

    async def translate(self, text: str) -> str:
        """Translate text and return the translated string."""


@dataclass
class TranslationService:
    """Routes text to the backend tuned for its kind."""

    caption_translator: Translator
    label_translator: Translator

    async def translate(self, text: str, kind: TranslationKind) -> str:
        """Translate text, raising TranslationError on any backend failure."""
        if not text or not text.strip():
            raise TranslationError(kind, text)
        translator = (
            self.caption_translator
            if kind is TranslationKind.CAPTION
            else self.label_translator
        )
        try:
            translated = await translator.translate(text.strip())
        except Exception as exc:
            _logger.warning("Translation failed: kind=%s error=%s", kind, exc)
            raise TranslationError(kind, text) from exc
        translated = (translated or "").strip()
        if not translated:
            raise TranslationError(kind, text)
        return translated
