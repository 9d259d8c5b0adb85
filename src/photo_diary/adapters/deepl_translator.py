"""DeepL backend for long-form caption translation."""

import asyncio
from dataclasses import dataclass

import deepl

from photo_diary.services.translation import Translator


@dataclass
class DeepLTranslator(Translator):
    """Translator backed by the DeepL SDK."""

    translator: deepl.Translator
    source_lang: str
    target_lang: str

    @classmethod
    def create(
        cls, auth_key: str, source_lang: str, target_lang: str
    ) -> "DeepLTranslator":
        """Create a DeepL translator for a fixed language pair."""
        return cls(
            translator=deepl.Translator(auth_key),
            source_lang=source_lang.upper(),
            target_lang=target_lang.upper(),
        )

    async def translate(self, text: str) -> str:
        """Translate text on a worker thread since the SDK is blocking."""
        result = await asyncio.to_thread(
            self.translator.translate_text,
            text,
            source_lang=self.source_lang,
            target_lang=self.target_lang,
        )
        return result.text
