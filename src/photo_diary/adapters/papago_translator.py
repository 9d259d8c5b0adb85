"""Papago NMT backend for short category labels."""

from dataclasses import dataclass

import httpx

from photo_diary.services.translation import Translator


@dataclass
class PapagoTranslator(Translator):
    """Translator using the Papago NMT REST API via httpx."""

    url: str
    client_id: str
    client_secret: str
    source_lang: str
    target_lang: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        url: str,
        client_id: str,
        client_secret: str,
        source_lang: str,
        target_lang: str,
    ) -> "PapagoTranslator":
        """Create a Papago translator with a managed httpx session."""
        return cls(
            url=url,
            client_id=client_id,
            client_secret=client_secret,
            source_lang=source_lang,
            target_lang=target_lang,
            http_client=httpx.AsyncClient(),
        )

    async def translate(self, text: str) -> str:
        """Translate a label and return the translated text."""
        response = await self.http_client.post(
            self.url,
            headers={
                "X-NCP-APIGW-API-KEY-ID": self.client_id,
                "X-NCP-APIGW-API-KEY": self.client_secret,
            },
            data={
                "source": self.source_lang,
                "target": self.target_lang,
                "text": text,
            },
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        return str(payload["message"]["result"]["translatedText"])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
