"""HTTP client for the captioning and classification servers."""

import json
from dataclasses import dataclass

import httpx

from photo_diary.services.inference import InferenceClient

_ACCEPT = "text/plain;charset=UTF-8"


@dataclass
class HttpxInferenceClient(InferenceClient):
    """Inference client using httpx."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 60.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 60.0) -> "HttpxInferenceClient":
        """Create an inference client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout=timeout,
        )

    async def caption(self, signed_url: str) -> dict[str, object]:
        """Request a caption for the image behind the signed URL."""
        return await self._post("captioning", {"url": signed_url})

    async def classify(self, signed_url: str) -> dict[str, object]:
        """Request scene categories for the image behind the signed URL."""
        return await self._post("classification", {"pic_path": signed_url})

    async def _post(self, path: str, payload: dict[str, str]) -> dict[str, object]:
        response = await self.http_client.post(
            f"{self.base_url}/{path}",
            json=payload,
            headers={"Accept": _ACCEPT},
            timeout=self.timeout,
        )
        response.raise_for_status()
        # The servers answer with text/plain, so decode the JSON body ourselves.
        body = json.loads(response.text)
        if not isinstance(body, dict):
            raise ValueError(f"Expected a JSON object from /{path}")
        return body

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
