"""Supabase Storage adapters for raw uploads and signed URLs."""

from dataclasses import dataclass

from supabase import Client

from photo_diary.services.pipeline import ObjectStore
from photo_diary.services.signing import SignedUrlProvider


@dataclass
class SupabaseObjectStore(ObjectStore):
    """Writes uploaded objects to a Supabase Storage bucket."""

    client: Client
    bucket: str

    def put(self, object_key: str, data: bytes, content_type: str) -> None:
        """Upload bytes under the given key; an existing object is never replaced."""
        self.client.storage.from_(self.bucket).upload(
            object_key, data, {"content-type": content_type, "upsert": "false"}
        )


@dataclass
class SupabaseSignedUrlProvider(SignedUrlProvider):
    """Issues signed download URLs for objects in a Supabase bucket."""

    client: Client
    bucket: str

    def sign(self, object_key: str, expires_in_seconds: int) -> str:
        """Return a signed URL valid for the given number of seconds."""
        response = self.client.storage.from_(self.bucket).create_signed_url(
            object_key, expires_in_seconds
        )
        url = response.get("signedURL") or response.get("signedUrl")
        if not url:
            raise RuntimeError(f"Supabase returned no signed URL for {object_key}")
        return str(url)
