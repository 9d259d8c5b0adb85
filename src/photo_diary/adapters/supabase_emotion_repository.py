"""Supabase-backed read access to emotions."""

from dataclasses import dataclass

from supabase import Client

from photo_diary.domain.emotions import EmotionRecord
from photo_diary.services.emotions import EmotionRepository


@dataclass
class SupabaseEmotionRepository(EmotionRepository):
    """Reads emotion tags and their photo associations."""

    client: Client

    def get_emotion(self, emotion_id: int) -> EmotionRecord | None:
        """Return an emotion by id, if present."""
        response = (
            self.client.table("emotions")
            .select("*")
            .eq("id", emotion_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return EmotionRecord(
            id=int(row["id"]),
            name=str(row["name"]),
            color=row.get("color"),
        )

    def list_emotion_ids_for_photo(self, photo_id: int) -> list[int]:
        """Return ids of emotions linked to a photo in association order."""
        response = (
            self.client.table("photo_emotions")
            .select("emotion_id")
            .eq("photo_id", photo_id)
            .order("id")
            .execute()
        )
        return [int(row["emotion_id"]) for row in response.data or []]
