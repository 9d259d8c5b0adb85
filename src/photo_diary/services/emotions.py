"""Read access to emotion tags attached to photos."""

from dataclasses import dataclass
from typing import Protocol

from photo_diary.domain.emotions import EmotionRecord, EmotionSummary
from photo_diary.errors import NotFoundError


class EmotionRepository(Protocol):
    """Persistence interface for emotions and their photo associations."""

    def get_emotion(self, emotion_id: int) -> EmotionRecord | None:
        """Return an emotion by id, if present."""

    def list_emotion_ids_for_photo(self, photo_id: int) -> list[int]:
        """Return ids of emotions linked to a photo in association order."""


@dataclass
class EmotionService:
    """Builds emotion summaries for photos."""

    repository: EmotionRepository

    def summary_for_photo(self, photo_id: int) -> EmotionSummary:
        """Return the main/sub emotion summary for a photo."""
        emotions = []
        for emotion_id in self.repository.list_emotion_ids_for_photo(photo_id):
            emotion = self.repository.get_emotion(emotion_id)
            if emotion is None:
                raise NotFoundError("emotion", emotion_id)
            emotions.append(emotion)
        return EmotionSummary.from_emotions(emotions)
