"""Domain models for emotion tags."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmotionRecord:
    """Represents an emotion tag."""

    id: int
    name: str
    color: str | None = None


@dataclass(frozen=True)
class EmotionSummary:
    """Main emotion of a photo plus any secondary ones."""

    main: EmotionRecord | None = None
    subs: list[EmotionRecord] = field(default_factory=list)

    @classmethod
    def from_emotions(cls, emotions: list[EmotionRecord]) -> "EmotionSummary":
        """Treat the first associated emotion as the main one."""
        if not emotions:
            return cls()
        return cls(main=emotions[0], subs=list(emotions[1:]))
