"""Signed URL issuance with expiry tracking."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from photo_diary.errors import SigningError

_logger = logging.getLogger(__name__)


class SignedUrlProvider(Protocol):
    """Interface for the storage backend that signs object keys."""

    def sign(self, object_key: str, expires_in_seconds: int) -> str:
        """Return a time-limited download URL for an object."""


@dataclass(frozen=True)
class SignedUrl:
    """A signed URL and the moment it stops being valid."""

    url: str
    expires_at: datetime


def is_expired(expires_at: datetime | None, now: datetime) -> bool:
    """Return True when a URL must be re-signed before use."""
    if expires_at is None:
        return True
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=UTC)
    return now >= expires_at


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class SignedUrlService:
    """Issues signed URLs and stamps them with an absolute expiry."""

    provider: SignedUrlProvider
    duration_minutes: int
    clock: Callable[[], datetime] = field(default=_utc_now)

    def obtain(self, object_key: str) -> SignedUrl:
        """Sign an object key, mapping any provider failure to SigningError."""
        issued_at = self.clock()
        try:
            url = self.provider.sign(object_key, self.duration_minutes * 60)
        except Exception as exc:
            _logger.warning("Signing failed: key=%s error=%s", object_key, exc)
            raise SigningError(object_key) from exc
        if not isinstance(url, str) or not url:
            raise SigningError(object_key)
        return SignedUrl(
            url=url,
            expires_at=issued_at + timedelta(minutes=self.duration_minutes),
        )

    def now(self) -> datetime:
        """Return the service clock's current time."""
        return self.clock()
