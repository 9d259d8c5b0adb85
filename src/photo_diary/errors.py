"""Error taxonomy shared by the ingestion pipeline and the read side."""


class PhotoDiaryError(Exception):
    """Base class for expected, reportable failures."""


class StorageError(PhotoDiaryError):
    """Writing an object to storage failed."""

    def __init__(self, object_key: str) -> None:
        super().__init__(f"Failed to store object {object_key}")
        self.object_key = object_key


class SigningError(PhotoDiaryError):
    """Issuing a signed URL failed."""

    def __init__(self, object_key: str) -> None:
        super().__init__(f"Failed to sign object {object_key}")
        self.object_key = object_key


class InferenceError(PhotoDiaryError):
    """A remote inference call failed or returned an unexpected body."""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        message = f"Inference {operation} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.operation = operation


class TranslationError(PhotoDiaryError):
    """A translation backend failed."""

    def __init__(self, kind: str, text: str) -> None:
        super().__init__(f"Translation ({kind}) failed for {text!r}")
        self.kind = kind
        self.text = text


class NotFoundError(PhotoDiaryError):
    """A referenced entity does not exist."""

    def __init__(self, kind: str, identifier: object) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class ConflictRetry(PhotoDiaryError):
    """An insert hit a uniqueness constraint; the caller should re-fetch."""

    def __init__(self, table: str, key: object) -> None:
        super().__init__(f"Conflict on {table} for {key!r}")
        self.table = table
        self.key = key
