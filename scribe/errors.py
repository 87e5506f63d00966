"""Error kinds surfaced to the caller. None of them are fatal to the process."""
from typing import Any

from scribe.constants import (
    MAX_FILE_SIZE,
    MSG_ERR_API,
    MSG_ERR_EMPTY_FILE,
    MSG_ERR_FILE_TOO_LARGE,
    MSG_ERR_INVALID_API_KEY,
    MSG_ERR_NETWORK,
    MSG_ERR_QUOTA,
    MSG_ERR_UNSUPPORTED_FORMAT,
    SUPPORTED_FORMATS,
)


class ScribeError(Exception):
    """Base class for every error the app reports to the user."""

    kind = "error"


# ── validation (reported before any network call) ─────────────────────────────


class FileValidationError(ScribeError):
    kind = "validation"


class EmptyFile(FileValidationError):
    kind = "empty_file"

    def __init__(self) -> None:
        super().__init__(MSG_ERR_EMPTY_FILE)


class FileTooLarge(FileValidationError):
    kind = "file_too_large"

    def __init__(self, size_bytes: int) -> None:
        self.size_bytes = size_bytes
        super().__init__(MSG_ERR_FILE_TOO_LARGE % (MAX_FILE_SIZE // (1024 * 1024)))


class UnsupportedFormat(FileValidationError):
    kind = "unsupported_format"

    def __init__(self, mime_type: str) -> None:
        self.mime_type = mime_type
        extensions = ", ".join(SUPPORTED_FORMATS).upper()
        super().__init__(MSG_ERR_UNSUPPORTED_FORMAT % (mime_type or "unknown", extensions))


# ── transcription (reported after an attempted call) ──────────────────────────


class TranscriptionError(ScribeError):
    kind = "transcription"


class InvalidApiKey(TranscriptionError):
    kind = "invalid_api_key"

    def __init__(self) -> None:
        super().__init__(MSG_ERR_INVALID_API_KEY)


class NetworkError(TranscriptionError):
    kind = "network_error"

    def __init__(self, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(MSG_ERR_NETWORK)


class TranscriptionApiError(TranscriptionError):
    """Non-success status from the speech API. ``details`` is its error payload."""

    kind = "api_error"

    def __init__(self, status: int, details: Any = None) -> None:
        self.status = status
        self.details = details
        super().__init__(MSG_ERR_API % (status, details if details is not None else ""))


# ── quota ─────────────────────────────────────────────────────────────────────


class QuotaExceeded(ScribeError):
    kind = "quota_exceeded"

    def __init__(self, remaining_seconds: int = 0) -> None:
        self.remaining_seconds = remaining_seconds
        super().__init__(MSG_ERR_QUOTA)
