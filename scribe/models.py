from dataclasses import dataclass, field
from typing import NamedTuple

from scribe.constants import LANGUAGE_LABELS, QUOTA_SECONDS
from scribe.formatting import format_duration


class LanguageOption(NamedTuple):
    value: str
    label: str


LANGUAGE_OPTIONS: tuple[LanguageOption, ...] = tuple(
    LanguageOption(value, label) for value, label in LANGUAGE_LABELS.items()
)


@dataclass(frozen=True)
class FileDescriptor:
    name: str
    size_bytes: int
    declared_mime_type: str
    extension: str

    @classmethod
    def from_upload(cls, name: str, size_bytes: int, declared_mime_type: str | None) -> "FileDescriptor":
        """Build a descriptor from what the browser reports; extension is lowercased, '' if none."""
        _, dot, ext = name.rpartition(".")
        return cls(
            name=name,
            size_bytes=size_bytes,
            declared_mime_type=declared_mime_type or "",
            extension=ext.lower() if dot else "",
        )


@dataclass(frozen=True)
class TranscriptionOptions:
    smart_format: bool = True
    diarize: bool = False
    punctuate: bool = True
    utterances: bool = False
    detect_language: bool = False


@dataclass(frozen=True)
class TranscriptionRequest:
    audio_bytes: bytes
    language_code: str
    mime_type: str
    options: TranscriptionOptions = field(default_factory=TranscriptionOptions)


@dataclass(frozen=True)
class TranscriptionResult:
    text: str
    audio_duration_seconds: float
    language_code: str


@dataclass(frozen=True)
class UsageState:
    used_seconds: int

    @property
    def remaining_seconds(self) -> int:
        return max(0, QUOTA_SECONDS - self.used_seconds)

    @property
    def has_reached_limit(self) -> bool:
        return self.remaining_seconds <= 0

    def to_dict(self) -> dict:
        return {
            "used_seconds": self.used_seconds,
            "remaining_seconds": self.remaining_seconds,
            "quota_seconds": QUOTA_SECONDS,
            "has_reached_limit": self.has_reached_limit,
            "remaining_display": format_duration(self.remaining_seconds),
        }


@dataclass(frozen=True)
class SubmissionOutcome:
    result: TranscriptionResult
    charged_seconds: int
    usage: UsageState

    def to_dict(self) -> dict:
        return {
            "text": self.result.text,
            "audio_duration_seconds": self.result.audio_duration_seconds,
            "language": self.result.language_code,
            "charged_seconds": self.charged_seconds,
            "usage": self.usage.to_dict(),
        }
