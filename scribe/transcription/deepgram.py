"""DeepgramTranscriptionClient — Deepgram pre-recorded audio backend over plain HTTP."""
import logging
from abc import abstractmethod
from typing import Any

import httpx

from scribe.constants import (
    DEEPGRAM_AUTH_SCHEME,
    DEEPGRAM_DEFAULT_LANGUAGE,
    DEEPGRAM_LANGUAGES,
    DEEPGRAM_MODEL,
    DEEPGRAM_URL,
    DEFAULT_TRANSCRIBE_TIMEOUT,
    ERROR_SNIPPET_LENGTH,
    MSG_ERR_INVALID_JSON,
    MSG_SENDING,
    MSG_TRANSCRIBED,
    MSG_UPSTREAM_ERROR,
)
from scribe.errors import InvalidApiKey, NetworkError, TranscriptionApiError
from scribe.models import TranscriptionOptions, TranscriptionRequest, TranscriptionResult
from scribe.transcription.client import TranscriptionClient

logger = logging.getLogger(__name__)


# ── pure helpers (module-level so tests can import them directly) ──────────────


def deepgram_language(code: str) -> str:
    """Map a selector value to Deepgram's language tag; unknown codes fall back to en-US."""
    return DEEPGRAM_LANGUAGES.get(code, DEEPGRAM_DEFAULT_LANGUAGE)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_query_params(language_tag: str, options: TranscriptionOptions = TranscriptionOptions()) -> dict[str, str]:
    """Query string for /v1/listen. Language is always explicit, never auto-detected."""
    return {
        "model": DEEPGRAM_MODEL,
        "language": language_tag,
        "smart_format": _flag(options.smart_format),
        "diarize": _flag(options.diarize),
        "punctuate": _flag(options.punctuate),
        "utterances": _flag(options.utterances),
        "detect_language": _flag(options.detect_language),
    }


def _first(items: Any) -> dict:
    match items:
        case [dict() as first, *_]:
            return first
        case _:
            return {}


def _duration(value: Any) -> float:
    """Non-negative seconds; anything that is not a plain number counts as missing."""
    match value:
        case bool():
            return 0.0
        case int() | float() as seconds:
            return max(0.0, float(seconds))
        case _:
            return 0.0


def parse_response(data: Any, language_tag: str) -> TranscriptionResult:
    """Best alternative of the first channel plus metadata.duration; missing fields default."""
    body = data if isinstance(data, dict) else {}
    results = body.get("results") or {}
    channel = _first(results.get("channels") if isinstance(results, dict) else None)
    alternative = _first(channel.get("alternatives"))
    metadata = body.get("metadata") or {}
    duration = metadata.get("duration") if isinstance(metadata, dict) else None
    return TranscriptionResult(
        text=alternative.get("transcript") or "",
        audio_duration_seconds=_duration(duration),
        language_code=language_tag,
    )


def error_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def translate_error(exc: Exception) -> Exception:
    """Re-signal auth and transport failures as InvalidApiKey / NetworkError."""
    match exc:
        case InvalidApiKey() | NetworkError():
            return exc
        case TranscriptionApiError(status=401):
            return InvalidApiKey()
        case e if "Unauthorized" in str(e):
            return InvalidApiKey()
        case httpx.TransportError():
            return NetworkError(exc)
        case _:
            return exc


# ── clients ───────────────────────────────────────────────────────────────────


class HttpTranscriptionClient(TranscriptionClient):
    """Shared POST-and-parse flow; subclasses decide where the bytes go and with which headers."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TRANSCRIBE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @abstractmethod
    def _params(self, request: TranscriptionRequest) -> dict[str, str]:
        """Query string for one request."""

    def _headers(self, request: TranscriptionRequest) -> dict[str, str]:
        return {"Content-Type": request.mime_type}

    async def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        language_tag = deepgram_language(request.language_code)
        try:
            logger.info(MSG_SENDING, len(request.audio_bytes), self._url, language_tag)
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    params=self._params(request),
                    headers=self._headers(request),
                    content=request.audio_bytes,
                )

            match response.is_success:
                case False:
                    details = error_details(response)
                    logger.error(MSG_UPSTREAM_ERROR, response.status_code, details)
                    raise TranscriptionApiError(response.status_code, details)
                case True:
                    pass

            try:
                data = response.json()
            except ValueError:
                snippet = response.text[:ERROR_SNIPPET_LENGTH]
                raise TranscriptionApiError(response.status_code, MSG_ERR_INVALID_JSON % snippet)

            result = parse_response(data, language_tag)
            logger.info(MSG_TRANSCRIBED, result.audio_duration_seconds, len(result.text))
            return result

        except Exception as exc:
            translated = translate_error(exc)
            if translated is exc:
                raise
            raise translated from exc


class DeepgramTranscriptionClient(HttpTranscriptionClient):
    """Calls Deepgram directly with a credential held by this process."""

    def __init__(
        self,
        api_key: str,
        url: str = DEEPGRAM_URL,
        timeout: float = DEFAULT_TRANSCRIBE_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(url, timeout=timeout, transport=transport)
        self._api_key = api_key

    def _params(self, request: TranscriptionRequest) -> dict[str, str]:
        return build_query_params(deepgram_language(request.language_code), request.options)

    def _headers(self, request: TranscriptionRequest) -> dict[str, str]:
        return {
            "Authorization": f"{DEEPGRAM_AUTH_SCHEME} {self._api_key}",
            "Content-Type": request.mime_type,
        }
