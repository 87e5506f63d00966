"""FastAPI application: relay endpoint, upload flow, usage endpoints and the single-page UI."""
import asyncio
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import httpx
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse

from scribe.config import Config
from scribe.constants import (
    API_KEY_PREFIX_CHARS,
    DEEPGRAM_AUTH_SCHEME,
    DEFAULT_AUDIO_MIME,
    DEFAULT_LANGUAGE,
    ERROR_SNIPPET_LENGTH,
    MSG_ERR_INVALID_JSON,
    MSG_ERR_METHOD_NOT_ALLOWED,
    MSG_ERR_NO_API_KEY,
    MSG_ERR_RELAY_API,
    MSG_ERR_UNEXPECTED,
    MSG_RELAY_FAILED,
    MSG_RELAY_NO_KEY,
    MSG_RELAY_RECEIVED,
    MSG_UPSTREAM_ERROR,
    RELAY_DEFAULT_LANGUAGE,
)
from scribe.errors import (
    EmptyFile,
    FileTooLarge,
    InvalidApiKey,
    NetworkError,
    QuotaExceeded,
    ScribeError,
    TranscriptionApiError,
    UnsupportedFormat,
)
from scribe.models import LANGUAGE_OPTIONS, FileDescriptor
from scribe.pipeline import TranscriptionPipeline
from scribe.transcription.client import TranscriptionClient
from scribe.transcription.deepgram import build_query_params
from scribe.usage import UsageTracker

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
RELAY_PATH = "/api/transcribe"


def error_status(exc: ScribeError) -> int:
    match exc:
        case EmptyFile():
            return 400
        case FileTooLarge():
            return 413
        case UnsupportedFormat():
            return 415
        case QuotaExceeded():
            return 429
        case InvalidApiKey():
            return 401
        case NetworkError() | TranscriptionApiError():
            return 502
        case _:
            return 500


def api_key_prefix(api_key: Optional[str]) -> str:
    match api_key:
        case str() as k if k:
            return k[:API_KEY_PREFIX_CHARS] + "..."
        case _:
            return "none"


def upload_size(file: UploadFile) -> int:
    """Size of the spooled upload without reading it into memory."""
    match file.size:
        case int() as size:
            return size
        case _:
            file.file.seek(0, os.SEEK_END)
            size = file.file.tell()
            file.file.seek(0)
            return size


def create_app(
    config: Config,
    tracker: UsageTracker,
    client: Optional[TranscriptionClient] = None,
    upstream_transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """Wire the routes. ``upstream_transport`` replaces the network for the relay in tests."""
    app = FastAPI(title="scribe")
    pipeline = TranscriptionPipeline(client, tracker) if client is not None else None

    @app.exception_handler(ScribeError)
    async def scribe_error_handler(request: Request, exc: ScribeError) -> JSONResponse:
        body = {"error": str(exc), "kind": exc.kind}
        match exc:
            case TranscriptionApiError(details=details) if details is not None:
                body["details"] = details
            case _:
                pass
        return JSONResponse(body, status_code=error_status(exc))

    # ── UI ────────────────────────────────────────────────────────────────────

    @app.get("/")
    async def get_index() -> HTMLResponse:
        """Serve the index.html single-page UI."""
        with open(STATIC_DIR / "index.html", encoding="utf-8") as f:
            return HTMLResponse(f.read())

    @app.get("/api/languages")
    async def get_languages() -> list[dict]:
        return [option._asdict() for option in LANGUAGE_OPTIONS]

    @app.get("/api/usage")
    async def get_usage() -> dict:
        return tracker.snapshot().to_dict()

    @app.post("/api/usage/reset")
    async def reset_usage() -> dict:
        await asyncio.to_thread(tracker.reset)
        return tracker.snapshot().to_dict()

    @app.get("/api/health")
    async def get_health() -> dict:
        """Diagnostic endpoint: is the server reachable and is a credential configured."""
        return {
            "status": "ok",
            "api_key_exists": bool(config.deepgram_api_key),
            "api_key_prefix": api_key_prefix(config.deepgram_api_key),
            "time": datetime.now(timezone.utc).isoformat(),
        }

    @app.post("/api/transcriptions")
    async def create_transcription(
        file: UploadFile = File(...),
        language: str = Form(DEFAULT_LANGUAGE),
    ) -> dict:
        """Validate, transcribe and charge one uploaded file; returns text and updated quota."""
        match pipeline:
            case None:
                return JSONResponse({"error": MSG_ERR_NO_API_KEY, "kind": "configuration"}, status_code=500)
            case _:
                pass
        descriptor = FileDescriptor.from_upload(file.filename or "", upload_size(file), file.content_type)
        outcome = await pipeline.submit(descriptor, file.read, language)
        return outcome.to_dict()

    # ── relay ─────────────────────────────────────────────────────────────────

    @app.post(RELAY_PATH)
    async def relay_transcribe(request: Request, language: Optional[str] = None) -> JSONResponse:
        """Forward the raw audio body to Deepgram with the server-held key and echo its answer."""
        api_key = config.deepgram_api_key
        match api_key:
            case None | "":
                logger.error(MSG_RELAY_NO_KEY)
                return JSONResponse({"error": MSG_ERR_NO_API_KEY}, status_code=500)
            case _:
                pass

        body = await request.body()
        language_tag = language or RELAY_DEFAULT_LANGUAGE
        logger.info(MSG_RELAY_RECEIVED, len(body), language_tag)

        try:
            async with httpx.AsyncClient(
                timeout=config.transcribe_timeout, transport=upstream_transport
            ) as upstream_client:
                upstream = await upstream_client.post(
                    config.deepgram_url,
                    params=build_query_params(language_tag),
                    headers={
                        "Authorization": f"{DEEPGRAM_AUTH_SCHEME} {api_key}",
                        "Content-Type": request.headers.get("content-type", DEFAULT_AUDIO_MIME),
                    },
                    content=body,
                )
        except httpx.HTTPError as exc:
            logger.error(MSG_RELAY_FAILED, exc)
            return JSONResponse({"error": str(exc) or MSG_ERR_UNEXPECTED}, status_code=500)

        try:
            data = upstream.json()
        except ValueError:
            snippet = upstream.text[:ERROR_SNIPPET_LENGTH]
            logger.error(MSG_RELAY_FAILED, snippet)
            return JSONResponse({"error": MSG_ERR_INVALID_JSON % snippet}, status_code=500)

        match upstream.status_code:
            case 200:
                return JSONResponse(data, status_code=200)
            case status:
                logger.error(MSG_UPSTREAM_ERROR, status, data)
                return JSONResponse(
                    {"error": MSG_ERR_RELAY_API % status, "details": data},
                    status_code=status,
                )

    @app.api_route(RELAY_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def relay_method_not_allowed() -> JSONResponse:
        return JSONResponse({"error": MSG_ERR_METHOD_NOT_ALLOWED}, status_code=405)

    return app
