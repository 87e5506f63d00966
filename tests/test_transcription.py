"""TDD: TranscriptionClient tests written FIRST"""
import json

import httpx
import pytest

from scribe.errors import InvalidApiKey, NetworkError, TranscriptionApiError
from scribe.models import TranscriptionRequest
from scribe.transcription.client import TranscriptionClient
from scribe.transcription.deepgram import (
    DeepgramTranscriptionClient,
    HttpTranscriptionClient,
    build_query_params,
    deepgram_language,
    parse_response,
    translate_error,
)
from scribe.transcription.relay import RelayTranscriptionClient

DEEPGRAM_BODY = {
    "metadata": {"duration": 45.2},
    "results": {
        "channels": [
            {"alternatives": [{"transcript": "hello from voice", "confidence": 0.98}]}
        ]
    },
}


def make_request(language: str = "ru", mime: str = "audio/wav") -> TranscriptionRequest:
    return TranscriptionRequest(audio_bytes=b"fake-audio-data", language_code=language, mime_type=mime)


def make_transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


def test_clients_implement_abc():
    assert issubclass(DeepgramTranscriptionClient, TranscriptionClient)
    assert issubclass(RelayTranscriptionClient, TranscriptionClient)


def test_http_client_requires_params_override():
    with pytest.raises(TypeError):
        HttpTranscriptionClient("http://example.test/listen")


# ── pure helpers ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize(
    "code, expected",
    [("en", "en-US"), ("ru", "ru"), ("de", "en-US"), ("", "en-US"), ("RU", "en-US")],
)
def test_language_mapping_defaults_to_en_us(code, expected):
    assert deepgram_language(code) == expected


def test_query_params_are_fixed_and_explicit():
    assert build_query_params("ru") == {
        "model": "nova-3",
        "language": "ru",
        "smart_format": "true",
        "diarize": "false",
        "punctuate": "true",
        "utterances": "false",
        "detect_language": "false",
    }


def test_parse_response_extracts_transcript_and_duration():
    result = parse_response(DEEPGRAM_BODY, "ru")

    assert result.text == "hello from voice"
    assert result.audio_duration_seconds == 45.2
    assert result.language_code == "ru"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"results": {}},
        {"results": {"channels": []}},
        {"results": {"channels": [{"alternatives": []}]}},
        {"results": None, "metadata": None},
        {"metadata": {"duration": -5}},
        {"metadata": {"duration": "n/a"}},
        {"metadata": {"duration": True}},
        [],
    ],
)
def test_parse_response_tolerates_missing_fields(body):
    result = parse_response(body, "en-US")

    assert result.text == ""
    assert result.audio_duration_seconds == 0


def test_translate_error_maps_unauthorized_message():
    assert isinstance(translate_error(RuntimeError("401 Unauthorized")), InvalidApiKey)


def test_translate_error_keeps_other_errors():
    exc = ValueError("something else")
    assert translate_error(exc) is exc


# ── direct client ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_deepgram_client_sends_audio_with_credentials():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=DEEPGRAM_BODY)

    client = DeepgramTranscriptionClient(api_key="test-key", transport=make_transport(handler))
    result = await client.transcribe(make_request("en", "audio/wav"))

    assert result.text == "hello from voice"
    assert result.language_code == "en-US"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/v1/listen"
    assert request.url.params["language"] == "en-US"
    assert request.url.params["detect_language"] == "false"
    assert request.headers["authorization"] == "Token test-key"
    assert request.headers["content-type"] == "audio/wav"
    assert request.content == b"fake-audio-data"


@pytest.mark.asyncio
async def test_unauthorized_response_becomes_invalid_api_key():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"err": "Unauthorized"})

    client = DeepgramTranscriptionClient(api_key="bad", transport=make_transport(handler))

    with pytest.raises(InvalidApiKey):
        await client.transcribe(make_request())


@pytest.mark.asyncio
async def test_error_status_raises_api_error_with_payload():
    payload = {"err_code": "Bad Request", "err_msg": "corrupt audio"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json=payload)

    client = DeepgramTranscriptionClient(api_key="k", transport=make_transport(handler))

    with pytest.raises(TranscriptionApiError) as exc_info:
        await client.transcribe(make_request())

    assert exc_info.value.status == 400
    assert exc_info.value.details == payload


@pytest.mark.asyncio
async def test_error_status_with_text_body_keeps_text():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    client = DeepgramTranscriptionClient(api_key="k", transport=make_transport(handler))

    with pytest.raises(TranscriptionApiError) as exc_info:
        await client.transcribe(make_request())

    assert exc_info.value.details == "Bad Gateway"


@pytest.mark.asyncio
async def test_success_with_invalid_json_raises_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    client = DeepgramTranscriptionClient(api_key="k", transport=make_transport(handler))

    with pytest.raises(TranscriptionApiError, match="Invalid JSON response"):
        await client.transcribe(make_request())


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout])
async def test_transport_failure_becomes_network_error(error):
    def handler(request: httpx.Request) -> httpx.Response:
        raise error("boom", request=request)

    client = DeepgramTranscriptionClient(api_key="k", transport=make_transport(handler))

    with pytest.raises(NetworkError):
        await client.transcribe(make_request())


# ── relay client ──────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_relay_client_sends_language_only_and_no_credential():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=json.dumps(DEEPGRAM_BODY).encode())

    client = RelayTranscriptionClient("http://relay.test/api/transcribe", transport=make_transport(handler))
    result = await client.transcribe(make_request("ru", "audio/mpeg"))

    assert result.text == "hello from voice"
    request = seen[0]
    assert dict(request.url.params) == {"language": "ru"}
    assert "authorization" not in request.headers
    assert request.headers["content-type"] == "audio/mpeg"


@pytest.mark.asyncio
async def test_relay_client_maps_relayed_401():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "Deepgram API error: 401", "details": {"err": "Unauthorized"}})

    client = RelayTranscriptionClient("http://relay.test/api/transcribe", transport=make_transport(handler))

    with pytest.raises(InvalidApiKey):
        await client.transcribe(make_request())
