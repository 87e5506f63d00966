"""Entry point — wires Config → UsageTracker → TranscriptionClient → FastAPI app."""
import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI
from rich.logging import RichHandler

from scribe.config import Config
from scribe.constants import MSG_SERVER_STARTING
from scribe.transcription.client import TranscriptionClient
from scribe.transcription.deepgram import DeepgramTranscriptionClient
from scribe.transcription.relay import RelayTranscriptionClient
from scribe.usage import JsonUsageStore, UsageTracker
from scribe.web import create_app


def _setup_logging(level: str) -> None:
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    list(map(root.removeHandler, root.handlers[:]))
    root.addHandler(RichHandler(rich_tracebacks=True))


def build_client(config: Config) -> Optional[TranscriptionClient]:
    """Direct Deepgram when this process holds the key, else a remote relay, else nothing."""
    match (config.deepgram_api_key, config.relay_url):
        case (str() as key, _) if key:
            return DeepgramTranscriptionClient(key, url=config.deepgram_url, timeout=config.transcribe_timeout)
        case (_, str() as url) if url:
            return RelayTranscriptionClient(url, timeout=config.transcribe_timeout)
        case _:
            return None


def build_app(config: Config) -> FastAPI:
    tracker = UsageTracker(JsonUsageStore(config.usage_store_path))
    return create_app(config, tracker, client=build_client(config))


def main() -> None:
    config = Config.from_env()
    _setup_logging(config.log_level)

    logger = logging.getLogger(__name__)
    logger.info(MSG_SERVER_STARTING, config.host, config.port)

    uvicorn.run(build_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    main()
