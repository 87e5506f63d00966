from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

from scribe.constants import (
    DEEPGRAM_URL,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_TRANSCRIBE_TIMEOUT,
    DEFAULT_USAGE_STORE_PATH,
)


@dataclass(frozen=True)
class Config:
    deepgram_api_key: Optional[str]
    log_level: str
    transcribe_timeout: int
    usage_store_path: Path
    host: str
    port: int
    relay_url: Optional[str] = None
    deepgram_url: str = DEEPGRAM_URL

    @classmethod
    def from_env(cls) -> "Config":
        load_dotenv()

        api_key = os.getenv("DEEPGRAM_API_KEY") or None
        log_level = os.getenv("LOG_LEVEL", "INFO")
        timeout = os.getenv("TRANSCRIBE_TIMEOUT", str(DEFAULT_TRANSCRIBE_TIMEOUT))
        store_path = os.getenv("USAGE_STORE_PATH") or DEFAULT_USAGE_STORE_PATH
        host = os.getenv("HOST", DEFAULT_HOST)
        port = os.getenv("PORT", str(DEFAULT_PORT))
        deepgram_url = os.getenv("DEEPGRAM_URL") or DEEPGRAM_URL
        relay_url = os.getenv("RELAY_URL") or None

        return cls._validate(
            deepgram_api_key=api_key,
            log_level=log_level,
            transcribe_timeout=timeout,
            usage_store_path=Path(store_path),
            host=host,
            port=port,
            deepgram_url=deepgram_url,
            relay_url=relay_url,
        )

    @staticmethod
    def _validate(
        deepgram_api_key: Optional[str],
        log_level: str,
        transcribe_timeout: str,
        usage_store_path: Path,
        host: str,
        port: str,
        deepgram_url: str,
        relay_url: Optional[str],
    ) -> "Config":
        match transcribe_timeout.strip():
            case t if t.isdigit() and int(t) > 0:
                timeout = int(t)
            case _:
                raise ValueError("TRANSCRIBE_TIMEOUT must be a positive integer")

        match port.strip():
            case p if p.isdigit():
                port_number = int(p)
            case _:
                raise ValueError("PORT must be an integer")

        return Config(
            deepgram_api_key=deepgram_api_key,
            log_level=log_level,
            transcribe_timeout=timeout,
            usage_store_path=usage_store_path,
            host=host,
            port=port_number,
            deepgram_url=deepgram_url,
            relay_url=relay_url,
        )
