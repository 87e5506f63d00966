"""TranscriptionPipeline — quota check → validate → read → transcribe → format → charge."""
import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import replace

from scribe.constants import MSG_SUBMISSION_DONE
from scribe.errors import QuotaExceeded
from scribe.formatting import format_paragraphs
from scribe.models import FileDescriptor, SubmissionOutcome, TranscriptionRequest
from scribe.transcription.client import TranscriptionClient
from scribe.usage import UsageTracker
from scribe.validation import validate_file

logger = logging.getLogger(__name__)

AudioReader = Callable[[], Awaitable[bytes]]


class TranscriptionPipeline:
    """Runs one submission at a time for the single local user."""

    def __init__(
        self,
        client: TranscriptionClient,
        tracker: UsageTracker,
        rng: random.Random | None = None,
    ) -> None:
        self._client = client
        self._tracker = tracker
        self._rng = rng

    def check(self, file: FileDescriptor) -> str:
        """Quota and file checks that need only the descriptor; returns the effective MIME type."""
        match self._tracker.has_reached_limit:
            case True:
                raise QuotaExceeded(self._tracker.remaining_seconds)
            case False:
                pass
        return validate_file(file)

    async def submit(self, file: FileDescriptor, read_audio: AudioReader, language: str) -> SubmissionOutcome:
        # read_audio runs only once the descriptor has passed check()
        mime_type = self.check(file)
        audio = await read_audio()
        request = TranscriptionRequest(audio_bytes=audio, language_code=language, mime_type=mime_type)
        result = await self._client.transcribe(request)

        formatted = replace(result, text=format_paragraphs(result.text, self._rng))
        used_before = self._tracker.used_seconds
        # write-through to the store is blocking file I/O
        await asyncio.to_thread(self._tracker.add_usage, result.audio_duration_seconds)
        charged = self._tracker.used_seconds - used_before
        logger.info(MSG_SUBMISSION_DONE, file.name, charged, self._tracker.remaining_seconds)

        return SubmissionOutcome(
            result=formatted,
            charged_seconds=charged,
            usage=self._tracker.snapshot(),
        )
