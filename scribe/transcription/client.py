"""TranscriptionClient — abstract base for speech-to-text backends."""
from abc import ABC, abstractmethod

from scribe.models import TranscriptionRequest, TranscriptionResult


class TranscriptionClient(ABC):
    @abstractmethod
    async def transcribe(self, request: TranscriptionRequest) -> TranscriptionResult:
        """Send the audio upstream and return the raw (unformatted) transcript.

        Raises InvalidApiKey, NetworkError or TranscriptionApiError on failure.
        """
        ...
