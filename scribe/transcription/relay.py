"""RelayTranscriptionClient — sends audio through the relay endpoint, which holds the API key."""
from scribe.models import TranscriptionRequest
from scribe.transcription.deepgram import HttpTranscriptionClient, deepgram_language


class RelayTranscriptionClient(HttpTranscriptionClient):

    def _params(self, request: TranscriptionRequest) -> dict[str, str]:
        return {"language": deepgram_language(request.language_code)}
