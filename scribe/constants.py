"""All magic values live here — no inline literals anywhere else."""

# Usage quota: 10 free minutes per local install.
QUOTA_SECONDS = 10 * 60
USAGE_STORE_KEY = "transcription_used_time"
DEFAULT_USAGE_STORE_PATH = ".usage.json"

# Upload limits (1 GiB)
MAX_FILE_SIZE = 1024 * 1024 * 1024

# Extension → MIME type. Anything whose effective type is not listed here is rejected.
SUPPORTED_FORMATS: dict[str, str] = {
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "m4a": "audio/mp4",
    "webm": "audio/webm",
}
DEFAULT_AUDIO_MIME = "audio/mpeg"

# Deepgram
DEEPGRAM_URL = "https://api.deepgram.com/v1/listen"
DEEPGRAM_MODEL = "nova-3"
DEEPGRAM_AUTH_SCHEME = "Token"
DEEPGRAM_LANGUAGES: dict[str, str] = {
    "en": "en-US",
    "ru": "ru",
}
DEEPGRAM_DEFAULT_LANGUAGE = "en-US"
RELAY_DEFAULT_LANGUAGE = "ru"
DEFAULT_TRANSCRIBE_TIMEOUT = 300
ERROR_SNIPPET_LENGTH = 100

# Language selector
DEFAULT_LANGUAGE = "ru"
LANGUAGE_LABELS: dict[str, str] = {
    "ru": "Русский",
    "en": "English",
}

# Paragraph heuristics
LONG_SENTENCE_CHARS = 150
MAX_PARAGRAPH_CHARS = 300
SENTENCES_PER_PARAGRAPH = 3
LEGACY_BREAK_CHANCE = 0.3
PARAGRAPH_SEPARATOR = "\n\n"

# Web server
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
API_KEY_PREFIX_CHARS = 5

# Log messages
MSG_SERVER_STARTING = "Starting scribe on http://%s:%d"
MSG_USAGE_LOADED = "Usage restored: %ds used of %ds"
MSG_USAGE_CHARGED = "Charged %ds of audio (%ds remaining)"
MSG_USAGE_DENIED = "Usage denied: quota exhausted"
MSG_USAGE_RESET = "Usage counter reset"
MSG_FILE_VALIDATED = "File validated: %s (%s, %d bytes)"
MSG_SENDING = "Sending %d bytes to %s (language=%s)"
MSG_TRANSCRIBED = "Transcription received: %.1fs of audio, %d chars"
MSG_UPSTREAM_ERROR = "Deepgram API error: %s %s"
MSG_RELAY_NO_KEY = "API key is missing in environment variables"
MSG_RELAY_RECEIVED = "Relay received %d bytes (language=%s)"
MSG_RELAY_FAILED = "Relay request failed: %s"
MSG_SUBMISSION_DONE = "Transcribed %s: charged %ds, %ds left"

# User-facing errors
MSG_ERR_EMPTY_FILE = "The file is empty"
MSG_ERR_FILE_TOO_LARGE = "File size exceeds 1 GB (%d MB)"
MSG_ERR_UNSUPPORTED_FORMAT = "Unsupported file format: %s. Use %s"
MSG_ERR_INVALID_API_KEY = "Invalid Deepgram API key"
MSG_ERR_NETWORK = "Network error. Check your internet connection and try again."
MSG_ERR_API = "Error while processing audio: %d. %s"
MSG_ERR_QUOTA = "You have used up the free limit of 10 minutes"
MSG_ERR_METHOD_NOT_ALLOWED = "Method not allowed"
MSG_ERR_NO_API_KEY = "Deepgram API key is not configured"
MSG_ERR_RELAY_API = "Deepgram API error: %d"
MSG_ERR_INVALID_JSON = "Invalid JSON response: %s..."
MSG_ERR_UNEXPECTED = "An unexpected error occurred while processing the request"
