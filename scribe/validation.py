import logging

from scribe.constants import MAX_FILE_SIZE, MSG_FILE_VALIDATED, SUPPORTED_FORMATS
from scribe.errors import EmptyFile, FileTooLarge, UnsupportedFormat
from scribe.models import FileDescriptor

logger = logging.getLogger(__name__)


def effective_mime_type(file: FileDescriptor) -> str:
    """Extension wins; the browser-reported type is only a fallback for unknown extensions."""
    return SUPPORTED_FORMATS.get(file.extension.lower(), file.declared_mime_type)


def validate_file(file: FileDescriptor) -> str:
    """Return the MIME type to send upstream, or raise a FileValidationError."""
    match file.size_bytes:
        case 0:
            raise EmptyFile()
        case n if n > MAX_FILE_SIZE:
            raise FileTooLarge(n)
        case _:
            pass

    mime_type = effective_mime_type(file)
    if mime_type not in SUPPORTED_FORMATS.values():
        raise UnsupportedFormat(mime_type)

    logger.debug(MSG_FILE_VALIDATED, file.name, mime_type, file.size_bytes)
    return mime_type
