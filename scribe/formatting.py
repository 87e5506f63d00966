"""Readability helpers: paragraph re-splitting and display formatting."""
import random
import re

from scribe.constants import (
    LEGACY_BREAK_CHANCE,
    LONG_SENTENCE_CHARS,
    MAX_PARAGRAPH_CHARS,
    PARAGRAPH_SEPARATOR,
    SENTENCES_PER_PARAGRAPH,
)

_SENTENCE_END = re.compile(r"([.!?])\s+")


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_END.sub("\\1\n", text).split("\n") if s.strip()]


def format_paragraphs(text: str, rng: random.Random | None = None) -> str:
    """Group a flat transcript into paragraphs separated by a blank line.

    A sentence longer than LONG_SENTENCE_CHARS stands alone. Otherwise a paragraph
    closes once it exceeds MAX_PARAGRAPH_CHARS or after SENTENCES_PER_PARAGRAPH
    sentences. Passing ``rng`` switches to the legacy rule of closing with
    probability LEGACY_BREAK_CHANCE after each sentence.
    """
    paragraphs: list[str] = []
    current: list[str] = []

    def flush() -> None:
        match current:
            case []:
                pass
            case _:
                paragraphs.append(" ".join(current))
                current.clear()

    for sentence in split_sentences(text):
        if len(sentence) > LONG_SENTENCE_CHARS:
            flush()
            paragraphs.append(sentence)
            continue

        current.append(sentence)
        too_long = len(" ".join(current)) > MAX_PARAGRAPH_CHARS
        match rng:
            case None:
                should_break = len(current) >= SENTENCES_PER_PARAGRAPH
            case r:
                should_break = r.random() < LEGACY_BREAK_CHANCE
        if too_long or should_break:
            flush()

    flush()
    return PARAGRAPH_SEPARATOR.join(paragraphs).strip()


def format_duration(seconds: float) -> str:
    """Render seconds as m:ss, e.g. 125 -> '2:05'."""
    total = max(0, int(seconds))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"


def format_file_size(size_bytes: int) -> str:
    match size_bytes:
        case n if n < 1024 * 1024:
            return f"{n / 1024:.1f} KB"
        case n:
            return f"{n / (1024 * 1024):.1f} MB"
