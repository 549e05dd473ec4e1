"""Generated response sanitizing and line segmentation."""

import re
from collections.abc import Iterator

DEFAULT_MAX_LINE_LENGTH = 400

# Role labels the generator sometimes echoes back at the start of a reply
ROLE_PREFIXES = ("Assistant: ", "Bot: ", "AI: ")

_TAG_PATTERN = re.compile(r"<[^>]*>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
# Whitespace that follows one or more sentence terminators
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def sanitize_response(raw: str) -> str:
    """Clean up raw generator output.

    Args:
        raw: Text returned by the generator.

    Returns:
        Text without a leading role label or markup tags, with whitespace
        runs collapsed to single spaces and trimmed.
    """
    text = raw.strip()
    for prefix in ROLE_PREFIXES:
        if text.startswith(prefix):
            text = text[len(prefix) :]
            break

    text = _TAG_PATTERN.sub("", text)
    text = _WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def split_sentences(text: str) -> list[str]:
    """Split text after sentence terminators, keeping the terminators.

    Empty fragments are dropped.
    """
    return [fragment for fragment in _SENTENCE_BOUNDARY.split(text) if fragment]


def encoded_length(text: str) -> int:
    """Length of text on the wire, in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def segment_response(
    text: str,
    max_length: int = DEFAULT_MAX_LINE_LENGTH,
) -> Iterator[str]:
    """Split text into chunks that fit on one chat line.

    Lengths are measured in UTF-8 bytes, as the IRC line limit is.
    Short text is yielded unchanged. Longer text is split into sentences
    which are packed greedily, joined by single spaces. A sentence longer
    than max_length is packed word by word instead. Words are never split,
    so a single word longer than max_length becomes its own chunk.

    Args:
        text: Text to split.
        max_length: Maximum chunk size in bytes.

    Yields:
        Chunks in reading order. Nothing is yielded for empty text.
    """
    if encoded_length(text) <= max_length:
        if text:
            yield text
        return

    current = ""
    for sentence in split_sentences(text):
        if encoded_length(sentence) > max_length:
            if current:
                yield current
                current = ""
            pieces = sentence.split()
        else:
            pieces = [sentence]

        for piece in pieces:
            candidate = f"{current} {piece}" if current else piece
            if encoded_length(candidate) <= max_length:
                current = candidate
                continue
            if current:
                yield current
            current = piece

    if current:
        yield current
