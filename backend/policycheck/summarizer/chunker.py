"""Split normalized text into bounded chunks on sentence boundaries."""

import re
from collections.abc import Iterator

DEFAULT_MAX_CHARS = 6000

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def _sentence_spans(text: str) -> Iterator[tuple[int, int]]:
    start = 0
    for m in _SENTENCE_BOUNDARY.finditer(text):
        yield start, m.start()
        start = m.end()
    if start < len(text):
        yield start, len(text)


def chunk_text(text: str, max_len: int = DEFAULT_MAX_CHARS) -> list[str]:
    """
    Greedily pack whole sentences into chunks of at most *max_len* characters.

    A sentence longer than *max_len* becomes its own chunk, unsplit. Chunks are
    slices of the stripped input, so joining them with the separators that
    fell between them gives the input back. Re-chunking any output chunk with
    the same *max_len* returns it unchanged.
    """
    if max_len < 1:
        raise ValueError("max_len must be positive")
    text = text.strip()
    chunks: list[str] = []
    chunk_start: int | None = None
    chunk_end = 0
    for start, end in _sentence_spans(text):
        if chunk_start is None:
            chunk_start, chunk_end = start, end
        elif end - chunk_start > max_len:
            chunks.append(text[chunk_start:chunk_end])
            chunk_start, chunk_end = start, end
        else:
            chunk_end = end
    if chunk_start is not None:
        chunks.append(text[chunk_start:chunk_end])
    return chunks
