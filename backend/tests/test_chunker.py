"""Unit tests for sentence-boundary chunking."""

import pytest

from policycheck.summarizer import chunk_text

SENTENCES = [f"Sentence number {i} talks about fees and data." for i in range(40)]
TEXT = " ".join(SENTENCES)


class TestChunkText:
    def test_short_text_is_one_chunk(self):
        assert chunk_text("One. Two.", 100) == ["One. Two."]

    def test_chunks_respect_max_len(self):
        chunks = chunk_text(TEXT, 200)
        assert len(chunks) > 1
        assert all(len(c) <= 200 for c in chunks)

    def test_join_reconstructs_source(self):
        chunks = chunk_text(TEXT, 200)
        assert " ".join(chunks) == TEXT

    def test_chunks_end_on_sentence_boundary(self):
        for chunk in chunk_text(TEXT, 200):
            assert chunk.endswith(".")

    def test_long_sentence_kept_whole(self):
        long_sentence = "A" * 50 + "."
        chunks = chunk_text(f"Short. {long_sentence} Tail.", 10)
        assert chunks == ["Short.", long_sentence, "Tail."]

    def test_rechunking_is_stable(self):
        for chunk in chunk_text(TEXT, 200):
            assert chunk_text(chunk, 200) == [chunk]

    def test_empty_text(self):
        assert chunk_text("   ", 100) == []

    def test_invalid_max_len(self):
        with pytest.raises(ValueError):
            chunk_text("Hello.", 0)
