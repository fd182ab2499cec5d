"""Chunk, classify and aggregate policy text into a page assessment."""

from policycheck.summarizer.aggregator import aggregate_page
from policycheck.summarizer.chunker import chunk_text
from policycheck.summarizer.classifier import ClassifierClient, safe_parse_clauses
from policycheck.summarizer.models import Clause, ClauseTag, Highlight, PageAssessment, Risk

__all__ = [
    "aggregate_page",
    "chunk_text",
    "ClassifierClient",
    "safe_parse_clauses",
    "Clause",
    "ClauseTag",
    "Highlight",
    "PageAssessment",
    "Risk",
]
