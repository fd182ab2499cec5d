"""Exceptions raised by the analysis pipeline.

Routes translate these into HTTP responses. Integrity failures (bad signature,
expired attestation) are never raised: they come back as ``valid: false``.
"""


class PolicyCheckError(Exception):
    """Base class for every error the pipeline raises on purpose."""


class MissingInputError(PolicyCheckError):
    """Neither a URL nor text was supplied."""


class NothingToAnalyzeError(PolicyCheckError):
    """The supplied document is empty after normalization."""


class FetchFailedError(PolicyCheckError):
    """The fetch collaborator could not produce text for a URL."""


class ClassifierUnavailableError(PolicyCheckError):
    """No classification model could be constructed (e.g. missing API key)."""


class NoClausesProducedError(PolicyCheckError):
    """Every chunk of the document failed to classify."""

    def __init__(self, failed_chunks: int) -> None:
        super().__init__(f"No clauses produced: all {failed_chunks} chunk(s) failed")
        self.failed_chunks = failed_chunks


class SigningKeyError(PolicyCheckError):
    """Signing key material is missing or malformed."""


class CanonicalizationError(PolicyCheckError):
    """A value that is not JSON-like reached the canonicalizer."""
