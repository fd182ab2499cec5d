"""Request dependencies: shared collaborators built at startup and kept on ``app.state``."""

from fastapi import Request

from policycheck.assessment import AssessmentBuilder
from policycheck.signing import SigningKeyProvider, Verifier


def get_builder(request: Request) -> AssessmentBuilder:
    return request.app.state.builder


def get_verifier(request: Request) -> Verifier:
    return request.app.state.verifier


def get_key_provider(request: Request) -> SigningKeyProvider:
    return request.app.state.key_provider
