"""Closed taxonomy and clause-level models for the classification stage."""

from enum import StrEnum

from pydantic import BaseModel, Field

EXCERPT_MAX_CHARS = 240


class ClauseTag(StrEnum):
    """Clause categories. Declaration order is the taxonomy order used for highlights."""

    DATA_USE = "data_use"
    DATA_SHARING = "data_sharing"
    COOKIES = "cookies"
    AUTO_RENEWAL = "auto_renewal"
    CANCELLATION = "cancellation"
    FEES = "fees"
    ARBITRATION = "arbitration"
    JURISDICTION = "jurisdiction"
    WARRANTY = "warranty"
    LIABILITY = "liability"
    AGE = "age"
    IP = "ip"
    THIRD_PARTY = "third_party"
    DO_NOT_SELL = "do_not_sell"
    OTHER = "other"


class Risk(StrEnum):
    """R = harmful/onerous, Y = unclear/mixed, G = benign."""

    RED = "R"
    YELLOW = "Y"
    GREEN = "G"


RISK_POINTS: dict[Risk, int] = {Risk.RED: 2, Risk.YELLOW: 1, Risk.GREEN: 0}


class Clause(BaseModel):
    tag: ClauseTag
    risk: Risk
    rationale: str = ""
    plain_english: str = Field(..., min_length=1)
    text_excerpt: str | None = Field(None, max_length=EXCERPT_MAX_CHARS)


class Highlight(BaseModel):
    tag: ClauseTag
    risk: Risk
    summary: str


class PageAssessment(BaseModel):
    overall_risk: Risk
    risk_score: int = Field(..., ge=0)
    highlights: list[Highlight] = Field(default_factory=list, max_length=6)
    clauses: list[Clause] = Field(default_factory=list)
