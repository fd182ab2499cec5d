"""Deterministic clause extraction."""

from policycheck.extraction.models import ParsedDocument, RiskFlags, Section, SectionKey
from policycheck.extraction.parser import extract, project_risk_flags

__all__ = ["extract", "project_risk_flags", "ParsedDocument", "RiskFlags", "Section", "SectionKey"]
