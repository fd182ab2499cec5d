"""Derived envelope summaries: flags, risk factor counts, score, level and confidence."""

from collections import Counter

from policycheck.assessment.models import AnalysisResult, Confidence, RiskLevel
from policycheck.summarizer.models import Risk

# Points deducted from a 100-point buyer-protection score per active flag.
FLAG_WEIGHTS: dict[str, int] = {
    "arbitration": 15,
    "class_action_waiver": 10,
    "liability_cap": 5,
    "termination_at_will": 10,
    "irreversible_txs": 5,
    "bridging_l2_risks": 5,
}

TIER_LEVELS: dict[Risk, RiskLevel] = {Risk.GREEN: "low", Risk.YELLOW: "medium", Risk.RED: "high"}

_CONFIDENCE_STEPS: list[Confidence] = ["high", "medium", "low"]


def collect_flags(analysis: AnalysisResult) -> list[str]:
    """Active extraction flags, then tags of red highlights not already listed."""
    flags = analysis.risk_flags.active()
    if analysis.page is not None:
        for highlight in analysis.page.highlights:
            if highlight.risk == Risk.RED and highlight.tag.value not in flags:
                flags.append(highlight.tag.value)
    return flags


def risk_factors_summary(analysis: AnalysisResult) -> dict[str, int]:
    """Clause counts per taxonomy tag when classification ran, else one per active extraction flag."""
    if analysis.page is not None:
        return dict(Counter(c.tag.value for c in analysis.page.clauses))
    return {name: 1 for name in analysis.risk_flags.active()}


def extraction_risk(analysis: AnalysisResult) -> tuple[int, RiskLevel]:
    deductions = sum(FLAG_WEIGHTS.get(name, 0) for name in analysis.risk_flags.active())
    if deductions <= 20:
        level: RiskLevel = "low"
    elif deductions <= 40:
        level = "medium"
    elif deductions <= 60:
        level = "high"
    else:
        level = "critical"
    return deductions, level


def score(analysis: AnalysisResult) -> tuple[int, RiskLevel, str]:
    """(risk_score, risk_level, scoring source). Classification wins when it ran."""
    if analysis.page is not None:
        return analysis.page.risk_score, TIER_LEVELS[analysis.page.overall_risk], "classification"
    deductions, level = extraction_risk(analysis)
    return deductions, level, "extraction"


def confidence(analysis: AnalysisResult) -> Confidence:
    step = 0 if analysis.source == "text_provided" else 1
    if analysis.failed_chunks:
        step += 1
    return _CONFIDENCE_STEPS[min(step, len(_CONFIDENCE_STEPS) - 1)]


def analysis_status(analysis: AnalysisResult) -> str:
    return analysis.source + ("_partial" if analysis.failed_chunks else "")
