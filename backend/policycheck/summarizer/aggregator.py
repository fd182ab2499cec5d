"""Merge chunk-level clauses into one page-level verdict."""

from policycheck.summarizer.models import (
    RISK_POINTS,
    Clause,
    ClauseTag,
    Highlight,
    PageAssessment,
    Risk,
)

RED_THRESHOLD = 6
YELLOW_THRESHOLD = 3
MAX_HIGHLIGHTS = 6
SUMMARY_MAX_CHARS = 140


def risk_score(clauses: list[Clause]) -> int:
    return sum(RISK_POINTS[c.risk] for c in clauses)


def overall_risk(score: int) -> Risk:
    """
    Map an absolute score to a tier.

    Thresholds are not normalized by clause count, so a long document with many
    Y clauses reaches R on volume alone. Consumers depend on these values.
    """
    if score >= RED_THRESHOLD:
        return Risk.RED
    if score >= YELLOW_THRESHOLD:
        return Risk.YELLOW
    return Risk.GREEN


def worst_risk_by_tag(clauses: list[Clause]) -> dict[ClauseTag, Risk]:
    """Monotonic worsening per tag: Y only replaces G, R replaces anything."""
    worst = {tag: Risk.GREEN for tag in ClauseTag}
    for c in clauses:
        current = worst[c.tag]
        if c.risk == Risk.RED or (c.risk == Risk.YELLOW and current == Risk.GREEN):
            worst[c.tag] = c.risk
    return worst


def summarize_first_line(tag: ClauseTag, clauses: list[Clause]) -> str:
    """First line of the *first* clause with this tag, not the worst one."""
    clause = next((c for c in clauses if c.tag == tag), None)
    if clause is None:
        return "Notable clause"
    first = (clause.plain_english.split("\n")[0] or clause.plain_english).strip()
    if len(first) > SUMMARY_MAX_CHARS:
        return first[: SUMMARY_MAX_CHARS - 3] + "..."
    return first


def aggregate_page(clauses: list[Clause]) -> PageAssessment:
    """
    Score all clauses and pick highlights.

    Highlights cover every tag whose worst risk is not G, in taxonomy order,
    capped at six. The badge shows the worst risk while the summary text comes
    from the first clause for the tag, so the two can disagree.
    """
    score = risk_score(clauses)
    worst = worst_risk_by_tag(clauses)
    highlights = [
        Highlight(tag=tag, risk=risk, summary=summarize_first_line(tag, clauses))
        for tag, risk in worst.items()
        if risk != Risk.GREEN
    ][:MAX_HIGHLIGHTS]
    return PageAssessment(
        overall_risk=overall_risk(score),
        risk_score=score,
        highlights=highlights,
        clauses=list(clauses),
    )
