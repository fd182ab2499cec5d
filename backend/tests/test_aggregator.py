"""Unit tests for page-level aggregation."""

from policycheck.summarizer import Clause, ClauseTag, Risk, aggregate_page
from policycheck.summarizer.aggregator import MAX_HIGHLIGHTS, summarize_first_line


def clause(risk: Risk, tag: ClauseTag = ClauseTag.OTHER, text: str = "Something happens.") -> Clause:
    return Clause(tag=tag, risk=risk, plain_english=text)


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------


class TestOverallRisk:
    def test_three_red_is_red(self):
        page = aggregate_page([clause(Risk.RED)] * 3)
        assert page.risk_score == 6
        assert page.overall_risk == Risk.RED

    def test_three_yellow_is_yellow(self):
        page = aggregate_page([clause(Risk.YELLOW)] * 3)
        assert page.risk_score == 3
        assert page.overall_risk == Risk.YELLOW

    def test_three_green_is_green(self):
        page = aggregate_page([clause(Risk.GREEN)] * 3)
        assert page.risk_score == 0
        assert page.overall_risk == Risk.GREEN

    def test_single_yellow_is_green(self):
        page = aggregate_page([clause(Risk.YELLOW)])
        assert page.risk_score == 1
        assert page.overall_risk == Risk.GREEN

    def test_volume_of_yellow_reaches_red(self):
        page = aggregate_page([clause(Risk.YELLOW)] * 6)
        assert page.overall_risk == Risk.RED

    def test_no_clauses(self):
        page = aggregate_page([])
        assert page.overall_risk == Risk.GREEN
        assert page.highlights == []


# ---------------------------------------------------------------------------
# Highlights
# ---------------------------------------------------------------------------


class TestHighlights:
    def test_worst_risk_with_first_clause_summary(self):
        page = aggregate_page(
            [
                clause(Risk.GREEN, ClauseTag.FEES, "Fees are modest."),
                clause(Risk.RED, ClauseTag.FEES, "Hidden fees apply."),
            ]
        )
        assert len(page.highlights) == 1
        assert page.highlights[0].risk == Risk.RED
        assert page.highlights[0].summary == "Fees are modest."

    def test_green_tags_not_highlighted(self):
        page = aggregate_page([clause(Risk.GREEN, ClauseTag.COOKIES)])
        assert page.highlights == []

    def test_taxonomy_order_and_cap(self):
        tags = list(ClauseTag)[::-1]
        page = aggregate_page([clause(Risk.YELLOW, tag) for tag in tags])
        assert len(page.highlights) == MAX_HIGHLIGHTS
        assert [h.tag for h in page.highlights] == list(ClauseTag)[:MAX_HIGHLIGHTS]

    def test_clauses_kept_unfiltered(self):
        clauses = [clause(Risk.GREEN), clause(Risk.RED, ClauseTag.LIABILITY)]
        assert aggregate_page(clauses).clauses == clauses

    def test_summary_first_line_truncated(self):
        long_line = "x" * 200
        summary = summarize_first_line(ClauseTag.FEES, [clause(Risk.RED, ClauseTag.FEES, long_line + "\nsecond")])
        assert summary == "x" * 137 + "..."

    def test_summary_fallback(self):
        assert summarize_first_line(ClauseTag.FEES, []) == "Notable clause"
