"""Fixed prompt contract for per-chunk clause classification."""

from policycheck.summarizer.models import EXCERPT_MAX_CHARS, ClauseTag, Risk

TAXONOMY_LIST = ", ".join(tag.value for tag in ClauseTag)
RISK_LIST = "|".join(risk.value for risk in Risk)

CLAUSE_CLASSIFICATION_SYSTEM_PROMPT = """
You are a legal-to-plain-English converter and risk flagger.

Rewrite the following legal text into clear, neutral plain language (reading level grade 8–9).

Classify each point using exactly one of these tags: {taxonomy}.

Assign risk using exactly one of: "R" (harmful/onerous), "Y" (unclear/mixed), "G" (benign).

Output STRICT JSON (no commentary, no Markdown fences):

{{ "clauses": [ {{ "tag": "<one of taxonomy>", "risk": "{risks}",
  "rationale": "<why>", "plain_english": "<2-5 bullets joined by \\n>",
  "text_excerpt": "<short quote from source>" }} ] }}

Rules:
• If unsure, use risk "Y" and explain.
• Quote exact phrases for text_excerpt (<= {excerpt_max} chars).
• Never hallucinate clauses that are not in the source text.
• No legal advice; just explain plainly.
""".format(taxonomy=TAXONOMY_LIST, risks=RISK_LIST, excerpt_max=EXCERPT_MAX_CHARS)

CLAUSE_CLASSIFICATION_USER_PROMPT = """SOURCE TEXT:
{chunk}
"""


def build_prompt(chunk: str) -> tuple[str, str]:
    """Return the (system, user) prompt pair for one chunk."""
    return CLAUSE_CLASSIFICATION_SYSTEM_PROMPT, CLAUSE_CLASSIFICATION_USER_PROMPT.format(chunk=chunk.strip())
