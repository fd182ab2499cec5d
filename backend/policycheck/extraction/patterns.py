"""
Deterministic regex extractors.

Every extractor takes normalized text (see ``normalize_text``) and returns a
value or None. None means "pattern absent", which is a normal outcome. Each
pattern carries a context guard so that a bare keyword (a dollar amount, the
word "wallet", the word "disputes") never sets a fact on its own.
"""

from __future__ import annotations

import re
from datetime import date, datetime

# ---------------------------------------------------------------------------
# Normalization & sentence helpers
# ---------------------------------------------------------------------------

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\u200b\ufeff]")
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def normalize_text(raw: str) -> str:
    """Replace NBSP and control characters with spaces, collapse whitespace, trim."""
    text = raw.replace("\u00a0", " ")
    text = _CONTROL_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str) -> list[str]:
    return [s for s in _SENTENCE_BOUNDARY.split(text) if s]


def _to_number(raw: str) -> int | float | None:
    try:
        value = float(raw.replace(",", ""))
    except ValueError:
        return None
    return int(value) if value.is_integer() else value


def _token_gap(sentence: str, start: int, end: int) -> int:
    """Number of whitespace-separated tokens in sentence[start:end]."""
    if end <= start:
        return 0
    return len(sentence[start:end].split())


_WORD_NUMBERS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
    "eight": 8, "nine": 9, "ten": 10, "fourteen": 14, "fifteen": 15,
    "twenty": 20, "thirty": 30, "sixty": 60, "ninety": 90,
}

# A region is a run of capitalized words, optionally joined by "and"
# ("New York", "England and Wales").
_REGION = r"[A-Z][A-Za-z'-]+(?:\s+(?:and\s+)?[A-Z][A-Za-z'-]+)*"

# ---------------------------------------------------------------------------
# Top-level document fields
# ---------------------------------------------------------------------------

_PRODUCT = re.compile(r"\b([A-Z][A-Za-z0-9.&-]*(?:\s+[A-Z][A-Za-z0-9.&-]*){0,4})(?=\s+Terms\b)")
_PRODUCT_STOPWORDS = {"these", "the", "this", "our", "your", "please", "read", "of", "and", "by", "to", "see"}


def product(text: str) -> str | None:
    for m in _PRODUCT.finditer(text):
        words = m.group(1).split()
        while words and words[0].lower() in _PRODUCT_STOPWORDS:
            words.pop(0)
        if words:
            return " ".join(words)
    return None


_UPDATED_AT = re.compile(
    r"\b(?:last\s+(?:updated|revised|modified)|effective\s+date)\s*:?\s*(?:on\s+)?"
    r"([A-Za-z]{3,9}\.?\s+\d{1,2},?\s+\d{4}|\d{4}-\d{2}-\d{2})",
    re.I,
)


def parse_date(value: str) -> date | None:
    """Parse 'July 29, 2025', 'Jul 29 2025' or '2025-07-29' as a calendar date (no timezone)."""
    cleaned = " ".join(value.replace(",", " ").replace(".", " ").split())
    for fmt in ("%B %d %Y", "%b %d %Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(cleaned, fmt).date()
        except ValueError:
            continue
    return None


def updated_at(text: str) -> date | None:
    m = _UPDATED_AT.search(text)
    return parse_date(m.group(1)) if m else None


_GOVERNED_BY = re.compile(r"\bgoverned\s+by\b(?P<clause>[^.;]{0,200})", re.I)
_LAWS_OF = re.compile(
    r"(?i:\blaws?\s+of\s+(?:the\s+)?(?:(?:state|commonwealth|province|republic)\s+of\s+)?)(" + _REGION + ")"
)
_STATE_OF = re.compile(r"(?i:\b(?:state|commonwealth|province)\s+of\s+)(" + _REGION + ")")
_REGION_LAW = re.compile(r"^\s*(?i:the\s+)?(" + _REGION + r")\s+(?i:law)\b")


def jurisdictions(text: str) -> list[str] | None:
    """Regions named in governing-law clauses, de-duplicated in order of appearance."""
    found: list[str] = []
    for clause_match in _GOVERNED_BY.finditer(text):
        clause = clause_match.group("clause")
        hits: list[tuple[int, str]] = []
        for pattern in (_LAWS_OF, _STATE_OF):
            hits.extend((m.start(1), m.group(1)) for m in pattern.finditer(clause))
        if not hits:
            fallback = _REGION_LAW.search(clause)
            if fallback:
                hits.append((fallback.start(1), fallback.group(1)))
        for _, region in sorted(hits):
            if region not in found:
                found.append(region)
    return found or None


_VENUE = re.compile(
    r"(?i:\bcourts?\s+(?:located\s+)?in\s+(?:the\s+)?(?:(?:state|commonwealth|county)\s+of\s+)?)(" + _REGION + ")"
)


def venue(text: str) -> str | None:
    m = _VENUE.search(text)
    return m.group(1) if m else None


# ---------------------------------------------------------------------------
# Eligibility & compliance
# ---------------------------------------------------------------------------

_AGE_MIN = re.compile(r"\bat\s+least\s+(\d{1,2})\s+years?\s+of\s+age\b", re.I)


def age_min(text: str) -> int | None:
    m = _AGE_MIN.search(text)
    return int(m.group(1)) if m else None


_SANCTIONS = re.compile(
    r"\b(?:sanctions?\s+(?:lists?|programs?|laws?|regulations?)|embargoed\s+(?:jurisdictions?|countr(?:y|ies))"
    r"|sanctioned\s+(?:persons?|countr(?:y|ies)|jurisdictions?))\b",
    re.I,
)


def sanctions(text: str) -> bool:
    return bool(_SANCTIONS.search(text))


# ---------------------------------------------------------------------------
# Wallet, tokens & transaction risk
# ---------------------------------------------------------------------------

_SELF_CUSTODY = re.compile(
    r"\b(?:do(?:es)?\s+not|no)\s+(?:have\s+|take\s+|hold\s+|maintain\s+)?custody"
    r"\s+(?:of|over)\b[^.]{0,80}?\b(?:wallets?|keys|assets)\b"
    r"|\bnon-?custodial\s+(?:wallets?|services?|interfaces?)\b",
    re.I,
)


def self_custody(text: str) -> bool:
    return bool(_SELF_CUSTODY.search(text))


_GAS_FEES_FINAL = re.compile(
    r"\b(?:gas|network|transaction)\s+fees?\b[^.]{0,60}?\b(?:non-?\s?refundable|final)\b", re.I
)


def gas_fees_non_refundable(text: str) -> bool:
    return bool(_GAS_FEES_FINAL.search(text))


_IRREVERSIBLE = re.compile(r"\btransactions?\s+(?:are\s+|is\s+)?(?:final|irreversible)\b|\birreversible\b", re.I)


def irreversible_txs(text: str) -> bool:
    return bool(_IRREVERSIBLE.search(text))


_BRIDGING = re.compile(
    r"\bbridg(?:e|es|ed|ing)\b[^.]{0,40}?\b(?:assets?|tokens?|funds|networks?|chains?)\b"
    r"|\brollups?\b|\blayer[-\s]?(?:two|2)\b|\bOP\s*Stack\b|\bsequencers?\b|\bdispute\s+period\b",
    re.I,
)


def bridging_l2(text: str) -> bool:
    return bool(_BRIDGING.search(text))


_NOT_SECURITY = re.compile(
    r"\bnot\s+intended\s+to\s+be\s+(?:a\s+)?[\"'\u201c]?securit(?:y|ies)\b|\bnot\s+(?:an?\s+)?investments?\b(?!\s+advice)",
    re.I,
)


def not_security(text: str) -> bool:
    return bool(_NOT_SECURITY.search(text))


_NO_ADVICE = re.compile(
    r"\b(?:no|not|nor)\s+(?:investment|legal|tax|financial)"
    r"(?:\s*(?:,|or|and)\s*(?:investment|legal|tax|financial))*\s+advice\b",
    re.I,
)


def no_investment_advice(text: str) -> bool:
    return bool(_NO_ADVICE.search(text))


# ---------------------------------------------------------------------------
# Disputes
# ---------------------------------------------------------------------------

_ARBITRATION = re.compile(
    r"\bbinding,?\s+(?:and\s+)?(?:individual\s+)?arbitration\b"
    r"|\b(?:individual|mandatory)\s+arbitration\b"
    r"|\b(?:resolved|settled)\s+(?:exclusively\s+)?(?:by|through)\s+(?:final\s+and\s+binding\s+)?arbitration\b"
    r"|\barbitration\b[^.]{0,80}?\b(?:JAMS|AAA|ICC)\b",
    re.I,
)


def arbitration(text: str) -> bool:
    return bool(_ARBITRATION.search(text))


_PROVIDER_NAMES = {
    "jams": "JAMS",
    "aaa": "AAA",
    "american arbitration association": "AAA",
    "icc": "ICC",
    "international chamber of commerce": "ICC",
    "lcia": "LCIA",
    "london court of international arbitration": "LCIA",
    "siac": "SIAC",
    "singapore international arbitration centre": "SIAC",
    "hkiac": "HKIAC",
    "nam": "NAM",
    "national arbitration and mediation": "NAM",
}
_PROVIDER = re.compile(
    r"\b(?:arbitration|rules\s+of)\b[^.]{0,80}?\b("
    + "|".join(re.escape(name) for name in sorted(_PROVIDER_NAMES, key=len, reverse=True))
    + r")\b",
    re.I,
)


def arbitration_provider(text: str) -> str | None:
    m = _PROVIDER.search(text)
    if not m:
        return None
    return _PROVIDER_NAMES[" ".join(m.group(1).lower().split())]


_CLASS_WAIVER = re.compile(
    r"\bwaive[sd]?\b[^.]{0,80}?\b(?:class|collective|representative)[-\s]+"
    r"(?:actions?|proceedings?|arbitrations?|claims?|lawsuits?)\b"
    r"|\b(?:class|representative)[-\s]+(?:actions?|proceedings?)\b[^.]{0,60}?\b(?:are|is)\s+(?:hereby\s+)?waived\b"
    r"|\bclass[-\s]+action\s+waiver\b",
    re.I,
)


def class_action_waiver(text: str) -> bool:
    return bool(_CLASS_WAIVER.search(text))


_OPT_OUT = re.compile(
    r"\bopt[-\s]?out\b[^.!?\d]{0,60}?(\d{1,3})\s+(?:calendar\s+)?days?\b"
    r"|\b(\d{1,3})\s+(?:calendar\s+)?days?\s+(?:after\s+[^.!?]{0,40}?\s+)?to\s+opt[-\s]?out\b",
    re.I,
)


def opt_out_days(text: str) -> int | None:
    m = _OPT_OUT.search(text)
    if not m:
        return None
    return int(m.group(1) or m.group(2))


# ---------------------------------------------------------------------------
# Liability
# ---------------------------------------------------------------------------

CAP_WINDOW_TOKENS = 12

_LIABILITY_WORD = re.compile(r"\bliab(?:le|ility|ilities)\b", re.I)
_CAP_TERM = re.compile(r"\b(?:liab(?:le|ility|ilities)|aggregate|maximum)\b", re.I)
_DOLLAR_AMOUNT = re.compile(
    r"(?:US)?\$\s?(\d[\d,]*(?:\.\d+)?)|\b(\d[\d,]*(?:\.\d+)?)\s*(?:U\.?S\.?\s*)?dollars?\b", re.I
)
_GREATER_OF = re.compile(r"\bgreater\s+of\b", re.I)


def liability_cap(text: str) -> tuple[int | float, str | None] | None:
    """
    First dollar amount that qualifies as a liability cap, with its basis.

    Only sentences that mention liability are considered. Within one, an
    amount qualifies when it sits within CAP_WINDOW_TOKENS tokens of
    "liability"/"aggregate"/"maximum", or directly follows "greater of"
    (basis ``"greater_of"``). The first qualifying amount in document order
    wins; later mentions are ignored.
    """
    for sentence in split_sentences(text):
        if not _LIABILITY_WORD.search(sentence):
            continue
        terms = [m.span() for m in _CAP_TERM.finditer(sentence)]
        greater = _GREATER_OF.search(sentence)
        for m in _DOLLAR_AMOUNT.finditer(sentence):
            amount = _to_number(m.group(1) or m.group(2))
            if amount is None:
                continue
            if greater and greater.end() <= m.start() and _token_gap(sentence, greater.end(), m.start()) <= 1:
                return amount, "greater_of"
            for term_start, term_end in terms:
                if term_end <= m.start():
                    gap = _token_gap(sentence, term_end, m.start())
                else:
                    gap = _token_gap(sentence, m.end(), term_start)
                if gap <= CAP_WINDOW_TOKENS:
                    return amount, None
    return None


# ---------------------------------------------------------------------------
# Termination & modifications
# ---------------------------------------------------------------------------

_TERMINATE_AT_WILL = re.compile(
    r"\b(?:suspend|terminate)\b[^.]{0,120}?\b(?:at\s+any\s+time|sole\s+discretion"
    r"|without\s+(?:prior\s+)?notice|for\s+any\s+(?:or\s+no\s+)?reason)\b"
    r"|\b(?:at\s+any\s+time|sole\s+discretion)\b[^.]{0,60}?\b(?:suspend|terminate)\b",
    re.I,
)
_USER_TERMINATES = re.compile(r"\byou\s+(?:may|can)\s+(?:\w+\s+){0,2}?(?:terminate|cancel|close)\b", re.I)


def terminate_at_will(text: str) -> bool:
    """The provider (not the user) may suspend or terminate at will."""
    for sentence in split_sentences(text):
        if _TERMINATE_AT_WILL.search(sentence) and not _USER_TERMINATES.search(sentence):
            return True
    return False


_MODIFY_IMMEDIATELY = re.compile(
    r"\b(?:revise|update|change|modify|amend)\s+(?:these\s+|this\s+|the\s+|our\s+)?(?:terms|agreement|polic(?:y|ies))\b"
    r"[^.]{0,120}?\b(?:without\s+(?:prior\s+)?notice|effective\s+immediately)\b",
    re.I,
)


def modifications_immediate(text: str) -> bool:
    return bool(_MODIFY_IMMEDIATELY.search(text))


# ---------------------------------------------------------------------------
# Privacy, IP, third parties
# ---------------------------------------------------------------------------

_NO_SALE = re.compile(
    r"\b(?:(?:do|does|will)\s+not|never)\s+sell(?!\s+my\b)\b[^.]{0,40}?\b(?:data|information)\b", re.I
)
_SALE = re.compile(r"\b(?:we|may|can)\s+sell\b[^.]{0,40}?\b(?:data|information)\b", re.I)


def sells_personal_data(text: str) -> bool | None:
    """True/False when the text says so explicitly; the earliest statement wins."""
    no_sale = _NO_SALE.search(text)
    sale = _SALE.search(text)
    if no_sale and (not sale or no_sale.start() <= sale.start()):
        return False
    if sale:
        return True
    return None


_USER_GRANTS_LICENSE = re.compile(
    r"\byou\s+(?:hereby\s+)?grant\b[^.]{0,120}?\blicen[cs]e\b|\bbroad\s+licen[cs]e\b", re.I
)


def broad_license(text: str) -> bool:
    return bool(_USER_GRANTS_LICENSE.search(text))


_THIRD_PARTY_DISCLAIMER = re.compile(
    r"\bthird[-\s]part(?:y|ies)\b[^.]{0,100}?\b(?:not\s+responsible|no\s+responsibility|not\s+liable"
    r"|do\s+not\s+(?:control|endorse))\b"
    r"|\b(?:not\s+responsible|not\s+liable|do\s+not\s+(?:control|endorse))\b[^.]{0,100}?\bthird[-\s]part(?:y|ies)\b",
    re.I,
)


def third_party_disclaimer(text: str) -> bool:
    return bool(_THIRD_PARTY_DISCLAIMER.search(text))


# ---------------------------------------------------------------------------
# DMCA & California notice
# ---------------------------------------------------------------------------

_DMCA_EMAIL = re.compile(r"\bdmca@[A-Za-z0-9.-]+", re.I)
_DMCA_CONTEXT = re.compile(r"\b(?:dmca|copyright\s+agent)\b", re.I)
_STREET_ADDRESS = re.compile(
    r"\b\d{1,6}\s+(?:[A-Z][A-Za-z]*\s+){1,4}"
    r"(?:Street|Avenue|Road|Boulevard|Drive|Lane|Way|Place|Suite)\b[^.]*"
)


def dmca_email(text: str) -> str | None:
    m = _DMCA_EMAIL.search(text)
    return m.group(0).rstrip(".-").lower() if m else None


def dmca_address(text: str) -> str | None:
    for sentence in split_sentences(text):
        if not _DMCA_CONTEXT.search(sentence):
            continue
        m = _STREET_ADDRESS.search(sentence)
        if m:
            return m.group(0).rstrip(" .,;")
    return None


_CCP_1542 = re.compile(r"\b(?:california\s+)?civil\s+code\s+(?:section\s+)?\S{0,3}?\s*1542\b", re.I)


def ccp_1542(text: str) -> bool:
    return bool(_CCP_1542.search(text))


# ---------------------------------------------------------------------------
# Network / rollup specifics
# ---------------------------------------------------------------------------

_STACK_NAMES = {
    "opstack": "OP Stack",
    "arbitrumorbit": "Arbitrum Orbit",
    "polygoncdk": "Polygon CDK",
    "zkstack": "ZK Stack",
}
_STACK = re.compile(r"\b(OP\s*Stack|Arbitrum\s+Orbit|Polygon\s+CDK|ZK\s*Stack)\b", re.I)
_SEQUENCER = re.compile(
    r"(?i:\bsequencer\b[^.]{0,40}?\b(?:operated|run|managed)\s+by\s+)"
    r"([A-Z][A-Za-z0-9&-]*(?:\s+[A-Z][A-Za-z0-9&-]*)*(?:,?\s+(?:Inc|LLC|Ltd|Corp|Limited|GmbH)\.?)?)"
)
_DISPUTE_PERIOD = re.compile(
    r"\b(\d{1,2}|" + "|".join(_WORD_NUMBERS) + r")[-\s]day\s+[\"'\u201c\u201d]?(?:dispute|challenge)\s+(?:period|window)\b",
    re.I,
)


def rollup_stack(text: str) -> str | None:
    m = _STACK.search(text)
    if not m:
        return None
    return _STACK_NAMES[re.sub(r"\s+", "", m.group(1)).lower()]


def sequencer_operator(text: str) -> str | None:
    m = _SEQUENCER.search(text)
    return m.group(1) if m else None


def dispute_period_days(text: str) -> int | None:
    m = _DISPUTE_PERIOD.search(text)
    if not m:
        return None
    raw = m.group(1).lower()
    return int(raw) if raw.isdigit() else _WORD_NUMBERS[raw]
