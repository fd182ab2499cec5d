"""Pydantic models for deterministic clause extraction output."""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, Field

FactValue = str | int | float | bool


class SectionKey(StrEnum):
    """Closed set of topic tags. One Section per key per document."""

    ELIGIBILITY = "eligibility"
    COMPLIANCE = "compliance"
    WALLET = "wallet"
    TOKENS = "tokens"
    RISKS = "risks"
    DISPUTES = "disputes"
    LIABILITY = "liability"
    TERMINATION = "termination"
    MODIFICATIONS = "modifications"
    PRIVACY = "privacy"
    IP = "ip"
    DMCA = "dmca"
    THIRD_PARTY = "third_party"
    GOVERNING_LAW = "governing_law"
    JURISDICTION_NOTICE = "jurisdiction_notice"
    NETWORK_SPECIFICS = "network_specifics"


class Section(BaseModel):
    key: SectionKey
    title: str
    bullets: list[str] | None = None
    body: str | None = None
    facts: dict[str, FactValue] | None = None


class ParsedDocument(BaseModel):
    product: str | None = None
    updated_at: date | None = None
    jurisdiction: list[str] | None = None
    sections: list[Section] = Field(default_factory=list)

    def section(self, key: SectionKey) -> Section | None:
        for s in self.sections:
            if s.key == key:
                return s
        return None


class RiskFlags(BaseModel):
    """Flat banner view. Always derived from Section facts, never set independently."""

    arbitration: bool = False
    classActionWaiver: bool = False
    liabilityCap: int | float | None = None
    terminationAtWill: bool = False
    walletSelfCustody: bool = False
    irreversibleTxs: bool = False
    bridgingL2Risks: bool = False
    optOutDays: int | None = None

    def active(self) -> list[str]:
        """Names (snake_case) of adverse flags that are set, in declaration order.

        optOutDays is informational (an opt-out window helps the user) and is
        not listed.
        """
        names = {
            "arbitration": "arbitration",
            "classActionWaiver": "class_action_waiver",
            "liabilityCap": "liability_cap",
            "terminationAtWill": "termination_at_will",
            "walletSelfCustody": "wallet_self_custody",
            "irreversibleTxs": "irreversible_txs",
            "bridgingL2Risks": "bridging_l2_risks",
        }
        out: list[str] = []
        for field, name in names.items():
            value = getattr(self, field)
            if value is not None and value is not False:
                out.append(name)
        return out
