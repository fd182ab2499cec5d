"""Deterministic (rules-first) parser that emits a ParsedDocument + RiskFlags."""

from __future__ import annotations

import logging

from policycheck.extraction import patterns as ex
from policycheck.extraction.models import (
    FactValue,
    ParsedDocument,
    RiskFlags,
    Section,
    SectionKey,
)

logger = logging.getLogger(__name__)

SECTION_TITLES: dict[SectionKey, str] = {
    SectionKey.ELIGIBILITY: "Eligibility",
    SectionKey.COMPLIANCE: "Sanctions & Compliance",
    SectionKey.WALLET: "Wallet & Self-Custody",
    SectionKey.TOKENS: "Tokens",
    SectionKey.RISKS: "Risks & Gotchas",
    SectionKey.DISPUTES: "Dispute Resolution",
    SectionKey.LIABILITY: "Liability Limit",
    SectionKey.TERMINATION: "Account Suspension/Termination",
    SectionKey.MODIFICATIONS: "Changes to the Terms",
    SectionKey.PRIVACY: "Privacy & Data Sales",
    SectionKey.IP: "Your Content & License",
    SectionKey.DMCA: "DMCA",
    SectionKey.THIRD_PARTY: "Third-Party Services",
    SectionKey.GOVERNING_LAW: "Governing Law & Venue",
    SectionKey.JURISDICTION_NOTICE: "California §1542",
    SectionKey.NETWORK_SPECIFICS: "Network Specifics (L2)",
}


class SectionCollector:
    """
    Accumulates Sections in detection order, one per key.

    Merging into an existing key appends unseen bullets and only adds fact
    keys that are not already present (first match wins).
    """

    def __init__(self) -> None:
        self._sections: dict[SectionKey, Section] = {}

    def merge(
        self,
        key: SectionKey,
        bullets: list[str] | None = None,
        facts: dict[str, FactValue | None] | None = None,
    ) -> Section:
        section = self._sections.get(key)
        if section is None:
            section = Section(key=key, title=SECTION_TITLES[key])
            self._sections[key] = section
        for bullet in bullets or []:
            if section.bullets is None:
                section.bullets = []
            if bullet not in section.bullets:
                section.bullets.append(bullet)
        for name, value in (facts or {}).items():
            if value is None:
                continue
            if section.facts is None:
                section.facts = {}
            section.facts.setdefault(name, value)
        return section

    def sections(self) -> list[Section]:
        return list(self._sections.values())


def _format_money(amount: int | float) -> str:
    return f"${amount:,}" if isinstance(amount, int) else f"${amount:,.2f}"


def project_risk_flags(document: ParsedDocument) -> RiskFlags:
    """Derive the banner flags from Section facts. A missing Section leaves its flags at false/null."""

    def fact(key: SectionKey, name: str) -> FactValue | None:
        section = document.section(key)
        if section is None or not section.facts:
            return None
        return section.facts.get(name)

    cap = fact(SectionKey.LIABILITY, "liabilityCap")
    opt_out = fact(SectionKey.DISPUTES, "optOutDays")
    return RiskFlags(
        arbitration=fact(SectionKey.DISPUTES, "arbitration") is True,
        classActionWaiver=fact(SectionKey.DISPUTES, "classActionWaiver") is True,
        liabilityCap=cap if isinstance(cap, (int, float)) and not isinstance(cap, bool) else None,
        terminationAtWill=fact(SectionKey.TERMINATION, "canSuspendAnytime") is True,
        walletSelfCustody=fact(SectionKey.WALLET, "selfCustody") is True,
        irreversibleTxs=fact(SectionKey.RISKS, "irreversibleTxs") is True,
        bridgingL2Risks=fact(SectionKey.RISKS, "bridgingL2") is True,
        optOutDays=opt_out if isinstance(opt_out, int) and not isinstance(opt_out, bool) else None,
    )


def extract(raw: str, hint: str | None = None) -> tuple[ParsedDocument, RiskFlags]:
    """
    Run the ordered pattern battery over *raw* and return the parsed document
    and its risk flags.

    Never raises on malformed input: an empty string yields a document with
    no optional fields and no sections.
    """
    text = ex.normalize_text(raw or "")
    if not text:
        document = ParsedDocument(product=hint.strip() if hint and hint.strip() else None)
        return document, project_risk_flags(document)

    collector = SectionCollector()

    product = hint.strip() if hint and hint.strip() else ex.product(text)
    updated_at = ex.updated_at(text)
    jurisdiction = ex.jurisdictions(text)

    # Eligibility
    age_min = ex.age_min(text)
    if age_min is not None:
        collector.merge(
            SectionKey.ELIGIBILITY,
            bullets=[f"You must be at least {age_min} years old."],
            facts={"ageMin": age_min},
        )

    # Compliance
    if ex.sanctions(text):
        collector.merge(
            SectionKey.COMPLIANCE,
            bullets=["Not available to sanctioned persons or embargoed jurisdictions."],
            facts={"sanctionsRestricted": True},
        )

    # Wallet / self-custody
    self_custody = ex.self_custody(text)
    gas_non_refundable = ex.gas_fees_non_refundable(text)
    irreversible = ex.irreversible_txs(text)
    if self_custody or gas_non_refundable or irreversible:
        bullets = []
        if self_custody:
            bullets.append("Platform is not a custodian; you hold your keys.")
        if gas_non_refundable:
            bullets.append("Gas/network fees are non-refundable.")
        if irreversible:
            bullets.append("On-chain transactions are final/irreversible.")
        collector.merge(
            SectionKey.WALLET,
            bullets=bullets,
            facts={
                "selfCustody": self_custody,
                "noCustodyByPlatform": self_custody,
                "gasFeesNonRefundable": gas_non_refundable,
            },
        )

    # Tokens
    not_security = ex.not_security(text)
    no_advice = ex.no_investment_advice(text)
    if not_security or no_advice:
        bullets = []
        if not_security:
            bullets.append("Tokens framed as collectibles, not securities/investments.")
        if no_advice:
            bullets.append("No investment/legal/tax advice.")
        collector.merge(
            SectionKey.TOKENS,
            bullets=bullets,
            facts={"notSecurity": not_security, "noInvestmentAdvice": no_advice},
        )

    # Risks
    bridging = ex.bridging_l2(text)
    if irreversible or bridging:
        bullets = []
        if irreversible:
            bullets.append("Transactions are irreversible and volatile.")
        if bridging:
            bullets.append("Bridging/L2 involves dispute/wait periods and technical risk.")
        collector.merge(
            SectionKey.RISKS,
            bullets=bullets,
            facts={"irreversibleTxs": irreversible, "bridgingL2": bridging},
        )

    # Disputes
    arbitration = ex.arbitration(text)
    provider = ex.arbitration_provider(text)
    class_waiver = ex.class_action_waiver(text)
    opt_out_days = ex.opt_out_days(text)
    if arbitration or class_waiver or opt_out_days is not None:
        bullets = []
        if arbitration:
            bullets.append("Binding individual arbitration" + (f" ({provider})" if provider else "") + ".")
        if class_waiver:
            bullets.append("You waive the right to join class actions.")
        if opt_out_days is not None:
            bullets.append(f"You can opt out within {opt_out_days} days.")
        collector.merge(
            SectionKey.DISPUTES,
            bullets=bullets,
            facts={
                "arbitration": arbitration,
                "arbitrationProvider": provider,
                "classActionWaiver": class_waiver,
                "optOutDays": opt_out_days,
            },
        )

    # Liability
    cap = ex.liability_cap(text)
    if cap is not None:
        amount, basis = cap
        bullet = f"Liability cap: {_format_money(amount)}"
        if basis == "greater_of":
            bullet += " (or the greater alternative stated)"
        collector.merge(
            SectionKey.LIABILITY,
            bullets=[bullet + "."],
            facts={"liabilityCap": amount, "liabilityCapBasis": basis},
        )

    # Termination
    if ex.terminate_at_will(text):
        collector.merge(
            SectionKey.TERMINATION,
            bullets=["Platform may suspend/terminate at its discretion."],
            facts={"canSuspendAnytime": True},
        )

    # Modifications
    if ex.modifications_immediate(text):
        collector.merge(
            SectionKey.MODIFICATIONS,
            bullets=["Terms can change effective immediately without prior notice."],
            facts={"termsChangeEffectiveImmediately": True},
        )

    # Privacy
    sells_data = ex.sells_personal_data(text)
    if sells_data is not None:
        collector.merge(
            SectionKey.PRIVACY,
            bullets=["Personal data may be sold." if sells_data else "States that personal data is not sold."],
            facts={"sellsPersonalData": sells_data},
        )

    # IP / license
    if ex.broad_license(text):
        collector.merge(
            SectionKey.IP,
            bullets=["You grant the platform a broad license to operate/promote the service."],
            facts={"broadLicenseToOperate": True},
        )

    # DMCA
    dmca_email = ex.dmca_email(text)
    dmca_address = ex.dmca_address(text)
    if dmca_email or dmca_address:
        bullets = []
        if dmca_email:
            bullets.append(f"DMCA email: {dmca_email}.")
        if dmca_address:
            bullets.append("DMCA mailing address present.")
        collector.merge(
            SectionKey.DMCA,
            bullets=bullets,
            facts={"dmcaEmail": dmca_email, "dmcaAddress": dmca_address},
        )

    # Third parties
    if ex.third_party_disclaimer(text):
        collector.merge(
            SectionKey.THIRD_PARTY,
            bullets=["Not responsible for third-party services or sites."],
            facts={"thirdPartyDisclaimer": True},
        )

    # Governing law & venue
    governing_law = jurisdiction[0] if jurisdiction else None
    if governing_law:
        venue = ex.venue(text) or governing_law
        collector.merge(
            SectionKey.GOVERNING_LAW,
            bullets=[f"Governed by {', '.join(jurisdiction)} law; venue {venue}."],
            facts={"governingLaw": governing_law, "venue": venue},
        )

    # California 1542
    if ex.ccp_1542(text):
        collector.merge(
            SectionKey.JURISDICTION_NOTICE,
            bullets=["California Civil Code §1542 waiver present."],
            facts={"ccp1542Waiver": True},
        )

    # Network / rollup specifics
    stack = ex.rollup_stack(text)
    sequencer = ex.sequencer_operator(text)
    dispute_days = ex.dispute_period_days(text)
    if stack or sequencer or dispute_days is not None:
        bullets = []
        if stack:
            bullets.append(f"{stack} rollup.")
        if sequencer:
            bullets.append(f"Sequencer operated by {sequencer}.")
        if dispute_days is not None:
            bullets.append(f"Withdrawals subject to a {dispute_days}-day dispute period.")
        collector.merge(
            SectionKey.NETWORK_SPECIFICS,
            bullets=bullets,
            facts={"stack": stack, "sequencerOperator": sequencer, "disputePeriodDays": dispute_days},
        )

    document = ParsedDocument(
        product=product,
        updated_at=updated_at,
        jurisdiction=jurisdiction,
        sections=collector.sections(),
    )
    flags = project_risk_flags(document)
    logger.info(
        "Extracted %d section(s) from %d chars (product=%s, active flags=%s)",
        len(document.sections),
        len(text),
        product,
        flags.active(),
    )
    return document, flags
