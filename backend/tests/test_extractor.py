"""Unit tests for the deterministic clause extractor."""

from datetime import date

from policycheck.extraction import SectionKey, extract
from policycheck.extraction import patterns as ex
from policycheck.extraction.parser import SectionCollector


def facts(document, key: SectionKey) -> dict:
    section = document.section(key)
    assert section is not None, f"missing section {key}"
    return section.facts or {}


# ---------------------------------------------------------------------------
# End-to-end document
# ---------------------------------------------------------------------------


class TestEndToEnd:
    def test_updated_at_is_calendar_date(self, terms_text):
        document, _ = extract(terms_text)
        assert document.updated_at == date(2025, 7, 29)

    def test_jurisdiction(self, terms_text):
        document, _ = extract(terms_text)
        assert document.jurisdiction == ["Delaware"]

    def test_product_detected(self, terms_text):
        document, _ = extract(terms_text)
        assert document.product == "Acme Wallet"

    def test_sections_in_detection_order(self, terms_text):
        document, _ = extract(terms_text)
        assert [s.key for s in document.sections] == [
            SectionKey.ELIGIBILITY,
            SectionKey.WALLET,
            SectionKey.DISPUTES,
            SectionKey.LIABILITY,
            SectionKey.GOVERNING_LAW,
        ]

    def test_risk_flags(self, terms_text):
        _, flags = extract(terms_text)
        assert flags.arbitration is True
        assert flags.liabilityCap == 100
        assert flags.walletSelfCustody is True
        assert flags.optOutDays == 30
        assert flags.classActionWaiver is False
        assert flags.terminationAtWill is False

    def test_facts(self, terms_text):
        document, _ = extract(terms_text)
        assert facts(document, SectionKey.ELIGIBILITY)["ageMin"] == 18
        assert facts(document, SectionKey.DISPUTES)["arbitrationProvider"] == "JAMS"
        assert facts(document, SectionKey.GOVERNING_LAW) == {"governingLaw": "Delaware", "venue": "Delaware"}

    def test_active_flags(self, terms_text):
        _, flags = extract(terms_text)
        assert flags.active() == ["arbitration", "liability_cap", "wallet_self_custody"]


# ---------------------------------------------------------------------------
# Liability context guard
# ---------------------------------------------------------------------------


class TestLiabilityCap:
    def test_voucher_amount_is_not_a_cap(self):
        _, flags = extract("We offer a $100 voucher to new users.")
        assert flags.liabilityCap is None

    def test_greater_of_amount(self):
        document, flags = extract(
            "Our maximum aggregate liability shall be the greater of $100 or the amount you paid."
        )
        assert flags.liabilityCap == 100
        assert facts(document, SectionKey.LIABILITY)["liabilityCapBasis"] == "greater_of"

    def test_amount_far_from_cap_terms_is_ignored(self):
        text = (
            "Our liability is limited as described in this section, and in no event will the total "
            "amount that we are required to pay you for anything exceed fees of $500."
        )
        assert ex.liability_cap(text) is None

    def test_first_qualifying_amount_wins(self):
        text = "Our total liability is limited to $50. In some regions our liability is limited to $200."
        assert ex.liability_cap(text) == (50, None)

    def test_dollar_word_form(self):
        assert ex.liability_cap("Our aggregate liability will not exceed 250 dollars.") == (250, None)


# ---------------------------------------------------------------------------
# Disputes
# ---------------------------------------------------------------------------


class TestDisputes:
    def test_arbitration_without_waiver_phrase(self):
        _, flags = extract("Claims are subject to binding individual arbitration with JAMS.")
        assert flags.arbitration is True
        assert flags.classActionWaiver is False

    def test_explicit_class_action_waiver(self):
        _, flags = extract("You waive any right to participate in a class action lawsuit.")
        assert flags.classActionWaiver is True

    def test_opt_out_days(self):
        document, flags = extract("You may opt out within 30 days by emailing us.")
        assert flags.optOutDays == 30
        assert facts(document, SectionKey.DISPUTES)["optOutDays"] == 30

    def test_generic_disputes_language_sets_nothing(self):
        _, flags = extract("Connect your wallet. Any disputes will be handled by our support team.")
        assert flags.classActionWaiver is False
        assert flags.arbitration is False

    def test_provider_long_name(self):
        text = "Arbitration will be administered under the rules of the American Arbitration Association."
        assert ex.arbitration_provider(text) == "AAA"


# ---------------------------------------------------------------------------
# Termination, privacy, DMCA
# ---------------------------------------------------------------------------


class TestOtherChecks:
    def test_provider_may_terminate_at_will(self):
        _, flags = extract("We may suspend or terminate your account at any time.")
        assert flags.terminationAtWill is True

    def test_user_termination_right_is_not_at_will(self):
        _, flags = extract("You may terminate your account at any time.")
        assert flags.terminationAtWill is False

    def test_bare_wallet_word_is_not_self_custody(self):
        _, flags = extract("Connect your wallet. Any disputes will be handled by our support team.")
        assert flags.walletSelfCustody is False

    def test_third_party_wallet_disclaimer_is_not_self_custody(self):
        _, flags = extract("We have no control over third-party wallets you choose to connect.")
        assert flags.walletSelfCustody is False

    def test_non_custodial_wording(self):
        _, flags = extract("Acme is a non-custodial wallet interface.")
        assert flags.walletSelfCustody is True

    def test_joined_region_is_one_jurisdiction(self):
        document, _ = extract("These Terms are governed by the laws of England and Wales.")
        assert document.jurisdiction == ["England and Wales"]

    def test_dmca_email_punctuation_stripped(self):
        document, _ = extract("Send copyright notices to DMCA@Example.com.")
        assert facts(document, SectionKey.DMCA)["dmcaEmail"] == "dmca@example.com"

    def test_do_not_sell_statement(self):
        document, _ = extract("We do not sell your personal information.")
        assert facts(document, SectionKey.PRIVACY)["sellsPersonalData"] is False

    def test_governing_law_with_venue(self):
        document, _ = extract(
            "These Terms are governed by the laws of the State of New York. "
            "Any claim shall be brought in the courts located in New York County."
        )
        assert document.jurisdiction == ["New York"]
        assert facts(document, SectionKey.GOVERNING_LAW)["venue"] == "New York County"


class TestNetworkSpecifics:
    TEXT = (
        "Acme Chain is built on the OP Stack. "
        "The sequencer is operated by ConduitXYZ, Inc. "
        "Withdrawals are subject to a seven-day dispute period."
    )

    def test_network_facts(self):
        document, _ = extract(self.TEXT)
        assert facts(document, SectionKey.NETWORK_SPECIFICS) == {
            "stack": "OP Stack",
            "sequencerOperator": "ConduitXYZ, Inc.",
            "disputePeriodDays": 7,
        }

    def test_network_facts_stay_in_their_section(self):
        document, flags = extract(self.TEXT)
        assert flags.bridgingL2Risks is True
        for section in document.sections:
            if section.key != SectionKey.NETWORK_SPECIFICS:
                assert "stack" not in (section.facts or {})
                assert "disputePeriodDays" not in (section.facts or {})


# ---------------------------------------------------------------------------
# Document-level behaviour
# ---------------------------------------------------------------------------


class TestDocument:
    def test_empty_text(self):
        document, flags = extract("   ")
        assert document.sections == []
        assert document.product is None
        assert flags.active() == []

    def test_product_hint_wins(self, terms_text):
        document, _ = extract(terms_text, hint="Acme Pro")
        assert document.product == "Acme Pro"

    def test_nbsp_and_control_characters_normalized(self):
        assert ex.normalize_text("a b\x00\n\n c ") == "a b c"

    def test_iso_updated_at(self):
        document, _ = extract("Effective date: 2024-02-29.")
        assert document.updated_at == date(2024, 2, 29)


class TestSectionCollector:
    def test_merge_keeps_first_facts(self):
        collector = SectionCollector()
        collector.merge(SectionKey.DISPUTES, bullets=["a"], facts={"arbitration": True})
        section = collector.merge(SectionKey.DISPUTES, bullets=["a", "b"], facts={"arbitration": False, "x": 1})
        assert section.bullets == ["a", "b"]
        assert section.facts == {"arbitration": True, "x": 1}
        assert len(collector.sections()) == 1

    def test_none_facts_skipped(self):
        collector = SectionCollector()
        section = collector.merge(SectionKey.DMCA, facts={"dmcaEmail": None})
        assert section.facts is None
