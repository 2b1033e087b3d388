import pytest

from mail_auth_inspector.domain.evidence import (
    AuthResults,
    DkimResult,
    DmarcResult,
    EnvelopeInfo,
    SpfResult,
)
from mail_auth_inspector.orchestrator.verdict import classify, summarize


def _auth(spf: str = "none", dkim: str = "none", dmarc: str = "none") -> AuthResults:
    return AuthResults(spf=SpfResult(status=spf), dkim=DkimResult(status=dkim), dmarc=DmarcResult(status=dmarc))


@pytest.mark.parametrize(
    ("auth", "aligned", "envelope_from", "badge", "reason"),
    [
        (_auth("pass", "pass", "pass"), True, "a@example.com", "secure", "auth_pass"),
        (_auth("pass", "pass", "none"), True, "a@example.com", "secure", "auth_pass"),
        (_auth("fail", "pass", "pass"), True, "a@example.com", "danger", "auth_failed"),
        (_auth("fail"), False, "a@example.com", "danger", "auth_failed"),
        (_auth("pass", "pass", "fail"), False, "a@example.com", "danger", "auth_failed"),
        (_auth("pass", "none"), False, "a@other.example", "warning", "auth_pass_mismatch"),
        (_auth("none", "pass"), False, "a@other.example", "warning", "auth_pass_mismatch"),
        (_auth("pass", "none"), False, "Unknown", "warning", "unverified"),
        (_auth("pass", "none"), True, "a@example.com", "warning", "unverified"),
        (_auth("softfail", "neutral"), True, "a@example.com", "warning", "unverified"),
        (_auth(), False, "Unknown", "warning", "unverified"),
    ],
)
def test_classification_table(auth, aligned, envelope_from, badge, reason):
    verdict = classify(auth, aligned, envelope_from)
    assert verdict.badge_class == badge
    assert verdict.badge_reason == reason
    assert verdict.should_auto_expand is (badge != "secure")


def test_dmarc_none_is_acceptable_but_other_results_are_not():
    assert classify(_auth(dmarc="none"), True, "x").is_dmarc_ok is True
    assert classify(_auth(dmarc="pass"), True, "x").is_dmarc_ok is True
    assert classify(_auth(dmarc="temperror"), True, "x").is_dmarc_ok is False


def test_summary_for_secure_message():
    envelope = EnvelopeInfo(
        envelope_from="bounce@mail.example.com",
        header_from_domain="example.com",
        envelope_from_domain="mail.example.com",
        is_domain_aligned=True,
    )
    summary = summarize(envelope, classify(_auth("pass", "pass"), True, envelope.envelope_from))
    assert summary.display_domain == "example.com"
    assert summary.domain_mismatch is False
    assert summary.alignment_note == "aligned"


def test_summary_flags_mismatch_and_mailing_list():
    envelope = EnvelopeInfo(
        envelope_from="bounce@lists.example.org",
        header_from_domain="sender.example",
        envelope_from_domain="lists.example.org",
        is_domain_aligned=False,
        is_mailing_list=True,
    )
    verdict = classify(_auth("pass"), False, envelope.envelope_from)
    summary = summarize(envelope, verdict)
    assert summary.domain_mismatch is True
    assert summary.display_domain == "lists.example.org"
    assert summary.is_mailing_list is True
    assert summary.alignment_note == "mailing_list"


def test_summary_notes_for_unauthenticated_mail():
    mismatched = EnvelopeInfo(envelope_from="x@evil.example", is_domain_aligned=False)
    verdict = classify(_auth(), False, mismatched.envelope_from)
    assert summarize(mismatched, verdict).alignment_note == "mismatch"
    assert summarize(mismatched, verdict).display_domain == ""

    aligned = EnvelopeInfo(envelope_from="x@example.com", is_domain_aligned=True)
    assert summarize(aligned, classify(_auth(), True, aligned.envelope_from)).alignment_note == "aligned_unauthenticated"

    unknown = EnvelopeInfo(is_domain_aligned=False)
    assert summarize(unknown, classify(_auth(), False, unknown.envelope_from)).alignment_note == ""
