"""Security badge classification and header summary."""

from __future__ import annotations

from mail_auth_inspector.domain.evidence import (
    UNKNOWN,
    AlignmentNote,
    AuthResults,
    EnvelopeInfo,
    HeaderSummary,
    SecurityVerdict,
)


def classify(auth: AuthResults, is_domain_aligned: bool, envelope_from: str) -> SecurityVerdict:
    spf = auth.spf.status
    dkim = auth.dkim.status
    dmarc = auth.dmarc.status
    is_spf_ok = spf == "pass"
    is_dkim_ok = dkim == "pass"
    # A missing DMARC policy is common and not treated as a failure.
    is_dmarc_ok = dmarc in {"pass", "none"}
    is_secure = is_spf_ok and is_dkim_ok and is_domain_aligned

    if is_secure:
        badge_class, badge_reason = "secure", "auth_pass"
    elif "fail" in {spf, dkim, dmarc}:
        badge_class, badge_reason = "danger", "auth_failed"
    elif (is_spf_ok or is_dkim_ok) and not is_domain_aligned and envelope_from != UNKNOWN:
        badge_class, badge_reason = "warning", "auth_pass_mismatch"
    else:
        badge_class, badge_reason = "warning", "unverified"

    return SecurityVerdict(
        is_secure=is_secure,
        is_spf_ok=is_spf_ok,
        is_dkim_ok=is_dkim_ok,
        is_dmarc_ok=is_dmarc_ok,
        badge_class=badge_class,
        badge_reason=badge_reason,
        should_auto_expand=badge_class != "secure",
    )


def _alignment_note(envelope: EnvelopeInfo, verdict: SecurityVerdict) -> AlignmentNote:
    if not envelope.is_domain_aligned and envelope.envelope_from != UNKNOWN:
        if envelope.is_mailing_list:
            return "mailing_list"
        if verdict.is_spf_ok or verdict.is_dkim_ok:
            return "mismatch_authenticated"
        return "mismatch"
    if envelope.is_domain_aligned:
        return "aligned" if verdict.is_secure else "aligned_unauthenticated"
    return ""


def summarize(envelope: EnvelopeInfo, verdict: SecurityVerdict) -> HeaderSummary:
    mismatch = (
        not envelope.is_domain_aligned
        and (verdict.is_spf_ok or verdict.is_dkim_ok)
        and envelope.envelope_from != UNKNOWN
    )
    if verdict.is_secure:
        display_domain = envelope.header_from_domain
    elif mismatch:
        display_domain = envelope.envelope_from_domain
    else:
        display_domain = ""
    return HeaderSummary(
        display_domain=display_domain,
        domain_mismatch=mismatch,
        is_mailing_list=envelope.is_mailing_list,
        alignment_note=_alignment_note(envelope, verdict),
    )
