"""Structured analysis output handed to the presentation layer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

UNKNOWN = "Unknown"

BadgeClass = Literal["secure", "warning", "danger"]
BadgeReason = Literal["auth_pass", "auth_failed", "auth_pass_mismatch", "unverified"]
DelayCategory = Literal["origin", "normal", "warning", "danger", "unknown"]
AlignmentNote = Literal[
    "",
    "aligned",
    "aligned_unauthenticated",
    "mailing_list",
    "mismatch_authenticated",
    "mismatch",
]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class EnvelopeInfo(_Frozen):
    envelope_from: str = UNKNOWN
    envelope_to: str = UNKNOWN
    header_from_name: str = ""
    header_from_address: str = UNKNOWN
    header_from_domain: str = ""
    envelope_from_domain: str = ""
    header_org_domain: str = ""
    envelope_org_domain: str = ""
    is_domain_aligned: bool = False
    is_mailing_list: bool = False


class SpfDetail(_Frozen):
    domain: str = ""
    ip: str = ""


class DkimDetail(_Frozen):
    domains: list[str] = Field(default_factory=list)


class DmarcDetail(_Frozen):
    domain: str = ""
    policy: str = ""


class SpfResult(_Frozen):
    status: str = "none"
    detail: SpfDetail = Field(default_factory=SpfDetail)


class DkimResult(_Frozen):
    status: str = "none"
    detail: DkimDetail = Field(default_factory=DkimDetail)


class DmarcResult(_Frozen):
    status: str = "none"
    detail: DmarcDetail = Field(default_factory=DmarcDetail)


class AuthTrust(_Frozen):
    """Which Authentication-Results headers were believed, and why."""

    last_received_by: str = ""
    trusted_authserv_ids: list[str] = Field(default_factory=list)
    discarded_authserv_ids: list[str] = Field(default_factory=list)
    fallback_applied: bool = False
    arc_count: int = 0


class AuthResults(_Frozen):
    spf: SpfResult = Field(default_factory=SpfResult)
    dkim: DkimResult = Field(default_factory=DkimResult)
    dmarc: DmarcResult = Field(default_factory=DmarcResult)
    trust: AuthTrust = Field(default_factory=AuthTrust)


class RouteHop(_Frozen):
    from_host: str | None = Field(default=None, alias="from")
    by_host: str | None = Field(default=None, alias="by")
    date: datetime | None = None
    raw: str = ""


class HopDelay(_Frozen):
    category: DelayCategory = "unknown"
    label: str = "--"
    seconds: int | None = None
    timestamp: str = ""


class SecurityVerdict(_Frozen):
    is_secure: bool = False
    is_spf_ok: bool = False
    is_dkim_ok: bool = False
    is_dmarc_ok: bool = False
    badge_class: BadgeClass = "warning"
    badge_reason: BadgeReason = "unverified"
    should_auto_expand: bool = True


class HeaderSummary(_Frozen):
    display_domain: str = ""
    domain_mismatch: bool = False
    is_mailing_list: bool = False
    alignment_note: AlignmentNote = ""


class MessageReport(_Frozen):
    envelope: EnvelopeInfo
    auth: AuthResults
    route: list[RouteHop] = Field(default_factory=list)
    hop_delays: list[HopDelay] = Field(default_factory=list)
    verdict: SecurityVerdict
    summary: HeaderSummary = Field(default_factory=HeaderSummary)
    trace: list[dict[str, Any]] = Field(default_factory=list)
