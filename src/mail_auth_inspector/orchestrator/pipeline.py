"""End-to-end header analysis: envelope, authentication, route, verdict."""

from __future__ import annotations

import logging
from typing import Any

from mail_auth_inspector.config.settings import AppConfig
from mail_auth_inspector.domain.email.models import MessageRecord
from mail_auth_inspector.domain.evidence import MessageReport
from mail_auth_inspector.orchestrator.verdict import classify, summarize
from mail_auth_inspector.tools.intel.auth_results import parse_auth_results
from mail_auth_inspector.tools.intel.envelope import resolve_envelope
from mail_auth_inspector.tools.intel.received import annotate_delays, reconstruct_route

logger = logging.getLogger(__name__)

TraceEvent = dict[str, Any]


def make_event(stage: str, status: str, message: str, data: dict[str, Any] | None = None) -> TraceEvent:
    payload: TraceEvent = {"stage": stage, "status": status, "message": message}
    if data:
        payload["data"] = data
    return payload


def analyze_message(
    message: MessageRecord,
    *,
    decoded_author: str | None = None,
    config: AppConfig | None = None,
) -> MessageReport:
    active = config or AppConfig()
    headers = message.headers
    trace: list[TraceEvent] = []

    envelope = resolve_envelope(message, headers, decoded_author)
    trace.append(
        make_event(
            "envelope",
            "ok" if envelope.is_domain_aligned else "mismatch",
            f"{envelope.header_org_domain or '-'} vs {envelope.envelope_org_domain or '-'}",
            {"mailing_list": envelope.is_mailing_list} if envelope.is_mailing_list else None,
        )
    )

    auth = parse_auth_results(headers, active.auth_policy())
    trace.append(
        make_event(
            "auth",
            "fallback" if auth.trust.fallback_applied else "ok",
            f"spf={auth.spf.status} dkim={auth.dkim.status} dmarc={auth.dmarc.status}",
            {"discarded": auth.trust.discarded_authserv_ids} if auth.trust.discarded_authserv_ids else None,
        )
    )

    route = reconstruct_route(headers)
    hop_delays = annotate_delays(route, active.delay_thresholds())
    slow_hops = sum(1 for item in hop_delays if item.category in {"warning", "danger"})
    trace.append(
        make_event(
            "route",
            "slow" if slow_hops else "ok",
            f"{len(route)} hops",
            {"slow_hops": slow_hops} if slow_hops else None,
        )
    )

    verdict = classify(auth, envelope.is_domain_aligned, envelope.envelope_from)
    trace.append(make_event("verdict", verdict.badge_class, verdict.badge_reason))
    logger.debug("verdict %s (%s)", verdict.badge_class, verdict.badge_reason)

    return MessageReport(
        envelope=envelope,
        auth=auth,
        route=route,
        hop_delays=hop_delays,
        verdict=verdict,
        summary=summarize(envelope, verdict),
        trace=trace,
    )
