"""Envelope vs. header-From resolution and organizational alignment."""

from __future__ import annotations

import logging
import re

from mail_auth_inspector.domain.email.models import HeaderMap, MessageRecord, first_header
from mail_auth_inspector.domain.evidence import UNKNOWN, EnvelopeInfo
from mail_auth_inspector.domain.suffix import organizational_domain

logger = logging.getLogger(__name__)

_NAME_ADDR_PATTERN = re.compile(r"(.*?)<([^>]+)>", re.DOTALL)
_MAILING_LIST_HEADERS = ("list-id", "list-unsubscribe")


def _strip_brackets(value: str) -> str:
    text = (value or "").strip()
    if text.startswith("<"):
        text = text[1:]
    if text.endswith(">"):
        text = text[:-1]
    return text.strip()


def address_domain(address: str) -> str:
    text = (address or "").strip()
    if "@" in text:
        text = text.rsplit("@", maxsplit=1)[1]
    return text.lower()


def split_name_addr(raw: str) -> tuple[str, str]:
    """Split ``"Display Name" <user@host>`` into name and address."""

    match = _NAME_ADDR_PATTERN.search(raw or "")
    if match:
        name = match.group(1).replace('"', "").strip()
        return name, match.group(2).strip()
    return "", _strip_brackets(raw)


def _pick_envelope_from(message: MessageRecord, headers: HeaderMap) -> str:
    envelope = message.envelope
    candidates = (
        envelope.sender if envelope else None,
        first_header(headers, "return-path"),
        split_name_addr(message.author)[1] if message.author else None,
    )
    for candidate in candidates:
        clean = _strip_brackets(candidate or "")
        if clean:
            return clean
    return UNKNOWN


def _pick_envelope_to(message: MessageRecord, headers: HeaderMap) -> str:
    delivered = [item.strip() for item in headers.get("delivered-to", []) if item.strip()]
    envelope_to = list(message.envelope.to) if message.envelope else []
    for values in (delivered, envelope_to, list(message.recipients)):
        joined = ", ".join(item for item in values if item)
        if joined:
            return _strip_brackets(joined)
    return UNKNOWN


def is_mailing_list(headers: HeaderMap) -> bool:
    return any(headers.get(name) for name in _MAILING_LIST_HEADERS)


def resolve_envelope(
    message: MessageRecord,
    headers: HeaderMap | None = None,
    decoded_author: str | None = None,
) -> EnvelopeInfo:
    header_map = message.headers if headers is None else headers
    envelope_from = _pick_envelope_from(message, header_map)
    envelope_to = _pick_envelope_to(message, header_map)

    header_from_raw = (decoded_author or "").strip() or (message.author or "").strip()
    header_from_raw = header_from_raw or first_header(header_map, "from").strip() or UNKNOWN
    header_from_name, header_from_address = split_name_addr(header_from_raw)

    header_from_domain = address_domain(header_from_address)
    envelope_from_domain = address_domain(envelope_from)
    header_org_domain = organizational_domain(header_from_domain)
    envelope_org_domain = organizational_domain(envelope_from_domain)
    aligned = header_org_domain == envelope_org_domain
    logger.debug(
        "alignment header=%s envelope=%s aligned=%s",
        header_org_domain,
        envelope_org_domain,
        aligned,
    )

    return EnvelopeInfo(
        envelope_from=envelope_from,
        envelope_to=envelope_to,
        header_from_name=header_from_name,
        header_from_address=header_from_address,
        header_from_domain=header_from_domain,
        envelope_from_domain=envelope_from_domain,
        header_org_domain=header_org_domain,
        envelope_org_domain=envelope_org_domain,
        is_domain_aligned=aligned,
        is_mailing_list=is_mailing_list(header_map),
    )
