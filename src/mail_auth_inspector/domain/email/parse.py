"""Input normalization: RFC 5322 text or client JSON into a MessageRecord."""

from __future__ import annotations

from email import policy
from email.errors import HeaderParseError
from email.message import Message
from email.parser import BytesParser
from email.utils import getaddresses
import json
import re
from typing import Any

from pydantic import ValidationError

from mail_auth_inspector.core.errors import MessageLoadError
from mail_auth_inspector.domain.email.models import Envelope, HeaderMap, MessageRecord

_FOLD_PATTERN = re.compile(r"\r?\n[ \t]+")


def _unfold(value: str) -> str:
    return _FOLD_PATTERN.sub(" ", value).strip()


def _raw_header_map(message: Message) -> HeaderMap:
    headers: HeaderMap = {}
    for name, value in message.raw_items():
        headers.setdefault(name.lower(), []).append(_unfold(str(value)))
    return headers


def _decoded_header(message: Message, headers: HeaderMap, name: str) -> str:
    try:
        return str(message.get(name) or "").strip()
    except (IndexError, ValueError, HeaderParseError):
        # malformed address syntax, keep the raw value
        values = headers.get(name.lower()) or []
        return values[0].strip() if values else ""


def _parse_address_list(*raw_values: str) -> list[str]:
    pairs = getaddresses([value for value in raw_values if value])
    values: list[str] = []
    for _, addr in pairs:
        clean = addr.strip()
        if clean:
            values.append(clean)
    return list(dict.fromkeys(values))


def _looks_like_eml(raw: str) -> bool:
    text = raw.replace("\r\n", "\n").lstrip()
    if not text:
        return False
    first_line = text.split("\n", maxsplit=1)[0]
    return ":" in first_line and not first_line.startswith(("{", "["))


def parse_eml_content(raw_eml: str) -> MessageRecord:
    message = BytesParser(policy=policy.default).parsebytes(raw_eml.encode("utf-8", errors="ignore"))
    headers = _raw_header_map(message)
    # policy.default decodes RFC 2047 encoded words in the display name.
    author = _decoded_header(message, headers, "From") or None
    recipients = _parse_address_list(
        _decoded_header(message, headers, "To"),
        _decoded_header(message, headers, "Cc"),
    )
    return MessageRecord(headers=headers, author=author, recipients=recipients)


def _parse_json_payload(payload: dict[str, Any]) -> MessageRecord:
    eml_raw = payload.get("eml") or payload.get("eml_raw")
    base = parse_eml_content(eml_raw) if isinstance(eml_raw, str) and eml_raw.strip() else MessageRecord()

    headers = dict(base.headers)
    if isinstance(payload.get("headers"), dict):
        headers.update(MessageRecord(headers=payload["headers"]).headers)

    envelope = base.envelope
    if isinstance(payload.get("envelope"), dict):
        envelope = Envelope.model_validate(payload["envelope"])

    author = payload.get("author")
    recipients = payload.get("recipients")
    return MessageRecord(
        headers=headers,
        envelope=envelope,
        author=author.strip() if isinstance(author, str) and author.strip() else base.author,
        recipients=recipients if isinstance(recipients, list) else base.recipients,
    )


def parse_input_payload(raw: str) -> MessageRecord:
    """Accept either a JSON full-message record or raw RFC 5322 header text."""

    stripped = (raw or "").strip()
    if not stripped:
        return MessageRecord()

    if stripped.startswith("{") and stripped.endswith("}"):
        try:
            payload = json.loads(stripped)
        except json.JSONDecodeError as exc:
            raise MessageLoadError(f"input looks like JSON but does not parse: {exc}") from exc
        if not isinstance(payload, dict):
            raise MessageLoadError("JSON input must be an object")
        try:
            return _parse_json_payload(payload)
        except ValidationError as exc:
            raise MessageLoadError(f"JSON input does not describe a message: {exc}") from exc

    if _looks_like_eml(raw):
        return parse_eml_content(raw)
    raise MessageLoadError("input is neither a JSON message record nor RFC 5322 headers")
