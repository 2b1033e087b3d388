"""Received-chain tokenizer, hop reconstruction and relay delay annotation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import logging
import math

from mail_auth_inspector.domain.email.models import HeaderMap
from mail_auth_inspector.domain.evidence import HopDelay, RouteHop

logger = logging.getLogger(__name__)

_ATOM_STOP = frozenset(" \t\r\n;(")


@dataclass(frozen=True)
class ReceivedToken:
    kind: str  # "atom" | "comment" | "semicolon"
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class ParsedReceived:
    from_text: str | None
    by_host: str | None
    date_text: str
    date: datetime | None


@dataclass(frozen=True)
class DelayThresholds:
    warning_after_s: int = 60
    danger_after_s: int = 300


def _scan_comment(value: str, start: int) -> int:
    depth = 0
    index = start
    while index < len(value):
        char = value[index]
        if char == "\\":
            index += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return len(value)


def tokenize_received(value: str) -> list[ReceivedToken]:
    """Split a Received value into atoms, comments and semicolons.

    Comments may nest; an unterminated comment runs to the end of the value.
    """

    text = value or ""
    tokens: list[ReceivedToken] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char.isspace():
            index += 1
            continue
        if char == ";":
            tokens.append(ReceivedToken("semicolon", ";", index, index + 1))
            index += 1
            continue
        if char == "(":
            end = _scan_comment(text, index)
            inner = text[index + 1 : end - 1 if text[end - 1 : end] == ")" else end]
            tokens.append(ReceivedToken("comment", inner, index, end))
            index = end
            continue
        end = index
        while end < len(text) and text[end] not in _ATOM_STOP:
            end += 1
        tokens.append(ReceivedToken("atom", text[index:end], index, end))
        index = end
    return tokens


def _is_keyword(token: ReceivedToken, keyword: str) -> bool:
    return token.kind == "atom" and token.text.lower() == keyword


def parse_received_date(text: str) -> datetime | None:
    clean = (text or "").strip()
    if not clean:
        return None
    try:
        parsed = parsedate_to_datetime(clean)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_received(value: str) -> ParsedReceived:
    text = value or ""
    tokens = tokenize_received(text)
    semicolons = [i for i, token in enumerate(tokens) if token.kind == "semicolon"]
    last_semicolon = semicolons[-1] if semicolons else len(tokens)
    clauses = tokens[:last_semicolon]
    date_tokens = [token.text for token in tokens[last_semicolon + 1 :] if token.kind == "atom"]
    date_text = " ".join(date_tokens)

    from_text: str | None = None
    start = next((i for i, token in enumerate(clauses) if _is_keyword(token, "from")), None)
    if start is not None:
        collected: list[ReceivedToken] = []
        for token in clauses[start + 1 :]:
            if token.kind == "semicolon" or _is_keyword(token, "by"):
                break
            collected.append(token)
        if collected:
            from_text = text[collected[0].start : collected[-1].end].strip() or None

    by_host: str | None = None
    by_index = next((i for i, token in enumerate(clauses) if _is_keyword(token, "by")), None)
    if by_index is not None:
        for token in clauses[by_index + 1 :]:
            if token.kind == "comment":
                continue
            if token.kind == "atom":
                by_host = token.text
            break

    return ParsedReceived(
        from_text=from_text,
        by_host=by_host,
        date_text=date_text,
        date=parse_received_date(date_text) if semicolons else None,
    )


def last_received_by(headers: HeaderMap) -> str:
    """Host that added the newest Received header, i.e. the receiving MTA."""

    received = headers.get("received") or []
    if not received:
        return ""
    return (parse_received(received[0]).by_host or "").lower()


def reconstruct_route(headers: HeaderMap) -> list[RouteHop]:
    received = headers.get("received") or []
    hops: list[RouteHop] = []
    for line in reversed(received):
        parsed = parse_received(line)
        if not parsed.from_text and not parsed.by_host:
            continue
        hops.append(
            RouteHop(
                from_host=parsed.from_text,
                by_host=parsed.by_host,
                date=parsed.date,
                raw=line,
            )
        )
    logger.debug("reconstructed %d hops from %d received headers", len(hops), len(received))
    return hops


def _format_delay(seconds: int, thresholds: DelayThresholds) -> tuple[str, str]:
    if seconds < thresholds.warning_after_s:
        label = f"+{seconds}s" if seconds >= 0 else f"{seconds}s"
        return label, "normal"
    minutes, remainder = divmod(seconds, 60)
    category = "danger" if seconds > thresholds.danger_after_s else "warning"
    return f"+{minutes}m{remainder}s", category


def annotate_delays(hops: list[RouteHop], thresholds: DelayThresholds | None = None) -> list[HopDelay]:
    active = thresholds or DelayThresholds()
    delays: list[HopDelay] = []
    previous: datetime | None = None
    for index, hop in enumerate(hops):
        timestamp = hop.date.strftime("%Y-%m-%d %H:%M:%S") if hop.date else ""
        if hop.date is not None and previous is not None:
            seconds = math.floor((hop.date - previous).total_seconds())
            label, category = _format_delay(seconds, active)
            delays.append(HopDelay(category=category, label=label, seconds=seconds, timestamp=timestamp))
        elif index == 0:
            delays.append(HopDelay(category="origin", label="origin", timestamp=timestamp))
        else:
            delays.append(HopDelay(category="unknown", label="--", timestamp=timestamp))
        previous = hop.date
    return delays
