"""Authentication-Results parsing (RFC 8601) with authserv-id trust filtering."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import re
from typing import Literal

from mail_auth_inspector.domain.email.models import HeaderMap
from mail_auth_inspector.domain.evidence import (
    AuthResults,
    AuthTrust,
    DkimDetail,
    DkimResult,
    DmarcDetail,
    DmarcResult,
    SpfDetail,
    SpfResult,
)
from mail_auth_inspector.domain.suffix import normalize_domain
from mail_auth_inspector.tools.intel.received import last_received_by

logger = logging.getLogger(__name__)

FallbackMode = Literal["trust_all", "distrust"]

_RESULT_WORD = re.compile(r"\w+")
_DOMAIN_OF = re.compile(r"domain of ([^;\s()]+)", re.IGNORECASE)
_DESIGNATES = re.compile(r"designates\s+([a-fA-F0-9.:]+)\s+as\s+permitted\s+sender", re.IGNORECASE)
_CLIENT_IP = re.compile(r"client-ip=([a-fA-F0-9.:]+)", re.IGNORECASE)
_DMARC_POLICY = re.compile(r"\bp=(reject|quarantine|none)\b", re.IGNORECASE)
_VALUE_STOP = frozenset(" \t\r\n;()")
_ATOM_STOP = frozenset(' \t\r\n;()="')


@dataclass(frozen=True)
class AuthToken:
    kind: str  # "atom" | "quoted" | "comment" | "equals" | "semicolon"
    text: str


@dataclass(frozen=True)
class MethodResult:
    method: str
    result: str
    version: str = ""
    reason: str = ""
    properties: tuple[tuple[str, str], ...] = ()
    comments: tuple[str, ...] = ()

    def prop(self, name: str) -> str:
        for key, value in self.properties:
            if key == name:
                return value
        return ""

    def props(self, *names: str) -> list[str]:
        return [value for key, value in self.properties if key in names]

    def comment_text(self) -> str:
        return " ".join(self.comments)


@dataclass(frozen=True)
class AuthResHeader:
    authserv_id: str
    version: str = ""
    methods: tuple[MethodResult, ...] = ()
    raw: str = ""


@dataclass(frozen=True)
class AuthTrustPolicy:
    """What to do when no Authentication-Results header names the receiving MTA."""

    fallback: FallbackMode = "trust_all"


@dataclass
class _TrustSelection:
    trusted: list[AuthResHeader] = field(default_factory=list)
    discarded: list[AuthResHeader] = field(default_factory=list)
    fallback_applied: bool = False


def _read_quoted(value: str, start: int) -> tuple[str, int]:
    chars: list[str] = []
    index = start + 1
    while index < len(value):
        char = value[index]
        if char == "\\" and index + 1 < len(value):
            chars.append(value[index + 1])
            index += 2
            continue
        if char == '"':
            return "".join(chars), index + 1
        chars.append(char)
        index += 1
    return "".join(chars), index


def _read_comment(value: str, start: int) -> tuple[str, int]:
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
                return value[start + 1 : index], index + 1
        index += 1
    return value[start + 1 :], len(value)


def tokenize_auth_results(value: str) -> list[AuthToken]:
    """Lex an Authentication-Results value.

    The token after ``=`` is read as a raw value up to whitespace, ``;`` or a
    comment so that base64 signatures and bracketed addresses stay whole.
    """

    text = value or ""
    tokens: list[AuthToken] = []
    expect_value = False
    index = 0
    while index < len(text):
        char = text[index]
        if char.isspace():
            index += 1
            continue
        if char == "(":
            inner, index = _read_comment(text, index)
            tokens.append(AuthToken("comment", inner))
            continue
        if char == ")":
            # unbalanced close paren
            expect_value = False
            index += 1
            continue
        if char == ";":
            tokens.append(AuthToken("semicolon", ";"))
            expect_value = False
            index += 1
            continue
        if char == '"':
            inner, index = _read_quoted(text, index)
            tokens.append(AuthToken("quoted", inner))
            expect_value = False
            continue
        if char == "=" and not expect_value:
            tokens.append(AuthToken("equals", "="))
            expect_value = True
            index += 1
            continue
        stop = _VALUE_STOP if expect_value else _ATOM_STOP
        end = index
        while end < len(text) and text[end] not in stop:
            end += 1
        tokens.append(AuthToken("atom", text[index:end]))
        expect_value = False
        index = end
    return tokens


def _split_segments(tokens: list[AuthToken]) -> list[list[AuthToken]]:
    segments: list[list[AuthToken]] = [[]]
    for token in tokens:
        if token.kind == "semicolon":
            segments.append([])
        else:
            segments[-1].append(token)
    return segments


def _pairs(segment: list[AuthToken]) -> tuple[list[tuple[str, str]], list[str], list[str]]:
    pairs: list[tuple[str, str]] = []
    comments: list[str] = []
    loose: list[str] = []
    index = 0
    while index < len(segment):
        token = segment[index]
        if token.kind == "comment":
            comments.append(token.text)
            index += 1
            continue
        if token.kind in {"atom", "quoted"}:
            following = segment[index + 1] if index + 1 < len(segment) else None
            if following is not None and following.kind == "equals":
                value_token = segment[index + 2] if index + 2 < len(segment) else None
                if value_token is not None and value_token.kind in {"atom", "quoted"}:
                    pairs.append((token.text.lower(), value_token.text))
                    index += 3
                else:
                    pairs.append((token.text.lower(), ""))
                    index += 2
                continue
            loose.append(token.text)
        index += 1
    return pairs, comments, loose


def _parse_method(segment: list[AuthToken]) -> MethodResult | None:
    pairs, comments, _ = _pairs(segment)
    if not pairs:
        return None
    method_key, raw_result = pairs[0]
    match = _RESULT_WORD.match(raw_result)
    if not match:
        return None
    method, _, version = method_key.partition("/")
    reason = ""
    properties: list[tuple[str, str]] = []
    for key, value in pairs[1:]:
        if key == "reason" and not reason:
            reason = value
        else:
            properties.append((key, value))
    return MethodResult(
        method=method.strip(),
        result=match.group(0).lower(),
        version=version.strip(),
        reason=reason,
        properties=tuple(properties),
        comments=tuple(comments),
    )


def parse_auth_header(value: str, *, arc: bool = False) -> AuthResHeader:
    """Parse one header value into authserv-id, version and method results.

    ARC-Authentication-Results values carry a leading ``i=<n>`` instance tag
    that is skipped before the authserv-id.
    """

    segments = _split_segments(tokenize_auth_results(value))
    if arc and segments:
        pairs, _, loose = _pairs(segments[0])
        if pairs and pairs[0][0] == "i" and not loose:
            segments = segments[1:]
    if not segments:
        return AuthResHeader(authserv_id="", raw=value or "")

    _, _, loose = _pairs(segments[0])
    authserv_id = normalize_domain(loose[0]) if loose else ""
    version = loose[1] if len(loose) > 1 and loose[1].isdigit() else ""
    methods = [method for method in (_parse_method(segment) for segment in segments[1:]) if method]
    return AuthResHeader(
        authserv_id=authserv_id,
        version=version,
        methods=tuple(methods),
        raw=value or "",
    )


def authserv_matches(authserv_id: str, host: str) -> bool:
    left = normalize_domain(authserv_id)
    right = normalize_domain(host)
    if not left or not right:
        return False
    return left == right or left.endswith("." + right) or right.endswith("." + left)


def _select_trusted(
    regular: list[AuthResHeader],
    receiving_host: str,
    policy: AuthTrustPolicy,
) -> _TrustSelection:
    if not regular:
        return _TrustSelection()
    matched = [item for item in regular if authserv_matches(item.authserv_id, receiving_host)]
    if matched:
        discarded = [item for item in regular if item not in matched]
        return _TrustSelection(trusted=matched, discarded=discarded)
    if policy.fallback == "trust_all":
        logger.debug("no authserv-id matches %r, trusting all %d headers", receiving_host, len(regular))
        return _TrustSelection(trusted=list(regular), fallback_applied=True)
    logger.debug("no authserv-id matches %r, discarding %d headers", receiving_host, len(regular))
    return _TrustSelection(discarded=list(regular))


def _methods(headers: list[AuthResHeader], name: str) -> list[MethodResult]:
    return [method for header in headers for method in header.methods if method.method == name]


def mechanism_status(headers: list[AuthResHeader], name: str) -> str:
    for method in _methods(headers, name):
        return method.result
    return "none"


def aggregate_dkim_status(statuses: list[str]) -> str:
    """One passing signature is enough; otherwise any failure wins."""

    if not statuses:
        return "none"
    if "pass" in statuses:
        return "pass"
    if "fail" in statuses:
        return "fail"
    return statuses[0]


def _after_at(value: str) -> str:
    clean = value.strip().strip("<>").strip()
    return clean.rsplit("@", maxsplit=1)[1] if "@" in clean else clean


def extract_spf_detail(headers: list[AuthResHeader]) -> SpfDetail:
    for method in _methods(headers, "spf"):
        comments = method.comment_text()
        domain = ""
        mail_from = method.prop("smtp.mailfrom")
        if mail_from:
            domain = _after_at(mail_from)
        else:
            domain_of = _DOMAIN_OF.search(comments)
            if domain_of:
                domain = _after_at(domain_of.group(1))

        ip = ""
        designates = _DESIGNATES.search(comments)
        if designates:
            ip = designates.group(1)
        else:
            client_ips = [value for key, value in method.properties if key.split(".")[-1] == "client-ip"]
            if client_ips:
                ip = client_ips[0]
            else:
                client_ip = _CLIENT_IP.search(comments)
                ip = client_ip.group(1) if client_ip else ""
        if domain or ip:
            return SpfDetail(domain=domain.lower(), ip=ip)
    return SpfDetail()


def extract_dkim_detail(headers: list[AuthResHeader]) -> DkimDetail:
    domains: list[str] = []
    for method in _methods(headers, "dkim"):
        for value in method.props("header.d", "header.i"):
            domain = _after_at(value).lower()
            if domain:
                domains.append(domain)
    return DkimDetail(domains=list(dict.fromkeys(domains)))


def extract_dmarc_detail(headers: list[AuthResHeader]) -> DmarcDetail:
    domain = ""
    policy = ""
    for method in _methods(headers, "dmarc"):
        if not domain:
            domain = method.prop("header.from").strip().lower()
        if not policy:
            searchable = " ".join([method.comment_text(), *(f"{key}={value}" for key, value in method.properties)])
            found = _DMARC_POLICY.search(searchable)
            policy = found.group(1).lower() if found else ""
        if domain and policy:
            break
    return DmarcDetail(domain=domain, policy=policy)


def parse_auth_results(headers: HeaderMap, policy: AuthTrustPolicy | None = None) -> AuthResults:
    active = policy or AuthTrustPolicy()
    receiving_host = last_received_by(headers)
    regular = [parse_auth_header(value) for value in headers.get("authentication-results") or []]
    arc = [parse_auth_header(value, arc=True) for value in headers.get("arc-authentication-results") or []]

    selection = _select_trusted(regular, receiving_host, active)
    trusted = [*selection.trusted, *arc]

    dkim_statuses = [method.result for method in _methods(trusted, "dkim")]
    return AuthResults(
        spf=SpfResult(status=mechanism_status(trusted, "spf"), detail=extract_spf_detail(trusted)),
        dkim=DkimResult(status=aggregate_dkim_status(dkim_statuses), detail=extract_dkim_detail(trusted)),
        dmarc=DmarcResult(status=mechanism_status(trusted, "dmarc"), detail=extract_dmarc_detail(trusted)),
        trust=AuthTrust(
            last_received_by=receiving_host,
            trusted_authserv_ids=list(dict.fromkeys(item.authserv_id for item in selection.trusted)),
            discarded_authserv_ids=list(dict.fromkeys(item.authserv_id for item in selection.discarded)),
            fallback_applied=selection.fallback_applied,
            arc_count=len(arc),
        ),
    )
