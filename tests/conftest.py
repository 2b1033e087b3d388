from __future__ import annotations

import pytest

from mail_auth_inspector.domain.email.models import MessageRecord

GMAIL_RECEIVED = [
    "from mail-sor-f41.google.com (mail-sor-f41.google.com. [209.85.220.41])"
    " by mx.google.com with SMTPS id a1sor123.2024.03.05.10.00.05"
    " for <alice@gmail.com> (Google Transport Security); Tue, 5 Mar 2024 10:00:05 -0800 (PST)",
    "from outbound.example.com (outbound.example.com [203.0.113.7])"
    " by mail-sor-f41.google.com with ESMTP id q7; Tue, 5 Mar 2024 10:00:00 -0800",
]

GMAIL_AUTH = (
    "mx.google.com;"
    " dkim=pass header.i=@example.com header.s=s1 header.b=AbCdEf/gh+Ij=;"
    " spf=pass (google.com: domain of bounce@mail.example.com designates 203.0.113.7 as permitted sender)"
    " smtp.mailfrom=bounce@mail.example.com;"
    " dmarc=pass (p=REJECT sp=REJECT dis=NONE) header.from=example.com"
)


@pytest.fixture
def gmail_headers() -> dict[str, list[str]]:
    return {
        "received": list(GMAIL_RECEIVED),
        "authentication-results": [GMAIL_AUTH],
        "return-path": ["<bounce@mail.example.com>"],
        "delivered-to": ["alice@gmail.com"],
        "from": ['"Example Billing" <billing@example.com>'],
    }


@pytest.fixture
def make_message():
    def _make(headers: dict[str, list[str]] | None = None, **fields) -> MessageRecord:
        return MessageRecord.model_validate({"headers": headers or {}, **fields})

    return _make
