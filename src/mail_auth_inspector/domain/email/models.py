"""Message input records handed over by the mail client."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

HeaderMap = dict[str, list[str]]


def normalize_header_map(raw: Any) -> HeaderMap:
    """Lower-case header names and coerce every value to an ordered list of strings."""

    if not isinstance(raw, dict):
        return {}
    headers: HeaderMap = {}
    for key, value in raw.items():
        name = str(key).strip().lower()
        if not name:
            continue
        if value is None:
            values: list[str] = []
        elif isinstance(value, (list, tuple)):
            values = [str(item) for item in value if item is not None]
        else:
            values = [str(value)]
        headers.setdefault(name, []).extend(values)
    return headers


def first_header(headers: HeaderMap, name: str) -> str:
    values = headers.get(name) or []
    return values[0] if values else ""


class Envelope(BaseModel):
    """SMTP envelope as reported by the receiving client, when it knows it."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    sender: str | None = Field(default=None, alias="from")
    to: list[str] = Field(default_factory=list)


class MessageRecord(BaseModel):
    """One fetched message: its header map plus optional envelope metadata."""

    model_config = ConfigDict(frozen=True)

    headers: HeaderMap = Field(default_factory=dict)
    envelope: Envelope | None = None
    author: str | None = None
    recipients: list[str] = Field(default_factory=list)

    @field_validator("headers", mode="before")
    @classmethod
    def _lower_case_headers(cls, value: Any) -> HeaderMap:
        return normalize_header_map(value)

    @field_validator("recipients", mode="before")
    @classmethod
    def _drop_blank_recipients(cls, value: Any) -> list[str]:
        if not isinstance(value, (list, tuple)):
            return []
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
