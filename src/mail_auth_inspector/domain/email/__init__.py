"""Email input models and parsing."""

from mail_auth_inspector.domain.email.models import Envelope, HeaderMap, MessageRecord
from mail_auth_inspector.domain.email.parse import parse_eml_content, parse_input_payload

__all__ = [
    "Envelope",
    "HeaderMap",
    "MessageRecord",
    "parse_eml_content",
    "parse_input_payload",
]
