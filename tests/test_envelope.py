from mail_auth_inspector.domain.email.models import Envelope
from mail_auth_inspector.tools.intel.envelope import resolve_envelope, split_name_addr


def test_envelope_from_prefers_explicit_envelope(make_message):
    message = make_message(
        {"return-path": ["<bounce@other.example>"]},
        envelope={"from": "<sender@example.com>", "to": ["rcpt@example.net"]},
    )
    info = resolve_envelope(message)
    assert info.envelope_from == "sender@example.com"
    assert info.envelope_to == "rcpt@example.net"


def test_envelope_falls_back_to_return_path_then_author(make_message):
    with_return_path = make_message({"return-path": ["<bounce@mail.example.com>"]})
    assert resolve_envelope(with_return_path).envelope_from == "bounce@mail.example.com"

    author_only = make_message({}, author="Alice <alice@example.org>")
    assert resolve_envelope(author_only).envelope_from == "alice@example.org"

    empty = resolve_envelope(make_message({}))
    assert empty.envelope_from == "Unknown"
    assert empty.envelope_to == "Unknown"
    assert empty.header_from_address == "Unknown"


def test_envelope_to_joins_delivered_to_before_recipients(make_message):
    message = make_message(
        {"delivered-to": ["a@example.com", "b@example.com"]},
        recipients=["c@example.com"],
    )
    assert resolve_envelope(message).envelope_to == "a@example.com, b@example.com"
    assert resolve_envelope(make_message({}, recipients=["c@example.com"])).envelope_to == "c@example.com"


def test_header_from_prefers_decoded_author(make_message):
    message = make_message({"from": ["=?UTF-8?B?5bGx55Sw?= <taro@example.co.jp>"]})
    info = resolve_envelope(message, decoded_author='"山田 太郎" <taro@example.co.jp>')
    assert info.header_from_name == "山田 太郎"
    assert info.header_from_address == "taro@example.co.jp"
    assert info.header_from_domain == "example.co.jp"


def test_split_name_addr_without_brackets():
    assert split_name_addr("plain@example.com") == ("", "plain@example.com")
    assert split_name_addr("<bare@example.com>") == ("", "bare@example.com")


def test_alignment_uses_organizational_domains(gmail_headers, make_message):
    info = resolve_envelope(make_message(gmail_headers))
    assert info.header_from_domain == "example.com"
    assert info.envelope_from_domain == "mail.example.com"
    assert info.header_org_domain == info.envelope_org_domain == "example.com"
    assert info.is_domain_aligned is True


def test_sibling_domains_under_multi_label_suffix_do_not_align(make_message):
    message = make_message(
        {"from": ["Legit <info@b.legit.co.jp>"]},
        envelope=Envelope(sender="bounce@a.evil.co.jp"),
    )
    info = resolve_envelope(message)
    assert info.header_org_domain == "legit.co.jp"
    assert info.envelope_org_domain == "evil.co.jp"
    assert info.is_domain_aligned is False


def test_domain_comparison_is_case_insensitive(make_message):
    message = make_message(
        {"from": ["<News@Mail.EXAMPLE.com>"], "return-path": ["<bounce@example.COM>"]},
    )
    assert resolve_envelope(message).is_domain_aligned is True


def test_mailing_list_detection(make_message):
    assert resolve_envelope(make_message({"list-id": ["<dev.lists.example.org>"]})).is_mailing_list is True
    assert resolve_envelope(make_message({"list-unsubscribe": ["<mailto:u@x.org>"]})).is_mailing_list is True
    assert resolve_envelope(make_message({"list-id": []})).is_mailing_list is False
