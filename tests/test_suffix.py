import pytest

from mail_auth_inspector.domain.suffix import PUBLIC_SUFFIXES, organizational_domain


@pytest.mark.parametrize(
    ("domain", "expected"),
    [
        ("aaa.bbb.google.com", "google.com"),
        ("mail.example.co.jp", "example.co.jp"),
        ("a.b.co.uk", "b.co.uk"),
        ("mail.example.zz", "example.zz"),
        ("sub.sub.example.com", "example.com"),
        ("user.github.io", "user.github.io"),
        ("bucket.s3.amazonaws.com", "bucket.s3.amazonaws.com"),
        ("news.blogspot.co.uk", "news.blogspot.co.uk"),
    ],
)
def test_organizational_domain_table(domain, expected):
    assert organizational_domain(domain) == expected


def test_organizational_domain_normalizes_case_and_trailing_dot():
    assert organizational_domain("Mail.Example.CO.JP.") == "example.co.jp"


def test_organizational_domain_short_inputs():
    assert organizational_domain("") == ""
    assert organizational_domain("localhost") == "localhost"
    assert organizational_domain("co.uk") == "co.uk"
    assert organizational_domain("example.com") == "example.com"


def test_sibling_subdomains_under_shared_suffix_stay_distinct():
    assert organizational_domain("a.evil.co.jp") != organizational_domain("b.legit.co.jp")


def test_suffix_table_is_immutable():
    assert isinstance(PUBLIC_SUFFIXES, frozenset)
    assert "co.jp" in PUBLIC_SUFFIXES
    assert "com" not in PUBLIC_SUFFIXES
