from mail_auth_inspector.orchestrator.pipeline import analyze_message
from mail_auth_inspector.orchestrator.session import AnalysisSession


def test_stale_generation_is_rejected(make_message):
    session = AnalysisSession()
    first = session.begin()
    second = session.begin()
    report = analyze_message(make_message({}))

    assert session.accept(first, report) is False
    assert session.latest is None
    assert session.accept(second, report) is True
    assert session.latest is report


def test_begin_clears_previous_report(make_message):
    session = AnalysisSession()
    token = session.begin()
    session.accept(token, analyze_message(make_message({})))
    assert session.latest is not None
    assert session.begin() > token
    assert session.latest is None
