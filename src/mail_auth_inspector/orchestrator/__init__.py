"""Header analysis orchestration layer."""

from mail_auth_inspector.orchestrator.pipeline import analyze_message
from mail_auth_inspector.orchestrator.session import AnalysisSession
from mail_auth_inspector.orchestrator.verdict import classify, summarize

__all__ = [
    "AnalysisSession",
    "analyze_message",
    "classify",
    "summarize",
]
