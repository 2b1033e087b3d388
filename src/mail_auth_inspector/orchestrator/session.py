"""Generation tracking so late results for a previous message can be dropped."""

from __future__ import annotations

from dataclasses import dataclass, field
import itertools
import logging

from mail_auth_inspector.domain.evidence import MessageReport

logger = logging.getLogger(__name__)


@dataclass
class AnalysisSession:
    """Holds the report for the currently displayed message.

    Call ``begin()`` whenever a new message is shown and hand the returned
    token back to ``accept()`` together with the finished report.
    """

    _counter: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)
    generation: int = 0
    latest: MessageReport | None = None

    def begin(self) -> int:
        self.generation = next(self._counter)
        self.latest = None
        return self.generation

    def is_current(self, token: int) -> bool:
        return token == self.generation

    def accept(self, token: int, report: MessageReport) -> bool:
        if not self.is_current(token):
            logger.debug("dropping stale report for generation %d (current %d)", token, self.generation)
            return False
        self.latest = report
        return True
