"""Selection epochs for supersedable content fetches.

Every content request is tagged with a :class:`Ticket`.  When the
fetch resolves, its ticket is compared with the tracker: only the
most recently issued ticket may commit.  Fetches are never cancelled;
a superseded result is simply dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Selection:
    chapter: int
    edition: str
    translation: str


@dataclass(frozen=True)
class Ticket:
    epoch: int
    selection: Selection


class SelectionTracker:
    """Issue monotonically increasing tickets and tell stale ones apart."""

    def __init__(self) -> None:
        self._epoch = 0
        self._current: Optional[Ticket] = None

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def current(self) -> Optional[Ticket]:
        return self._current

    def issue(self, selection: Selection) -> Ticket:
        self._epoch += 1
        self._current = Ticket(self._epoch, selection)
        return self._current

    def invalidate(self) -> None:
        """Make every outstanding ticket stale without issuing a new one."""
        self._epoch += 1
        self._current = None

    def is_current(self, ticket: Ticket) -> bool:
        return self._current is not None and ticket.epoch == self._current.epoch
