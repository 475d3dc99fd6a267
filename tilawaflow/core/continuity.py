"""Continuity policy: what happens when navigation runs off a chapter.

The policy is a small state machine over :class:`PlaybackCursor`.  It
never touches audio or content itself; each decision is returned as a
:class:`Transition` that the session applies:

* ``STEP``    – same chapter, new ayah index.
* ``CHAPTER`` – a different chapter is requested; its content must be
  fetched before the cursor is usable again (index already reset to 0).
* ``STOP``    – play intent is cleared, cursor position unchanged.
* ``NONE``    – nothing to do (boundary reached).

Going back from the first ayah of chapter *k* lands on the *first*
ayah of chapter *k-1*, not its last one, mirroring how going forward
from the last ayah lands on the first ayah of the next chapter.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .cursor import PlaybackCursor
from .models import TOTAL_SURAHS


class Move(enum.Enum):
    STEP = "step"
    CHAPTER = "chapter"
    STOP = "stop"
    NONE = "none"


@dataclass(frozen=True)
class Transition:
    kind: Move
    cursor: PlaybackCursor

    @property
    def changes_chapter(self) -> bool:
        return self.kind is Move.CHAPTER


class ContinuityPolicy:
    """Decide cursor transitions for ayah and chapter navigation.

    :param total_chapters: Highest chapter number (``N``).
    :param continuous: Whether finishing a chapter proceeds to the next.
    """

    def __init__(self, total_chapters: int = TOTAL_SURAHS, continuous: bool = True) -> None:
        if total_chapters < 1:
            raise ValueError("total_chapters must be positive")
        self.total_chapters = total_chapters
        self.continuous = continuous

    # ------------------------------------------------------------------
    # Ayah navigation
    # ------------------------------------------------------------------

    def advance(self, cursor: PlaybackCursor, unit_count: int) -> Transition:
        """Move to the next ayah, the next chapter, or stop."""
        if cursor.index < unit_count - 1:
            return Transition(Move.STEP, cursor.with_index(cursor.index + 1))
        if self.continuous and cursor.chapter < self.total_chapters:
            return Transition(Move.CHAPTER, cursor.with_chapter(cursor.chapter + 1))
        return Transition(Move.STOP, cursor.with_intent(False))

    def retreat(self, cursor: PlaybackCursor) -> Transition:
        """Move to the previous ayah, or to the start of the previous chapter."""
        if cursor.index > 0:
            return Transition(Move.STEP, cursor.with_index(cursor.index - 1))
        if cursor.chapter > 1:
            return Transition(Move.CHAPTER, cursor.with_chapter(cursor.chapter - 1))
        return Transition(Move.NONE, cursor)

    # ------------------------------------------------------------------
    # Chapter navigation
    # ------------------------------------------------------------------

    def next_chapter(self, cursor: PlaybackCursor) -> Transition:
        if cursor.chapter >= self.total_chapters:
            return Transition(Move.NONE, cursor)
        return Transition(Move.CHAPTER, cursor.with_chapter(cursor.chapter + 1))

    def previous_chapter(self, cursor: PlaybackCursor) -> Transition:
        if cursor.chapter <= 1:
            return Transition(Move.NONE, cursor)
        return Transition(Move.CHAPTER, cursor.with_chapter(cursor.chapter - 1))

    # ------------------------------------------------------------------
    # Boundary predicates
    # ------------------------------------------------------------------

    def is_first_overall(self, cursor: PlaybackCursor) -> bool:
        return cursor.chapter == 1 and cursor.index == 0

    def is_last_overall(self, cursor: PlaybackCursor, unit_count: int) -> bool:
        # With continuous play on there is no hard end from the listener's side.
        if self.continuous:
            return False
        return cursor.chapter == self.total_chapters and cursor.index >= unit_count - 1

    def is_first_chapter(self, cursor: PlaybackCursor) -> bool:
        return cursor.chapter <= 1

    def is_last_chapter(self, cursor: PlaybackCursor) -> bool:
        return cursor.chapter >= self.total_chapters
