"""
Player core for TilawaFlow.

This subpackage holds the playback synchronisation logic, free of any
GUI code:

* :mod:`.models` – immutable surah, edition, ayah and content records.
* :mod:`.cursor` – the playback cursor (chapter, ayah index, intent).
* :mod:`.continuity` – what happens at the edges of a chapter.
* :mod:`.selection` – epochs that let stale fetch results be dropped.
* :mod:`.session` – the facade the presentation layer drives.

Example::

    from tilawaflow.core import RecitationSession
    session = RecitationSession(connector, resource)
    session.start()
    session.toggle_play()
"""

from .models import Ayah, ChapterRef, ContentBundle, EditionRef, TOTAL_SURAHS  # noqa: F401
from .cursor import PlaybackCursor  # noqa: F401
from .continuity import ContinuityPolicy, Move, Transition  # noqa: F401
from .selection import Selection, SelectionTracker, Ticket  # noqa: F401
from .session import RecitationSession, run_inline  # noqa: F401

__all__ = [
    "Ayah",
    "ChapterRef",
    "ContentBundle",
    "EditionRef",
    "TOTAL_SURAHS",
    "PlaybackCursor",
    "ContinuityPolicy",
    "Move",
    "Transition",
    "Selection",
    "SelectionTracker",
    "Ticket",
    "RecitationSession",
    "run_inline",
]
