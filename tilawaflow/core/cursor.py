"""The playback cursor: where the player is and whether it should sound."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class PlaybackCursor:
    """Current chapter, ayah index within it, and the user's play intent.

    ``play_intent`` records what the user (or the continuity policy)
    wants; the audio resource may lag behind it or refuse it.  The
    index is only meaningful against the content bundle of
    ``chapter``; every chapter change resets it to 0.
    """

    chapter: int = 1
    index: int = 0
    play_intent: bool = False

    def __post_init__(self) -> None:
        if self.chapter < 1:
            raise ValueError(f"chapter must be >= 1, got {self.chapter}")
        if self.index < 0:
            raise ValueError(f"index must be >= 0, got {self.index}")

    def with_index(self, index: int) -> "PlaybackCursor":
        return replace(self, index=index)

    def with_chapter(self, chapter: int) -> "PlaybackCursor":
        return replace(self, chapter=chapter, index=0)

    def with_intent(self, play_intent: bool) -> "PlaybackCursor":
        return replace(self, play_intent=bool(play_intent))
