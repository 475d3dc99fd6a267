"""The recitation session: cursor, content and audio kept in step.

:class:`RecitationSession` is what the presentation layer talks to.
It owns the playback cursor, the current content bundle, the
continuity policy and the audio binding controller, and exposes
read-only observables plus the user operations.

Content fetches are the only waits on external I/O.  They run through
an injected *dispatch* callable::

    dispatch(fn, on_result, on_error)

which must eventually call exactly one of the two callbacks on the
thread that owns the session.  The default runs ``fn`` inline; the GUI
uses a thread pool (see :mod:`tilawaflow.gui.async_job`).

Each content request is tagged with a selection ticket.  A result
whose ticket is no longer current is dropped, so a slow fetch for a
superseded chapter can never overwrite a newer one.

Play intent survives a content replacement: when the chapter changes
while playing, the intent stays on and the first ayah of the new
chapter arms autoplay once its content is committed.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple

from ..audio.binding import AudioBindingController
from ..audio.resource import AudioResource
from .continuity import ContinuityPolicy, Move, Transition
from .cursor import PlaybackCursor
from .models import Ayah, ChapterRef, ContentBundle, EditionRef, TOTAL_SURAHS
from .selection import Selection, SelectionTracker, Ticket

if TYPE_CHECKING:
    from ..connectors.base import BaseConnector

logger = logging.getLogger(__name__)

DEFAULT_EDITION = "ar.alafasy"
DEFAULT_TRANSLATION = "en.sahih"

#: Notification topics passed to subscribers.
STATE = "state"
PROGRESS = "progress"
CATALOGUE = "catalogue"

Dispatch = Callable[[Callable[[], Any], Callable[[Any], None], Callable[[BaseException], None]], None]


def run_inline(fn: Callable[[], Any], on_result: Callable[[Any], None],
               on_error: Callable[[BaseException], None]) -> None:
    """Dispatch that runs *fn* synchronously on the calling thread."""
    try:
        result = fn()
    except Exception as exc:
        on_error(exc)
    else:
        on_result(result)


class RecitationSession:
    """Presentation-facing facade of the player core.

    :param connector: Content provider.
    :param resource: The single audio output.
    :param dispatch: How fetches are executed; inline by default.
    :param edition: Initial reciter edition.
    :param translation: Initial translation edition.
    :param translation_language: Language of the listed translations.
    :param continuous: Initial continuity mode.
    :param total_chapters: Number of chapters in the corpus.
    """

    def __init__(
        self,
        connector: BaseConnector,
        resource: AudioResource,
        *,
        dispatch: Optional[Dispatch] = None,
        edition: str = DEFAULT_EDITION,
        translation: str = DEFAULT_TRANSLATION,
        translation_language: str = "en",
        continuous: bool = True,
        total_chapters: int = TOTAL_SURAHS,
    ) -> None:
        self.connector = connector
        self._dispatch = dispatch or run_inline
        self.policy = ContinuityPolicy(total_chapters, continuous)
        self.controller = AudioBindingController(
            resource,
            on_ended=self.advance,
            on_rejected=self._on_rejected,
            on_progress=self._on_progress,
        )
        self.translation_language = translation_language
        self._selections = SelectionTracker()
        self._cursor = PlaybackCursor()
        self._bundle: Optional[ContentBundle] = None
        self._edition = edition
        self._translation = translation
        self._chapters: List[ChapterRef] = []
        self._editions: List[EditionRef] = []
        self._translations: List[EditionRef] = []
        self._loading = False
        self._error: Optional[str] = None
        self._catalogue_error: Optional[str] = None
        self._warning: Optional[str] = None
        self._position = 0.0
        self._duration = 0.0
        self._listeners: List[Callable[[str], None]] = []

    @classmethod
    def from_config(cls, config, connector: BaseConnector, resource: AudioResource,
                    dispatch: Optional[Dispatch] = None) -> "RecitationSession":
        """Build a session from the ``playback`` section of an :class:`AppConfig`."""
        session = cls(
            connector,
            resource,
            dispatch=dispatch,
            edition=config.get("playback", "edition", default=DEFAULT_EDITION),
            translation=config.get("playback", "translation", default=DEFAULT_TRANSLATION),
            translation_language=config.get("playback", "translation_language", default="en"),
            continuous=bool(config.get("playback", "continuous", default=True)),
        )
        session.set_volume(config.get("playback", "volume", default=1.0))
        return session

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Call *callback* with a topic on every change; returns an unsubscriber."""
        self._listeners.append(callback)
        return lambda: self._listeners.remove(callback) if callback in self._listeners else None

    def _notify(self, topic: str) -> None:
        for callback in list(self._listeners):
            callback(topic)

    # ------------------------------------------------------------------
    # Observables
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> PlaybackCursor:
        return self._cursor

    @property
    def bundle(self) -> Optional[ContentBundle]:
        return self._bundle

    @property
    def chapters(self) -> Tuple[ChapterRef, ...]:
        return tuple(self._chapters)

    @property
    def editions(self) -> Tuple[EditionRef, ...]:
        return tuple(self._editions)

    @property
    def translations(self) -> Tuple[EditionRef, ...]:
        return tuple(self._translations)

    @property
    def edition(self) -> str:
        return self._edition

    @property
    def translation(self) -> str:
        return self._translation

    @property
    def current_chapter(self) -> Optional[ChapterRef]:
        if self._bundle is not None:
            return self._bundle.chapter
        return next((c for c in self._chapters if c.number == self._cursor.chapter), None)

    @property
    def current_ayah(self) -> Optional[Ayah]:
        if self._bundle is None:
            return None
        return self._bundle.ayah_at(self._cursor.index)

    @property
    def is_playing(self) -> bool:
        return self._cursor.play_intent

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        """The content failure if any, else the catalogue failure."""
        return self._error or self._catalogue_error

    @property
    def warning(self) -> Optional[str]:
        return self._warning

    @property
    def position(self) -> float:
        return self._position

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def volume(self) -> float:
        return self.controller.resource.volume

    @property
    def muted(self) -> bool:
        return self.controller.resource.muted

    @property
    def continuous(self) -> bool:
        return self.policy.continuous

    @property
    def is_first(self) -> bool:
        return self.policy.is_first_overall(self._cursor)

    @property
    def is_last(self) -> bool:
        unit_count = len(self._bundle) if self._bundle is not None else 0
        return self.policy.is_last_overall(self._cursor, unit_count)

    @property
    def is_first_chapter(self) -> bool:
        return self.policy.is_first_chapter(self._cursor)

    @property
    def is_last_chapter(self) -> bool:
        return self.policy.is_last_chapter(self._cursor)

    # ------------------------------------------------------------------
    # Catalogue and selection
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Fetch the content of the current chapter and the catalogue."""
        self._request(self._cursor)
        self.load_catalogue()

    def load_catalogue(self) -> None:
        self._dispatch(self._fetch_catalogue, self._on_catalogue, self._on_catalogue_error)

    def _fetch_catalogue(self):
        return (
            self.connector.list_chapters(),
            self.connector.list_editions(),
            self.connector.list_translations(self.translation_language),
        )

    def _on_catalogue(self, result) -> None:
        chapters, editions, translations = result
        self._chapters = list(chapters)
        self._editions = list(editions)
        self._translations = list(translations)
        self._catalogue_error = None
        self._notify(CATALOGUE)

    def _on_catalogue_error(self, exc: BaseException) -> None:
        logger.error("Error fetching initial data: %s", exc)
        self._catalogue_error = str(exc)
        self._notify(STATE)

    def select_chapter(self, number: int) -> None:
        number = int(number)
        if not 1 <= number <= self.policy.total_chapters:
            raise ValueError(f"Surah number must be in 1..{self.policy.total_chapters}, got {number}")
        if self._is_selected(Selection(number, self._edition, self._translation)):
            return
        self._request(self._cursor.with_chapter(number))

    def select_edition(self, identifier: str) -> None:
        if self._is_selected(Selection(self._cursor.chapter, identifier, self._translation)):
            return
        self._edition = identifier
        self._request(self._cursor.with_chapter(self._cursor.chapter))

    def select_translation(self, identifier: str) -> None:
        if self._is_selected(Selection(self._cursor.chapter, self._edition, identifier)):
            return
        self._translation = identifier
        self._request(self._cursor.with_chapter(self._cursor.chapter))

    def reload(self) -> None:
        """Fetch the current selection again, e.g. after a failure.

        The catalogue is fetched again too when it never arrived.
        """
        self._request(self._cursor.with_chapter(self._cursor.chapter))
        if not self._chapters or self._catalogue_error is not None:
            self.load_catalogue()

    def _is_selected(self, selection: Selection) -> bool:
        ticket = self._selections.current
        return ticket is not None and ticket.selection == selection

    def _request(self, cursor: PlaybackCursor) -> None:
        selection = Selection(cursor.chapter, self._edition, self._translation)
        ticket = self._selections.issue(selection)
        self.controller.release()
        self._bundle = None
        self._cursor = cursor
        self._position = self._duration = 0.0
        self._loading = True
        self._error = None
        logger.debug("Requesting %s (epoch %d)", selection, ticket.epoch)
        self._notify(STATE)
        self._dispatch(
            partial(self.connector.get_content, selection.chapter, selection.edition, selection.translation),
            partial(self._commit, ticket),
            partial(self._fail, ticket),
        )

    def _commit(self, ticket: Ticket, bundle: ContentBundle) -> None:
        if not self._selections.is_current(ticket):
            logger.debug("Discarding stale content for %s", ticket.selection)
            return
        self._bundle = bundle
        self._loading = False
        self._cursor = self._cursor.with_index(0)
        self._sync()
        self._notify(STATE)

    def _fail(self, ticket: Ticket, exc: BaseException) -> None:
        if not self._selections.is_current(ticket):
            logger.debug("Discarding stale failure for %s: %s", ticket.selection, exc)
            return
        logger.error("Error fetching surah data: %s", exc)
        # A failed selection counts as not loaded; selecting it again refetches.
        self._selections.invalidate()
        self.controller.release()
        self._bundle = None
        self._loading = False
        self._error = str(exc)
        self._cursor = self._cursor.with_intent(False)
        self._notify(STATE)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def toggle_play(self) -> None:
        playing = not self._cursor.play_intent
        self._cursor = self._cursor.with_intent(playing)
        if playing:
            self._warning = None
        self._sync()
        self._notify(STATE)

    def seek(self, seconds: float) -> Optional[float]:
        applied = self.controller.seek(seconds)
        if applied is not None:
            self._position = applied
            self._notify(PROGRESS)
        return applied

    def set_volume(self, level: float) -> None:
        self.controller.set_volume(level)
        self._notify(STATE)

    def toggle_mute(self) -> None:
        self.controller.set_muted(not self.controller.resource.muted)
        self._notify(STATE)

    def set_continuous(self, enabled: bool) -> None:
        self.policy.continuous = bool(enabled)
        self._notify(STATE)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def advance(self) -> None:
        if self._bundle is None:
            return
        self._apply(self.policy.advance(self._cursor, len(self._bundle)))

    def retreat(self) -> None:
        self._apply(self.policy.retreat(self._cursor))

    def next_chapter(self) -> None:
        self._apply(self.policy.next_chapter(self._cursor))

    def previous_chapter(self) -> None:
        self._apply(self.policy.previous_chapter(self._cursor))

    def _apply(self, transition: Transition) -> None:
        if transition.kind is Move.NONE:
            return
        if transition.changes_chapter:
            self._request(transition.cursor)
            return
        self._cursor = transition.cursor
        self._sync()
        self._notify(STATE)

    # ------------------------------------------------------------------
    # Controller plumbing
    # ------------------------------------------------------------------

    def _sync(self) -> None:
        self.controller.reconcile(self._bundle, self._cursor.index, self._cursor.play_intent)

    def _on_rejected(self, message: str) -> None:
        self._warning = message
        self._cursor = self._cursor.with_intent(False)
        self._sync()
        self._notify(STATE)

    def _on_progress(self, position: float, duration: float) -> None:
        self._position = position
        self._duration = duration
        self._notify(PROGRESS)
