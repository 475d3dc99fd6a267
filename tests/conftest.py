import pytest

from tilawaflow.audio.resource import AudioResource, PlaybackRejected, READY
from tilawaflow.connectors.base import BaseConnector, ContentError
from tilawaflow.core.models import Ayah, ChapterRef, ContentBundle, EditionRef


def make_bundle(chapter=1, count=3, edition="ar.alafasy", translation="en.sahih"):
    ayahs = tuple(
        Ayah(
            number=chapter * 1000 + i + 1,
            number_in_surah=i + 1,
            audio=f"https://audio.test/{edition}/{chapter}/{i + 1}.mp3",
            text=f"نص {chapter}:{i + 1}",
            translation=f"Translation {chapter}:{i + 1}",
        )
        for i in range(count)
    )
    ref = ChapterRef(number=chapter, name=f"سورة {chapter}", english_name=f"Surah {chapter}",
                     english_name_translation="The Test", ayah_count=count, revelation_type="Meccan")
    return ContentBundle(chapter=ref, edition=edition, translation=translation, ayahs=ayahs)


class FakeAudioResource(AudioResource):
    """In-memory audio resource; tests fire its events by hand."""

    def __init__(self):
        super().__init__()
        self.loads = []
        self.plays = []
        self.pauses = 0
        self.playing = False
        self.reject_with = None
        self._ready = False
        self._position = 0.0
        self._duration = 0.0
        self.output = (1.0, False)

    def _load(self, source):
        self.loads.append(source)
        self.playing = False
        self._ready = False
        self._position = 0.0
        self._duration = 0.0

    @property
    def ready(self):
        return bool(self._source) and self._ready

    def play(self):
        if self.reject_with is not None:
            raise PlaybackRejected(self.reject_with)
        self.plays.append(self._source)
        self.playing = True

    def pause(self):
        self.pauses += 1
        self.playing = False

    @property
    def position(self):
        return self._position

    @property
    def duration(self):
        return self._duration

    def set_position(self, seconds):
        self._position = seconds

    def _apply_output(self):
        self.output = (self._volume, self._muted)

    # Test helpers

    def make_ready(self, duration=5.0):
        self._ready = True
        self._duration = duration
        self.emit(READY)


class FakeConnector(BaseConnector):
    """Connector serving generated bundles; counts of ayahs per chapter are configurable."""

    def __init__(self, counts=None, total=114):
        self.counts = counts or {}
        self.total = total
        self.calls = []
        self.fail = {}

    def list_chapters(self):
        return [ChapterRef(number=n, name=f"سورة {n}", english_name=f"Surah {n}",
                           ayah_count=self.counts.get(n, 3)) for n in range(1, self.total + 1)]

    def list_editions(self):
        return [EditionRef("ar.alafasy", "مشاري العفاسي", "Alafasy", "ar", "audio", "versebyverse"),
                EditionRef("ar.husary", "محمود خليل الحصري", "Husary", "ar", "audio", "versebyverse")]

    def list_translations(self, language="en"):
        return [EditionRef("en.sahih", "Saheeh International", "Saheeh International", language,
                           "text", "translation")]

    def get_content(self, chapter, edition, translation):
        self.calls.append((chapter, edition, translation))
        if chapter in self.fail:
            raise ContentError(self.fail[chapter])
        return make_bundle(chapter, self.counts.get(chapter, 3), edition, translation)


class DeferredDispatcher:
    """Holds dispatched work until the test resolves it, in any order."""

    def __init__(self):
        self.jobs = []

    def __call__(self, fn, on_result, on_error):
        self.jobs.append((fn, on_result, on_error))

    def run(self, index=0):
        fn, on_result, on_error = self.jobs.pop(index)
        try:
            result = fn()
        except Exception as exc:
            on_error(exc)
        else:
            on_result(result)

    def run_all(self):
        while self.jobs:
            self.run(0)


@pytest.fixture
def resource():
    return FakeAudioResource()


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def deferred():
    return DeferredDispatcher()


@pytest.fixture
def bundle():
    return make_bundle


@pytest.fixture
def new_session(connector, resource):
    from tilawaflow.core.session import RecitationSession

    def _build(**kwargs):
        return RecitationSession(connector, resource, **kwargs)

    return _build
