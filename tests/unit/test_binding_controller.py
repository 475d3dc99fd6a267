import pytest

from tilawaflow.audio.binding import AudioBindingController, PendingAutoplay
from tilawaflow.audio.listeners import ListenerScope
from tilawaflow.audio.resource import ENDED, ERROR, EVENTS, PROGRESS, READY


def _controller(resource, **callbacks):
    calls = {"ended": 0, "rejected": [], "progress": []}

    def on_ended():
        calls["ended"] += 1

    controller = AudioBindingController(
        resource,
        on_ended=callbacks.get("on_ended", on_ended),
        on_rejected=calls["rejected"].append,
        on_progress=lambda p, d: calls["progress"].append((p, d)),
    )
    return controller, calls


def test_pending_autoplay_is_consumed_once():
    flag = PendingAutoplay()
    flag.arm()

    assert flag.consume() is True
    assert flag.consume() is False
    assert flag.armed is False


def test_new_source_with_play_intent_arms_then_plays_once_on_ready(resource, bundle):
    controller, _ = _controller(resource)
    content = bundle(1, 3)

    controller.reconcile(content, 0, True)

    assert resource.loads == [content.ayahs[0].audio]
    assert resource.plays == []
    assert controller.pending_autoplay

    resource.make_ready()
    resource.make_ready()

    assert resource.plays == [content.ayahs[0].audio]
    assert not controller.pending_autoplay


def test_reconcile_same_index_does_not_reload(resource, bundle):
    controller, _ = _controller(resource)
    content = bundle(1, 3)

    controller.reconcile(content, 0, False)
    controller.reconcile(content, 0, False)

    assert resource.loads == [content.ayahs[0].audio]
    assert resource.listener_count(READY) == 1


def test_resume_on_ready_source_plays_immediately(resource, bundle):
    controller, _ = _controller(resource)
    content = bundle(1, 3)
    controller.reconcile(content, 0, True)
    resource.make_ready()

    controller.reconcile(content, 0, False)
    assert not resource.playing

    controller.reconcile(content, 0, True)

    assert resource.playing
    assert len(resource.plays) == 2
    assert len(resource.loads) == 1


def test_play_intent_off_disarms_and_pauses(resource, bundle):
    controller, _ = _controller(resource)
    content = bundle(1, 3)
    controller.reconcile(content, 0, True)

    controller.reconcile(content, 0, False)
    resource.make_ready()

    assert not controller.pending_autoplay
    assert resource.plays == []
    assert resource.pauses >= 1


def test_missing_unit_leaves_resource_alone(resource, bundle):
    controller, _ = _controller(resource)

    controller.reconcile(None, 0, True)
    controller.reconcile(bundle(1, 2), 5, True)

    assert resource.loads == []
    assert not controller.pending_autoplay


def test_switching_source_removes_old_listeners(resource, bundle):
    controller, calls = _controller(resource)
    content = bundle(1, 3)

    controller.reconcile(content, 0, True)
    controller.reconcile(content, 1, True)

    for event in EVENTS:
        assert resource.listener_count(event) == 1
    resource.emit(ENDED)
    assert calls["ended"] == 1


def test_natural_end_advancing_mid_dispatch_fires_once(resource, bundle):
    content = bundle(1, 3)
    state = {"index": 0, "ended": 0}

    def on_ended():
        state["ended"] += 1
        state["index"] += 1
        controller.reconcile(content, state["index"], True)

    controller, _ = _controller(resource, on_ended=on_ended)
    controller.reconcile(content, 0, True)
    resource.make_ready()

    resource.emit(ENDED)

    assert state["ended"] == 1
    assert resource.source == content.ayahs[1].audio
    assert controller.pending_autoplay

    resource.make_ready()
    assert resource.plays == [content.ayahs[0].audio, content.ayahs[1].audio]


def test_rejected_play_reports_and_disarms(resource, bundle):
    controller, calls = _controller(resource)
    resource.reject_with = "play() failed because the user didn't interact"
    controller.reconcile(bundle(1, 3), 0, True)

    resource.make_ready()

    assert calls["rejected"] == ["play() failed because the user didn't interact"]
    assert not controller.pending_autoplay
    assert resource.plays == []


def test_error_event_counts_as_rejection(resource, bundle):
    controller, calls = _controller(resource)
    controller.reconcile(bundle(1, 3), 0, True)

    resource.emit(ERROR, "decoder failure")

    assert calls["rejected"] == ["decoder failure"]
    assert not controller.pending_autoplay


def test_progress_events_are_forwarded(resource, bundle):
    controller, calls = _controller(resource)
    controller.reconcile(bundle(1, 3), 0, False)

    resource.emit(PROGRESS, 1.5, 6.0)

    assert calls["progress"] == [(1.5, 6.0)]


def test_release_unloads_and_removes_listeners(resource, bundle):
    controller, calls = _controller(resource)
    controller.reconcile(bundle(1, 3), 0, True)

    controller.release()
    resource.emit(READY)
    resource.emit(ENDED)

    assert resource.source == ""
    assert not controller.pending_autoplay
    assert resource.plays == []
    assert calls["ended"] == 0
    assert all(resource.listener_count(event) == 0 for event in EVENTS)


def test_failed_assignment_still_removes_previous_listeners(resource, bundle, monkeypatch):
    controller, _ = _controller(resource)
    content = bundle(1, 3)
    controller.reconcile(content, 0, False)

    def broken_load(source):
        raise RuntimeError("device lost")

    monkeypatch.setattr(resource, "_load", broken_load)

    with pytest.raises(RuntimeError):
        controller.reconcile(content, 1, False)
    assert all(resource.listener_count(event) == 0 for event in EVENTS)


def test_seek_is_clamped_and_needs_a_source(resource, bundle):
    controller, _ = _controller(resource)

    assert controller.seek(3.0) is None

    controller.reconcile(bundle(1, 3), 0, False)
    resource.make_ready(duration=10.0)

    assert controller.seek(4.0) == 4.0
    assert controller.seek(25.0) == 10.0
    assert controller.seek(-2.0) == 0.0
    assert resource.position == 0.0


def test_volume_while_muted_is_remembered(resource, bundle):
    controller, _ = _controller(resource)
    controller.reconcile(bundle(1, 3), 0, False)

    controller.set_muted(True)
    controller.set_volume(0.3)

    assert resource.effective_volume == 0.0
    assert resource.volume == 0.3
    assert resource.output == (0.3, True)

    controller.set_muted(False)
    assert resource.effective_volume == 0.3
    assert len(resource.loads) == 1


def test_volume_is_clamped(resource):
    resource.set_volume(1.7)
    assert resource.volume == 1.0
    resource.set_volume(-0.2)
    assert resource.volume == 0.0


def test_listener_scope_close_continues_past_failures(resource, monkeypatch):
    scope = ListenerScope(resource, "a.mp3").install({
        READY: lambda: None,
        ENDED: lambda: None,
        ERROR: lambda message: None,
    })
    original = resource.unsubscribe
    seen = []

    def flaky_unsubscribe(token):
        seen.append(token)
        if len(seen) == 1:
            raise RuntimeError("boom")
        original(token)

    monkeypatch.setattr(resource, "unsubscribe", flaky_unsubscribe)

    with pytest.raises(RuntimeError):
        scope.close()

    assert len(seen) == 3
    assert resource.listener_count(ENDED) == 0
    assert resource.listener_count(ERROR) == 0
    assert scope.closed

    scope.close()
    assert len(seen) == 3


def test_listener_scope_as_context_manager(resource):
    with ListenerScope(resource, "a.mp3").install({READY: lambda: None}):
        assert resource.listener_count(READY) == 1
    assert resource.listener_count(READY) == 0


def test_unknown_event_is_rejected(resource):
    with pytest.raises(ValueError):
        resource.subscribe("stalled", lambda: None)


def test_listener_scope_close_reraises_first_failure(resource, monkeypatch):
    scope = ListenerScope(resource, "a.mp3").install({
        READY: lambda: None,
        ENDED: lambda: None,
        ERROR: lambda message: None,
    })
    original = resource.unsubscribe
    attempts = []

    def failing_unsubscribe(token):
        attempts.append(token)
        if len(attempts) < 3:
            raise RuntimeError(f"failure {len(attempts)}")
        original(token)

    monkeypatch.setattr(resource, "unsubscribe", failing_unsubscribe)

    with pytest.raises(RuntimeError, match="failure 1"):
        scope.close()
    assert len(attempts) == 3
    assert resource.listener_count(ERROR) == 0
