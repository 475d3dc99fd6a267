import pytest

from tilawaflow.core.continuity import ContinuityPolicy, Move
from tilawaflow.core.cursor import PlaybackCursor


def test_cursor_rejects_invalid_positions():
    with pytest.raises(ValueError):
        PlaybackCursor(chapter=0)
    with pytest.raises(ValueError):
        PlaybackCursor(chapter=1, index=-1)


def test_with_chapter_resets_index_and_keeps_intent():
    cursor = PlaybackCursor(chapter=2, index=5, play_intent=True)

    moved = cursor.with_chapter(3)

    assert moved == PlaybackCursor(chapter=3, index=0, play_intent=True)
    assert cursor.index == 5


def test_advance_steps_within_chapter():
    policy = ContinuityPolicy(114, continuous=False)

    transition = policy.advance(PlaybackCursor(1, 0, True), unit_count=7)

    assert transition.kind is Move.STEP
    assert transition.cursor == PlaybackCursor(1, 1, True)


def test_advance_at_chapter_end_continuous_requests_next_chapter():
    policy = ContinuityPolicy(114, continuous=True)

    transition = policy.advance(PlaybackCursor(1, 6, True), unit_count=7)

    assert transition.kind is Move.CHAPTER
    assert transition.changes_chapter
    assert transition.cursor == PlaybackCursor(2, 0, True)


def test_advance_at_chapter_end_without_continuity_stops():
    policy = ContinuityPolicy(114, continuous=False)

    transition = policy.advance(PlaybackCursor(1, 6, True), unit_count=7)

    assert transition.kind is Move.STOP
    assert transition.cursor == PlaybackCursor(1, 6, False)


def test_advance_at_last_unit_of_last_chapter_stops_even_when_continuous():
    policy = ContinuityPolicy(114, continuous=True)

    transition = policy.advance(PlaybackCursor(114, 5, True), unit_count=6)

    assert transition.kind is Move.STOP
    assert transition.cursor.play_intent is False
    assert transition.cursor.chapter == 114
    assert transition.cursor.index == 5


def test_retreat_steps_back_then_lands_on_first_unit_of_previous_chapter():
    policy = ContinuityPolicy(114)

    assert policy.retreat(PlaybackCursor(3, 2)).cursor == PlaybackCursor(3, 1)

    transition = policy.retreat(PlaybackCursor(3, 0, True))
    assert transition.kind is Move.CHAPTER
    assert transition.cursor == PlaybackCursor(2, 0, True)


def test_retreat_at_very_first_unit_is_a_no_op():
    policy = ContinuityPolicy(114)
    cursor = PlaybackCursor(1, 0, True)

    transition = policy.retreat(cursor)

    assert transition.kind is Move.NONE
    assert transition.cursor is cursor


def test_chapter_skips_respect_corpus_bounds():
    policy = ContinuityPolicy(114)

    assert policy.next_chapter(PlaybackCursor(114, 3)).kind is Move.NONE
    assert policy.previous_chapter(PlaybackCursor(1, 3)).kind is Move.NONE
    assert policy.next_chapter(PlaybackCursor(5, 3)).cursor == PlaybackCursor(6, 0)
    assert policy.previous_chapter(PlaybackCursor(5, 3)).cursor == PlaybackCursor(4, 0)


def test_boundary_predicates():
    policy = ContinuityPolicy(114, continuous=False)

    assert policy.is_first_overall(PlaybackCursor(1, 0))
    assert not policy.is_first_overall(PlaybackCursor(1, 1))
    assert not policy.is_first_overall(PlaybackCursor(2, 0))
    assert policy.is_last_overall(PlaybackCursor(114, 5), unit_count=6)
    assert not policy.is_last_overall(PlaybackCursor(114, 4), unit_count=6)
    assert not policy.is_last_overall(PlaybackCursor(113, 5), unit_count=6)

    policy.continuous = True
    assert not policy.is_last_overall(PlaybackCursor(114, 5), unit_count=6)


def test_single_chapter_corpus():
    policy = ContinuityPolicy(1, continuous=True)

    assert policy.advance(PlaybackCursor(1, 2, True), unit_count=3).kind is Move.STOP
    assert policy.is_first_chapter(PlaybackCursor(1))
    assert policy.is_last_chapter(PlaybackCursor(1))


def test_policy_requires_a_chapter():
    with pytest.raises(ValueError):
        ContinuityPolicy(0)
