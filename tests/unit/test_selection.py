from tilawaflow.core.selection import Selection, SelectionTracker


def test_only_latest_ticket_is_current():
    tracker = SelectionTracker()

    first = tracker.issue(Selection(1, "ar.alafasy", "en.sahih"))
    second = tracker.issue(Selection(2, "ar.alafasy", "en.sahih"))

    assert not tracker.is_current(first)
    assert tracker.is_current(second)
    assert second.epoch > first.epoch
    assert tracker.current is second


def test_reissuing_same_selection_still_supersedes():
    tracker = SelectionTracker()
    selection = Selection(1, "ar.alafasy", "en.sahih")

    first = tracker.issue(selection)
    second = tracker.issue(selection)

    assert first.selection == second.selection
    assert not tracker.is_current(first)
    assert tracker.is_current(second)


def test_invalidate_makes_everything_stale():
    tracker = SelectionTracker()
    ticket = tracker.issue(Selection(1, "ar.alafasy", "en.sahih"))

    tracker.invalidate()

    assert not tracker.is_current(ticket)
    assert tracker.current is None
    assert tracker.epoch == 2
