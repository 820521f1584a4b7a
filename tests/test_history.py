import pytest

from gesture_interpreter import GestureHistory, Vector
from gesture_interpreter.models.state import HistoryEntry


def entry(timestamp: float, pinch: bool = False) -> HistoryEntry:
    return HistoryEntry(position=Vector(0.0, 0.0), openness=0.5, pinch=pinch, timestamp=timestamp)


def test_oldest_entries_are_dropped():
    history = GestureHistory(max_length=3)
    for timestamp in range(5):
        history.push(entry(timestamp))
    assert len(history) == 3
    assert [e.timestamp for e in history] == [2, 3, 4]


def test_pinch_count():
    history = GestureHistory()
    for timestamp, pinch in enumerate([True, False, True, True]):
        history.push(entry(timestamp, pinch))
    assert history.pinch_count == 3


def test_last_all_pinching():
    history = GestureHistory()
    history.push(entry(0, True))
    history.push(entry(1, True))
    assert not history.last_all_pinching(3)

    history.push(entry(2, True))
    assert history.last_all_pinching(3)

    history.push(entry(3, False))
    assert not history.last_all_pinching(3)
    assert not history.last_all_pinching(1)


def test_clear():
    history = GestureHistory()
    history.push(entry(0, True))
    history.clear()
    assert len(history) == 0
    assert history.pinch_count == 0


def test_invalid_length():
    with pytest.raises(ValueError):
        GestureHistory(max_length=0)
