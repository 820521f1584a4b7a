"""Short rolling history of the last interpreted frames."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator

from .state import HistoryEntry

DEFAULT_HISTORY_LENGTH = 5


class GestureHistory:
    """Bounded FIFO of per-frame summaries, oldest first."""

    def __init__(self, max_length: int = DEFAULT_HISTORY_LENGTH) -> None:
        if max_length < 1:
            raise ValueError(f"History length must be at least 1, got {max_length}")
        self.max_length = max_length
        self.entries: deque[HistoryEntry] = deque()

    def push(self, entry: HistoryEntry) -> None:
        self.entries.append(entry)
        while len(self.entries) > self.max_length:
            self.entries.popleft()

    def clear(self) -> None:
        self.entries.clear()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self.entries)

    @property
    def pinch_count(self) -> int:
        """Number of pinching frames in the history."""
        return sum(1 for entry in self.entries if entry.pinch)

    def last_all_pinching(self, count: int) -> bool:
        """Check if the `count` most recent frames were all pinching (False if not enough frames)."""
        if len(self.entries) < count:
            return False
        return all(self.entries[-i].pinch for i in range(1, count + 1))
