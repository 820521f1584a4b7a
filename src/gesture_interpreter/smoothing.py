"""Smoothing utilities for gesture values."""

from __future__ import annotations


def lerp(start: float, end: float, factor: float) -> float:
    """Linear interpolation from `start` toward `end` (factor 0 keeps start, 1 gives end)."""
    return start + (end - start) * factor


class NumberSmoother:
    """Smooths a numeric value by moving a fixed fraction toward each new value."""

    def __init__(self, factor: float, default_value: float = 0.0):
        if not 0 < factor <= 1:
            raise ValueError(f"Smoothing factor must be in ]0, 1], got {factor}")
        self.factor = factor
        self.default_value = default_value
        self.value = default_value

    def update(self, value: float) -> float:
        """Update with new value and return smoothed result."""
        self.value = lerp(self.value, value, self.factor)
        return self.value

    def reset(self, value: float | None = None) -> None:
        """Restart smoothing from `value` (or the default value)."""
        self.value = self.default_value if value is None else value


class CoordSmoother:
    """Smooths a 2D coordinate."""

    def __init__(self, factor: float, default_value: tuple[float, float] = (0.0, 0.0)):
        self.smoothers = [NumberSmoother(factor, default) for default in default_value]

    def update(self, coord: tuple[float, float]) -> tuple[float, float]:
        """Update with new coordinate and return smoothed result."""
        if len(coord) != 2:
            raise ValueError(f"Expected 2 dimensions, got {len(coord)}")

        x, y = (s.update(v) for s, v in zip(self.smoothers, coord, strict=True))
        return x, y

    def reset(self) -> None:
        for smoother in self.smoothers:
            smoother.reset()

    @property
    def value(self) -> tuple[float, float]:
        x, y = (s.value for s in self.smoothers)
        return x, y
