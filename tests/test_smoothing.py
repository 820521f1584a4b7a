import pytest

from gesture_interpreter.smoothing import CoordSmoother, NumberSmoother, lerp


def test_lerp():
    assert lerp(0.0, 1.0, 0.1) == pytest.approx(0.1)
    assert lerp(2.0, 4.0, 0.5) == 3.0
    assert lerp(2.0, 4.0, 1.0) == 4.0


def test_number_smoother():
    smoother = NumberSmoother(0.5)
    assert smoother.update(1.0) == 0.5
    assert smoother.update(1.0) == 0.75

    smoother.reset()
    assert smoother.value == 0.0

    smoother.reset(0.3)
    assert smoother.value == 0.3


@pytest.mark.parametrize("factor", [0, -0.1, 1.5])
def test_number_smoother_invalid_factor(factor):
    with pytest.raises(ValueError):
        NumberSmoother(factor)


def test_coord_smoother():
    smoother = CoordSmoother(0.8)
    assert smoother.update((1.0, -1.0)) == pytest.approx((0.8, -0.8))
    assert smoother.value == pytest.approx((0.8, -0.8))

    smoother.reset()
    assert smoother.value == (0.0, 0.0)

    with pytest.raises(ValueError):
        smoother.update((1.0, 2.0, 3.0))  # type: ignore[arg-type]
