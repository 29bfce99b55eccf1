"""Tests for the braking curve and easing helpers."""

import pytest

from squad_roulette.animation.easing import (
    Easing,
    ease_out_brake,
    get_easing,
    interpolate,
    interpolate_color,
)
from squad_roulette.spin.animator import CONVERGENCE_EPSILON
from squad_roulette.spin.selection import ROW_HEIGHT, TARGET_SCROLL_ROWS


def test_brake_endpoints() -> None:
    assert ease_out_brake(0.0) == 0.0
    assert ease_out_brake(1.0) == 1.0
    assert ease_out_brake(1.5) == 1.0


def test_brake_is_seventh_power_ease_out() -> None:
    for t in (0.1, 0.25, 0.5, 0.9):
        assert ease_out_brake(t) == pytest.approx(1 - (1 - t) ** 7)


def test_brake_is_monotonic() -> None:
    samples = [ease_out_brake(i / 1000) for i in range(1001)]

    assert all(b > a for a, b in zip(samples, samples[1:]))


def test_brake_front_loads_motion() -> None:
    # Half the distance is covered in under a tenth of the time
    assert ease_out_brake(0.1) > 0.5


def test_tail_is_within_convergence_epsilon() -> None:
    # Deepest possible strip: 100 rows plus a full extra loop of a long list
    distance = (TARGET_SCROLL_ROWS * 5) * ROW_HEIGHT
    remaining = distance * (1 - ease_out_brake(0.99))

    assert remaining < CONVERGENCE_EPSILON


def test_get_easing_by_name_and_enum() -> None:
    assert get_easing("brake") is ease_out_brake
    assert get_easing(Easing.BRAKE) is ease_out_brake
    assert get_easing("LINEAR")(0.3) == 0.3

    with pytest.raises(ValueError):
        get_easing("wobble")


def test_interpolate_clamps_progress() -> None:
    assert interpolate(10.0, 20.0, -1.0) == 10.0
    assert interpolate(10.0, 20.0, 2.0) == 20.0
    assert interpolate(0.0, 100.0, 0.5, Easing.EASE_OUT_QUAD) == 75.0


def test_interpolate_color() -> None:
    assert interpolate_color((0, 0, 0), (200, 100, 50), 0.5) == (100, 50, 25)
    assert interpolate_color((0, 0, 0), (0, 255, 0), 3.0, Easing.EASE_OUT_QUAD) == (0, 255, 0)
