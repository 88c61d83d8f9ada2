from __future__ import annotations

import math

import pytest

from mandelview.config import MAX_ITERATION_DEPTH, MIN_ITERATION_DEPTH
from mandelview.errors import InvalidInputValue
from mandelview.viewport import (
    DirtyFlag,
    ViewportController,
    ViewState,
    parse_iteration_depth,
    wheel_zoom_factor,
)


def clean_controller(**kwargs) -> ViewportController:
    c = ViewportController(500, 500, **kwargs)
    c.dirty.clear()
    return c


def test_dirty_flag_starts_set_and_toggles() -> None:
    flag = DirtyFlag()
    assert flag and flag.is_set
    flag.clear()
    assert not flag
    flag.set()
    assert flag.is_set


def test_view_is_a_copy() -> None:
    c = clean_controller()
    v = c.view
    v.zoom = 123.0
    assert c.view.zoom == 1.0


@pytest.mark.parametrize("f1,f2", [(0.5, 0.5), (1.1, 0.9), (2.0, 0.25), (0.99, 1.37)])
def test_zoom_is_multiplicative(f1: float, f2: float) -> None:
    a = clean_controller()
    a.zoom(f1)
    a.zoom(f2)
    b = clean_controller()
    b.zoom(f1 * f2)
    assert a.view.zoom == pytest.approx(b.view.zoom)


def test_wheel_delta_minus_500_halves_zoom() -> None:
    c = clean_controller(view=ViewState(zoom=3.0))
    assert wheel_zoom_factor(-500) == 0.5
    assert c.zoom_by_wheel(-500)
    assert c.view.zoom == pytest.approx(1.5)
    assert c.dirty


def test_wheel_down_zooms_out() -> None:
    c = clean_controller()
    c.zoom_by_wheel(100)
    assert c.view.zoom == pytest.approx(1.1)


@pytest.mark.parametrize("factor", [0.0, -1.0, math.inf, math.nan])
def test_bad_zoom_factor_is_ignored(factor: float) -> None:
    c = clean_controller()
    assert c.zoom(factor) is False
    assert c.view.zoom == 1.0
    assert not c.dirty


def test_zoom_result_overflow_is_ignored() -> None:
    c = clean_controller(view=ViewState(zoom=1e300))
    assert c.zoom(1e10) is False
    assert c.view.zoom == 1e300
    assert not c.dirty


def test_wheel_delta_beyond_sensitivity_is_ignored() -> None:
    c = clean_controller()
    assert c.zoom_by_wheel(-1000) is False
    assert c.zoom_by_wheel(-2500) is False
    assert c.view.zoom == 1.0


def test_click_on_center_does_not_move() -> None:
    c = clean_controller()
    assert c.recenter(250, 250)
    assert c.view.center_x == 0.0
    assert c.view.center_y == 0.0
    assert c.dirty


def test_click_shifts_by_fraction_of_extent() -> None:
    c = clean_controller()
    c.recenter(500, 0)
    # Right edge and top edge are half an extent (2 units) away
    assert c.view.center_x == pytest.approx(2.0)
    assert c.view.center_y == pytest.approx(-2.0)


def test_recenter_compensates_for_display_scaling() -> None:
    scaled = ViewportController(1000, 1000)
    scaled.recenter(100, 100, displayed_width=500, displayed_height=500)

    unscaled = ViewportController(1000, 1000)
    unscaled.recenter(200, 200)

    assert scaled.view.center_x == pytest.approx(unscaled.view.center_x)
    assert scaled.view.center_y == pytest.approx(unscaled.view.center_y)


def test_recenter_with_zoom_scales_shift() -> None:
    c = clean_controller(view=ViewState(zoom=0.5))
    c.recenter(375, 250)
    assert c.view.center_x == pytest.approx(0.25 * 2.0)


@pytest.mark.parametrize("args", [
    (math.nan, 10.0, None, None),
    (10.0, math.inf, None, None),
    (10.0, 10.0, 0, 500),
    (10.0, 10.0, 500, -1),
])
def test_bad_click_is_ignored(args) -> None:
    c = clean_controller()
    assert c.recenter(*args) is False
    assert not c.dirty
    assert c.view.center_x == 0.0


def test_click_that_would_overflow_center_is_ignored() -> None:
    c = clean_controller(view=ViewState(zoom=1e300))
    assert c.recenter(1e12, 0.0) is False
    assert not c.dirty
    assert c.view.center_x == 0.0
    assert c.view.center_y == 0.0


def test_set_iteration_depth_forwards_once(fake_engine) -> None:
    c = clean_controller(engine=fake_engine)
    assert c.set_iteration_depth(50)
    assert fake_engine.calls == [("set_iteration_depth", 50)]
    assert c.view.iteration_depth == 50
    assert c.dirty


def test_set_iteration_depth_parses_strings(fake_engine) -> None:
    c = clean_controller(engine=fake_engine)
    assert c.set_iteration_depth("42")
    assert fake_engine.depth == 42


@pytest.mark.parametrize("value,expected", [
    (0, MIN_ITERATION_DEPTH),
    (-7, MIN_ITERATION_DEPTH),
    (1000, MAX_ITERATION_DEPTH),
    (12.6, 13),
    ("3", 3),
])
def test_parse_iteration_depth_clamps(value, expected: int) -> None:
    assert parse_iteration_depth(value) == expected


@pytest.mark.parametrize("value", ["abc", None, math.nan, math.inf, ""])
def test_unparseable_depth_is_ignored(fake_engine, value) -> None:
    with pytest.raises(InvalidInputValue):
        parse_iteration_depth(value)
    c = clean_controller(engine=fake_engine)
    assert c.set_iteration_depth(value) is False
    assert fake_engine.calls == []
    assert not c.dirty


def test_dirty_only_changes_through_operations() -> None:
    c = clean_controller()
    _ = c.view
    _ = c.view_window()
    assert not c.dirty
    c.recenter(1, 1)
    assert c.dirty


def test_reset_restores_start_view_and_keeps_depth() -> None:
    start = ViewState(center_x=-0.5, center_y=0.1, zoom=0.75, iteration_depth=16)
    c = clean_controller(view=start)
    c.recenter(0, 0)
    c.zoom(0.5)
    c.set_iteration_depth(99)
    c.dirty.clear()

    c.reset()
    v = c.view
    assert (v.center_x, v.center_y, v.zoom) == (-0.5, 0.1, 0.75)
    assert v.iteration_depth == 99
    assert c.dirty


def test_view_window_matches_extent() -> None:
    c = clean_controller(view=ViewState(center_x=1.0, center_y=-1.0, zoom=0.5))
    assert c.view_window() == pytest.approx((0.0, -2.0, 2.0, 2.0))


def test_invalid_surface_size_raises() -> None:
    with pytest.raises(ValueError):
        ViewportController(0, 100)
