import pytest

from core.series import label_stride, project_series
from core.time_window import filter_by_window
from tests.factories import day, events

pytestmark = pytest.mark.unit

W, H, PAD = 600.0, 400.0, 40.0


def test_empty_series_has_no_points_or_ticks():
    model = project_series([], W, H, PAD)
    assert model.empty
    assert model.points == []
    assert model.x_ticks == []
    assert model.y_ticks == []


def test_single_point_sits_at_padding():
    model = project_series(events((day(0), 120)), W, H, PAD)
    (point,) = model.points
    assert point.x == PAD
    assert point.y == pytest.approx(PAD)
    assert point.source_index == 0


def test_length_order_and_monotonic_x():
    history = events(*[(day(i), (i * 37) % 11) for i in range(13)])
    model = project_series(history, W, H, PAD)
    assert len(model.points) == len(history)
    assert [p.source_index for p in model.points] == list(range(13))
    xs = [p.x for p in model.points]
    assert xs == sorted(xs)
    assert xs[0] == PAD
    assert xs[-1] == pytest.approx(W - PAD)


def test_y_stays_inside_padding_band():
    history = events((day(0), 0), (day(1), 50), (day(2), 100), (day(3), 25))
    model = project_series(history, W, H, PAD)
    for p in model.points:
        assert PAD - 1e-9 <= p.y <= H - PAD + 1e-9
    assert model.points[0].y == H - PAD
    assert model.points[2].y == pytest.approx(PAD)
    assert model.points[1].y == pytest.approx(H - PAD - 0.5 * (H - 2 * PAD))


def test_all_zero_amounts_lie_flat_on_baseline():
    model = project_series(events((day(0), 0), (day(1), 0), (day(2), 0)), W, H, PAD)
    assert {p.y for p in model.points} == {H - PAD}
    assert model.max_amount == 0
    assert [t.value for t in model.y_ticks] == [0.0] * 5


def test_six_month_scenario_keeps_everything_and_tops_out_last_point():
    history = events((day(20), 100), (day(30), 250), (day(200), 400))
    kept = filter_by_window(history, "6m", day(200))
    assert len(kept) == 3
    model = project_series(kept, W, H, PAD)
    assert model.max_amount == 400
    assert model.points[-1].y == pytest.approx(PAD)


def test_x_ticks_every_ceil_n_over_six():
    history = events(*[(day(i), 10) for i in range(14)])
    model = project_series(history, W, H, PAD)
    assert label_stride(14) == 3
    assert [int(t.value) for t in model.x_ticks] == [0, 3, 6, 9, 12]
    assert model.x_ticks[0].label == "Jan 1"


def test_y_ticks_are_five_even_steps_to_max():
    model = project_series(events((day(0), 100), (day(1), 400)), W, H, PAD)
    assert [t.value for t in model.y_ticks] == [0.0, 100.0, 200.0, 300.0, 400.0]
    assert model.y_ticks[0].position == H - PAD
    assert model.y_ticks[-1].position == pytest.approx(PAD)
    assert model.y_ticks[-1].label == "400"


def test_rejects_canvas_without_room():
    with pytest.raises(ValueError):
        project_series(events((day(0), 1)), 60, 60, 40)
