"""Tests for steady.minibuffer.geometry -- overlay overlap and point distance."""

from __future__ import annotations

from typing import Any

from steady.minibuffer.frame import Buffer, Frame
from steady.minibuffer.geometry import FrameMetrics, GeometryResolver


class _BufferLineHost:
    """Delegates to a frame but hides ``count_screen_lines``."""

    def __init__(self, frame: Frame) -> None:
        self._frame = frame

    def __getattr__(self, name: str) -> Any:
        if name == "count_screen_lines":
            raise AttributeError(name)
        return getattr(self._frame, name)


def _rect(resolver: GeometryResolver, window):
    rect = resolver.window_rect(window)
    assert rect is not None
    return rect


# ---------------------------------------------------------------------------
# Metrics and overlay extent
# ---------------------------------------------------------------------------


class TestFrameMetrics:
    def test_read_from_host(self, frame: Frame) -> None:
        assert FrameMetrics.from_host(frame) == FrameMetrics(height=50, char_height=16)

    def test_metrics_are_read_per_resolver(self, frame: Frame) -> None:
        first = GeometryResolver(frame)
        frame.rows = 40
        second = GeometryResolver(frame)
        assert first.metrics.height == 50
        assert second.metrics.height == 40


class TestOverlayExtent:
    """Whether the overlay fits and where it starts."""

    def test_fits_up_to_frame_height(self, frame: Frame) -> None:
        resolver = GeometryResolver(frame)
        assert resolver.can_accommodate(10)
        assert resolver.can_accommodate(50)
        assert not resolver.can_accommodate(51)

    def test_threshold(self, frame: Frame) -> None:
        assert GeometryResolver(frame).threshold(10) == 39


# ---------------------------------------------------------------------------
# Overlap
# ---------------------------------------------------------------------------


class TestAffectedByHeight:
    """Windows the overlay reaches."""

    def test_full_height_window_is_affected(self, frame: Frame) -> None:
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, frame.selected_window())
        assert resolver.affected_by_height(rect, 10)

    def test_stacked_windows(self, frame: Frame) -> None:
        upper = frame.selected_window()
        lower = frame.split_window()
        resolver = GeometryResolver(frame)
        assert not resolver.affected_by_height(_rect(resolver, upper), 10)
        assert resolver.affected_by_height(_rect(resolver, lower), 10)

    def test_top_edge_marks_wholly_covered_windows(self, frame: Frame) -> None:
        upper = frame.selected_window()
        lower = frame.split_window(size=45)
        resolver = GeometryResolver(frame)
        assert resolver.affected_by_height(_rect(resolver, lower), 10, edge="top")
        assert not resolver.affected_by_height(_rect(resolver, upper), 10, edge="top")

    def test_partially_covered_window_is_not_wholly_covered(self, frame: Frame) -> None:
        frame.split_window()
        lower = frame.window_list()[1]
        resolver = GeometryResolver(frame)
        assert not resolver.affected_by_height(_rect(resolver, lower), 10, edge="top")

    def test_oversized_overlay_affects_nothing(self, frame: Frame) -> None:
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, frame.selected_window())
        assert not resolver.affected_by_height(rect, 60)
        assert resolver.affected_windows(60) == []

    def test_affected_windows(self, frame: Frame) -> None:
        frame.split_window()
        lower = frame.window_list()[1]
        resolver = GeometryResolver(frame)
        assert [r.window for r in resolver.affected_windows(10)] == [lower]


class TestWindowRects:
    def test_dead_window_has_no_rect(self, frame: Frame) -> None:
        lower = frame.split_window()
        frame.delete_window(lower)
        assert GeometryResolver(frame).window_rect(lower) is None

    def test_visible_rects_cover_every_window(self, frame: Frame) -> None:
        frame.split_window()
        rects = GeometryResolver(frame).visible_rects()
        assert [(r.top, r.bottom) for r in rects] == [(0, 25), (25, 50)]


class TestSouthernNeighbor:
    """Adjacency below a window."""

    def test_stacked(self, frame: Frame) -> None:
        upper = frame.selected_window()
        lower = frame.split_window()
        resolver = GeometryResolver(frame)
        rects = resolver.visible_rects()
        assert resolver.has_southern_neighbor(_rect(resolver, upper), rects)
        assert not resolver.has_southern_neighbor(_rect(resolver, lower), rects)

    def test_side_by_side(self, frame: Frame) -> None:
        frame.split_window(side="right")
        resolver = GeometryResolver(frame)
        rects = resolver.visible_rects()
        assert not any(resolver.has_southern_neighbor(r, rects) for r in rects)

    def test_two_windows_over_one(self, frame: Frame) -> None:
        top_left = frame.selected_window()
        bottom = frame.split_window()
        top_right = frame.split_window(top_left, side="right", size=40)
        resolver = GeometryResolver(frame)
        rects = resolver.visible_rects()
        assert resolver.has_southern_neighbor(_rect(resolver, top_left), rects)
        assert resolver.has_southern_neighbor(_rect(resolver, top_right), rects)
        assert not resolver.has_southern_neighbor(_rect(resolver, bottom), rects)

    def test_window_below_a_different_column_is_not_a_neighbor(self, frame: Frame) -> None:
        left = frame.selected_window()
        right = frame.split_window(side="right", size=40)
        frame.split_window(right)
        resolver = GeometryResolver(frame)
        rects = resolver.visible_rects()
        assert not resolver.has_southern_neighbor(_rect(resolver, left), rects)
        assert resolver.has_southern_neighbor(_rect(resolver, right), rects)


# ---------------------------------------------------------------------------
# Distance and unit conversion
# ---------------------------------------------------------------------------


class TestDistanceFromBottom:
    """Rows between point and the window's bottom edge."""

    def test_point_near_bottom(self, frame: Frame) -> None:
        window = frame.selected_window()
        frame.goto(window, 45)
        resolver = GeometryResolver(frame)
        assert resolver.distance_from_bottom(_rect(resolver, window)) == 4

    def test_point_at_top(self, frame: Frame) -> None:
        window = frame.selected_window()
        resolver = GeometryResolver(frame)
        assert resolver.distance_from_bottom(_rect(resolver, window)) == 49

    def test_counts_wrapped_rows(self) -> None:
        frame = Frame(buffer=Buffer("wrap", ["x" * 200] * 20))
        window = frame.selected_window()
        frame.goto(window, 10)
        resolver = GeometryResolver(frame)
        # 10 lines of 3 rows each above point
        assert resolver.distance_from_bottom(_rect(resolver, window)) == 19

    def test_buffer_line_fallback(self) -> None:
        frame = Frame(buffer=Buffer("wrap", ["x" * 200] * 20))
        window = frame.selected_window()
        frame.goto(window, 10)
        resolver = GeometryResolver(_BufferLineHost(frame))
        assert resolver.distance_from_bottom(_rect(resolver, window)) == 39

    def test_tall_lines_are_converted_to_frame_rows(self, frame: Frame) -> None:
        window = frame.selected_window()
        window.line_pixel_height = 32
        frame.goto(window, 20)
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, window)
        assert resolver.pixel_ratio(rect) == 2.0
        # 25 lines fit; 4 lines below point are 8 frame rows
        assert resolver.distance_from_bottom(rect) == 8

    def test_dead_window_has_no_distance(self, frame: Frame) -> None:
        lower = frame.split_window()
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, lower)
        frame.delete_window(lower)
        assert resolver.distance_from_bottom(rect) is None


class TestUnitConversion:
    def test_rows_to_lines_nominal(self, frame: Frame) -> None:
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, frame.selected_window())
        assert resolver.rows_to_lines(rect, 9) == 9

    def test_rows_to_lines_tall_lines(self, frame: Frame) -> None:
        window = frame.selected_window()
        window.line_pixel_height = 32
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, window)
        assert resolver.rows_to_lines(rect, 10) == 5
        assert resolver.lines_to_rows(rect, 5) == 10

    def test_rows_to_lines_short_lines(self, frame: Frame) -> None:
        window = frame.selected_window()
        window.line_pixel_height = 8
        resolver = GeometryResolver(frame)
        rect = _rect(resolver, window)
        assert resolver.rows_to_lines(rect, 6) == 12
