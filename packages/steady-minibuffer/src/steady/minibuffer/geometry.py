"""Geometry resolver: which windows an incoming minibuffer overlay obscures.

Pure queries against a ``Host``; nothing here mutates the layout.

All distances are in frame rows.  A window whose text uses a line height
different from the frame's character cell (larger fonts, images) counts its
own screen lines; those counts are converted to frame rows by multiplying by
``line_pixel_height / char_height`` and converted back by dividing, rounding
to the nearest whole row or line each time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Sequence

from steady.minibuffer.host import Host, WindowNotLiveError

__all__ = [
    "FrameMetrics",
    "WindowRect",
    "GeometryResolver",
]

logger = logging.getLogger(__name__)

Edge = Literal["top", "bottom"]


@dataclass(frozen=True)
class FrameMetrics:
    height: int
    char_height: int

    @classmethod
    def from_host(cls, host: Host) -> FrameMetrics:
        return cls(height=host.frame_height(), char_height=host.frame_char_height())


@dataclass(frozen=True)
class WindowRect:
    """A window's edges in frame rows/columns (bottom and right exclusive)."""

    window: Any
    left: int
    top: int
    right: int
    bottom: int
    line_pixel_height: int

    @property
    def rows(self) -> int:
        return self.bottom - self.top


class GeometryResolver:
    """Resolves window rectangles and overlay overlap for one invocation.

    Frame metrics are read once at construction; build a new resolver for
    every prompt so they are never reused across invocations.
    """

    def __init__(self, host: Host) -> None:
        self.host = host
        self.metrics = FrameMetrics.from_host(host)

    # ------------------------------------------------------------------
    # Overlay extent
    # ------------------------------------------------------------------

    def can_accommodate(self, overlay_height: int) -> bool:
        """False when the overlay is taller than the frame."""
        return overlay_height <= self.metrics.height

    def threshold(self, overlay_height: int) -> int:
        """Last row still clear of an overlay of *overlay_height* rows."""
        return self.metrics.height - overlay_height - 1

    # ------------------------------------------------------------------
    # Rectangles
    # ------------------------------------------------------------------

    def window_rect(self, window: Any) -> WindowRect | None:
        """Rectangle of *window*, or ``None`` if it is no longer visible."""
        try:
            left, top, right, bottom = self.host.window_edges(window)
            pixel_height = self.host.line_pixel_height(window)
        except WindowNotLiveError:
            logger.debug("Skipping %r: window is gone", window)
            return None
        return WindowRect(window, left, top, right, bottom, pixel_height)

    def visible_rects(self) -> list[WindowRect]:
        rects = []
        for window in self.host.window_list():
            rect = self.window_rect(window)
            if rect is not None:
                rects.append(rect)
        return rects

    def affected_by_height(
        self,
        rect: WindowRect,
        overlay_height: int,
        edge: Edge = "bottom",
    ) -> bool:
        """True if the overlay reaches *rect*'s *edge*.

        With ``edge="bottom"`` the overlay covers the window's last row or
        comes closer; with ``edge="top"`` the window is wholly under it.
        """
        if not self.can_accommodate(overlay_height):
            return False
        row = rect.bottom if edge == "bottom" else rect.top
        return row >= self.threshold(overlay_height)

    def affected_windows(self, overlay_height: int) -> list[WindowRect]:
        if not self.can_accommodate(overlay_height):
            return []
        return [
            rect for rect in self.visible_rects()
            if self.affected_by_height(rect, overlay_height)
        ]

    @staticmethod
    def has_southern_neighbor(rect: WindowRect, rects: Sequence[WindowRect]) -> bool:
        """True if another window starts on the row below *rect* and overlaps it horizontally."""
        for other in rects:
            if other.window is rect.window:
                continue
            if other.top == rect.bottom and other.left < rect.right and rect.left < other.right:
                return True
        return False

    # ------------------------------------------------------------------
    # Unit conversion
    # ------------------------------------------------------------------

    def pixel_ratio(self, rect: WindowRect) -> float:
        return rect.line_pixel_height / self.metrics.char_height

    def rows_to_lines(self, rect: WindowRect, rows: int) -> int:
        """Number of the window's screen lines spanning *rows* frame rows."""
        return round(rows / self.pixel_ratio(rect))

    def lines_to_rows(self, rect: WindowRect, lines: int) -> int:
        return round(lines * self.pixel_ratio(rect))

    # ------------------------------------------------------------------
    # Point distance
    # ------------------------------------------------------------------

    def _cursor_line(self, window: Any) -> int:
        count_screen_lines = getattr(self.host, "count_screen_lines", None)
        if count_screen_lines is not None:
            return count_screen_lines(window)
        # Buffer-line fallback; undercounts when lines soft-wrap.
        line, _column = self.host.window_point(window)
        return line - self.host.window_start(window)

    def distance_from_bottom(self, rect: WindowRect) -> int | None:
        """Frame rows between the row holding point and the window's bottom edge.

        Returns ``None`` when the window has gone away.
        """
        ratio = self.pixel_ratio(rect)
        body_lines = max(1, int(rect.rows / ratio))
        try:
            cursor = self._cursor_line(rect.window)
        except WindowNotLiveError:
            logger.debug("Skipping %r: window is gone", rect.window)
            return None
        return self.lines_to_rows(rect, body_lines - 1 - cursor)
