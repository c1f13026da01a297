"""In-memory frame and window model.

``Frame`` implements the ``Host`` protocol without a display: windows are
rectangles of character rows over ``Buffer`` line lists, point and viewport
are tracked per window, soft-wrapped screen rows are counted with the
display-width helpers in :mod:`steady.minibuffer.text`, and the two blocking
prompt entry points ask a *responder* callable for their answer.

Displaying the minibuffer applies the native keep-point-visible behaviour:
any window touching the frame bottom whose point would end up under the
overlay is scrolled, and the scroll is recorded in ``Frame.scroll_events``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Literal, Sequence

from steady.minibuffer.host import (
    FrameError,
    PromptCancelled,
    PromptRegistry,
    WindowNotLiveError,
)
from steady.minibuffer.text import DEFAULT_TAB_WIDTH, column_row, screen_rows

if TYPE_CHECKING:
    from steady.minibuffer.height import HeightProvider

__all__ = [
    "Buffer",
    "Window",
    "WindowConfiguration",
    "Frame",
    "Responder",
    "SplitSide",
]

logger = logging.getLogger(__name__)

SplitSide = Literal["below", "right"]

# responder(frame, prompt, collection) -> answer
Responder = Callable[["Frame", str, Sequence[str]], str]

_DEFAULT_MINIBUFFER_LINES = 10


# ---------------------------------------------------------------------------
# Buffers and windows
# ---------------------------------------------------------------------------


@dataclass
class Buffer:
    name: str
    lines: list[str] = field(default_factory=lambda: [""])

    @classmethod
    def from_text(cls, name: str, text: str) -> Buffer:
        return cls(name, text.split("\n"))

    @classmethod
    def numbered(cls, name: str, count: int, width: int = 20) -> Buffer:
        """A buffer of *count* lines, each ``"line N"`` padded to *width*."""
        return cls(name, [f"line {i}".ljust(width) for i in range(count)])


class Window:
    """A viewport onto a buffer, owned by a ``Frame``."""

    def __init__(
        self,
        frame: Frame,
        buffer: Buffer,
        left: int,
        top: int,
        right: int,
        bottom: int,
        line_pixel_height: int | None = None,
    ) -> None:
        self.frame = frame
        self.buffer = buffer
        self.left = left
        self.top = top
        self.right = right
        self.bottom = bottom
        self.line_pixel_height = line_pixel_height or frame.char_height

        # Buffer line shown at the top of the viewport
        self.start = 0
        self.point_line = 0
        self.point_column = 0

        self.mark_active = False
        self.preserve_size = False
        self.live = True

    @property
    def height(self) -> int:
        return self.bottom - self.top

    @property
    def width(self) -> int:
        return self.right - self.left

    @property
    def edges(self) -> tuple[int, int, int, int]:
        return (self.left, self.top, self.right, self.bottom)

    def __repr__(self) -> str:
        state = "" if self.live else " dead"
        return (
            f"<Window {self.buffer.name} "
            f"rows {self.top}-{self.bottom - 1} cols {self.left}-{self.right - 1}{state}>"
        )


# ---------------------------------------------------------------------------
# Window configuration snapshots
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _WindowState:
    buffer: Buffer
    edges: tuple[int, int, int, int]
    start: int
    point_line: int
    point_column: int


@dataclass(frozen=True)
class WindowConfiguration:
    """Layout, viewport and point of every window, plus the selection.

    Size-preserve flags and mark state are not part of a configuration.
    """

    windows: tuple[tuple[Window, _WindowState], ...]
    selected: Window


# ---------------------------------------------------------------------------
# Frame
# ---------------------------------------------------------------------------


class Frame:
    """Rectangular display surface holding a tiling of windows.

    Parameters
    ----------
    rows:
        Frame height in character rows (the echo area is not included).
    columns:
        Frame width in character columns.
    char_height:
        Nominal character-cell height in pixels.
    buffer:
        Buffer shown in the initial window.
    responder:
        Supplies answers for the blocking prompt entry points.  With no
        responder every prompt is cancelled.
    """

    def __init__(
        self,
        rows: int = 50,
        columns: int = 80,
        char_height: int = 16,
        buffer: Buffer | None = None,
        responder: Responder | None = None,
    ) -> None:
        self.rows = rows
        self.columns = columns
        self.char_height = char_height
        self.responder = responder
        self.tab_width = DEFAULT_TAB_WIDTH

        # Lines the minibuffer overlay occupies while a prompt is active
        self.minibuffer_lines = _DEFAULT_MINIBUFFER_LINES

        root = Window(self, buffer or Buffer("*scratch*"), 0, 0, columns, rows)
        self._windows: list[Window] = [root]
        self._selected: Window = root
        self._minibuffer_depth = 0

        self.prompts = PromptRegistry()
        self.scroll_events: list[Window] = []

    # ------------------------------------------------------------------
    # Frame metrics
    # ------------------------------------------------------------------

    def frame_height(self) -> int:
        return self.rows

    def frame_char_height(self) -> int:
        return self.char_height

    def minibuffer_depth(self) -> int:
        return self._minibuffer_depth

    # ------------------------------------------------------------------
    # Window enumeration and geometry
    # ------------------------------------------------------------------

    def _live(self, window: Window) -> Window:
        if not window.live or window.frame is not self:
            raise WindowNotLiveError(f"{window!r} is not a live window")
        return window

    def window_list(self) -> list[Window]:
        """Live windows, top to bottom then left to right."""
        return sorted(self._windows, key=lambda w: (w.top, w.left))

    def window_edges(self, window: Window) -> tuple[int, int, int, int]:
        return self._live(window).edges

    def line_pixel_height(self, window: Window) -> int:
        return self._live(window).line_pixel_height

    def window_start(self, window: Window) -> int:
        return self._live(window).start

    def window_point(self, window: Window) -> tuple[int, int]:
        self._live(window)
        return (window.point_line, window.point_column)

    def current_column(self, window: Window) -> int:
        return self._live(window).point_column

    def selected_window(self) -> Window:
        return self._selected

    def select_window(self, window: Window) -> None:
        self._selected = self._live(window)

    def window_at_row(self, row: int, column: int = 0) -> Window | None:
        """The live window covering frame position (*row*, *column*)."""
        for window in self._windows:
            if window.top <= row < window.bottom and window.left <= column < window.right:
                return window
        return None

    # ------------------------------------------------------------------
    # Layout changes
    # ------------------------------------------------------------------

    def split_window(
        self,
        window: Window | None = None,
        size: int | None = None,
        side: SplitSide = "below",
    ) -> Window:
        """Split *window*, returning the new window below or to its right.

        *size* is the number of rows (or columns) the original window keeps;
        by default it keeps the larger half.
        """
        window = self._live(window or self._selected)
        total = window.height if side == "below" else window.width
        keep = size if size is not None else total - total // 2
        if keep < 1 or total - keep < 1:
            raise FrameError(f"{window!r} is too small for splitting")

        if side == "below":
            new = Window(
                self, window.buffer,
                window.left, window.top + keep, window.right, window.bottom,
                window.line_pixel_height,
            )
            window.bottom = window.top + keep
        else:
            new = Window(
                self, window.buffer,
                window.left + keep, window.top, window.right, window.bottom,
                window.line_pixel_height,
            )
            window.right = window.left + keep

        new.start = window.start
        new.point_line = window.point_line
        new.point_column = window.point_column
        self._windows.insert(self._windows.index(window) + 1, new)
        self._keep_point_visible(window)
        self._keep_point_visible(new)
        return new

    def delete_window(self, window: Window) -> None:
        """Delete *window*, giving its area to the windows on one full side."""
        self._live(window)
        if len(self._windows) == 1:
            raise FrameError("Attempt to delete the sole window")

        side, group = self._absorbers(window)
        if not group:
            raise FrameError(f"No sibling can take the space of {window!r}")

        for other in group:
            if side == "above":
                other.bottom = window.bottom
            elif side == "below":
                other.top = window.top
            elif side == "left":
                other.right = window.right
            else:
                other.left = window.left

        self._windows.remove(window)
        window.live = False
        if self._selected is window:
            self._selected = group[0]
        logger.debug("Deleted %r (space given %s)", window, side)

    def _absorbers(self, window: Window) -> tuple[str | None, list[Window]]:
        others = [w for w in self._windows if w is not window]
        for side in ("above", "below", "left", "right"):
            group = [o for o in others if _abuts(o, window, side)]
            if not group:
                continue
            if side in ("above", "below"):
                covered = sum(o.width for o in group)
                if covered == window.width:
                    return side, group
            else:
                covered = sum(o.height for o in group)
                if covered == window.height:
                    return side, group
        return None, []

    # ------------------------------------------------------------------
    # Point, viewport and screen rows
    # ------------------------------------------------------------------

    def _body_lines(self, window: Window) -> int:
        ratio = window.line_pixel_height / self.char_height
        return max(1, int(window.height / ratio))

    def count_screen_lines(self, window: Window) -> int:
        """Screen rows from the window start to the row holding point."""
        self._live(window)
        lines = window.buffer.lines
        rows = 0
        for i in range(window.start, window.point_line):
            rows += screen_rows(lines[i], window.width, self.tab_width)
        rows += column_row(
            lines[window.point_line], window.point_column, window.width, self.tab_width
        )
        return rows

    def _keep_point_visible(self, window: Window) -> None:
        if window.point_line < window.start:
            window.start = window.point_line
            return
        body = self._body_lines(window)
        while window.start < window.point_line and self.count_screen_lines(window) >= body:
            window.start += 1

    def goto(self, window: Window, line: int, column: int = 0) -> None:
        """Move point in *window* to buffer position (*line*, *column*)."""
        self._live(window)
        lines = window.buffer.lines
        window.point_line = max(0, min(line, len(lines) - 1))
        window.point_column = max(0, min(column, len(lines[window.point_line])))
        self._keep_point_visible(window)

    def set_window_start(self, window: Window, line: int) -> None:
        self._live(window)
        window.start = max(0, min(line, len(window.buffer.lines) - 1))

    def forward_line(self, window: Window, n: int) -> None:
        """Move point *n* buffer lines (negative moves up) to line start."""
        self._live(window)
        self.goto(window, window.point_line + n, 0)

    def move_to_column(self, window: Window, column: int) -> None:
        self._live(window)
        line = window.buffer.lines[window.point_line]
        window.point_column = max(0, min(column, len(line)))

    def set_mark(self, window: Window) -> None:
        self._live(window).mark_active = True

    def deactivate_selection(self, window: Window) -> None:
        self._live(window).mark_active = False

    # ------------------------------------------------------------------
    # Size locks
    # ------------------------------------------------------------------

    def set_window_preserve_size(self, window: Window, preserve: bool) -> None:
        self._live(window).preserve_size = preserve

    def window_preserve_size(self, window: Window) -> bool:
        return self._live(window).preserve_size

    # ------------------------------------------------------------------
    # Window configurations
    # ------------------------------------------------------------------

    def save_window_configuration(self) -> WindowConfiguration:
        states = tuple(
            (
                w,
                _WindowState(w.buffer, w.edges, w.start, w.point_line, w.point_column),
            )
            for w in self._windows
        )
        return WindowConfiguration(windows=states, selected=self._selected)

    def restore_window_configuration(self, configuration: WindowConfiguration) -> None:
        windows: list[Window] = []
        for window, state in configuration.windows:
            window.buffer = state.buffer
            window.left, window.top, window.right, window.bottom = state.edges
            window.start = state.start
            window.point_line = state.point_line
            window.point_column = state.point_column
            window.live = True
            windows.append(window)

        for window in self._windows:
            if all(window is not w for w in windows):
                window.live = False

        self._windows = windows
        self._selected = configuration.selected

    # ------------------------------------------------------------------
    # Blocking prompts
    # ------------------------------------------------------------------

    def completing_read(self, prompt: str, collection: Sequence[str] = ()) -> str:
        """Read one string in the minibuffer."""
        return self.prompts.call("completing_read", self._read, prompt, collection)

    def completing_read_multiple(
        self, prompt: str, collection: Sequence[str] = ()
    ) -> list[str]:
        """Read a comma-separated list of strings in the minibuffer."""
        return self.prompts.call(
            "completing_read_multiple", self._read_multiple, prompt, collection
        )

    def _read(self, prompt: str, collection: Sequence[str]) -> str:
        self._minibuffer_depth += 1
        try:
            self._display_minibuffer()
            if self.responder is None:
                raise PromptCancelled(prompt)
            return self.responder(self, prompt, list(collection))
        finally:
            self._minibuffer_depth -= 1

    def _read_multiple(self, prompt: str, collection: Sequence[str]) -> list[str]:
        answer = self._read(prompt, collection)
        return [item.strip() for item in answer.split(",") if item.strip()]

    def _distance_to_bottom(self, window: Window) -> int:
        ratio = window.line_pixel_height / self.char_height
        lines = self._body_lines(window) - 1 - self.count_screen_lines(window)
        return round(lines * ratio)

    def _display_minibuffer(self) -> None:
        # The overlay reclaims the echo row and the bottom window's mode
        # line, so it hides the last ``minibuffer_lines - 2`` rows of text.
        hidden = self.minibuffer_lines - 2
        for window in self.window_list():
            if window.bottom != self.rows:
                continue
            distance = self._distance_to_bottom(window)
            if distance >= hidden:
                continue
            ratio = window.line_pixel_height / self.char_height
            shift = math.ceil((hidden - distance) / ratio)
            window.start = min(window.start + shift, window.point_line)
            self.scroll_events.append(window)
            logger.debug("Scrolled %r by %d lines to keep point visible", window, shift)

    def height_provider(self) -> HeightProvider:
        """Height provider reporting this frame's minibuffer size."""
        from steady.minibuffer.height import HeightProvider

        return HeightProvider(
            name="frame",
            is_active=lambda: True,
            get_height=lambda: self.minibuffer_lines,
        )


def _abuts(other: Window, window: Window, side: str) -> bool:
    """True if *other* lies on *side* of *window* within its span."""
    if side == "above":
        return other.bottom == window.top and window.left <= other.left and other.right <= window.right
    if side == "below":
        return other.top == window.bottom and window.left <= other.left and other.right <= window.right
    if side == "left":
        return other.right == window.left and window.top <= other.top and other.bottom <= window.bottom
    return other.left == window.right and window.top <= other.top and other.bottom <= window.bottom
