"""Host interface consumed by the stabilizer.

Provides the ``Host`` protocol (window enumeration, geometry, point and
viewport queries, layout mutation, configuration snapshots), the host error
types, and ``PromptRegistry``, the interception point for the two blocking
prompt entry points.
"""

from __future__ import annotations

import functools
from typing import Any, Callable, Protocol

__all__ = [
    "FrameError",
    "WindowNotLiveError",
    "PromptCancelled",
    "Host",
    "PromptFn",
    "PromptWrapper",
    "PROMPT_ENTRY_POINTS",
    "PromptRegistry",
]

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class FrameError(Exception):
    """A layout operation the host refuses, e.g. deleting the sole window."""


class WindowNotLiveError(FrameError):
    """The window has been deleted and no longer has geometry."""


class PromptCancelled(Exception):
    """The user quit out of a blocking prompt."""


# ---------------------------------------------------------------------------
# Host protocol
# ---------------------------------------------------------------------------


class Host(Protocol):
    """Window/frame query and mutation surface.

    Edges are frame-relative character rows and columns; ``bottom`` and
    ``right`` are exclusive.  Point is a ``(line, column)`` pair in buffer
    coordinates.

    ``count_screen_lines(window) -> int`` is optional and therefore not
    declared here.  When present it returns the rendered screen rows between
    the window start and the row holding point; callers check for it with
    ``getattr`` and fall back to counting buffer lines.
    """

    # Frame metrics

    def frame_height(self) -> int: ...

    def frame_char_height(self) -> int: ...

    def minibuffer_depth(self) -> int: ...

    # Windows

    def window_list(self) -> list[Any]: ...

    def window_edges(self, window: Any) -> tuple[int, int, int, int]: ...

    def line_pixel_height(self, window: Any) -> int: ...

    def window_start(self, window: Any) -> int: ...

    def window_point(self, window: Any) -> tuple[int, int]: ...

    def current_column(self, window: Any) -> int: ...

    def selected_window(self) -> Any: ...

    def select_window(self, window: Any) -> None: ...

    def delete_window(self, window: Any) -> None: ...

    # Point and selection

    def forward_line(self, window: Any, n: int) -> None: ...

    def move_to_column(self, window: Any, column: int) -> None: ...

    def deactivate_selection(self, window: Any) -> None: ...

    # Size locks

    def set_window_preserve_size(self, window: Any, preserve: bool) -> None: ...

    def window_preserve_size(self, window: Any) -> bool: ...

    # Configuration snapshots (do not cover size locks)

    def save_window_configuration(self) -> Any: ...

    def restore_window_configuration(self, configuration: Any) -> None: ...


# ---------------------------------------------------------------------------
# Prompt interception
# ---------------------------------------------------------------------------

PromptFn = Callable[..., Any]

# wrapper(prompt_fn, *args, **kwargs) -> result
PromptWrapper = Callable[..., Any]

PROMPT_ENTRY_POINTS: tuple[str, ...] = (
    "completing_read",
    "completing_read_multiple",
)


class PromptRegistry:
    """Around-wrappers installed on the host's blocking prompt entry points.

    Wrappers are applied innermost-first in installation order, so the most
    recently added wrapper sees the call first.
    """

    def __init__(self, entry_points: tuple[str, ...] = PROMPT_ENTRY_POINTS) -> None:
        self._wrappers: dict[str, list[PromptWrapper]] = {
            name: [] for name in entry_points
        }

    @property
    def entry_points(self) -> tuple[str, ...]:
        return tuple(self._wrappers)

    def add_wrapper(self, entry: str, wrapper: PromptWrapper) -> None:
        """Install *wrapper* on *entry*.  Adding it twice is a no-op."""
        wrappers = self._wrappers[entry]
        if wrapper not in wrappers:
            wrappers.append(wrapper)

    def remove_wrapper(self, entry: str, wrapper: PromptWrapper) -> None:
        """Remove *wrapper* from *entry* (no-op if absent)."""
        try:
            self._wrappers[entry].remove(wrapper)
        except ValueError:
            pass

    def has_wrapper(self, entry: str, wrapper: PromptWrapper) -> bool:
        return wrapper in self._wrappers[entry]

    def call(self, entry: str, primitive: PromptFn, *args: Any, **kwargs: Any) -> Any:
        """Invoke *primitive* for *entry* through every installed wrapper."""
        fn = primitive
        for wrapper in self._wrappers[entry]:
            fn = functools.partial(wrapper, fn)
        return fn(*args, **kwargs)
