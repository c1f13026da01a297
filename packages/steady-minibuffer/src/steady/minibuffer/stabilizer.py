"""Stabilizer: keeps the layout still while a minibuffer prompt is open.

Around every blocking prompt the stabilizer

1. works out how tall the overlay will be,
2. snapshots the window configuration,
3. deletes windows the overlay would cover entirely,
4. moves point up in bottom windows so the host never auto-scrolls them,
5. locks the size of every window that has a window below it,
6. runs the prompt,
7. releases the locks and restores the snapshot, on every exit path.

Nested prompts and overlays taller than the frame pass straight through.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Any, Callable, Iterator, Sequence, Union

from steady.minibuffer.geometry import GeometryResolver, WindowRect
from steady.minibuffer.height import (
    HeightProviderRegistry,
    get_height_providers,
    resolve_minibuffer_height,
)
from steady.minibuffer.host import FrameError, Host, PromptFn, WindowNotLiveError
from steady.minibuffer.settings import StabilizerSettings, load_settings

__all__ = ["SAFETY_MARGIN", "Stabilizer"]

logger = logging.getLogger(__name__)

# Rows of the overlay that hide no text (echo row and mode line)
SAFETY_MARGIN = 2

SettingsSource = Union[StabilizerSettings, Callable[[], StabilizerSettings]]


class Stabilizer:
    """Wraps prompt calls with the prune/relocate/lock bracket.

    Parameters
    ----------
    host:
        The window system to stabilize.
    settings:
        A ``StabilizerSettings`` instance or a zero-argument loader called
        on every invocation.  Defaults to :func:`load_settings`.
    height_providers:
        Registry used to infer the overlay height.  Defaults to the
        process-wide registry.
    """

    def __init__(
        self,
        host: Host,
        settings: SettingsSource | None = None,
        height_providers: HeightProviderRegistry | None = None,
    ) -> None:
        self.host = host
        self._settings = settings if settings is not None else load_settings
        self._height_providers = height_providers

    def read_settings(self) -> StabilizerSettings:
        if callable(self._settings):
            return self._settings()
        return self._settings

    def overlay_height(self, settings: StabilizerSettings) -> int:
        registry = self._height_providers or get_height_providers()
        return resolve_minibuffer_height(settings, registry)

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def invoke(self, prompt_fn: PromptFn, *args: Any, **kwargs: Any) -> Any:
        """Call ``prompt_fn(*args, **kwargs)`` inside the stabilization bracket.

        Returns its result or propagates its exception unchanged.
        """
        settings = self.read_settings()
        height = self.overlay_height(settings)
        resolver = GeometryResolver(self.host)

        if self.host.minibuffer_depth() > 0:
            logger.debug("Nested prompt; not stabilizing")
            return prompt_fn(*args, **kwargs)
        if not resolver.can_accommodate(height):
            logger.debug(
                "Overlay of %d rows exceeds frame height %d; not stabilizing",
                height, resolver.metrics.height,
            )
            return prompt_fn(*args, **kwargs)

        configuration = self.host.save_window_configuration()
        try:
            self._prune(resolver, height)
            rects = resolver.visible_rects()
            self._relocate_points(resolver, rects, height, settings.point_offset)
            with self._size_locks(resolver, rects):
                return prompt_fn(*args, **kwargs)
        finally:
            self.host.restore_window_configuration(configuration)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _prune(self, resolver: GeometryResolver, height: int) -> None:
        """Delete windows that would sit wholly under the overlay."""
        for rect in resolver.visible_rects():
            if not resolver.affected_by_height(rect, height, edge="top"):
                continue
            try:
                self.host.delete_window(rect.window)
            except FrameError as e:
                logger.debug("Could not delete %r: %s", rect.window, e)

    def _relocate_points(
        self,
        resolver: GeometryResolver,
        rects: Sequence[WindowRect],
        height: int,
        point_offset: int,
    ) -> None:
        """Move point up in bottom windows whose point the overlay would hide."""
        selected = self.host.selected_window()
        for rect in rects:
            if resolver.has_southern_neighbor(rect, rects):
                continue
            try:
                self._relocate_point(resolver, rect, height, point_offset)
            except WindowNotLiveError:
                logger.debug("Skipping %r: window is gone", rect.window)
        try:
            self.host.select_window(selected)
        except WindowNotLiveError:
            # Pruned; the restored configuration reselects it.
            pass

    def _relocate_point(
        self,
        resolver: GeometryResolver,
        rect: WindowRect,
        height: int,
        point_offset: int,
    ) -> bool:
        window = rect.window
        self.host.select_window(window)
        distance = resolver.distance_from_bottom(rect)
        if distance is None or distance >= height - SAFETY_MARGIN:
            return False

        column = self.host.current_column(window)
        self.host.deactivate_selection(window)
        rows = (height - distance) + point_offset
        lines = resolver.rows_to_lines(rect, rows)
        self.host.forward_line(window, -lines)
        self.host.move_to_column(window, column)
        logger.debug(
            "Moved point in %r up %d lines (distance %d, overlay %d)",
            window, lines, distance, height,
        )
        return True

    @contextlib.contextmanager
    def _size_locks(
        self,
        resolver: GeometryResolver,
        rects: Sequence[WindowRect],
    ) -> Iterator[list[Any]]:
        """Preserve the size of every window with a southern neighbor.

        Restoring a window configuration leaves these flags behind, so they
        are cleared here on every exit path.  Windows the user had already
        locked are left alone.
        """
        locked: list[Any] = []
        try:
            for rect in rects:
                if not resolver.has_southern_neighbor(rect, rects):
                    continue
                if self.host.window_preserve_size(rect.window):
                    continue
                self.host.set_window_preserve_size(rect.window, True)
                locked.append(rect.window)
            yield locked
        finally:
            for window in locked:
                self.host.set_window_preserve_size(window, False)
