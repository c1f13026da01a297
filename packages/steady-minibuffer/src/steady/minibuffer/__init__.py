"""steady-minibuffer: keep the window layout still while a minibuffer prompt is open."""

# Reference in-memory host
from steady.minibuffer.frame import Buffer, Frame, Window, WindowConfiguration

# Geometry
from steady.minibuffer.geometry import FrameMetrics, GeometryResolver, WindowRect

# Overlay height inference
from steady.minibuffer.height import (
    DEFAULT_MINIBUFFER_HEIGHT,
    HeightProvider,
    HeightProviderRegistry,
    get_height_providers,
    resolve_minibuffer_height,
    set_height_providers,
)

# Host interface
from steady.minibuffer.host import (
    PROMPT_ENTRY_POINTS,
    FrameError,
    Host,
    PromptCancelled,
    PromptRegistry,
    WindowNotLiveError,
)

# Mode toggle
from steady.minibuffer.mode import StabilizerMode

# Settings
from steady.minibuffer.settings import (
    DEFAULT_POINT_OFFSET,
    StabilizerSettings,
    load_settings,
    save_settings,
)

# Stabilizer
from steady.minibuffer.stabilizer import SAFETY_MARGIN, Stabilizer

# Text utilities
from steady.minibuffer.text import column_row, screen_rows, visible_width

__all__ = [
    # Frame
    "Buffer",
    "Frame",
    "Window",
    "WindowConfiguration",
    # Geometry
    "FrameMetrics",
    "GeometryResolver",
    "WindowRect",
    # Height
    "DEFAULT_MINIBUFFER_HEIGHT",
    "HeightProvider",
    "HeightProviderRegistry",
    "get_height_providers",
    "resolve_minibuffer_height",
    "set_height_providers",
    # Host
    "PROMPT_ENTRY_POINTS",
    "FrameError",
    "Host",
    "PromptCancelled",
    "PromptRegistry",
    "WindowNotLiveError",
    # Mode
    "StabilizerMode",
    # Settings
    "DEFAULT_POINT_OFFSET",
    "StabilizerSettings",
    "load_settings",
    "save_settings",
    # Stabilizer
    "SAFETY_MARGIN",
    "Stabilizer",
    # Text
    "column_row",
    "screen_rows",
    "visible_width",
]
