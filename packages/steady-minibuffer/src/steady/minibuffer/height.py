"""Minibuffer height inference.

Completion front-ends decide how tall the minibuffer grows.  Each one is
described by a ``HeightProvider``; the registry asks them in priority order
and the first active provider that reports a height wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from steady.minibuffer.settings import StabilizerSettings

logger = logging.getLogger(__name__)

DEFAULT_MINIBUFFER_HEIGHT = 10


@dataclass
class HeightProvider:
    name: str
    is_active: Callable[[], bool]
    get_height: Callable[[], int | None]


class HeightProviderRegistry:
    """Prioritized list of height providers; earlier entries win."""

    def __init__(self, providers: list[HeightProvider] | None = None) -> None:
        self._providers: list[HeightProvider] = []
        for provider in providers or []:
            self.register(provider)

    @property
    def providers(self) -> list[HeightProvider]:
        return list(self._providers)

    def register(self, provider: HeightProvider, index: int | None = None) -> None:
        """Add *provider* at *index* (default: lowest priority).

        A provider with the same name is replaced.
        """
        self.unregister(provider.name)
        if index is None:
            self._providers.append(provider)
        else:
            self._providers.insert(index, provider)

    def unregister(self, name: str) -> None:
        self._providers = [p for p in self._providers if p.name != name]

    def clear(self) -> None:
        self._providers.clear()

    def infer(self) -> int | None:
        """Height reported by the first active provider, or None."""
        for provider in self._providers:
            try:
                if not provider.is_active():
                    continue
                height = provider.get_height()
            except Exception:
                logger.exception("Height provider %r failed", provider.name)
                continue
            if height is not None:
                return height
        return None


def resolve_minibuffer_height(
    settings: StabilizerSettings,
    registry: HeightProviderRegistry | None = None,
) -> int:
    """Explicit override, else the inferred height, else the default."""
    if settings.minibuffer_height is not None:
        return settings.minibuffer_height
    if registry is not None:
        inferred = registry.infer()
        if inferred is not None:
            return inferred
    return DEFAULT_MINIBUFFER_HEIGHT


_global_height_providers: HeightProviderRegistry | None = None


def get_height_providers() -> HeightProviderRegistry:
    global _global_height_providers
    if _global_height_providers is None:
        _global_height_providers = HeightProviderRegistry()
    return _global_height_providers


def set_height_providers(registry: HeightProviderRegistry) -> None:
    global _global_height_providers
    _global_height_providers = registry
