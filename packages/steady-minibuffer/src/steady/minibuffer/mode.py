"""Install the stabilizer around the host's blocking prompt entry points."""

from __future__ import annotations

from typing import Any

from steady.minibuffer.host import Host, PromptFn, PromptRegistry
from steady.minibuffer.stabilizer import Stabilizer


class StabilizerMode:
    """Toggles the stabilizer wrapper on every prompt entry point.

    ``install`` and ``uninstall`` are idempotent.
    """

    def __init__(
        self,
        host: Host,
        stabilizer: Stabilizer | None = None,
        registry: PromptRegistry | None = None,
    ) -> None:
        self.host = host
        self.stabilizer = stabilizer or Stabilizer(host)
        if registry is None:
            registry = getattr(host, "prompts", None)
        if registry is None:
            raise ValueError("host exposes no prompt registry; pass one explicitly")
        self.registry: PromptRegistry = registry

    def _wrap(self, prompt_fn: PromptFn, *args: Any, **kwargs: Any) -> Any:
        return self.stabilizer.invoke(prompt_fn, *args, **kwargs)

    @property
    def enabled(self) -> bool:
        return all(
            self.registry.has_wrapper(entry, self._wrap)
            for entry in self.registry.entry_points
        )

    def install(self) -> None:
        for entry in self.registry.entry_points:
            self.registry.add_wrapper(entry, self._wrap)

    def uninstall(self) -> None:
        for entry in self.registry.entry_points:
            self.registry.remove_wrapper(entry, self._wrap)
