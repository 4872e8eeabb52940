"""
Power registry - Maps cards to their power plugins.

A power plugin is called as `plugin(game, action, done)`:
- `game` is the Game aggregate (board, stack, messaging helpers)
- `action` is the POWER stack entry (source and target sides)
- `done` must be called exactly once when the plugin has finished

Plugins mutate the game directly and may push further stack entries.
"""

from __future__ import annotations
from typing import Any, Callable, Iterator


PowerResolver = Callable[[Any, Any, Callable[[], None]], None]


class PowerRegistry:
    """Registry of power plugins keyed by (tribe, slug)."""

    def __init__(self):
        self._resolvers: dict[tuple[str, str], PowerResolver] = {}

    def register(self, tribe: str, slug: str) -> Callable[[PowerResolver], PowerResolver]:
        """Decorator registering a plugin for a card."""
        def decorator(resolver: PowerResolver) -> PowerResolver:
            key = (tribe, slug)
            if key in self._resolvers:
                raise ValueError(f"Power already registered for {tribe}/{slug}")
            self._resolvers[key] = resolver
            return resolver
        return decorator

    def get(self, tribe: str, slug: str) -> PowerResolver | None:
        return self._resolvers.get((tribe, slug))

    def merge(self, other: PowerRegistry) -> PowerRegistry:
        """Return a registry holding the plugins of both."""
        merged = PowerRegistry()
        merged._resolvers = {**self._resolvers, **other._resolvers}
        return merged

    def __contains__(self, key: tuple[str, str]) -> bool:
        return key in self._resolvers

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._resolvers)

    def __len__(self) -> int:
        return len(self._resolvers)
