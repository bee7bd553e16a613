"""Per-state key transition tables."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .events import KeyEvent

KeyHandler = Callable[[KeyEvent], bool | None]


@dataclass(frozen=True)
class KeyComboBinding:
    """One action bound to one or more combo tokens (``"j"``, ``"CTRL_N"``)."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Exact-match table from combo tokens to handlers.

    ``fallback`` receives every event with no explicit binding, so each table
    decides on its own what unknown keys mean.
    """

    def __init__(self, fallback: KeyHandler | None = None) -> None:
        self._handlers: dict[str, KeyHandler] = {}
        self._fallback = fallback

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def combos(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def handles(self, event: KeyEvent) -> bool:
        return event.combo in self._handlers

    def dispatch(self, event: KeyEvent) -> bool | None:
        """Run the handler bound to ``event``; ``None`` when nothing ran."""
        handler = self._handlers.get(event.combo)
        if handler is None:
            handler = self._fallback
        if handler is None:
            return None
        return handler(event)


__all__ = ["KeyHandler", "KeyComboBinding", "KeyComboRegistry"]
