"""Key events as seen by the state machine."""

from __future__ import annotations

from dataclasses import dataclass

CTRL = "CTRL"
_CTRL_PREFIX = "CTRL_"

ENTER = "ENTER"
ESC = "ESC"
BACKSPACE = "BACKSPACE"
TAB = "TAB"
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"


@dataclass(frozen=True)
class KeyEvent:
    """A plain key, or a key pressed with a modifier chord.

    Named keys use upper-case tokens (``ENTER``, ``UP``); characters are
    themselves. Chorded keys store the lower-case letter plus ``modifier``.
    """

    key: str
    modifier: str | None = None

    @classmethod
    def from_token(cls, token: str) -> KeyEvent:
        """Build an event from a ``read_key`` token such as ``"CTRL_N"``."""
        if token.startswith(_CTRL_PREFIX) and len(token) > len(_CTRL_PREFIX):
            return cls(token[len(_CTRL_PREFIX):].lower(), CTRL)
        return cls(token)

    @classmethod
    def ctrl(cls, key: str) -> KeyEvent:
        return cls(key.lower(), CTRL)

    @property
    def combo(self) -> str:
        """Registry lookup token: ``CTRL_N`` for chords, the key otherwise."""
        if self.modifier is None:
            return self.key
        return f"{self.modifier}_{self.key.upper()}"

    @property
    def is_chord(self) -> bool:
        return self.modifier is not None

    @property
    def is_printable(self) -> bool:
        return self.modifier is None and len(self.key) == 1 and self.key.isprintable()


__all__ = [
    "KeyEvent",
    "CTRL",
    "ENTER",
    "ESC",
    "BACKSPACE",
    "TAB",
    "UP",
    "DOWN",
    "LEFT",
    "RIGHT",
]
