"""Input-layer public API: raw key decoding and key-event dispatch tables."""

from .events import KeyEvent
from .key_registry import KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyEvent",
    "KeyComboBinding",
    "KeyComboRegistry",
]
