"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into key tokens: characters,
named keys (``UP``, ``ENTER``, ``ESC``) and control chords (``CTRL_N``).
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []

_NAMED_CONTROL_BYTES: dict[bytes, str] = {
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"2": "INSERT",
    b"3": "DELETE",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}


def _read_ready_byte(fd: int, timeout_ms: int) -> bytes | None:
    ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
    if not ready:
        return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_text(fd: int, first: bytes) -> str:
    raw = first
    for _ in range(_utf8_length(first[0]) - 1):
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            break
        raw += nxt
    return raw.decode("utf-8", errors="replace")


def _decode_escape(fd: int) -> str:
    seq = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return "ESC"
    if seq not in {b"[", b"O"}:
        # Lone ESC followed by a regular key; keep that key for the next read.
        _PENDING_BYTES.append(seq)
        return "ESC"
    params = b""
    while True:
        nxt = _read_ready_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if nxt is None:
            if not params:
                # ESC then a bare "[" or "O": hand the second key back.
                _PENDING_BYTES.append(seq)
                return "ESC"
            return "UNKNOWN"
        if 0x40 <= nxt[0] <= 0x7E:
            break
        params += nxt
    # Unmapped sequences are consumed whole and reported as UNKNOWN.
    if not params and nxt in _CSI_FINAL_KEYS:
        return _CSI_FINAL_KEYS[nxt]
    if nxt == b"~":
        return _TILDE_KEYS.get(params, "UNKNOWN")
    return "UNKNOWN"


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Return the next key token, or ``""`` when nothing arrived in time."""
    if _PENDING_BYTES:
        ch = _PENDING_BYTES.pop(0)
    else:
        if timeout_ms is not None:
            ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return ""
        ch = os.read(fd, 1)
        if not ch:
            return ""

    named = _NAMED_CONTROL_BYTES.get(ch)
    if named is not None:
        return named
    if ch == b"\x1b":
        return _decode_escape(fd)

    code = ch[0]
    if 1 <= code <= 26:
        return f"CTRL_{chr(code + 64)}"
    if code < 32:
        return "UNKNOWN"
    return _decode_text(fd, ch)


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "read_key"]
