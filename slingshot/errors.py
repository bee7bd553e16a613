"""Error taxonomy for controller-level failures.

Every error wraps the ``OSError`` (or similar) that caused it and renders a
short message suitable for the status row. Controllers convert these into
``status_message`` text; none of them is meant to terminate the session.
"""

from __future__ import annotations


class SlingshotError(Exception):
    """Base class for recoverable browser errors."""


class FilesystemError(SlingshotError):
    """Directory unreadable or file create/remove/open failure."""


class PathError(SlingshotError):
    """Navigation target cannot be entered."""


class ProcessLaunchError(SlingshotError):
    """Editor or shell command could not be started."""


def describe_os_error(exc: BaseException) -> str:
    """Return ``strerror: filename`` style text for OS errors, ``str`` otherwise."""
    if isinstance(exc, OSError) and exc.strerror:
        if exc.filename is not None:
            return f"{exc.strerror}: {exc.filename}"
        return exc.strerror
    return str(exc)


__all__ = [
    "SlingshotError",
    "FilesystemError",
    "PathError",
    "ProcessLaunchError",
    "describe_os_error",
]
