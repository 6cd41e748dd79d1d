from __future__ import annotations

import errno
import os


class SeedError(RuntimeError):
    """Base class for seeding failures. `path` points at the offending file, when there is one."""

    def __init__(self, message: str, *, path: str | os.PathLike[str] | None = None):
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None


class StoreConnectionError(SeedError):
    """The store could not be reached. Fatal to the whole run."""


class DiscoveryError(SeedError):
    """The fixture directory could not be enumerated, or two fixtures target one collection."""


class FixtureParseError(SeedError):
    pass


class ReconcileError(SeedError):
    pass


class InsertError(SeedError):
    pass


class StoreError(RuntimeError):
    """A single store operation failed (driver errors are re-raised as this)."""


def error_message(exc: BaseException) -> str:
    """
    Human readable message for a fixture failure.

    OS-level errors are described by their errno rather than the raw repr, and
    anything that carries a file path gets it appended, e.g.
    "Error: No such file or directory [seeds/widgets.json]".
    """
    code = getattr(exc, "errno", None)
    if isinstance(code, int) and code in errno.errorcode:
        text = os.strerror(code)
    else:
        text = str(exc) or exc.__class__.__name__

    out = f"Error: {text}"
    path = getattr(exc, "path", None) or getattr(exc, "filename", None)
    if path:
        out += f" [{os.fspath(path)}]"
    return out
