"""Confine caller-supplied relative paths to a trusted base directory.

Existing targets resolve to their real path, which is the path callers should
open. Targets that do not exist yet resolve to the lexical join once every
existing ancestor has been checked; the window between that check and the
eventual create is not closed here, so writers re-resolve right before
writing (see Workspace.write_text).

Only "does not exist" lets resolution continue. Any other filesystem error
rejects.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import RejectReason, error_for

PathLike = Union[str, "os.PathLike[str]"]

# RuntimeError: symlink loop on interpreters before 3.13. ValueError: embedded NUL.
_RESOLVE_ERRORS = (OSError, RuntimeError, ValueError)


@dataclass(frozen=True)
class Resolution:
    path: Optional[str]
    reason: Optional[RejectReason] = None
    exists: bool = False

    @property
    def ok(self) -> bool:
        return self.path is not None


def is_within(path: str, root: str) -> bool:
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def _realpath(path: str) -> str:
    return str(Path(path).resolve(strict=True))


def _reject(reason: RejectReason) -> Resolution:
    return Resolution(path=None, reason=reason)


def resolve_path(base_path: PathLike, relative_path: PathLike) -> Resolution:
    """Resolve ``relative_path`` under ``base_path``, reporting why on rejection."""
    normalized_base = os.path.abspath(os.fspath(base_path))
    full_path = os.path.normpath(os.path.join(normalized_base, os.fspath(relative_path)))

    # Lexical check first: catches ../ sequences without touching the filesystem.
    if not is_within(full_path, normalized_base):
        return _reject(RejectReason.PATH_ESCAPE)

    try:
        real_base = _realpath(normalized_base)
    except _RESOLVE_ERRORS:
        return _reject(RejectReason.BASE_UNAVAILABLE)

    try:
        real_path = _realpath(full_path)
    except FileNotFoundError:
        pass
    except _RESOLVE_ERRORS:
        return _reject(RejectReason.UNEXPECTED_FS_ERROR)
    else:
        if not is_within(real_path, real_base):
            return _reject(RejectReason.PATH_ESCAPE)
        return Resolution(path=real_path, exists=True)

    # Not there yet: the nearest existing ancestor decides.
    check_path = full_path
    while True:
        # A dangling symlink would be followed on create; its target cannot be proven.
        if os.path.islink(check_path):
            return _reject(RejectReason.PATH_ESCAPE)
        check_path = os.path.dirname(check_path)
        if check_path == normalized_base or not is_within(check_path, normalized_base):
            break
        try:
            real_parent = _realpath(check_path)
        except FileNotFoundError:
            continue
        except _RESOLVE_ERRORS:
            return _reject(RejectReason.UNEXPECTED_FS_ERROR)
        if not is_within(real_parent, real_base):
            return _reject(RejectReason.PATH_ESCAPE)
        break

    return Resolution(path=full_path, exists=False)


def safe_resolve_path(base_path: PathLike, relative_path: PathLike) -> Optional[str]:
    """Return the confined absolute path, or None if it cannot be proven inside the base."""
    return resolve_path(base_path, relative_path).path


def require_resolved_path(base_path: PathLike, relative_path: PathLike) -> str:
    res = resolve_path(base_path, relative_path)
    if res.path is None:
        reason = res.reason or RejectReason.PATH_ESCAPE
        raise error_for(
            reason,
            f"Invalid path: path traversal detected ({reason.value}): {os.fspath(relative_path)}",
        )
    return res.path
