from __future__ import annotations

from enum import Enum
from typing import Optional


class RejectReason(str, Enum):
    INVALID_IDENTIFIER = "invalid_identifier"
    PATH_ESCAPE = "path_escape"
    # Environment problem rather than hostile input; callers still refuse.
    BASE_UNAVAILABLE = "base_unavailable"
    UNEXPECTED_FS_ERROR = "unexpected_fs_error"


class WardenError(ValueError):
    """Base for rejections raised by the require_* helpers and the workspace layer."""

    reason: RejectReason = RejectReason.PATH_ESCAPE

    def __init__(self, message: str, *, reason: Optional[RejectReason] = None):
        super().__init__(message)
        if reason is not None:
            self.reason = reason


class InvalidIdentifier(WardenError):
    reason = RejectReason.INVALID_IDENTIFIER


class PathEscape(WardenError):
    reason = RejectReason.PATH_ESCAPE


class BaseUnavailable(WardenError):
    reason = RejectReason.BASE_UNAVAILABLE


class UnexpectedFilesystemError(WardenError):
    reason = RejectReason.UNEXPECTED_FS_ERROR


_BY_REASON = {
    RejectReason.INVALID_IDENTIFIER: InvalidIdentifier,
    RejectReason.PATH_ESCAPE: PathEscape,
    RejectReason.BASE_UNAVAILABLE: BaseUnavailable,
    RejectReason.UNEXPECTED_FS_ERROR: UnexpectedFilesystemError,
}


def error_for(reason: RejectReason, message: str) -> WardenError:
    return _BY_REASON[reason](message)
