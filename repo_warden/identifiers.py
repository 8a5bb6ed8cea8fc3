"""Owner/repository name validation.

Names are interpolated into clone paths ({tmp}/{session}/{owner}-{repo}) and
into HTTPS URLs, so the allowed set is deliberately narrower than what GitHub
or GitLab accept.
"""

from __future__ import annotations

import re

from .errors import InvalidIdentifier

MAX_IDENTIFIER_LENGTH = 100

_IDENT_RX = re.compile(r"[A-Za-z0-9._-]+")


def is_valid_repo_identifier(value: str) -> bool:
    if not isinstance(value, str) or not value:
        return False
    if len(value) > MAX_IDENTIFIER_LENGTH:
        return False
    if ".." in value or "/" in value or "\\" in value:
        return False
    return _IDENT_RX.fullmatch(value) is not None


def require_repo_identifier(value: str, field: str = "identifier") -> str:
    """Return ``value`` unchanged or raise InvalidIdentifier."""
    if not is_valid_repo_identifier(value):
        raise InvalidIdentifier(f"Invalid {field} name: {value!r}")
    return value
