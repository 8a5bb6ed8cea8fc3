"""Repo Warden: the sanitization core behind a cross-repository coding agent.

The agent clones repositories it does not trust and shells out to git and the
hosting-platform CLIs with strings it did not write. Everything it builds from
those strings goes through one of four checks first:

- identifiers: owner/repo names that end up in paths and URLs
- paths: relative paths confined to a cloned repository root
- shell: quoting for bash command lines
- scrub: credential redaction for subprocess output

The workspace, command, audit and cli modules are thin layers on top.
"""

from __future__ import annotations

from .errors import (
    BaseUnavailable,
    InvalidIdentifier,
    PathEscape,
    RejectReason,
    UnexpectedFilesystemError,
    WardenError,
)
from .identifiers import is_valid_repo_identifier
from .paths import safe_resolve_path
from .scrub import scrub
from .shell import quote

__all__ = [
    "BaseUnavailable",
    "InvalidIdentifier",
    "PathEscape",
    "RejectReason",
    "UnexpectedFilesystemError",
    "WardenError",
    "is_valid_repo_identifier",
    "quote",
    "safe_resolve_path",
    "scrub",
]

__version__ = "0.1.0"
