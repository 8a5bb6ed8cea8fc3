"""Credential redaction for text that may echo a token-bearing clone URL.

git prints the remote URL in many of its errors, and clone/push URLs carry the
token as ``https://x-access-token:<token>@host/...``. Anything shaped like
``<label>:<token>@`` becomes ``<label>:***@``. Everything else is left alone.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

REDACTED = "***"

# GitHub App / Actions tokens, GitLab token clone URLs.
DEFAULT_LABELS = ("x-access-token", "oauth2")


def _compile(labels: Iterable[str]) -> "re.Pattern[str]":
    names = [re.escape(label) for label in labels if label]
    if not names:
        raise ValueError("at least one credential label is required")
    return re.compile(r"(" + "|".join(names) + r"):[^@]+@")


def make_scrubber(labels: Iterable[str] = DEFAULT_LABELS) -> Callable[[str], str]:
    rx = _compile(labels)

    def _scrub(text: str) -> str:
        return rx.sub(lambda m: f"{m.group(1)}:{REDACTED}@", text)

    return _scrub


scrub = make_scrubber()

sanitize_git_output = scrub
