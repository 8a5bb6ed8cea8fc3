"""Quoting for bash command lines.

Every value comes back wrapped in single quotes. Inside single quotes bash
performs no expansion of any kind, so the only character needing care is the
single quote itself, written as ``'"'"'``. There is no list of "dangerous"
characters to keep up to date.

Words are never left bare, even when shlex would allow it: as the first word
of a command a bare ``FOO=bar`` is an assignment and a bare ``time`` is a
keyword.
"""

from __future__ import annotations

import shlex
from typing import Iterable, List


def quote(value: str) -> str:
    """Return a single shell word that bash reads back as exactly ``value``.

    The empty string becomes ``''`` so it still occupies an argument slot.
    """
    q = shlex.quote(value)
    # shlex leaves a word bare only when it contains no quote characters.
    return q if q.startswith("'") else f"'{value}'"


def join(argv: Iterable[str]) -> str:
    return " ".join(quote(a) for a in argv)


def split(command: str) -> List[str]:
    return shlex.split(command)
