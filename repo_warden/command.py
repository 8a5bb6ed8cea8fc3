from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .scrub import scrub
from .shell import quote

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 60.0

# git and friends must never stop to ask for credentials or open a pager.
NON_INTERACTIVE_ENV = {
    "GIT_TERMINAL_PROMPT": "0",
    "GIT_SSH_COMMAND": "ssh -oBatchMode=yes -oStrictHostKeyChecking=accept-new",
    "GIT_PAGER": "cat",
    "PAGER": "cat",
    "DEBIAN_FRONTEND": "noninteractive",
    "NO_COLOR": "1",
    "TERM": "dumb",
}


@dataclass(frozen=True)
class CmdResult:
    command: str
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def command_preview(command: str, limit: int = 100) -> str:
    return command[:limit] + ("..." if len(command) > limit else "")


def run_shell(
    command: str,
    *,
    cwd: Optional[str] = None,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    env: Optional[Mapping[str, str]] = None,
    redact: Callable[[str], str] = scrub,
) -> CmdResult:
    """Run one command line under ``bash -c``.

    The line is executed as given; every untrusted piece of it must already
    have gone through shell.quote. Logged text goes through ``redact``.
    Timeouts and spawn failures come back as a failed CmdResult with
    returncode -1.
    """

    logger.info("CMD %s", redact(command_preview(command)))

    try:
        p = subprocess.run(
            ["bash", "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            cwd=cwd,
            timeout=timeout_s,
            env={**os.environ, **NON_INTERACTIVE_ENV, **(env or {})},
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout_s, redact(command_preview(command)))
        return CmdResult(command=command, returncode=-1, stdout="", stderr=f"Command timed out after {timeout_s}s")
    except OSError as e:
        logger.warning("Command could not start: %s", redact(str(e)))
        return CmdResult(command=command, returncode=-1, stdout="", stderr=str(e))

    if p.stdout:
        logger.debug("STDOUT %s", redact(p.stdout.strip()))
    if p.stderr:
        logger.debug("STDERR %s", redact(p.stderr.strip()))

    return CmdResult(command=command, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)


def run_in_repo(repo_path: str, command: str, **kwargs) -> CmdResult:
    return run_shell(f"cd {quote(repo_path)} && {command}", **kwargs)
