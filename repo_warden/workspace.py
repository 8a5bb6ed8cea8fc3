from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .errors import RejectReason, WardenError
from .paths import Resolution, resolve_path

logger = logging.getLogger(__name__)

DEFAULT_READ_MAX_BYTES = 2_000_000


class WorkspaceViolation(WardenError):
    pass


@dataclass(frozen=True)
class Workspace:
    """A cloned repository root; every file operation is confined to it."""

    root: Path

    @classmethod
    def from_path(cls, root: Union[str, Path]) -> "Workspace":
        # Lexical only: resolve_path derives the real root on every call.
        return cls(root=Path(os.path.abspath(os.path.expanduser(str(root)))))

    def _resolution(self, rel: Union[str, Path]) -> Resolution:
        res = resolve_path(self.root, rel)
        if not res.ok:
            reason = res.reason or RejectReason.PATH_ESCAPE
            logger.warning("Rejected path %r under %s (%s)", str(rel), self.root, reason.value)
            raise WorkspaceViolation(
                f"Invalid path: path traversal detected ({reason.value}): {rel}",
                reason=reason,
            )
        return res

    def resolve(self, rel: Union[str, Path]) -> Path:
        return Path(self._resolution(rel).path or "")

    def read_text(self, rel: Union[str, Path], *, max_bytes: int = DEFAULT_READ_MAX_BYTES) -> str:
        # Open the verified real path, not the caller's relative one.
        p = self.resolve(rel)
        with p.open("rb") as f:
            data = f.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise ValueError(f"Refusing to read >{max_bytes} bytes from {rel}")
        return data.decode("utf-8", errors="replace")

    def write_text(self, rel: Union[str, Path], content: str) -> Path:
        """Write ``content`` to ``rel``, creating parent directories.

        The path is checked again after the directories exist and right before
        the file is opened. A swap between that check and open() is not
        prevented.
        """
        p = self.resolve(rel)
        p.parent.mkdir(parents=True, exist_ok=True)
        again = self.resolve(rel)
        if again != p:
            raise WorkspaceViolation(f"Path changed while preparing write: {rel}")
        with again.open("w", encoding="utf-8") as f:
            f.write(content)
        logger.info("Wrote %d bytes to %s", len(content.encode("utf-8")), again)
        return again

    def exists(self, rel: Union[str, Path]) -> bool:
        return self._resolution(rel).exists

    def list_files(self, rel: Optional[Union[str, Path]] = None) -> List[str]:
        """List files under ``rel`` (default: the root), skipping ``.git``.

        Entries are relative to the workspace root when they fall under it.
        """
        target = self.resolve(rel or ".")
        if not target.is_dir():
            raise NotADirectoryError(str(rel))

        root_prefix = str(self.root) + os.sep
        real_prefix = str(self.resolve(".")) + os.sep
        out: List[str] = []
        for dirpath, dirnames, filenames in os.walk(target):
            dirnames[:] = [d for d in dirnames if d != ".git"]
            for name in filenames:
                full = os.path.join(dirpath, name)
                if full.startswith(real_prefix):
                    full = full[len(real_prefix):]
                elif full.startswith(root_prefix):
                    full = full[len(root_prefix):]
                out.append(full)
        return sorted(out)
