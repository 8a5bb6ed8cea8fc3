from __future__ import annotations

import hashlib
import json
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .scrub import scrub

# Never inside a workspace.
DEFAULT_AUDIT_DIR = os.path.join(os.path.expanduser("~"), ".repo-warden", "audit")


@dataclass(frozen=True)
class AuditLogger:
    path: Path

    @classmethod
    def default_for_workspace(cls, workspace_root: Path, audit_dir: Optional[str] = None) -> "AuditLogger":
        """One log per workspace, named after it, under ``audit_dir``."""
        root = os.path.abspath(str(workspace_root))
        digest = hashlib.sha256(root.encode("utf-8")).hexdigest()[:12]
        name = f"{os.path.basename(root) or 'root'}-{digest}.jsonl"
        return cls(path=Path(audit_dir or DEFAULT_AUDIT_DIR) / name)

    def log(self, event: Dict[str, Any]) -> None:
        event = dict(event)
        event.setdefault("ts", time.time())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(event, sort_keys=True) + "\n")


def _clean(value: Any, redact: Callable[[str], str]) -> Any:
    if isinstance(value, str):
        return redact(value)
    if isinstance(value, list):
        return [_clean(v, redact) for v in value]
    return value


def audit_event(
    *,
    action: str,
    ok: bool,
    details: Optional[Dict[str, Any]] = None,
    error: Optional[str] = None,
    redact: Callable[[str], str] = scrub,
) -> Dict[str, Any]:
    e: Dict[str, Any] = {"action": action, "ok": ok}
    if details:
        e["details"] = {k: _clean(v, redact) for k, v in details.items()}
    if error:
        e["error"] = redact(error)
    return e
