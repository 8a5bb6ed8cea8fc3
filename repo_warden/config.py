from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logging_utils import DEFAULT_LOG_PATH
from .scrub import DEFAULT_LABELS


@dataclass(frozen=True)
class WardenConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def exec_timeout_s(self) -> float:
        return float(((self.raw.get("exec") or {}).get("timeout_s")) or 60.0)

    @property
    def read_max_bytes(self) -> int:
        return int(((self.raw.get("workspace") or {}).get("read_max_bytes")) or 2_000_000)

    @property
    def scrub_labels(self) -> List[str]:
        labels = (self.raw.get("scrub") or {}).get("labels")
        return [str(x) for x in labels] if labels else list(DEFAULT_LABELS)

    @property
    def log_path(self) -> str:
        return str(((self.raw.get("logging") or {}).get("path")) or DEFAULT_LOG_PATH)

    @property
    def log_level(self) -> str:
        return str(((self.raw.get("logging") or {}).get("level")) or "INFO").upper()

    @property
    def audit_log(self) -> Optional[str]:
        value = (self.raw.get("audit") or {}).get("path")
        return str(value) if value else None


def load_config(path: Optional[str]) -> WardenConfig:
    if path is None:
        return WardenConfig()

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("repo-warden config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the repo-warden config") from e

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("repo-warden config must contain a mapping/object")

    return WardenConfig(raw=raw)
