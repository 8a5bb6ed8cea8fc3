from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable

from .audit import AuditLogger, audit_event
from .command import command_preview, run_in_repo
from .config import WardenConfig, load_config
from .errors import WardenError
from .identifiers import is_valid_repo_identifier
from .logging_utils import configure_logging
from .paths import resolve_path
from .scrub import make_scrubber
from .shell import join
from .workspace import Workspace


def _config_from_args(args: argparse.Namespace) -> WardenConfig:
    return load_config(args.config)


def _redactor(cfg: WardenConfig) -> Callable[[str], str]:
    return make_scrubber(cfg.scrub_labels)


def _workspace_from_args(args: argparse.Namespace, cfg: WardenConfig) -> Workspace:
    if not args.workspace:
        raise SystemExit("--workspace is required")
    log_path = args.log or (cfg.log_path if "logging" in cfg.raw else None)
    if log_path:
        configure_logging(log_path=log_path, level=cfg.log_level, also_console=False)
    return Workspace.from_path(args.workspace)


def _audit_from_args(ws: Workspace, args: argparse.Namespace, cfg: WardenConfig) -> AuditLogger:
    path = args.audit_log or cfg.audit_log
    if path:
        return AuditLogger(path=Path(path).expanduser())
    return AuditLogger.default_for_workspace(ws.root)


def cmd_check_id(args: argparse.Namespace) -> int:
    rc = 0
    for value in args.values:
        if is_valid_repo_identifier(value):
            print(f"ok\t{value}")
        else:
            print(f"invalid\t{value}")
            rc = 1
    return rc


def cmd_resolve(args: argparse.Namespace) -> int:
    res = resolve_path(args.base, args.path)
    if res.path is None:
        reason = res.reason.value if res.reason else "rejected"
        print(f"REJECTED ({reason})")
        return 1
    print(res.path)
    return 0


def cmd_quote(args: argparse.Namespace) -> int:
    print(join(args.values))
    return 0


def cmd_scrub(args: argparse.Namespace) -> int:
    redact = _redactor(_config_from_args(args))
    sys.stdout.write(redact(sys.stdin.read()))
    return 0


def cmd_ls(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    ws = _workspace_from_args(args, cfg)
    audit = _audit_from_args(ws, args, cfg)
    rel = args.path
    try:
        files = ws.list_files(rel)
        for f in files:
            print(f)
        audit.log(audit_event(action="list", ok=True, details={"path": rel or ".", "count": len(files)}))
        return 0
    except Exception as e:
        audit.log(audit_event(action="list", ok=False, details={"path": rel or "."}, error=str(e)))
        raise


def cmd_read(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    ws = _workspace_from_args(args, cfg)
    audit = _audit_from_args(ws, args, cfg)
    try:
        txt = ws.read_text(args.path, max_bytes=cfg.read_max_bytes)
        sys.stdout.write(txt)
        if txt and not txt.endswith("\n"):
            sys.stdout.write("\n")
        audit.log(audit_event(action="read", ok=True, details={"path": args.path, "bytes": len(txt.encode("utf-8"))}))
        return 0
    except Exception as e:
        audit.log(audit_event(action="read", ok=False, details={"path": args.path}, error=str(e)))
        raise


def cmd_write(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    ws = _workspace_from_args(args, cfg)
    audit = _audit_from_args(ws, args, cfg)
    content = sys.stdin.read()
    try:
        ws.write_text(args.path, content)
        audit.log(
            audit_event(
                action="write",
                ok=True,
                details={"path": args.path, "bytes": len(content.encode("utf-8"))},
            )
        )
        return 0
    except Exception as e:
        audit.log(audit_event(action="write", ok=False, details={"path": args.path}, error=str(e)))
        raise


def cmd_exec(args: argparse.Namespace) -> int:
    cfg = _config_from_args(args)
    ws = _workspace_from_args(args, cfg)
    audit = _audit_from_args(ws, args, cfg)
    redact = _redactor(cfg)
    argv = list(args.command)
    if argv and argv[0] == "--":
        argv = argv[1:]
    if not argv:
        raise SystemExit("exec: provide a command after --")
    # One argument is a command line as-is; several are an argv to be quoted.
    command = argv[0] if len(argv) == 1 else join(argv)
    timeout = float(args.timeout) if args.timeout else cfg.exec_timeout_s

    res = run_in_repo(str(ws.root), command, timeout_s=timeout, redact=redact)
    sys.stdout.write(redact(res.stdout))
    sys.stderr.write(redact(res.stderr))
    audit.log(
        audit_event(
            action="exec",
            ok=res.ok,
            details={
                "command_preview": command_preview(command),
                "returncode": res.returncode,
                "timeout": timeout,
            },
            error=None if res.ok else res.stderr,
            redact=redact,
        )
    )
    return res.returncode if res.returncode >= 0 else 1


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="repo-warden")
    p.add_argument("--workspace", help="Cloned repository root (required for ls/read/write/exec)")
    p.add_argument("--config", help="YAML config file")
    p.add_argument("--audit-log", help="Audit log path (defaults to ~/.repo-warden/audit/<workspace>-<hash>.jsonl)")
    p.add_argument("--timeout", default=None, help="exec timeout seconds (default: config or 60)")
    p.add_argument("--log", default=None, help="Log file for workspace commands")

    sub = p.add_subparsers(dest="subcmd", required=True)

    sp = sub.add_parser("check-id", help="Validate owner/repo identifiers")
    sp.add_argument("values", nargs="+")
    sp.set_defaults(func=cmd_check_id)

    sp = sub.add_parser("resolve", help="Confine a relative path to a base directory")
    sp.add_argument("base")
    sp.add_argument("path")
    sp.set_defaults(func=cmd_resolve)

    sp = sub.add_parser("quote", help="Print arguments as one bash-safe command line")
    sp.add_argument("values", nargs="*")
    sp.set_defaults(func=cmd_quote)

    sp = sub.add_parser("scrub", help="Redact credentials from stdin")
    sp.set_defaults(func=cmd_scrub)

    sp = sub.add_parser("ls", help="List files in the workspace")
    sp.add_argument("path", nargs="?", default=None)
    sp.set_defaults(func=cmd_ls)

    sp = sub.add_parser("read", help="Read a file to stdout")
    sp.add_argument("path")
    sp.set_defaults(func=cmd_read)

    sp = sub.add_parser("write", help="Write a file from stdin")
    sp.add_argument("path")
    sp.set_defaults(func=cmd_write)

    sp = sub.add_parser("exec", help="Run a shell command in the workspace")
    sp.add_argument("command", nargs=argparse.REMAINDER, help="Command; use: repo-warden exec -- <cmd...>")
    sp.set_defaults(func=cmd_exec)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    try:
        return int(args.func(args))
    except WardenError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
