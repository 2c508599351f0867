from __future__ import annotations

import enum
import subprocess
from pathlib import Path
from typing import Optional, Protocol

DEFAULT_UPSTREAM_REF = "origin/HEAD"
DEFAULT_PROBE_TIMEOUT_S = 300


class ProbeKind(enum.Enum):
    REMOTE = "remote"
    STATUS = "status"
    SKIP = "skip"
    OMIT = "omit"
    FETCH = "fetch"
    FETCH_DRY = "fetch-dry"
    REV_LIST = "rev-list"


class ProbeRunner(Protocol):
    def run(self, repo_path: str, kind: ProbeKind) -> tuple[str, str]:
        """Return (output, error); at most one of them is non-empty."""
        ...


def run_git(args: list[str], cwd: Path, timeout_s: Optional[float] = DEFAULT_PROBE_TIMEOUT_S) -> tuple[int, str, str]:
    proc = subprocess.run(
        ["git", *args],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout_s,
    )
    return proc.returncode, proc.stdout, proc.stderr


def probe_command(kind: ProbeKind, *, upstream_ref: str = DEFAULT_UPSTREAM_REF) -> list[str]:
    if kind is ProbeKind.REMOTE:
        return ["remote", "-v"]
    if kind is ProbeKind.STATUS:
        return ["status", "--porcelain", "-uall"]
    if kind is ProbeKind.SKIP:
        return ["config", "--get", "review.skip"]
    if kind is ProbeKind.OMIT:
        return ["config", "--get", "review.omit"]
    if kind is ProbeKind.FETCH:
        return ["fetch"]
    if kind is ProbeKind.FETCH_DRY:
        return ["fetch", "--dry-run"]
    if kind is ProbeKind.REV_LIST:
        return ["rev-list", "--left-right", f"HEAD...{upstream_ref}"]
    raise ValueError(f"unknown probe kind: {kind!r}")


def _format_error(args: list[str], reason: str, output: str) -> str:
    msg = f"[ERROR] git {' '.join(args)}: {reason}\n"
    if output.strip():
        msg += output if output.endswith("\n") else output + "\n"
    return msg


class GitProbeRunner:
    """Runs git probes in a working copy; failures come back as error text."""

    def __init__(self, *, upstream_ref: str = DEFAULT_UPSTREAM_REF, timeout_s: Optional[float] = DEFAULT_PROBE_TIMEOUT_S) -> None:
        self.upstream_ref = upstream_ref
        self.timeout_s = timeout_s if timeout_s else None

    def run(self, repo_path: str, kind: ProbeKind) -> tuple[str, str]:
        args = probe_command(kind, upstream_ref=self.upstream_ref)
        try:
            code, out, err = run_git(args, cwd=Path(repo_path), timeout_s=self.timeout_s)
        except subprocess.TimeoutExpired:
            return "", _format_error(args, f"timed out after {self.timeout_s:g}s", "")
        except OSError as e:
            return "", _format_error(args, str(e), "")
        # git fetch reports progress and ref updates on stderr.
        output = out + err
        if code != 0:
            return "", _format_error(args, f"exit status {code}", output)
        return output, ""
