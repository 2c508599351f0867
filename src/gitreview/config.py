from __future__ import annotations

import argparse
import dataclasses
import json
import os
from pathlib import Path
from typing import Mapping, Optional

from .analysis_aggregate import DEFAULT_ORG_MARKER
from .git import DEFAULT_PROBE_TIMEOUT_S, DEFAULT_UPSTREAM_REF
from .logging import get_logger
from .models import ReviewCategories

log = get_logger("config")

DEFAULTS: dict[str, object] = {
    "gui": "smerge",
    "outfile": "SMARTY_REVIEW_LOG",
    "fetch": True,
    "roots": "CDPATH",
    "repo_list": "",
    "review": "abejm",
    "org": DEFAULT_ORG_MARKER,
    "jobs": 16,
    "delay": 0.25,
    "timeout": DEFAULT_PROBE_TIMEOUT_S,
    "upstream": DEFAULT_UPSTREAM_REF,
}


@dataclasses.dataclass(frozen=True)
class ReviewConfig:
    fetch: bool = True
    review: ReviewCategories = ReviewCategories()
    org_marker: str = DEFAULT_ORG_MARKER
    jobs: int = 16
    launch_delay_s: float = 0.25
    probe_timeout_s: Optional[float] = DEFAULT_PROBE_TIMEOUT_S
    upstream_ref: str = DEFAULT_UPSTREAM_REF
    gui: str = "smerge"
    outfile: str = "SMARTY_REVIEW_LOG"
    repo_paths: tuple[str, ...] = ()
    repo_roots: tuple[str, ...] = ()


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    data = json.loads(config_path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"Config file must contain a JSON object: {config_path}")
    return data


def parse_review_codes(codes: str) -> ReviewCategories:
    c = (codes or "").lower()
    return ReviewCategories(
        error="e" in c,
        messy="m" in c,
        ahead="a" in c,
        behind="b" in c,
        fetched="f" in c,
        journal="j" in c,
    )


def expand_repo_path(path: str, prefixes: list[str]) -> str:
    p = path.strip()
    if not p:
        return ""
    if p.startswith("~/"):
        p = str(Path.home() / p[2:])
    if not os.path.isabs(p):
        for prefix in prefixes:
            if not prefix:
                continue
            candidate = os.path.join(prefix, p)
            if os.path.exists(candidate):
                return candidate
    return p


def read_repo_list(path: str, prefixes: list[str]) -> list[str]:
    """Read a repo-list file: one repository per line, `#` starts a comment line."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SystemExit(f"Path for repo-list cannot be opened: {path}: {e}") from e

    out: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if len(line) > 1 and not line.startswith("#"):
            out.append(expand_repo_path(line, prefixes))
    log.info("Added %d repositories from file: %s", len(out), path)
    return out


def _pick(args: argparse.Namespace, file_config: Mapping[str, object], key: str) -> object:
    value = getattr(args, key, None)
    if value is not None:
        return value
    if key in file_config and file_config[key] is not None:
        return file_config[key]
    return DEFAULTS[key]


def build_config(args: argparse.Namespace, file_config: Mapping[str, object], environ: Optional[Mapping[str, str]] = None) -> ReviewConfig:
    env = os.environ if environ is None else environ

    try:
        jobs = int(_pick(args, file_config, "jobs"))  # type: ignore[arg-type]
        delay = float(_pick(args, file_config, "delay"))  # type: ignore[arg-type]
        timeout = float(_pick(args, file_config, "timeout"))  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise SystemExit(f"Invalid numeric option: {e}") from e
    if jobs < 1:
        raise SystemExit(f"--jobs must be at least 1, got: {jobs}")
    if delay < 0:
        raise SystemExit(f"--delay must not be negative, got: {delay}")
    if timeout < 0:
        raise SystemExit(f"--timeout must not be negative, got: {timeout}")
    fetch = _pick(args, file_config, "fetch")
    if not isinstance(fetch, bool):
        raise SystemExit(f"fetch must be true or false, got: {fetch!r}")

    roots_var = str(_pick(args, file_config, "roots"))
    roots = [r for r in env.get(roots_var, "").split(":") if r]

    paths = [expand_repo_path(p, roots) for p in (getattr(args, "paths", None) or [])]
    repo_list = str(_pick(args, file_config, "repo_list") or "")
    for list_file in [x for x in repo_list.split(";") if x.strip()]:
        paths.extend(read_repo_list(expand_repo_path(list_file, roots), roots))
    paths = [p for p in paths if p]

    if not fetch:
        log.info("Running git fetch with --dry-run (updated repositories will not be reviewed).")

    return ReviewConfig(
        fetch=fetch,
        review=parse_review_codes(str(_pick(args, file_config, "review"))),
        org_marker=str(_pick(args, file_config, "org")),
        jobs=jobs,
        launch_delay_s=delay,
        probe_timeout_s=timeout or None,
        upstream_ref=str(_pick(args, file_config, "upstream")),
        gui=str(_pick(args, file_config, "gui")),
        outfile=str(_pick(args, file_config, "outfile")),
        repo_paths=tuple(paths),
        repo_roots=() if paths else tuple(roots),
    )
