from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from .config import ReviewConfig
from .logging import get_logger

log = get_logger("selection")


def is_git_repo(path: Path) -> bool:
    # `.git` is a file in worktrees and submodules.
    return (path / ".git").exists()


def collect_git_repositories(roots: Iterable[str]) -> list[str]:
    """Immediate children of each root that are git working copies. Not recursive."""
    found: list[str] = []
    for root in roots:
        if not root:
            continue
        try:
            entries = sorted(os.scandir(root), key=lambda e: e.name)
        except OSError as e:
            log.debug("Cannot scan root %s: %s", root, e)
            continue
        for entry in entries:
            if entry.is_dir() and is_git_repo(Path(entry.path)):
                found.append(os.path.abspath(entry.path))
    return found


def filter_git_repositories(paths: Iterable[str]) -> list[str]:
    out: list[str] = []
    for p in paths:
        if is_git_repo(Path(p)):
            out.append(os.path.abspath(p))
        else:
            log.info("Not a git repository (ignored): %s", p)
    return out


def discover_repositories(config: ReviewConfig) -> list[str]:
    paths = collect_git_repositories(config.repo_roots) + filter_git_repositories(config.repo_paths)
    return sorted(set(paths))
