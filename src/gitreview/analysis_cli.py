from __future__ import annotations

import argparse
from pathlib import Path

from .analysis_run import run_review
from .config import build_config, load_config
from .logging import configure_logging

DESCRIPTION = """\
gitreview facilitates visual inspection (code review) of git
repositories that meet any of the following criteria:

1. New content was fetched
2. Behind their upstream default branch
3. Ahead of their upstream default branch
4. Messy (have uncommitted state)
5. Throw errors for the required git operations (listed below)

We use variants of the following commands to ascertain the
status of each repository:

- `git remote`    (shows remote address)
- `git status`    (shows uncommitted files)
- `git fetch`     (finds new commits/tags/branches)
- `git rev-list`  (lists commits behind/ahead of upstream)

...all of which should be safe enough.

Each repository that meets any criteria above will be
presented for review. After all reviews are complete a
concatenated report of all output from `git fetch` for
repositories with new content is appended to the review log
(or printed to stdout). Only repositories whose remote contains
the --org marker are included in this report.

Repositories are identified for consideration from path values
supplied as positional arguments, via --repo-list, or via the
--roots environment variable.
"""

EPILOG = """\
Skipping repositories:
  git config --add review.skip true
  (the repository is left out of the review entirely)

Omitting repositories:
  git config --add review.omit true
  (the repository is still reviewed but left out of the final report)
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitreview",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", nargs="*", help="Repository paths to examine (disables --roots scanning).")
    parser.add_argument("--config", type=Path, default=Path("gitreview.json"), help="Path to an optional JSON config file.")
    parser.add_argument("--gui", type=str, default=None, help="External git GUI used for visual reviews (default: smerge).")
    parser.add_argument(
        "--outfile",
        type=str,
        default=None,
        help="Path, or name of an environment variable holding the path, of an existing review log to append to "
        "(default: SMARTY_REVIEW_LOG). Falls back to stdout.",
    )
    parser.add_argument(
        "--fetch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run git fetch (default). With --no-fetch, fetch runs with --dry-run and fetched repos are not reviewed.",
    )
    parser.add_argument(
        "--roots",
        type=str,
        default=None,
        help="Environment variable with colon-separated directories to scan (not recursively) for repos (default: CDPATH).",
    )
    parser.add_argument(
        "--repo-list",
        dest="repo_list",
        type=str,
        default=None,
        help="Semicolon-separated list of files listing one repository per line.",
    )
    parser.add_argument(
        "--review",
        type=str,
        default=None,
        help="Letter codes of statuses to review: a=ahead, b=behind, e=errors, f=fetched, j=journal, m=messy (default: abejm).",
    )
    parser.add_argument("--org", type=str, default=None, help="Remote substring that marks repos for the final report.")
    parser.add_argument("--jobs", type=int, default=None, help="Parallel repository analyses (default: 16).")
    parser.add_argument("--delay", type=float, default=None, help="Seconds between review window launches (default: 0.25).")
    parser.add_argument("--timeout", type=float, default=None, help="Per git command timeout in seconds, 0 = none (default: 300).")
    parser.add_argument("--upstream", type=str, default=None, help="Upstream ref compared against HEAD (default: origin/HEAD).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def main(argv: list[str]) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))
    config = build_config(args, load_config(args.config))
    return run_review(config)
