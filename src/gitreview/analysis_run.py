from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Optional, Sequence

from .analysis_aggregate import classify, reviewable
from .analysis_repo import analyze_repo
from .analysis_selection import discover_repositories
from .config import ReviewConfig
from .git import GitProbeRunner, ProbeRunner
from .journal import write_journal
from .logging import get_logger
from .models import GitReport
from .review import launch_gui, prompt, review_all

log = get_logger("run")

DEFAULT_JOBS = 16
LEGEND = "Legend: [!] = error; [M] = messy; [A] = ahead; [B] = behind; [F] = fetched; [O] = omitted; [S] = skipped;"


def _analyze_isolated(repo_path: str, runner: ProbeRunner, fetch: bool) -> GitReport:
    try:
        return analyze_repo(repo_path, runner=runner, fetch=fetch)
    except Exception as e:  # one broken repo must not take down the batch
        log.debug("Analysis of %s raised", repo_path, exc_info=True)
        return GitReport(repo_path=repo_path, status_error=f"[ERROR] analysis failed: {type(e).__name__}: {e}\n")


def analyze_all(
    repo_paths: Sequence[str],
    *,
    runner: ProbeRunner,
    fetch: bool,
    jobs: int = DEFAULT_JOBS,
) -> tuple[GitReport, ...]:
    """
    Analyze every repository with at most `jobs` running at once.

    Returns only after all analyses finished; order is completion order.
    """
    if jobs < 1:
        raise ValueError(f"jobs must be at least 1, got {jobs}")

    reports: list[GitReport] = []
    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="gitreview") as ex:
        futs: list[Future[GitReport]] = [ex.submit(_analyze_isolated, p, runner, fetch) for p in repo_paths]
        try:
            for i, fut in enumerate(as_completed(futs), start=1):
                r = fut.result()
                reports.append(r)
                if r.flags:
                    log.info("[%s] %s", r.flags, r.repo_path)
                if i % 10 == 0 or i == len(futs):
                    log.debug("Analyzed %d/%d repos...", i, len(futs))
        except KeyboardInterrupt:
            # Queued repos are dropped; only analyses already running are waited for.
            ex.shutdown(wait=False, cancel_futures=True)
            raise
    return tuple(reports)


def run_review(
    config: ReviewConfig,
    *,
    runner: Optional[ProbeRunner] = None,
    prompt: Callable[[str], str] = prompt,
    launch: Callable[[str, str], None] = launch_gui,
) -> int:
    repo_paths = discover_repositories(config)
    if not repo_paths:
        log.warning("No git repositories found (roots: %s).", ", ".join(config.repo_roots) or "none")
        return 0

    if runner is None:
        runner = GitProbeRunner(upstream_ref=config.upstream_ref, timeout_s=config.probe_timeout_s)

    log.info("Analyzing %d git repositories...", len(repo_paths))
    log.info(LEGEND)
    reports = analyze_all(repo_paths, runner=runner, fetch=config.fetch, jobs=config.jobs)

    sets = classify(reports, fetch=config.fetch, org_marker=config.org_marker)
    paths = reviewable(sets, config.review)

    if not review_all(sets, paths, gui=config.gui, delay_s=config.launch_delay_s, prompt=prompt, launch=launch):
        return 0

    write_journal(sets.journal, outfile=config.outfile, prompt=prompt)
    return 0
