from __future__ import annotations

import subprocess
import time
from typing import Callable

from .analysis_aggregate import category_counts
from .logging import get_logger
from .models import CategorySet, ReviewSets

log = get_logger("review")

DEFAULT_LAUNCH_DELAY_S = 0.25


def prompt(message: str) -> str:
    try:
        return input(message + " ").strip()
    except EOFError:
        return ""


def launch_gui(gui: str, path: str) -> None:
    if gui == "gitk":
        # gitk only takes revisions, so it has to run inside the repository.
        subprocess.run([gui, "--all"], cwd=path, check=True)
    else:
        subprocess.run([gui, path], check=True)


def print_category(label: str, s: CategorySet, *, with_text: bool = False) -> None:
    if not len(s):
        return
    print(f"{label}: {len(s)}")
    for path in s.paths():
        print(f"  {path}")
        if with_text:
            for record in s.records(path):
                for line in record.rstrip().splitlines():
                    print(f"    {line}")
    print("")


def print_summary(sets: ReviewSets, reviewable_paths: list[str]) -> None:
    for label, s in category_counts(sets):
        print_category(label, s, with_text=s is sets.erred)
    print(f"Repositories to be reviewed: {len(reviewable_paths)}")
    for path in reviewable_paths:
        print(f"  {path}")
    print("")


def review_all(
    sets: ReviewSets,
    reviewable_paths: list[str],
    *,
    gui: str,
    delay_s: float = DEFAULT_LAUNCH_DELAY_S,
    prompt: Callable[[str], str] = prompt,
    launch: Callable[[str, str], None] = launch_gui,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """
    Open `gui` once per reviewable repository, in order.

    Returns False when the operator quits at the prompt, True otherwise.
    """
    if not reviewable_paths:
        print("Nothing to review at this time.")
        return True

    print_summary(sets, reviewable_paths)

    ans = prompt(
        f"Press <ENTER> to initiate the review process (will open {len(reviewable_paths)} review windows), or 'q' to quit..."
    )
    if ans.lower().startswith("q"):
        return False

    for path in reviewable_paths:
        log.info("Opening %s at %s", gui, path)
        try:
            launch(gui, path)
        except (OSError, subprocess.CalledProcessError) as e:
            log.error("Failed to open git GUI: %s", e)
        sleep(delay_s)
    return True
