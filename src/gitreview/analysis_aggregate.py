from __future__ import annotations

from typing import Iterable

from .logging import get_logger
from .models import CategorySet, GitReport, ReviewCategories, ReviewSets

log = get_logger("aggregate")

DEFAULT_ORG_MARKER = "smartystreets"


def can_journal(report: GitReport, omitted: CategorySet, *, org_marker: str) -> bool:
    # Externals never go into the code review journal.
    if org_marker not in report.remote_output:
        return False
    return report.repo_path not in omitted


def classify(reports: Iterable[GitReport], *, fetch: bool, org_marker: str = DEFAULT_ORG_MARKER) -> ReviewSets:
    sets = ReviewSets()
    for report in reports:
        path = report.repo_path
        for err in report.errors:
            sets.erred.add(path, err)
            log.warning("%s %s", path, err.rstrip())

        if report.status_output:
            sets.messy.add(path, report.status_output)
        if report.rev_list_ahead:
            sets.ahead.add(path, report.rev_list_ahead)
        if report.rev_list_behind:
            sets.behind.add(path, report.rev_list_behind)
        if report.skip_output:
            sets.skipped.add(path, report.skip_output)
        if report.omit_output:
            sets.omitted.add(path, report.omit_output)

        if fetch and report.fetch_output:
            text = report.fetch_output + report.rev_list_output
            sets.fetched.add(path, text)
            if can_journal(report, sets.omitted, org_marker=org_marker):
                sets.journal.add(path, text)
    return sets


def enabled_sets(sets: ReviewSets, categories: ReviewCategories) -> list[CategorySet]:
    out: list[CategorySet] = []
    if categories.error:
        out.append(sets.erred)
    if categories.messy:
        out.append(sets.messy)
    if categories.ahead:
        out.append(sets.ahead)
    if categories.behind:
        out.append(sets.behind)
    if categories.fetched:
        out.append(sets.fetched)
    if categories.journal:
        out.append(sets.journal)
    return out


def sort_unique_keys(*category_sets: CategorySet) -> list[str]:
    unique: set[str] = set()
    for s in category_sets:
        unique.update(s)
    return sorted(unique)


def reviewable(sets: ReviewSets, categories: ReviewCategories) -> list[str]:
    return sort_unique_keys(*enabled_sets(sets, categories))


def category_counts(sets: ReviewSets) -> list[tuple[str, CategorySet]]:
    return [
        ("Repositories with git errors", sets.erred),
        ("Repositories with uncommitted changes", sets.messy),
        ("Repositories ahead of upstream", sets.ahead),
        ("Repositories behind upstream", sets.behind),
        ("Repositories with new content since the last review", sets.fetched),
        ("Repositories to be included in the final report", sets.journal),
        ("Repositories omitted from the final report", sets.omitted),
        ("Repositories that were skipped", sets.skipped),
    ]
