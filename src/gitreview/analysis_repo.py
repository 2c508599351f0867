from __future__ import annotations

from .git import ProbeKind, ProbeRunner
from .models import GitReport


def parse_rev_list(output: str) -> tuple[str, str]:
    """
    Split `git rev-list --left-right HEAD...<upstream>` output into
    (ahead, behind). `<` commits exist only locally, `>` commits only upstream.
    A side with no commits is "" rather than a count.
    """
    ahead: list[str] = []
    behind: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if line.startswith("<"):
            ahead.append(line + "\n")
        elif line.startswith(">"):
            behind.append(line + "\n")
    return "".join(ahead), "".join(behind)


def analyze_repo(repo_path: str, *, runner: ProbeRunner, fetch: bool) -> GitReport:
    skip_output, _ = runner.run(repo_path, ProbeKind.SKIP)
    if skip_output.strip():
        return GitReport(repo_path=repo_path, skip_output=skip_output)

    remote_output, _ = runner.run(repo_path, ProbeKind.REMOTE)
    status_output, status_error = runner.run(repo_path, ProbeKind.STATUS)
    # An unset review.omit key exits non-zero; that is not a repo error.
    omit_output, _ = runner.run(repo_path, ProbeKind.OMIT)
    fetch_output, fetch_error = runner.run(repo_path, ProbeKind.FETCH if fetch else ProbeKind.FETCH_DRY)
    rev_list_output, rev_list_error = runner.run(repo_path, ProbeKind.REV_LIST)

    ahead, behind = ("", "") if rev_list_error else parse_rev_list(rev_list_output)
    return GitReport(
        repo_path=repo_path,
        remote_output=remote_output,
        status_output=status_output,
        status_error=status_error,
        fetch_output=fetch_output,
        fetch_error=fetch_error,
        rev_list_output=rev_list_output,
        rev_list_error=rev_list_error,
        rev_list_ahead=ahead,
        rev_list_behind=behind,
        omit_output=omit_output if omit_output.strip() else "",
    )
