from __future__ import annotations

from gitreview.analysis_repo import analyze_repo, parse_rev_list
from gitreview.git import ProbeKind

NOT_SET = ("", "[ERROR] git config --get review.x: exit status 1\n")


class FakeRunner:
    def __init__(self, responses: dict[ProbeKind, tuple[str, str]]) -> None:
        self.responses = responses
        self.calls: list[ProbeKind] = []

    def run(self, repo_path: str, kind: ProbeKind) -> tuple[str, str]:
        self.calls.append(kind)
        return self.responses.get(kind, ("", ""))


def test_parse_rev_list_splits_sides() -> None:
    ahead, behind = parse_rev_list("<aaa\n>bbb\n<ccc\n")
    assert ahead == "<aaa\n<ccc\n"
    assert behind == ">bbb\n"


def test_parse_rev_list_zero_lines_is_empty_not_zero() -> None:
    assert parse_rev_list("") == ("", "")
    assert parse_rev_list(">bbb\n") == ("", ">bbb\n")
    assert parse_rev_list("<aaa") == ("<aaa\n", "")


def test_analyze_repo_runs_probes_in_order_and_fills_report() -> None:
    runner = FakeRunner(
        {
            ProbeKind.SKIP: NOT_SET,
            ProbeKind.REMOTE: ("origin\tgit@github.com:acme/r1.git (fetch)\n", ""),
            ProbeKind.STATUS: (" M a.txt\n", ""),
            ProbeKind.OMIT: NOT_SET,
            ProbeKind.FETCH: ("From github.com:acme/r1\n", ""),
            ProbeKind.REV_LIST: ("<aaa\n>bbb\n", ""),
        }
    )
    r = analyze_repo("/r1", runner=runner, fetch=True)

    assert runner.calls == [
        ProbeKind.SKIP,
        ProbeKind.REMOTE,
        ProbeKind.STATUS,
        ProbeKind.OMIT,
        ProbeKind.FETCH,
        ProbeKind.REV_LIST,
    ]
    assert r.repo_path == "/r1"
    assert "acme/r1" in r.remote_output
    assert r.status_output == " M a.txt\n"
    assert r.fetch_output == "From github.com:acme/r1\n"
    assert r.rev_list_output == "<aaa\n>bbb\n"
    assert r.rev_list_ahead == "<aaa\n"
    assert r.rev_list_behind == ">bbb\n"
    assert r.skip_output == ""
    assert r.omit_output == ""
    assert r.errors == ()
    assert r.flags == "MABF"


def test_analyze_repo_uses_dry_fetch_when_fetch_disabled() -> None:
    runner = FakeRunner({ProbeKind.FETCH_DRY: ("From github.com:acme/r1\n", "")})
    r = analyze_repo("/r1", runner=runner, fetch=False)

    assert ProbeKind.FETCH_DRY in runner.calls
    assert ProbeKind.FETCH not in runner.calls
    assert r.fetch_output == "From github.com:acme/r1\n"


def test_analyze_repo_skipped_short_circuits() -> None:
    runner = FakeRunner({ProbeKind.SKIP: ("true\n", ""), ProbeKind.STATUS: ("?? x\n", "")})
    r = analyze_repo("/r1", runner=runner, fetch=True)

    assert runner.calls == [ProbeKind.SKIP]
    assert r.skipped
    assert r.skip_output == "true\n"
    assert r.status_output == ""


def test_analyze_repo_marker_errors_are_not_repo_errors() -> None:
    runner = FakeRunner({ProbeKind.SKIP: NOT_SET, ProbeKind.OMIT: NOT_SET, ProbeKind.REMOTE: ("", "[ERROR] no remote\n")})
    r = analyze_repo("/r1", runner=runner, fetch=True)

    assert r.errors == ()
    assert r.remote_output == ""
    assert not r.omitted


def test_analyze_repo_keeps_error_and_output_exclusive() -> None:
    runner = FakeRunner(
        {
            ProbeKind.STATUS: ("", "[ERROR] status\n"),
            ProbeKind.FETCH: ("", "[ERROR] fetch\n"),
            ProbeKind.REV_LIST: ("", "[ERROR] rev-list\n"),
        }
    )
    r = analyze_repo("/r1", runner=runner, fetch=True)

    assert r.errors == ("[ERROR] status\n", "[ERROR] fetch\n", "[ERROR] rev-list\n")
    for out, err in [
        (r.status_output, r.status_error),
        (r.fetch_output, r.fetch_error),
        (r.rev_list_output, r.rev_list_error),
    ]:
        assert not (out and err)
    assert (r.rev_list_ahead, r.rev_list_behind) == ("", "")
    assert r.flags == "!"


def test_analyze_repo_records_omit_marker() -> None:
    runner = FakeRunner({ProbeKind.OMIT: ("true\n", "")})
    r = analyze_repo("/r1", runner=runner, fetch=True)
    assert r.omit_output == "true\n"
    assert r.omitted
