from __future__ import annotations

import contextlib
import datetime as dt
import os
import sys
from pathlib import Path
from typing import Callable, Iterator, Mapping, Optional, TextIO

from .logging import get_logger
from .models import CategorySet

log = get_logger("journal")


def resolve_output_path(outfile: str, environ: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    env = os.environ if environ is None else environ
    name = (outfile or "").strip()
    if not name:
        return None
    if name in env:
        value = env[name].strip()
        log.info("Found output path in environment variable: %s=%s", name, value)
        # A set but empty variable means stdout, not a file named after the variable.
        return Path(value) if value else None
    return Path(name)


@contextlib.contextmanager
def open_output_writer(outfile: str, environ: Optional[Mapping[str, str]] = None) -> Iterator[TextIO]:
    path = resolve_output_path(outfile, environ)
    if path is not None and path.exists():
        try:
            f = path.open("a", encoding="utf-8")
        except OSError as e:
            log.warning("Could not open file for appending: [%s] Error: %s", path, e)
        else:
            log.info("Final report will be appended to %s", path)
            with f:
                yield f
            return
    log.info("Final report will be written to stdout.")
    yield sys.stdout


def format_journal_entry(journal: CategorySet, today: dt.date) -> str:
    lines = ["", "", f"## {today.isoformat()}", ""]
    for _path, text in journal.items():
        lines.append(text)
    return "\n".join(lines) + "\n"


def write_journal(
    journal: CategorySet,
    *,
    outfile: str,
    prompt: Callable[[str], str],
    today: Optional[dt.date] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> bool:
    if not len(journal):
        return False

    prompt("Press <ENTER> to conclude review process and print code review log entry...")

    entry = format_journal_entry(journal, today or dt.date.today())
    with open_output_writer(outfile, environ) as writer:
        writer.write(entry)
        writer.flush()
    return True
