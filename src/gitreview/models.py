from __future__ import annotations

import dataclasses
from typing import Iterator


@dataclasses.dataclass(frozen=True)
class GitReport:
    repo_path: str
    remote_output: str = ""
    status_output: str = ""
    status_error: str = ""
    fetch_output: str = ""
    fetch_error: str = ""
    rev_list_output: str = ""
    rev_list_error: str = ""
    rev_list_ahead: str = ""
    rev_list_behind: str = ""
    skip_output: str = ""
    omit_output: str = ""

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(e for e in (self.status_error, self.fetch_error, self.rev_list_error) if e)

    @property
    def skipped(self) -> bool:
        return bool(self.skip_output)

    @property
    def omitted(self) -> bool:
        return bool(self.omit_output)

    @property
    def flags(self) -> str:
        # Legend: [!] error; [M] messy; [A] ahead; [B] behind; [F] fetched; [O] omitted; [S] skipped
        out = ""
        if self.errors:
            out += "!"
        if self.status_output:
            out += "M"
        if self.rev_list_ahead:
            out += "A"
        if self.rev_list_behind:
            out += "B"
        if self.fetch_output:
            out += "F"
        if self.omit_output:
            out += "O"
        if self.skip_output:
            out += "S"
        return out


class CategorySet:
    """Append-only mapping of repo path -> ordered text records."""

    def __init__(self) -> None:
        self._records: dict[str, list[str]] = {}

    def add(self, path: str, text: str) -> None:
        self._records.setdefault(path, []).append(text)

    def records(self, path: str) -> tuple[str, ...]:
        return tuple(self._records.get(path, ()))

    def text(self, path: str) -> str:
        return "".join(self._records.get(path, ()))

    def paths(self) -> list[str]:
        return sorted(self._records)

    def items(self) -> Iterator[tuple[str, str]]:
        for path in self._records:
            yield path, self.text(path)

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategorySet):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"CategorySet({self._records!r})"


@dataclasses.dataclass
class ReviewSets:
    erred: CategorySet = dataclasses.field(default_factory=CategorySet)
    messy: CategorySet = dataclasses.field(default_factory=CategorySet)
    ahead: CategorySet = dataclasses.field(default_factory=CategorySet)
    behind: CategorySet = dataclasses.field(default_factory=CategorySet)
    fetched: CategorySet = dataclasses.field(default_factory=CategorySet)
    journal: CategorySet = dataclasses.field(default_factory=CategorySet)
    omitted: CategorySet = dataclasses.field(default_factory=CategorySet)
    skipped: CategorySet = dataclasses.field(default_factory=CategorySet)


@dataclasses.dataclass(frozen=True)
class ReviewCategories:
    error: bool = True
    messy: bool = True
    ahead: bool = True
    behind: bool = True
    fetched: bool = False
    journal: bool = True
