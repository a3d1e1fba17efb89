from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Verdict(IntEnum):
    """Health classification; a larger value is a worse verdict."""

    NULL = 0
    GOOD = 1
    MEDIUM = 2
    BAD = 3

    def combine(self, other: Verdict) -> Verdict:
        return max(self, other)

    @property
    def label(self) -> str:
        return f"Quality::{self.name}"


def worst(verdicts: list[Verdict] | tuple[Verdict, ...]) -> Verdict:
    result = Verdict.NULL
    for verdict in verdicts:
        result = result.combine(verdict)
    return result


@dataclass(frozen=True)
class BadBinRecord:
    index: int
    name: str
    count: int

    def describe(self) -> str:
        return f"BAD: ID = {self.index}, {self.name}"


@dataclass
class CheckResult:
    verdict: Verdict = Verdict.NULL
    flags: list[str] = field(default_factory=list)

    def set(self, verdict: Verdict) -> None:
        self.verdict = self.verdict.combine(verdict)

    def add_flag(self, text: str) -> None:
        self.flags.append(text)
