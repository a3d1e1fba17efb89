from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Literal

from decoding_qc.quality import BadBinRecord, Verdict

LOGGER = logging.getLogger(__name__)

LabelRole = Literal["status", "bad_bin", "shifter"]

STATUS_TEXT: dict[Verdict, str] = {
    Verdict.NULL: "Quality::NULL",
    Verdict.GOOD: "Quality::GOOD",
    Verdict.MEDIUM: "Quality::MEDIUM",
    Verdict.BAD: "Quality::BAD (call expert)",
}
STATUS_COLOR: dict[Verdict, str] = {
    Verdict.NULL: "#64748b",
    Verdict.GOOD: "#15803d",
    Verdict.MEDIUM: "#d97706",
    Verdict.BAD: "#991b1b",
}
BAD_BIN_COLOR = "#991b1b"
SHIFTER_COLOR = "#0f172a"

STATUS_POSITION = (0.05, 0.95)
STATUS_SIZE = 0.06
BAD_BIN_X = 0.12
BAD_BIN_TOP = 0.835
BAD_BIN_STEP = 0.04
TEXT_SIZE = 0.04
SHIFTER_POSITION = (0.005, 0.006)


@dataclass(frozen=True)
class DisplayLabel:
    """Text placed in normalised figure coordinates (0..1 on both axes)."""

    text: str
    x: float
    y: float
    color: str
    size: float
    role: LabelRole
    bold: bool = False


def build_shifter_notes(plot_names: Sequence[str], messages: Sequence[str]) -> dict[str, str]:
    if len(plot_names) != len(messages):
        LOGGER.warning(
            "Bad list of plots with text messages for shifter (%d plots, %d messages)",
            len(plot_names),
            len(messages),
        )
        return {}
    return {str(name).strip(): str(text).strip() for name, text in zip(plot_names, messages)}


def split_list(raw: str, delimiter: str = ",") -> list[str]:
    text = (raw or "").strip()
    if not text:
        return []
    return [token.strip() for token in text.split(delimiter)]


class Annotator:
    """Turns a verdict and its bad bins into display labels.

    Bad-bin records found during a cycle are buffered per series until that
    series is annotated; annotating always empties the buffer for the series.
    """

    def __init__(self) -> None:
        self._pending: dict[str, list[BadBinRecord]] = {}

    def record(self, series_name: str, bad_bins: Sequence[BadBinRecord]) -> None:
        self._pending.setdefault(series_name, []).extend(bad_bins)

    def pending(self, series_name: str) -> list[BadBinRecord]:
        return list(self._pending.get(series_name, []))

    def drop(self, series_name: str) -> None:
        self._pending.pop(series_name, None)

    def discard_pending(self) -> int:
        dropped = sum(len(records) for records in self._pending.values())
        if dropped:
            LOGGER.debug("Discarding %d stale bad-bin records", dropped)
        self._pending.clear()
        return dropped

    def annotate(
        self,
        series_name: str,
        verdict: Verdict,
        bad_bins: Sequence[BadBinRecord] | None = None,
        shifter_notes: Mapping[str, str] | None = None,
    ) -> list[DisplayLabel]:
        buffered = self._pending.pop(series_name, [])
        records = list(bad_bins) if bad_bins is not None else buffered

        labels: list[DisplayLabel] = []
        if verdict is Verdict.BAD:
            for position, record in enumerate(records):
                labels.append(
                    DisplayLabel(
                        text=record.describe(),
                        x=BAD_BIN_X,
                        y=BAD_BIN_TOP - BAD_BIN_STEP * (position + 1),
                        color=BAD_BIN_COLOR,
                        size=TEXT_SIZE,
                        role="bad_bin",
                    )
                )
        labels.append(
            DisplayLabel(
                text=STATUS_TEXT[verdict],
                x=STATUS_POSITION[0],
                y=STATUS_POSITION[1],
                color=STATUS_COLOR[verdict],
                size=STATUS_SIZE,
                role="status",
                bold=True,
            )
        )
        note = (shifter_notes or {}).get(series_name, "")
        if note:
            labels.append(
                DisplayLabel(
                    text=note,
                    x=SHIFTER_POSITION[0],
                    y=SHIFTER_POSITION[1],
                    color=SHIFTER_COLOR,
                    size=TEXT_SIZE,
                    role="shifter",
                    bold=True,
                )
            )
        return labels
