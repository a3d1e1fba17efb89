from __future__ import annotations

import logging
from dataclasses import dataclass

from decoding_qc.config import DEFAULT_FLAT_CEILING, CheckParameters

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThresholdVector:
    """Per-kind limits; a negative entry excludes that bin from checking."""

    limits: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.limits)

    def is_checked(self, index: int) -> bool:
        return self.limits[index] >= 0


@dataclass(frozen=True)
class FlatCheck:
    """Fallback mode: one ceiling applied to the raw value of every scanned bin."""

    ceiling: int = DEFAULT_FLAT_CEILING
    scan_last_bin: bool = False
    reason: str = ""

    def scan_range(self, n_bins: int) -> range:
        stop = n_bins if self.scan_last_bin else n_bins - 1
        return range(max(stop, 0))


ThresholdMode = ThresholdVector | FlatCheck


def parse_limit_list(raw: str, delimiter: str = ",") -> list[int]:
    """Split a delimiter-encoded integer list; raises ValueError on any bad entry."""
    text = (raw or "").strip()
    if not text:
        return []
    values: list[int] = []
    for position, token in enumerate(text.split(delimiter)):
        entry = token.strip()
        if not entry:
            raise ValueError(f"empty limit entry at position {position}")
        try:
            values.append(int(entry))
        except ValueError as exc:
            raise ValueError(f"non-integer limit entry at position {position}: {entry!r}") from exc
    return values


def load_thresholds(
    raw: str,
    n_kinds: int,
    *,
    flat_check: bool = False,
    flat_ceiling: int = DEFAULT_FLAT_CEILING,
    flat_scan_last_bin: bool = False,
    delimiter: str = ",",
) -> ThresholdMode:
    def _flat(reason: str) -> FlatCheck:
        return FlatCheck(ceiling=flat_ceiling, scan_last_bin=flat_scan_last_bin, reason=reason)

    if flat_check:
        LOGGER.info("Flat check requested by configuration, ceiling=%d", flat_ceiling)
        return _flat("requested")

    try:
        limits = parse_limit_list(raw, delimiter=delimiter)
    except ValueError as exc:
        LOGGER.error(
            "Unparseable vector with decoding error limits (%s), falling back to flat check",
            exc,
        )
        return _flat("unparseable")

    if len(limits) != n_kinds:
        LOGGER.error(
            "Incorrect vector with decoding error limits: got %d entries, expected %d; "
            "falling back to flat check",
            len(limits),
            n_kinds,
        )
        return _flat("length_mismatch")
    return ThresholdVector(limits=tuple(limits))


def thresholds_from_parameters(params: CheckParameters, n_kinds: int) -> ThresholdMode:
    return load_thresholds(
        params.limits,
        n_kinds,
        flat_check=params.flat_check,
        flat_ceiling=params.flat_ceiling,
        flat_scan_last_bin=params.flat_scan_last_bin,
        delimiter=params.delimiter,
    )
