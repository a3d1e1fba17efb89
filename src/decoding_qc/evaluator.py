from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from decoding_qc.error_kinds import ErrorCatalog
from decoding_qc.quality import BadBinRecord, Verdict
from decoding_qc.series import MonitoringSeries
from decoding_qc.thresholds import FlatCheck, ThresholdMode


@dataclass(frozen=True)
class SeriesEvaluation:
    series: str
    verdict: Verdict
    bad_bins: list[BadBinRecord] = field(default_factory=list)
    mode: str = "vector"
    bootstrap: bool = False


def clamped_delta(current: Sequence[int], prior: Sequence[int]) -> list[int]:
    # Cumulative counters only grow; a drop means the decoder reset them.
    return [max(0, int(now) - int(before)) for now, before in zip(current, prior)]


class DeltaEvaluator:
    """Compares one series' cycle-over-cycle growth against the configured limits.

    Evaluation is side-effect free. Committing the current bins as the next
    baseline is left to the caller so that a repeated evaluation within one cycle
    yields the same answer.
    """

    def __init__(self, catalog: ErrorCatalog) -> None:
        self.catalog = catalog

    def evaluate(
        self,
        series: MonitoringSeries,
        prior: Sequence[int] | None,
        thresholds: ThresholdMode,
    ) -> SeriesEvaluation:
        mode = "flat" if isinstance(thresholds, FlatCheck) else "vector"
        if prior is None:
            return SeriesEvaluation(
                series=series.name, verdict=Verdict.GOOD, mode=mode, bootstrap=True
            )

        n_bins = min(len(series.bins), len(self.catalog))
        bad_bins: list[BadBinRecord] = []
        if isinstance(thresholds, FlatCheck):
            for index in thresholds.scan_range(n_bins):
                value = series.bins[index]
                if value > thresholds.ceiling:
                    bad_bins.append(self._record(index, value))
        else:
            delta = clamped_delta(series.bins, prior)
            for index in range(min(n_bins, len(thresholds), len(delta))):
                if not thresholds.is_checked(index):
                    continue
                if thresholds.limits[index] <= delta[index]:
                    bad_bins.append(self._record(index, delta[index]))

        return SeriesEvaluation(
            series=series.name,
            verdict=Verdict.BAD if bad_bins else Verdict.GOOD,
            bad_bins=bad_bins,
            mode=mode,
        )

    def evaluate_ceiling(
        self, series: MonitoringSeries, ceiling: int, metric: str = "max"
    ) -> SeriesEvaluation:
        """Aggregate series are not differenced; their peak bin (or total) is tested."""
        value = series.total if metric == "sum" else series.maximum
        verdict = Verdict.BAD if value > ceiling else Verdict.GOOD
        return SeriesEvaluation(series=series.name, verdict=verdict, mode="ceiling")

    def _record(self, index: int, count: int) -> BadBinRecord:
        return BadBinRecord(index=index, name=self.catalog.name_of(index), count=int(count))
