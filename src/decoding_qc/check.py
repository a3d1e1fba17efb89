from __future__ import annotations

import logging
from collections.abc import Mapping

from decoding_qc.annotator import Annotator, DisplayLabel, build_shifter_notes, split_list
from decoding_qc.config import AppConfig, CheckParameters, SeriesConfig
from decoding_qc.error_kinds import ErrorCatalog
from decoding_qc.evaluator import DeltaEvaluator, SeriesEvaluation
from decoding_qc.quality import CheckResult
from decoding_qc.series import MonitorObject, read_series
from decoding_qc.snapshot import SnapshotStore
from decoding_qc.thresholds import FlatCheck, ThresholdMode, thresholds_from_parameters

LOGGER = logging.getLogger(__name__)


class DecodingErrorCheck:
    """Per-cycle health check over decoder error histograms.

    The host calls :meth:`check` once per cycle and then :meth:`beautify` for each
    object it wants decorated. The snapshot store and the annotator buffer belong
    to this instance; a single host cycle is expected to drive both calls.
    """

    def __init__(
        self,
        params: CheckParameters | None = None,
        series_config: SeriesConfig | None = None,
        catalog: ErrorCatalog | None = None,
        store: SnapshotStore | None = None,
        annotator: Annotator | None = None,
    ) -> None:
        self.params = params or CheckParameters()
        self.series_config = series_config or SeriesConfig()
        self.catalog = catalog or ErrorCatalog.default()
        self.store = store if store is not None else SnapshotStore()
        self.annotator = annotator if annotator is not None else Annotator()
        self.evaluator = DeltaEvaluator(self.catalog)
        self.cycle = 0
        self.last_thresholds: ThresholdMode | None = None
        self.last_evaluations: list[SeriesEvaluation] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> DecodingErrorCheck:
        return cls(
            params=config.check,
            series_config=config.series,
            catalog=ErrorCatalog.from_names(config.error_kinds),
        )

    def is_link_series(self, name: str) -> bool:
        return self.series_config.link_series_pattern in name

    def is_chip_series(self, name: str) -> bool:
        return name == self.series_config.chip_series_name

    def check(
        self,
        objects: Mapping[str, MonitorObject],
        params: CheckParameters | None = None,
    ) -> CheckResult:
        params = params or self.params
        self.cycle += 1
        self.annotator.discard_pending()
        thresholds = thresholds_from_parameters(params, len(self.catalog))
        self.last_thresholds = thresholds
        self.last_evaluations = []

        result = CheckResult()
        seen: set[str] = set()
        for obj in objects.values():
            if not (self.is_chip_series(obj.name) or self.is_link_series(obj.name)):
                continue
            if obj.name in seen:
                LOGGER.warning("Skipping duplicate object %s in cycle %d", obj.name, self.cycle)
                continue
            seen.add(obj.name)

            if self.is_chip_series(obj.name):
                series = read_series(obj, None)
                if series is None:
                    continue
                evaluation = self.evaluator.evaluate_ceiling(
                    series,
                    self.series_config.chip_ceiling,
                    self.series_config.chip_ceiling_metric,
                )
            else:
                series = read_series(obj, len(self.catalog))
                if series is None:
                    continue
                evaluation = self.evaluator.evaluate(
                    series, self.store.get(series.name), thresholds
                )
                for record in evaluation.bad_bins:
                    result.add_flag(record.describe())
                self.annotator.record(series.name, evaluation.bad_bins)
                self.store.commit(series.name, series.bins)
            result.set(evaluation.verdict)
            self.last_evaluations.append(evaluation)

        LOGGER.debug(
            "Cycle %d: %s over %d series (%s mode)",
            self.cycle,
            result.verdict.name,
            len(self.last_evaluations),
            "flat" if isinstance(thresholds, FlatCheck) else "vector",
        )
        return result

    def shifter_notes(self, params: CheckParameters | None = None) -> dict[str, str]:
        params = params or self.params
        plot_names = split_list(params.plot_with_text_message, params.delimiter)
        messages = split_list(params.text_message, params.delimiter)
        return build_shifter_notes(plot_names, messages)

    def beautify(
        self,
        obj: MonitorObject,
        result: CheckResult,
        params: CheckParameters | None = None,
    ) -> list[DisplayLabel]:
        if not (self.is_link_series(obj.name) or self.is_chip_series(obj.name)):
            return []
        # Objects that could not be read this cycle get no labels.
        if obj.name not in {evaluation.series for evaluation in self.last_evaluations}:
            self.annotator.drop(obj.name)
            return []
        labels = self.annotator.annotate(
            obj.name, result.verdict, shifter_notes=self.shifter_notes(params)
        )
        obj.labels.extend(labels)
        return labels
