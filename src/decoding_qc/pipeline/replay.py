from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from decoding_qc.check import DecodingErrorCheck
from decoding_qc.config import AppConfig
from decoding_qc.io.read import CycleBatch
from decoding_qc.io.write import verdict_frame, write_summary, write_table
from decoding_qc.paths import build_output_paths, figure_stem
from decoding_qc.quality import Verdict, worst
from decoding_qc.series import read_series
from decoding_qc.thresholds import FlatCheck
from decoding_qc.viz.histograms import plot_series_with_labels

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayOutcome:
    verdicts: dict[int, Verdict]
    table_path: Path
    summary_path: Path
    figure_paths: list[Path]

    @property
    def overall(self) -> Verdict:
        return worst(tuple(self.verdicts.values()))


def _render_cycle(
    check: DecodingErrorCheck,
    cycle: int,
    objects: dict[str, Any],
    labels_by_series: dict[str, list],
    figures_dir: Path,
    figure_suffix: str,
) -> list[Path]:
    written: list[Path] = []
    highlights = {
        evaluation.series: [record.index for record in evaluation.bad_bins]
        for evaluation in check.last_evaluations
    }
    for name, labels in labels_by_series.items():
        n_kinds = None if check.is_chip_series(name) else len(check.catalog)
        series = read_series(objects[name], n_kinds)
        if series is None:
            continue
        output_path = figures_dir / f"cycle_{cycle:04d}" / f"{figure_stem(name)}.{figure_suffix}"
        written.append(
            plot_series_with_labels(
                series,
                labels,
                check.catalog,
                output_path,
                highlight=highlights.get(name, []),
            )
        )
    return written


def replay_cycles(
    batches: Sequence[CycleBatch],
    out_dir: Path,
    config: AppConfig,
    *,
    check: DecodingErrorCheck | None = None,
    render_figures: bool = False,
) -> ReplayOutcome:
    """Drive the check over recorded cycles the way the host scheduler would."""
    paths = build_output_paths(out_dir)
    check = check or DecodingErrorCheck.from_config(config)

    rows: list[dict[str, Any]] = []
    verdicts: dict[int, Verdict] = {}
    flags: dict[str, list[str]] = {}
    figure_paths: list[Path] = []
    flat_cycles = 0

    for cycle, objects in batches:
        result = check.check(objects)
        verdicts[cycle] = result.verdict
        if result.flags:
            flags[str(cycle)] = list(result.flags)
        if isinstance(check.last_thresholds, FlatCheck):
            flat_cycles += 1

        for evaluation in check.last_evaluations:
            rows.append(
                {
                    "cycle": cycle,
                    "series": evaluation.series,
                    "verdict": evaluation.verdict.name,
                    "mode": evaluation.mode,
                    "bootstrap": evaluation.bootstrap,
                    "n_bad_bins": len(evaluation.bad_bins),
                    "bad_bins": ";".join(str(record.index) for record in evaluation.bad_bins),
                }
            )

        labels_by_series = {}
        for name, obj in objects.items():
            labels = check.beautify(obj, result)
            if labels:
                labels_by_series[name] = labels

        if render_figures and labels_by_series:
            try:
                figure_paths.extend(
                    _render_cycle(
                        check,
                        cycle,
                        objects,
                        labels_by_series,
                        paths.figures,
                        config.outputs.figures_format,
                    )
                )
            except (OSError, ValueError):
                LOGGER.exception("Failed rendering figures for cycle %d", cycle)

        LOGGER.info("Cycle %d: %s", cycle, result.verdict.name)

    table_path = write_table(
        verdict_frame(rows), paths.tables / "cycle_verdicts", fmt=config.outputs.tables_format
    )
    overall = worst(tuple(verdicts.values()))
    summary_path = write_summary(
        {
            "n_cycles": len(verdicts),
            "overall_verdict": overall.name,
            "verdicts": {str(cycle): verdict.name for cycle, verdict in verdicts.items()},
            "flags": flags,
            "n_flat_check_cycles": flat_cycles,
            "error_kinds": len(check.catalog),
        },
        paths.summary / "replay.json",
    )
    return ReplayOutcome(
        verdicts=verdicts,
        table_path=table_path,
        summary_path=summary_path,
        figure_paths=figure_paths,
    )
