from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np

from decoding_qc.annotator import DisplayLabel
from decoding_qc.error_kinds import ErrorCatalog
from decoding_qc.series import MonitoringSeries
from decoding_qc.viz.common import relative_font_size, save_figure


def plot_series_with_labels(
    series: MonitoringSeries,
    labels: Sequence[DisplayLabel],
    catalog: ErrorCatalog,
    output_path: Path,
    *,
    highlight: Sequence[int] = (),
) -> Path:
    positions = np.arange(len(series.bins))
    colors = np.full(len(series.bins), "#94a3b8", dtype=object)
    for index in highlight:
        if 0 <= index < len(colors):
            colors[index] = "#991b1b"

    fig, ax = plt.subplots(figsize=(12, 5))
    fig.subplots_adjust(top=0.82, bottom=0.12)
    ax.bar(positions, series.bins, color=list(colors))
    ax.set_xlim(-0.5, len(series.bins) - 0.5)
    ax.set_xticks(positions)
    ax.set_xticklabels([str(position) for position in positions])
    # Aggregate plots are binned per chip, not per error kind.
    ax.set_xlabel("Error ID" if len(series.bins) == len(catalog) else "Bin")
    ax.set_ylabel("Counts")
    ax.set_title(series.name, fontsize=10, loc="right")

    for label in labels:
        fig.text(
            label.x,
            label.y,
            label.text,
            color=label.color,
            fontsize=relative_font_size(fig, label.size),
            fontweight="bold" if label.bold else "normal",
            transform=fig.transFigure,
        )
    return save_figure(fig, output_path)
