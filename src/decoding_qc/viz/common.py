from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
from matplotlib.figure import Figure

POINTS_PER_INCH = 72.0


def save_figure(fig: Figure, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(path)
    plt.close(fig)
    return path


def relative_font_size(fig: Figure, size: float) -> float:
    """Font size in points for a size given as a fraction of the figure height."""
    return float(size) * fig.get_figheight() * POINTS_PER_INCH
