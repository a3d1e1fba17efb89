from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    root: Path
    tables: Path
    figures: Path
    summary: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    paths = OutputPaths(
        root=out_dir,
        tables=out_dir / "tables",
        figures=out_dir / "figures",
        summary=out_dir / "summary",
    )
    for path in (paths.root, paths.tables, paths.figures, paths.summary):
        path.mkdir(parents=True, exist_ok=True)
    return paths


def figure_stem(series_name: str) -> str:
    """File-system safe stem for a series such as ``General/LinkErrorPlots``."""
    cleaned = "".join(char if char.isalnum() or char in "-_" else "_" for char in series_name)
    return cleaned.strip("_") or "series"
