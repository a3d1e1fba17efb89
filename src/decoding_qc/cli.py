from __future__ import annotations

from pathlib import Path

import typer

from decoding_qc.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from decoding_qc.error_kinds import ErrorCatalog
from decoding_qc.io.read import load_cycles
from decoding_qc.logging import configure_logging
from decoding_qc.pipeline.replay import replay_cycles
from decoding_qc.thresholds import FlatCheck, thresholds_from_parameters

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path) -> AppConfig:
    return load_config(config_path)


@app.command()
def replay(
    csv: Path = typer.Option(..., exists=True, readable=True, resolve_path=True),
    out: Path = typer.Option(Path("out"), resolve_path=True),
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
    figures: bool = typer.Option(False, help="Render annotated histograms for every cycle."),
) -> None:
    """Replay recorded error counters (cycle,series,bin,count) through the check."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    catalog = ErrorCatalog.from_names(cfg.error_kinds)
    try:
        batches = load_cycles(csv, len(catalog))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--csv") from exc

    outcome = replay_cycles(batches, out_dir=out, config=cfg, render_figures=figures)
    typer.echo(f"Replay complete. Cycles: {len(outcome.verdicts)}")
    for cycle, verdict in outcome.verdicts.items():
        typer.echo(f"- cycle {cycle}: {verdict.label}")
    typer.echo(f"Overall: {outcome.overall.label}")
    typer.echo(f"Verdict table: {outcome.table_path}")


@app.command("error-kinds")
def error_kinds(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """List the error kinds, one per histogram bin."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    for kind in ErrorCatalog.from_names(cfg.error_kinds):
        typer.echo(f"{kind.index:>3}  {kind.name}")


@app.command()
def thresholds(
    config: Path = typer.Option(DEFAULT_CONFIG_PATH, exists=True, readable=True, resolve_path=True),
) -> None:
    """Show how the configured limit vector resolves."""
    cfg = _load_app_config(config)
    configure_logging(cfg.logging.level)
    catalog = ErrorCatalog.from_names(cfg.error_kinds)
    mode = thresholds_from_parameters(cfg.check, len(catalog))
    if isinstance(mode, FlatCheck):
        scanned = "all bins" if mode.scan_last_bin else "all but the last bin"
        typer.echo(f"Flat check ({mode.reason}): ceiling={mode.ceiling}, scanning {scanned}")
        return
    typer.echo("Per-kind limits:")
    for kind, limit in zip(catalog, mode.limits):
        shown = "skipped" if limit < 0 else str(limit)
        typer.echo(f"{kind.index:>3}  {shown:>8}  {kind.name}")


if __name__ == "__main__":
    app()
