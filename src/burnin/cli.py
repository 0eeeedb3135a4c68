"""Command-line interface for disk burn-in runs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from .config import get_settings, settings_with_overrides
from .device.commands import DeviceFault
from .logger import configure_logging, get_logger
from .preflight import PreflightError, check_dependencies, check_device, normalise_device, run_preflight
from .runtime import BurnInSession, RunAborted, RunOutcome

app = typer.Typer(add_completion=False, help="SMART self-test and badblocks burn-in for a single disk.")

EXIT_OK = 0
EXIT_STAGE_FAILED = 1
EXIT_PREFLIGHT = 2
EXIT_DEVICE_FAULT = 3


def _print_summary(outcome: RunOutcome) -> None:
    typer.echo("Stage summary:")
    for stage in outcome.stages:
        suffix = " (simulated)" if stage.simulated else ""
        typer.echo(f"  {stage.name}: {stage.status.value}{suffix}")


@app.callback()
def _root_callback() -> None:
    """disk-burnin command group."""


@app.command()
def run(
    device: str = typer.Argument(..., help="Device to burn in, e.g. 'sda' or '/dev/sda'."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Announce every action instead of performing it (also enabled by BURNIN_DRY_RUN).",
    ),
    log_dir: Optional[Path] = typer.Option(None, help="Directory for the run log."),
    bad_blocks_dir: Optional[Path] = typer.Option(None, help="Directory for the badblocks report."),
    plan: Optional[str] = typer.Option(
        None,
        help="Comma-separated stages to run in order (short, badblocks, extended).",
    ),
) -> None:
    """Run the burn-in plan against DEVICE. Destroys all data on DEVICE."""

    try:
        settings = settings_with_overrides(
            dry_run=True if dry_run else None,
            log_dir=log_dir,
            bad_blocks_dir=bad_blocks_dir,
            plan=plan,
        )
    except ValidationError as exc:
        typer.echo(f"Error: invalid configuration: {exc}", err=True)
        raise typer.Exit(code=EXIT_PREFLIGHT) from exc
    configure_logging(settings)
    logger = get_logger(__name__)
    mode = settings.run_mode

    try:
        device_path = run_preflight(settings, device, mode)
    except PreflightError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_PREFLIGHT) from exc

    logger.info("Starting burn-in of %s in %s mode", device_path, mode.value)
    session = BurnInSession(settings, device_path, mode)
    try:
        outcome = session.run()
    except RunAborted as exc:
        _print_summary(exc.outcome)
        typer.echo(f"Error: burn-in aborted: {exc}", err=True)
        raise typer.Exit(code=EXIT_DEVICE_FAULT) from exc
    except DeviceFault as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_DEVICE_FAULT) from exc

    _print_summary(outcome)
    raise typer.Exit(code=EXIT_OK if outcome.ok else EXIT_STAGE_FAILED)


@app.command()
def profile(
    device: str = typer.Argument(..., help="Device to inspect, e.g. 'sda' or '/dev/sda'."),
) -> None:
    """Show the resolved device profile and the stages a run would perform."""

    settings = get_settings()
    configure_logging(settings)
    try:
        device_path = normalise_device(device)
        check_dependencies([settings.smartctl_path])
        check_device(device_path)
        session = BurnInSession(settings, device_path)
        resolved = session.resolve()
        stages = session.plan_stages()
    except (PreflightError, DeviceFault) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_PREFLIGHT) from exc

    typer.echo(f"Device: {resolved.device}")
    typer.echo(f"Model: {resolved.model}")
    typer.echo(f"Serial: {resolved.serial}")
    typer.echo(f"Class: {resolved.device_class.value}")
    typer.echo(f"Short test: {resolved.short_test_minutes} minutes ({resolved.short_test_seconds} seconds)")
    typer.echo(f"Extended test: {resolved.extended_test_minutes} minutes ({resolved.extended_test_seconds} seconds)")
    log_path, bad_blocks_path = session.output_paths(resolved)
    typer.echo(f"Log file: {log_path}")
    typer.echo(f"Bad blocks file: {bad_blocks_path}")
    typer.echo("Plan:")
    for stage in stages:
        if stage.is_applicable(resolved):
            marker = " [destructive]" if stage.destructive else ""
            typer.echo(f"  {stage.name}{marker}")
        else:
            typer.echo(f"  {stage.name} (skipped: {stage.skip_reason})")


def main() -> None:
    """Entrypoint for the ``burnin`` console script."""

    logger = get_logger(__name__)
    logger.debug("Invoked burnin CLI entrypoint")
    app()
