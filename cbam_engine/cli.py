# -*- coding: utf-8 -*-
"""
cbam-engine - CBAM emissions calculation from the command line

Commands:
    calculate   Compute the results snapshot of a JSON/YAML data snapshot
    validate    Run the input validation checks on a data snapshot
    defaults    Look up a built-in default emission factor
    version     Show the engine version
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cbam_engine import __version__
from cbam_engine.config import get_config
from cbam_engine.defaults import (
    get_default_embedded_emission_factor,
    get_default_fuel_emission_factor,
    get_default_process_emission_factor,
)
from cbam_engine.exceptions import SnapshotLoadError
from cbam_engine.io import load_overrides, load_snapshot
from cbam_engine.models import CBAMDataSnapshot, ResultsSnapshot, ValidationReport
from cbam_engine.service import CBAMEngineService

app = typer.Typer(
    name="cbam-engine",
    help="CBAM emissions calculation engine",
    no_args_is_help=True,
    add_completion=False,
)
console = Console()


class DefaultKind(str, Enum):
    fuel = "fuel"
    process = "process"
    embedded = "embedded"


def _configure_logging(verbose: bool, quiet: bool = False) -> None:
    level = getattr(logging, get_config().log_level, logging.INFO)
    if verbose:
        level = logging.DEBUG
    elif quiet:
        # keep stdout parseable for --json
        level = max(level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(file: Path, overrides: Optional[Path] = None) -> CBAMDataSnapshot:
    try:
        snapshot = load_snapshot(file)
        if overrides is not None:
            extra = load_overrides(overrides)
            snapshot = snapshot.model_copy(
                update={"emission_factors": list(snapshot.emission_factors) + extra},
            )
    except SnapshotLoadError as exc:
        console.print(f"[red]Error: {escape(exc.message)}[/red]")
        if exc.context.get("reason"):
            console.print(f"[dim]{escape(str(exc.context['reason']))}[/dim]")
        raise typer.Exit(1)
    return snapshot


def _print_results(results: ResultsSnapshot) -> None:
    table = Table(title="CBAM Emissions", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white", justify="right")

    table.add_row("Direct CO2 (tCO2)", f"{results.total_direct_co2_emissions:,.4f}")
    table.add_row("Process (tCO2e)", f"{results.total_process_emissions:,.4f}")
    table.add_row("Installation sources (tCO2e)", f"{results.installation_emissions:,.4f}")
    table.add_row("Total emissions (tCO2e)", f"{results.total_emissions:,.4f}")
    table.add_row("Embedded (tCO2e)", f"{results.total_embedded_emissions:,.4f}")
    table.add_row("Cumulative (tCO2e)", f"{results.cumulative_emissions:,.4f}")
    table.add_row("Transport (tCO2e)", f"{results.transport_emissions:,.4f}")
    table.add_row("Biogenic CO2 (tCO2)", f"{results.biogenic_co2_emissions:,.4f}")
    table.add_row("Total production (t)", f"{results.total_production:,.4f}")
    table.add_row("Specific emissions (tCO2e/t)", f"{results.specific_emissions:,.4f}")
    table.add_row("Emission intensity (tCO2e/t)", f"{results.emission_intensity:,.4f}")
    table.add_row("Renewable share", f"{results.renewable_share:.2%}")
    table.add_row("Imported raw material share", f"{results.imported_raw_material_share:.2%}")
    table.add_row("CBAM reportable (tCO2e)", f"{results.cbam_reportable_emissions:,.4f}")
    console.print(table)

    if results.provenance_hash:
        console.print(f"[dim]Provenance: {results.provenance_hash}[/dim]")


def _print_report(report: ValidationReport, title: str) -> None:
    if report.errors:
        console.print(f"[bold red]{title}: {len(report.errors)} error(s)[/bold red]")
        for message in report.errors:
            console.print(f"  [red]x[/red] {escape(message)}")
    else:
        console.print(f"[bold green]{title}: valid[/bold green]")
    for message in report.warnings:
        console.print(f"  [yellow]![/yellow] {escape(message)}")
    for message in report.info:
        console.print(f"  [dim]i {escape(message)}[/dim]")


@app.command()
def calculate(
    file: Path = typer.Argument(..., help="Data snapshot (JSON or YAML)"),
    as_json: bool = typer.Option(False, "--json", help="Print the results snapshot as JSON"),
    overrides: Optional[Path] = typer.Option(
        None, "--overrides", "-o", help="Additional emission factor overrides (JSON or YAML)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", help="Also write the results snapshot as JSON to this file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Compute the full results snapshot for a data snapshot file"""
    _configure_logging(verbose, quiet=as_json)
    snapshot = _load(file, overrides)
    results = CBAMEngineService().calculate(snapshot)
    exported = results.to_export_dict()

    if output is not None:
        output.write_text(json.dumps(exported, indent=2), encoding="utf-8")
        if not as_json:
            console.print(f"[green]Results written to {output}[/green]")

    if as_json:
        typer.echo(json.dumps(exported, indent=2))
    else:
        _print_results(results)


@app.command()
def validate(
    file: Path = typer.Argument(..., help="Data snapshot (JSON or YAML)"),
    results: bool = typer.Option(False, "--results", help="Also calculate and validate the results"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Run the input validation checks; exits with 1 when errors are found"""
    _configure_logging(verbose)
    snapshot = _load(file)
    service = CBAMEngineService()

    if results:
        evaluation = service.evaluate(snapshot)
        _print_report(evaluation.data_report, "Data")
        _print_report(evaluation.results_report, "Results")
        valid = evaluation.is_valid
    else:
        report = service.validate_data(snapshot)
        _print_report(report, "Data")
        valid = report.is_valid

    if not valid:
        raise typer.Exit(1)


@app.command()
def defaults(
    kind: DefaultKind = typer.Argument(..., help="fuel, process or embedded"),
    name: str = typer.Argument(..., help="Fuel type, process type or material name"),
):
    """Show the built-in default emission factor for a name"""
    lookups = {
        DefaultKind.fuel: (get_default_fuel_emission_factor, "tCO2/unit"),
        DefaultKind.process: (get_default_process_emission_factor, "tCO2/t"),
        DefaultKind.embedded: (get_default_embedded_emission_factor, "tCO2e/t"),
    }
    lookup, unit = lookups[kind]
    console.print(f"{kind.value} '{escape(name)}': [bold]{lookup(name):g}[/bold] {unit}")


@app.command()
def version():
    """Show the engine version"""
    console.print(f"[bold green]cbam-engine v{__version__}[/bold green]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
