"""Command-line interface for SoH Check.

Usage:
    sohcheck calculate --delivery-capacity 75 --trip-distance 150 \\
        --avg-consumption 18 --soc-start 90 --soc-end 20
    sohcheck tiers
    sohcheck serve --port 8000
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .analysis import LowSocDeltaWarning, MeasurementValidationError, SoHCalculator
from .config import configure_logging, get_settings
from .services import OutcomeStatus, SoHCheckService

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="sohcheck",
    help="SoH Check - battery State of Health from a single consumption trip",
    add_completion=False,
)

TIER_COLORS = {
    "excellent": "green",
    "good": "cyan",
    "fair": "yellow",
    "poor": "red",
}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """SoH Check command-line interface."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@app.command()
def calculate(
    delivery_capacity: Optional[str] = typer.Option(
        None, "--delivery-capacity", help="Rated battery capacity at delivery (kWh)"
    ),
    trip_distance: Optional[str] = typer.Option(None, "--trip-distance", help="Trip distance (km)"),
    avg_consumption: Optional[str] = typer.Option(
        None, "--avg-consumption", help="Average consumption (kWh/100 km)"
    ),
    soc_start: Optional[str] = typer.Option(None, "--soc-start", help="State of charge at trip start (%)"),
    soc_end: Optional[str] = typer.Option(None, "--soc-end", help="State of charge at trip end (%)"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Continue on a low SoC delta without asking"),
) -> None:
    """Calculate battery State of Health from one trip."""
    service = SoHCheckService()
    raw = {
        "delivery_capacity": delivery_capacity,
        "trip_distance": trip_distance,
        "avg_consumption": avg_consumption,
        "soc_start": soc_start,
        "soc_end": soc_end,
    }

    def confirm(warning: LowSocDeltaWarning) -> bool:
        if yes:
            return True
        return typer.confirm(warning.message, default=False)

    try:
        outcome = service.run(raw, confirm=confirm)
    except MeasurementValidationError as e:
        console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1)

    if outcome.status == OutcomeStatus.CANCELLED:
        console.print("Calculation cancelled.")
        return

    result = outcome.result
    color = TIER_COLORS[result.status_tier.value]

    table = Table(title="Battery State of Health")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("SoC delta", f"{result.soc_delta:g}%")
    table.add_row("Consumed energy", f"{result.consumed_energy_kwh:.1f} kWh")
    table.add_row("Current capacity", result.display_capacity)
    table.add_row("SoH", f"[{color}]{result.display_soh}[/{color}]")
    table.add_row("Status", f"[{color}]{result.status_label}[/{color}]")
    console.print(table)


@app.command()
def tiers() -> None:
    """Show the status tier ladder."""
    table = Table(title="Status tiers")
    table.add_column("Tier")
    table.add_column("SoH")
    table.add_column("Label")

    lowest = None
    for threshold, tier in SoHCalculator.tier_ladder():
        color = TIER_COLORS[tier.value]
        if threshold is None:
            condition = f"< {lowest:g}%"
        else:
            condition = f">= {threshold:g}%"
            lowest = threshold
        table.add_row(f"[{color}]{tier.value}[/{color}]", condition, tier.label)

    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sohcheck.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload or settings.debug,
    )


if __name__ == "__main__":
    app()
