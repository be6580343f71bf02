"""CLI entry point for health-trends."""

from datetime import date
from pathlib import Path

import typer
from pydantic import TypeAdapter, ValidationError

from health_trends import __version__
from health_trends.app import HealthTrends, configure_logging
from health_trends.core.config import Settings
from health_trends.core.exceptions import UnsupportedUnitError
from health_trends.models.metric import DisplayUnit, MetricKind
from health_trends.models.policy import METRIC_POLICIES
from health_trends.models.sample import DatedSample
from health_trends.services.conversion import is_supported

app = typer.Typer(
    name="health-trends",
    help="Period averages, chart series and scales for daily health metrics",
    no_args_is_help=True,
)

_samples_adapter = TypeAdapter(list[DatedSample])


@app.command()
def snapshot(
    samples: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of samples"),
    kind: MetricKind = typer.Option(MetricKind.WEIGHT, help="Metric kind"),
    unit: DisplayUnit = typer.Option(None, help="Display unit (configured preference if unset)"),
    target: float = typer.Option(None, help="Target in base unit"),
    today: float = typer.Option(None, help="Today's value in base unit"),
    as_of: str = typer.Option(None, help="Day treated as today (YYYY-MM-DD)"),
) -> None:
    """Compute one snapshot and print it as JSON.

    Example:
        health-trends snapshot weight.json --kind weight --unit lbs --target 75
    """
    config = Settings()
    configure_logging(config)

    try:
        series = _samples_adapter.validate_json(samples.read_bytes())
        day = date.fromisoformat(as_of) if as_of else None
    except (ValidationError, ValueError) as e:
        typer.echo(f"Invalid input: {e}", err=True)
        raise typer.Exit(code=1) from e

    if unit is not None and not is_supported(kind, unit):
        typer.echo(f"Error: {UnsupportedUnitError(kind, unit)}", err=True)
        raise typer.Exit(code=2)

    trends = HealthTrends(config=config, clock=(lambda: day) if day else None)
    pipeline = trends.pipeline(kind, samples=series, target=target, today=today)
    if unit is not None and unit != pipeline.feeds.unit.value:
        pipeline.feeds.unit.publish(unit)

    result = pipeline.snapshot()
    trends.close()
    if result is None:
        typer.echo("Error: no snapshot produced", err=True)
        raise typer.Exit(code=2)

    typer.echo(result.model_dump_json(indent=2))


@app.command()
def kinds() -> None:
    """List metric kinds and their display units."""
    for kind, policy in METRIC_POLICIES.items():
        units = ", ".join(u.value for u in policy.display_units)
        typer.echo(f"{kind.value}: {units}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"health-trends v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
