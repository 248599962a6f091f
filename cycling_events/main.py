import asyncio
import json
import logging
import sys
from collections.abc import Callable
from typing import Any

import click
import structlog

from cycling_events.config import FetchConfig
from cycling_events.exceptions import ConfigurationError, ValidationError
from cycling_events.models import AggregationRequest, BikeRegParams, StravaParams
from cycling_events.service import build_response, get_events, get_source_events

logger = structlog.get_logger(__name__)

_DEFAULT_AREA = StravaParams()


def setup_logging(log_level: str = "INFO") -> None:
    """Sends stdlib and structlog output to stderr, keeping stdout for JSON."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.KeyValueRenderer(
                key_order=["timestamp", "level", "event"]
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def filter_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Adds the per-source filter and output options to a command."""
    options = [
        click.option("--state", default="", help="BikeReg state filter (e.g. NY)"),
        click.option(
            "--discipline", default="", help="BikeReg discipline filter (e.g. Road)"
        ),
        click.option("--month", default="", help="BikeReg month filter"),
        click.option(
            "--lat", type=float, default=_DEFAULT_AREA.lat, help="Strava latitude"
        ),
        click.option(
            "--lng", type=float, default=_DEFAULT_AREA.lng, help="Strava longitude"
        ),
        click.option(
            "--radius", type=float, default=_DEFAULT_AREA.radius, help="Strava radius"
        ),
        click.option(
            "--output", default=None, help="Write JSON to this file instead of stdout"
        ),
        click.option("--log-level", default="INFO", help="DEBUG, INFO, WARNING or ERROR"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _load_config() -> FetchConfig:
    try:
        return FetchConfig.from_env()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def _write(payload: dict[str, Any], output: str | None) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        logger.info("output_written", path=output, count=payload["count"])
    else:
        click.echo(text)


@click.group()
def cli() -> None:
    """Cycling event listings from BikeReg and the New York Cycle Club."""


@cli.command()
@click.option("--bikereg/--no-bikereg", default=True, help="Include BikeReg events")
@click.option("--strava/--no-strava", default=False, help="Include Strava events")
@click.option("--nycc/--no-nycc", default=True, help="Include NYCC rides and calendar")
@click.option(
    "--merge-sources",
    is_flag=True,
    help="Treat same name and date from different sources as one event",
)
@filter_options
def events(
    bikereg: bool,
    strava: bool,
    nycc: bool,
    merge_sources: bool,
    state: str,
    discipline: str,
    month: str,
    lat: float,
    lng: float,
    radius: float,
    output: str | None,
    log_level: str,
) -> None:
    """Fetch, merge and sort events from all enabled sources."""
    setup_logging(log_level)
    request = AggregationRequest(
        include_bikereg=bikereg,
        include_strava=strava,
        include_nycc=nycc,
        merge_across_sources=merge_sources,
        bikereg=BikeRegParams(state=state, discipline=discipline, month=month),
        strava=StravaParams(lat=lat, lng=lng, radius=radius),
    )
    found = asyncio.run(get_events(request, _load_config()))
    _write(build_response(found), output)


@cli.command()
@click.argument("name")
@filter_options
def source(
    name: str,
    state: str,
    discipline: str,
    month: str,
    lat: float,
    lng: float,
    radius: float,
    output: str | None,
    log_level: str,
) -> None:
    """Fetch events from a single source (bikereg, strava, nycc, nycc_calendar)."""
    setup_logging(log_level)
    request = AggregationRequest(
        bikereg=BikeRegParams(state=state, discipline=discipline, month=month),
        strava=StravaParams(lat=lat, lng=lng, radius=radius),
    )
    try:
        found = asyncio.run(get_source_events(name, request, _load_config()))
    except ValidationError as e:
        raise click.BadParameter(e.message, param_hint="NAME") from e
    _write(build_response(found), output)


if __name__ == "__main__":
    cli()
