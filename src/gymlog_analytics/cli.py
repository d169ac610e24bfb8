"""CLI interface for gymlog analytics."""

from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import replace
from datetime import datetime

import click

from .config import Config
from .logging import setup_logging
from .metrics import get_metrics
from .period import WINDOWS
from .refresh import DashboardRefresher
from .registry import get_view_metadata
from .store import SessionStoreError, store_from_config
from .utils import parse_timestamp


def _parse_now(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise click.BadParameter(f"cannot parse {value!r} as an ISO 8601 instant")
    return parsed


def _validate_config(config: Config) -> Config:
    try:
        return config.validate()
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
def main():
    """Statistics over a workout session log."""


@main.command()
@click.option(
    "--store", "store_path",
    type=click.Path(dir_okay=False),
    help="Read a JSON session log (overrides GYMLOG_STORE_PATH and DATABASE_URL).",
)
@click.option("--database-url", type=str, help="Read sessions from Postgres (needs --user-id).")
@click.option("--user-id", type=str, help="Owner of the sessions when reading from Postgres.")
@click.option(
    "--window",
    type=click.Choice(WINDOWS),
    help="Trailing window for period views [default: GYMLOG_DEFAULT_WINDOW or week].",
)
@click.option(
    "--exercise", "exercises",
    multiple=True,
    help="Exercise to build stats for (repeatable). Defaults to every exercise in the window.",
)
@click.option("--now", callback=_parse_now, help="Reference instant (ISO 8601). Defaults to now.")
@click.option("--log-format", type=click.Choice(["json", "text"]), help="Log output format.")
@click.option(
    "--metrics", "include_metrics",
    is_flag=True,
    help="Add refresh and per-view timing counters under a \"metrics\" key.",
)
def snapshot(
    store_path: str | None,
    database_url: str | None,
    user_id: str | None,
    window: str | None,
    exercises: tuple[str, ...],
    now: datetime | None,
    log_format: str | None,
    include_metrics: bool,
):
    """Compute every view and print the dashboard snapshot as JSON."""
    config = Config.from_env()
    if store_path:
        config = replace(config, store_path=store_path, database_url=None)
    if database_url:
        if not (user_id or config.user_id):
            raise click.UsageError("--database-url requires --user-id")
        config = replace(config, database_url=database_url)
    if user_id:
        config = replace(config, user_id=user_id)
    if log_format:
        config = replace(config, log_format=log_format)
    config = _validate_config(config)

    window = window or config.default_window
    if window not in WINDOWS:
        raise click.UsageError(
            f"Invalid default window {window!r}; expected one of: {', '.join(WINDOWS)}"
        )

    setup_logging(config.log_format)
    refresher = DashboardRefresher.from_config(config, store_from_config(config))
    try:
        result = asyncio.run(
            refresher.refresh(window, exercises=list(exercises) or None, now=now)
        )
    except SessionStoreError as exc:
        click.echo(f"Error: could not load sessions: {exc}", err=True)
        sys.exit(1)

    if result is None:
        click.echo("Error: refresh was superseded", err=True)
        sys.exit(1)
    body = result.to_dict()
    if include_metrics:
        body["metrics"] = get_metrics()
    click.echo(json.dumps(body, indent=2, sort_keys=True, ensure_ascii=False))


@main.command("list-views")
def list_views():
    """List registered views with their scope and output schema."""
    click.echo(json.dumps(get_view_metadata(), indent=2, sort_keys=True, ensure_ascii=False))
