"""Command line interface for the habit tracker."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from .config import BaseConfig
from .errors import HabitTrackerError
from .infra.database import bootstrap_database
from .infra.repositories.habit import SQLModelHabitStore
from .logging_config import setup_logging
from .services.export_csv import export_habits_csv, write_habits_csv
from .services.habits import HabitService
from .services.stats import HabitSort
from .services.users import ensure_user


class _Context:
    """Lazily bootstrapped config, session factory and service."""

    def __init__(self) -> None:
        self.config = BaseConfig()
        self._session_factory = None
        self._service: HabitService | None = None

    def bootstrap(self):
        """Create the engine and schema on first use."""
        if self._session_factory is None:
            _, self._session_factory = bootstrap_database(self.config)
        return self._session_factory

    @property
    def session_factory(self):
        return self.bootstrap()

    @property
    def service(self) -> HabitService:
        if self._service is None:
            store = SQLModelHabitStore(self.session_factory)
            self._service = HabitService(store, clock=self.config.local_now)
        return self._service


pass_context = click.make_pass_decorator(_Context)


def _run(action):
    """Invoke ``action`` and turn domain failures into CLI errors."""
    try:
        return action()
    except HabitTrackerError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Configure file and console logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Habit tracker maintenance and reporting commands."""

    ctx.obj = _Context()
    if verbose:
        setup_logging(ctx.obj.config)


@cli.command("init-db")
@pass_context
def init_db(context: _Context) -> None:
    """Create the database schema."""

    context.bootstrap()
    click.echo(f"Database ready: {context.config.DATABASE_URL}")


@cli.command("add-user")
@click.option("--provider-id", required=True, help="Identity provider subject id.")
@click.option("--email", required=True)
@click.option("--name", default=None)
@pass_context
def add_user(context: _Context, provider_id: str, email: str, name: str | None) -> None:
    """Create (or look up) a user as the login flow would."""

    user = _run(
        lambda: ensure_user(
            provider_id=provider_id,
            email=email,
            name=name,
            session_factory=context.session_factory,
        )
    )
    click.echo(f"User #{user.id} {user.email}")


@cli.command("stats")
@click.option("--user-id", type=int, required=True)
@click.option(
    "--sort",
    type=click.Choice([option.value for option in HabitSort]),
    default=HabitSort.NEWEST.value,
    show_default=True,
)
@pass_context
def stats(context: _Context, user_id: int, sort: str) -> None:
    """Print habits with their streaks and the stats snapshot."""

    overview = _run(lambda: context.service.overview(user_id=user_id, sort=sort))
    for habit in overview.habits:
        mark = "x" if habit.checked_in_today else " "
        click.echo(f"[{mark}] {habit.name} (streak {habit.streak}, total {habit.total_completions})")
    snapshot = overview.stats
    click.echo(
        f"{snapshot.completed_today}/{snapshot.total_habits} done today "
        f"({snapshot.completion_rate}%), {snapshot.total_completions_this_week} this week, "
        f"{snapshot.total_all_time} all time"
    )


@cli.command("calendar")
@click.option("--user-id", type=int, required=True)
@click.option("--year", required=True)
@click.option("--month", required=True)
@pass_context
def calendar(context: _Context, user_id: int, year: str, month: str) -> None:
    """Print the month's completions as JSON."""

    data = _run(lambda: context.service.calendar(year, month, user_id=user_id))
    click.echo(json.dumps(data, indent=2))


@cli.command("export")
@click.option("--user-id", type=int, required=True)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="CSV file to write; stdout when omitted.",
)
@pass_context
def export(context: _Context, user_id: int, output: Path | None) -> None:
    """Export habits and completion dates as CSV."""

    rows = _run(lambda: context.service.export_rows(user_id=user_id))
    if output is None:
        write_habits_csv(rows, sys.stdout)
        return
    path = export_habits_csv(rows=rows, output_path=output)
    click.echo(f"Export written: {path}")


def main() -> None:  # pragma: no cover - console entry point
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
