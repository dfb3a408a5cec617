"""Command-line entry points for StreakSage."""

from __future__ import annotations

from datetime import date

import click

from .config import BaseConfig
from .context import create_app_context
from .errors import StreakSageError
from .logging_config import setup_logging
from .tracker import HabitTracker


def _tracker(ctx: click.Context) -> HabitTracker:
    obj = ctx.ensure_object(dict)
    if "tracker" not in obj:
        config: BaseConfig = obj.get("config") or BaseConfig()
        obj["tracker"] = HabitTracker(create_app_context(config))
    return obj["tracker"]


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track habits, streaks and your friends' progress."""

    obj = ctx.ensure_object(dict)
    if "config" not in obj:
        obj["config"] = BaseConfig()
    setup_logging(obj["config"])


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""

    tracker = _tracker(ctx)
    click.echo(f"Database ready: {tracker.config.DATABASE_URL}")


@cli.command("seed")
@click.option("--demo", is_flag=True, default=False, help="Seed demo users, habits and follows")
@click.pass_context
def seed(ctx: click.Context, demo: bool) -> None:
    """Seed application data."""

    if not demo:
        click.echo("No action specified. Use --demo to seed demo data.")
        return

    from .services.demo import seed_demo

    ids = seed_demo(_tracker(ctx))
    click.echo(f"Demo users: {', '.join(sorted(ids))}")


@cli.command("stats")
@click.argument("username")
@click.pass_context
def stats(ctx: click.Context, username: str) -> None:
    """Show today's progress and streaks for USERNAME."""

    tracker = _tracker(ctx)
    try:
        user = tracker.get_user_by_username(username)
    except StreakSageError as exc:
        raise click.ClickException(str(exc)) from exc

    today = date.today()
    summary = tracker.get_user_stats(user.id, today)
    click.echo(f"{user.display_name} (@{user.username})")
    click.echo(f"  Current streak: {summary.current_streak}")
    click.echo(
        f"  Today: {summary.today_completed}/{summary.today_total} "
        f"({summary.today_completion_rate:.0f}%)"
    )
    click.echo(
        f"  This month: {summary.monthly_completed_days}/{summary.monthly_total_days} days "
        f"({summary.monthly_completion_rate:.0f}%)"
    )
    for status in tracker.get_habits_with_status(user.id, today):
        mark = "x" if status.is_completed else " "
        click.echo(f"  [{mark}] {status.habit.title} - streak {status.streak}")


@cli.command("feed")
@click.argument("username")
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Maximum items to show")
@click.pass_context
def feed(ctx: click.Context, username: str, limit: int | None) -> None:
    """Show recent activity from the people USERNAME follows."""

    tracker = _tracker(ctx)
    try:
        user = tracker.get_user_by_username(username)
        items = tracker.get_activity_feed(user.id, limit=limit)
    except StreakSageError as exc:
        raise click.ClickException(str(exc)) from exc

    if not items:
        click.echo("No recent activity.")
        return
    for item in items:
        line = f"{item.user.display_name} completed {item.habit.title} ({item.time_ago})"
        if item.streak > 1:
            line += f" - Day {item.streak} streak!"
        click.echo(line)


@cli.command("follow")
@click.argument("follower")
@click.argument("following")
@click.pass_context
def follow(ctx: click.Context, follower: str, following: str) -> None:
    """Make FOLLOWER follow FOLLOWING."""

    tracker = _tracker(ctx)
    try:
        source = tracker.get_user_by_username(follower)
        target = tracker.get_user_by_username(following)
        tracker.follow(source.id, target.id)
    except StreakSageError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"{source.username} now follows {target.username}")


def main() -> None:  # pragma: no cover - console script
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
