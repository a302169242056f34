"""Command line interface for Sports Aggregator."""

import asyncio
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import get_settings
from .container import build_container
from .models import SportId
from .utils.logging_config import setup_logging


console = Console()

SPORT_CHOICE = click.Choice([sport.value for sport in SportId])


def _sport(value: Optional[str]) -> Optional[SportId]:
    return SportId(value) if value else None


async def _with_container(action):
    container = build_container(get_settings())
    await container.start()
    try:
        return await action(container)
    finally:
        await container.close()


def _print_statuses(container) -> None:
    table = Table(title="Provider Status")
    table.add_column("Provider", style="cyan")
    table.add_column("Healthy")
    table.add_column("Failures", justify="right")
    table.add_column("Rate limit", justify="right")
    table.add_column("Last error", style="dim")

    for status in container.registry.get_all_statuses():
        table.add_row(
            status.name,
            "[green]yes[/green]" if status.is_healthy else "[red]no[/red]",
            str(status.consecutive_failures),
            "-" if status.rate_limit_remaining is None else str(status.rate_limit_remaining),
            status.last_error or "",
        )
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None, help='Override LOG_LEVEL')
def cli(log_level: Optional[str]):
    """Sports Aggregator - news and live scores from many providers."""
    setup_logging(level=log_level)


@cli.command()
@click.option('--host', default=None, help='Bind address')
@click.option('--port', default=None, type=int, help='Bind port')
@click.option('--reload', is_flag=True, help='Reload on code changes')
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the HTTP API."""
    from .main import run
    run(host=host, port=port, reload=reload)


@cli.command()
@click.option('--sport', '-s', type=SPORT_CHOICE, default=None, help='Sport filter')
@click.option('--limit', '-l', default=20, type=click.IntRange(1, 100), help='Number of articles')
def news(sport: Optional[str], limit: int):
    """Fetch the latest news once and print it."""
    async def _news(container):
        result = await container.news.get_latest(_sport(sport), limit=limit, use_cache=False)

        table = Table(title=f"Latest news ({sport or 'all'})")
        table.add_column("Published", style="dim")
        table.add_column("Sport")
        table.add_column("Source", style="cyan")
        table.add_column("Title")
        table.add_column("Category", style="magenta")
        for article in result.items:
            table.add_row(
                article.published_at.strftime('%Y-%m-%d %H:%M'),
                article.sport_id.value,
                article.source,
                article.title,
                article.category or "",
            )
        console.print(table)
        if result.is_fallback:
            console.print("[yellow]⚠️ All providers unavailable, showing sample data[/yellow]")
        _print_statuses(container)

    asyncio.run(_with_container(_news))


@cli.command()
@click.option('--sport', '-s', type=SPORT_CHOICE, default=None, help='Sport filter')
def scores(sport: Optional[str]):
    """Fetch live scores once and print them."""
    async def _scores(container):
        result = await container.scores.get_latest(_sport(sport), limit=100, use_cache=False)

        table = Table(title=f"Scores ({sport or 'all'})")
        table.add_column("Start", style="dim")
        table.add_column("League")
        table.add_column("Home", style="cyan")
        table.add_column("Score", justify="center")
        table.add_column("Away", style="cyan")
        table.add_column("Status")
        for score in result.items:
            line = (
                f"{score.home_score} - {score.away_score}"
                if score.home_score is not None and score.away_score is not None else "-"
            )
            table.add_row(
                score.start_time.strftime('%Y-%m-%d %H:%M'),
                score.league,
                score.home_team,
                line,
                score.away_team,
                score.period or score.status.value,
            )
        console.print(table)
        if result.is_fallback:
            console.print("[yellow]⚠️ All providers unavailable, showing sample data[/yellow]")

    asyncio.run(_with_container(_scores))


@cli.command()
def status():
    """Probe every provider once and print the health registry."""
    async def _status(container):
        await container.news.get_latest(None, limit=10, use_cache=False)
        await container.scores.get_latest(None, limit=10, use_cache=False)
        _print_statuses(container)

    asyncio.run(_with_container(_status))


def main():
    """Entry point."""
    cli()


if __name__ == "__main__":
    main()
