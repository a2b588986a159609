"""statsbot CLI: start the bot, or print an account report in the terminal."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from statsbot.core.config import settings
from statsbot.core.errors import FetchError
from statsbot.ingestion.github import ActivityBundle, github_client, load_activity

app = typer.Typer(help="statsbot: GitHub PR stats for Discord.")

console = Console()


@app.command("run")
def run_bot():
    """Log in to Discord and start handling commands."""
    from statsbot.main import run

    try:
        run()
    except RuntimeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


async def _load(username: str) -> ActivityBundle:
    async with github_client() as client:
        return await load_activity(client, username)


def _bundle_table(bundle: ActivityBundle) -> Table:
    table = Table(title=f"Stats for {bundle.username} ({bundle.today})")
    table.add_column("Metric", style="cyan bold")
    table.add_column("Value", justify="right")

    table.add_row("Open PRs", str(len(bundle.open_prs)))
    table.add_row("Merged PRs today", str(len(bundle.merged_today)))
    table.add_row("Total merged PRs", str(len(bundle.merged_prs)))
    table.add_row("Assigned issues", str(len(bundle.assigned_issues)))
    table.add_row("Daily score", f"[green]{bundle.daily_score}[/green]")
    table.add_row("Total score", f"[green]{bundle.all_time_score}[/green]")
    return table


@app.command("report")
def report(
    username: str,
    list_today: bool = typer.Option(False, "--today", "-t", help="List PRs merged today"),
):
    """Fetch an account's activity and print its counts and scores."""
    if not settings.github_token:
        console.print("[yellow]GITHUB_TOKEN is not set; requests are unauthenticated.[/yellow]")

    with console.status(f"[bold green]Fetching GitHub activity for {username}..."):
        try:
            bundle = asyncio.run(_load(username))
        except FetchError as e:
            console.print(f"[red]GitHub API error: {e.status_code}[/red]")
            raise typer.Exit(1)

    console.print(_bundle_table(bundle))

    if list_today:
        if not bundle.merged_today:
            console.print("[dim]No PRs found.[/dim]")
        for item in bundle.merged_today:
            labels = ", ".join(item.labels) or "no labels"
            console.print(f"  • {item.title} [dim]({labels})[/dim] {item.url}")


if __name__ == "__main__":
    app()
