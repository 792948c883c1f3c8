"""
Command-line interface for the match tracker.
Usage examples:
  python -m match_tracker.apps.cli run-once
  python -m match_tracker.apps.cli snapshot --team senior-a-masc
  python -m match_tracker.apps.cli history --limit 10
  python -m match_tracker.apps.cli classify "AE BADALONÈS SÈNIOR A MASCULÍ"
  python -m match_tracker.apps.cli serve --port 3001
"""

import asyncio
import json
from typing import Optional

import click

from ..common.logging_utils import configure_logging
from ..common.team_classifier import TeamClassifier
from ..core.config import Settings
from ..database.state_store import PersistenceError, StateStore
from .tracker_app import run_update_once


def _store(cfg: Settings) -> StateStore:
    return StateStore(cfg.state_file_path, cfg.history_limit)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL for this invocation.")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str]):
    cfg = Settings()
    configure_logging("match_tracker", level=log_level or cfg.log_level, log_format=cfg.log_format)
    ctx.obj = cfg


@cli.command(name="run-once")
@click.pass_obj
def run_once(cfg: Settings):
    """Crawl once, diff against the stored snapshot and save on changes"""
    result = asyncio.run(run_update_once(cfg))
    click.echo(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    raise SystemExit(0 if result.success else 1)


@cli.command()
@click.option("--team", default=None, help="Only show one team key.")
@click.pass_obj
def snapshot(cfg: Settings, team: Optional[str]):
    """Print the stored snapshot"""
    try:
        snap, metadata = asyncio.run(_store(cfg).load())
    except PersistenceError as e:
        raise click.ClickException(str(e))
    if snap is None:
        click.echo("No snapshot stored yet.")
        return

    click.echo(
        f"Season {snap.season} | {snap.total_teams} teams | {snap.total_matches} matches | "
        f"last update {metadata.last_update} | last check {metadata.last_check}"
    )
    for key, entry in snap.teams.items():
        if team and key != team:
            continue
        click.echo(f"- {key}: {entry.name} ({len(entry.urls)} matches)")
        if team:
            for url in entry.urls:
                click.echo(f"    {url}")


@cli.command()
@click.option("--limit", default=20, show_default=True, help="Number of most recent records.")
@click.pass_obj
def history(cfg: Settings, limit: int):
    """Print the most recent history records"""
    try:
        records = asyncio.run(_store(cfg).history())
    except PersistenceError as e:
        raise click.ClickException(str(e))
    if not records:
        click.echo("History is empty.")
        return
    for record in records[-limit:]:
        click.echo(
            f"{record.timestamp.isoformat()}  teams={record.total_teams}  "
            f"matches={record.total_matches}  season={record.season}"
        )


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
def classify(cfg: Settings, names: tuple[str, ...]):
    """Show the team key and profile for raw team names"""
    classifier = TeamClassifier.for_club(icon=cfg.team_icon, club_keyword=cfg.club_keyword)
    for name in names:
        key, profile = classifier.classify(name)
        click.echo(f"{name!r} -> {key} {profile.icon} keywords={list(profile.keywords)}")


@cli.command()
@click.option("--host", default=None, help="Bind address (default: API_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: API_PORT).")
@click.option("--no-scheduler", is_flag=True, help="Serve the API without scheduled updates.")
@click.pass_obj
def serve(cfg: Settings, host: Optional[str], port: Optional[int], no_scheduler: bool):
    """Run the API server; the app lifespan bootstraps and starts the scheduler"""
    import uvicorn

    from ..api.main import create_fastapi_app
    from .tracker_app import MatchTrackerApp

    overrides = {}
    if host:
        overrides["api_host"] = host
    if port:
        overrides["api_port"] = port
    if no_scheduler:
        overrides["enable_scheduler"] = False
    cfg = cfg.model_copy(update=overrides)
    app = create_fastapi_app(cfg, MatchTrackerApp(cfg), manage_lifecycle=True)
    uvicorn.run(app, host=cfg.api_host, port=cfg.api_port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    cli()
