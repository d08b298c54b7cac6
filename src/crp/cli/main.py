"""Typer CLI entry point."""

from __future__ import annotations

import asyncio
from typing import Optional

import orjson
import typer
import uvicorn

from crp.api import create_app
from crp.classification import classify
from crp.config import Settings
from crp.db import PostgresComplaintStore
from crp.db.client import db_cursor
from crp.errors import PipelineError
from crp.pipeline import build_resolver
from crp.utils.logging import configure_logging, get_logger


app = typer.Typer(help="Complaint Routing Pipeline CLI")
db_app = typer.Typer(help="Database utilities")

app.add_typer(db_app, name="db")

logger = get_logger(__name__)


def _echo_json(payload: dict) -> None:
    typer.echo(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())


@app.callback()
def main() -> None:
    """Initialize logging for all commands."""
    settings = Settings()
    configure_logging(settings.log_level)


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default from HOST)"),
    port: Optional[int] = typer.Option(None, help="Port (default from PORT)"),
) -> None:
    """Run the HTTP API with uvicorn."""
    settings = Settings()
    uvicorn.run(
        create_app(settings=settings),
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command("classify")
def classify_cmd(
    title: str = typer.Argument(..., help="Post title"),
    body: str = typer.Option("", help="Post body"),
) -> None:
    """Classify a post without fetching or saving anything."""
    result = classify(title, body)
    _echo_json(result.model_dump(mode="json", by_alias=True))


@app.command("fetch")
def fetch(
    keyword: str = typer.Option(..., help="Search keyword, e.g. pothole"),
    source: str = typer.Option("delhi", help="Subreddit to search"),
    limit: int = typer.Option(20, help="Max posts to fetch"),
    multi: bool = typer.Option(False, help="Search r/delhi, r/india and r/delhiNCR"),
) -> None:
    """Preview classified posts for a keyword."""
    resolver = build_resolver()
    try:
        summary = asyncio.run(resolver.preview(keyword, source, limit, multi))
    except PipelineError as exc:
        typer.echo(f"Fetch failed: {exc}", err=True)
        raise typer.Exit(1)
    _echo_json(summary.model_dump(mode="json", by_alias=True))


@app.command("batch")
def batch(
    keyword: str = typer.Option("pothole", help="Search keyword"),
    source: str = typer.Option("delhi", help="Subreddit to search"),
    limit: int = typer.Option(10, help="Max posts to process (capped by BATCH_MAX_POSTS)"),
) -> None:
    """Fetch posts and register every civic complaint among them."""
    resolver = build_resolver()
    try:
        summary = asyncio.run(resolver.batch_process(keyword, source, limit))
    except PipelineError as exc:
        typer.echo(f"Batch failed: {exc}", err=True)
        raise typer.Exit(1)
    _echo_json(summary.model_dump(mode="json", by_alias=True))


@db_app.command("check")
def db_check() -> None:
    """Check database connectivity."""

    async def check() -> None:
        async with db_cursor() as cursor:
            await cursor.execute("select 1")

    try:
        asyncio.run(check())
        logger.info("db.check.ok")
    except Exception as exc:
        logger.error("db.check.failed: %s", exc)
        typer.echo(f"Database check failed: {exc}", err=True)
        raise typer.Exit(1)


@db_app.command("init")
def db_init() -> None:
    """Create the complaints table if it does not exist."""
    try:
        asyncio.run(PostgresComplaintStore().init_schema())
    except (PipelineError, ValueError) as exc:
        logger.error("db.init.failed: %s", exc)
        typer.echo(f"Database init failed: {exc}", err=True)
        raise typer.Exit(1)
    logger.info("db.init.ok")


if __name__ == "__main__":
    app()
