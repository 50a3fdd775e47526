"""Command-line interface for sharescrape."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from sharescrape import __version__
from sharescrape.config import Config, load_config
from sharescrape.exceptions import ScrapeError
from sharescrape.extractor import default_registry
from sharescrape.observability import configure_logging
from sharescrape.orchestrator import build_orchestrator

console = Console()
err_console = Console(stderr=True)
logger = structlog.get_logger(__name__)


def _load(ctx: click.Context) -> Config:
    config: Config = load_config(ctx.obj["config_path"])
    if ctx.obj["log_level"]:
        config.monitoring.log_level = ctx.obj["log_level"]
    configure_logging(config.monitoring)
    return config


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """sharescrape - normalized transcripts from AI chat share pages."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("url")
@click.option("--output", "-o", type=click.Path(dir_okay=False, writable=True), help="Write the JSON result here")
@click.pass_context
def scrape(ctx: click.Context, url: str, output: Optional[str]) -> None:
    """Scrape a single share-page URL."""
    config = _load(ctx)
    orchestrator = build_orchestrator(config)

    try:
        result = asyncio.run(orchestrator.scrape(url))
    except ScrapeError as e:
        err_console.print(f"[red]{e.kind}: {e.public_message}[/red]")
        sys.exit(2 if e.status_code < 500 else 1)

    payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(payload, encoding="utf-8")
        console.print(
            Panel.fit(
                f"Platform: {result.platform.value}\nMessages: {len(result.messages)}\nSaved to: {output}",
                title=result.title or url,
                border_style="green",
            )
        )
    else:
        console.print_json(payload)


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to web.host)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to web.port)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Serve the HTTP API."""
    from sharescrape.web.main import run_web_server

    config = _load(ctx)
    run_web_server(host=host or config.web.host, port=port or config.web.port, config=config)


@cli.command()
def platforms() -> None:
    """List supported platforms and the URL patterns they accept."""
    table = Table(title="Supported platforms")
    table.add_column("Platform", style="cyan")
    table.add_column("URL patterns", style="magenta")
    table.add_column("Render wait", justify="right")
    for extractor in default_registry():
        table.add_row(
            extractor.platform.value,
            ", ".join(extractor.url_patterns),
            f"{extractor.render_timeout_ms / 1000:g}s",
        )
    console.print(table)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
