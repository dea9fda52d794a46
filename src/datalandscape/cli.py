"""Command-line interface for DataLandscape."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import uvicorn
import yaml
from pydantic import ValidationError
from rich.console import Console

from datalandscape import __version__
from datalandscape.config.config import Config, find_config_file
from datalandscape.observability.logging import configure_logging
from datalandscape.pipeline import DatasetInfoPipeline

console = Console(stderr=True)


def _load_config(ctx: click.Context) -> Config:
    config_path: Optional[Path] = ctx.obj["config_path"] or find_config_file()
    config = Config.from_yaml(config_path) if config_path else Config()
    config.monitoring.log_level = ctx.obj["log_level"]
    return config


def _emit(payload: Dict[str, Any], output: Optional[str]) -> None:
    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        console.print(f"[green]Wrote {output}[/green]")
    else:
        click.echo(text)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: str) -> None:
    """DataLandscape - data asset extraction for web sources."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None
    ctx.obj["log_level"] = log_level


@cli.command()
@click.argument("url")
@click.option("--title", default=None, help="Title already known for the source")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the record to this file")
@click.pass_context
def extract(ctx: click.Context, url: str, title: Optional[str], output: Optional[str]) -> None:
    """Extract the data asset record for URL."""
    config = _load_config(ctx)
    configure_logging(config.monitoring)

    async def run() -> Dict[str, Any]:
        async with DatasetInfoPipeline(config) as pipeline:
            result = await pipeline.extract(url, title)
        return {"dataAsset": result.to_json_dict()}

    _emit(asyncio.run(run()), output)


@cli.command()
@click.argument("urls_file", type=click.File("r"), required=False)
@click.option("--url", "urls", multiple=True, help="URL to process (can be used multiple times)")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the job report to this file")
@click.pass_context
def batch(ctx: click.Context, urls_file: Optional[Any], urls: tuple[str, ...], output: Optional[str]) -> None:
    """Extract many URLs concurrently as one job."""
    url_list: List[str] = []
    if urls_file:
        url_list.extend(line.strip() for line in urls_file if line.strip())
    url_list.extend(urls)

    if not url_list:
        console.print("[red]Error: No URLs provided[/red]")
        sys.exit(1)

    config = _load_config(ctx)
    configure_logging(config.monitoring)

    async def run() -> Dict[str, Any]:
        async with DatasetInfoPipeline(config) as pipeline:
            job = await pipeline.extract_many(url_list)
            results = [await pipeline.store.get_result(key) for key in job.result_keys]
        return {"job": job.to_dict(), "results": [r for r in results if r is not None]}

    _emit(asyncio.run(run()), output)


@cli.command()
@click.argument("source_ids", nargs=-1)
@click.option("--all", "all_sources", is_flag=True, help="Ingest every configured source")
@click.option("--list", "list_only", is_flag=True, help="List configured sources and exit")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the job report to this file")
@click.pass_context
def ingest(
    ctx: click.Context, source_ids: tuple[str, ...], all_sources: bool, list_only: bool, output: Optional[str]
) -> None:
    """Harvest listing items from configured ingestion sources."""
    config = _load_config(ctx)
    configured = config.ingestion.sources

    if list_only:
        for source in configured:
            click.echo(f"{source.id}\t{source.url}\t{source.schedule}")
        return

    if all_sources:
        sources = list(configured)
    else:
        unknown = [source_id for source_id in source_ids if config.ingestion.get_source(source_id) is None]
        if unknown:
            console.print(f"[red]Error: Unknown sources: {', '.join(unknown)}[/red]")
            sys.exit(1)
        sources = [source for source in configured if source.id in source_ids]
    if not sources:
        console.print("[red]Error: No sources selected[/red]")
        sys.exit(1)

    configure_logging(config.monitoring)

    async def run() -> Dict[str, Any]:
        async with DatasetInfoPipeline(config) as pipeline:
            job = await pipeline.ingest_sources(sources)
            results = [await pipeline.store.get_result(key) for key in job.result_keys]
        return {"job": job.to_dict(), "results": [r for r in results if r is not None]}

    _emit(asyncio.run(run()), output)


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int]) -> None:
    """Start the HTTP API."""
    from datalandscape.web.main import create_app

    config = _load_config(ctx)
    configure_logging(config.monitoring)
    host = host or config.web.host
    port = port or config.web.port

    console.print(f"[green]Starting DataLandscape API at http://{host}:{port}[/green]")
    uvicorn.run(
        create_app(config), host=host, port=port, log_config=None, log_level=config.monitoring.log_level.lower()
    )


@cli.command()
@click.pass_context
def validate_config(ctx: click.Context) -> None:
    """Validate the current configuration."""
    try:
        config = _load_config(ctx)
    except (ValidationError, ValueError, yaml.YAMLError) as e:
        console.print(f"[red]Configuration invalid: {e}[/red]")
        sys.exit(1)
    click.echo(config.model_dump_json(indent=2))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
