"""CLI entry point for fumadocs-migrate."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from fumadocs_migrate.config import MigrateConfig, load_config, load_config_with_source
from fumadocs_migrate.config.loader import CONFIG_FILENAME, DEFAULT_CONFIG_TEMPLATE
from fumadocs_migrate.driver import MigrationDriver, load_version
from fumadocs_migrate.models import MigrationReport
from fumadocs_migrate.stats import TransformStats
from fumadocs_migrate.transform import EXTRA_PASSES, build_pipeline, resolve_pass_order

app = typer.Typer(
    name="fumadocs-migrate",
    help="Rewrite Mintlify-flavoured MDX docs into Fumadocs MDX in place.",
)

config_app = typer.Typer(help="Manage fumadocs-migrate configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: MigrateConfig | None = None
_config_source: Path | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JsonLogFormatter(logging.Formatter):
    """Formatter used when `log_format: json`: one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def _configure_logging(cfg: MigrateConfig) -> None:
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JsonLogFormatter())
    else:
        handler = RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    logging.basicConfig(level=_LOG_LEVELS[cfg.log_level], handlers=[handler], force=True)


def _get_config() -> MigrateConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to fumadocs-migrate.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config, _config_source
    try:
        _config, _config_source = load_config_with_source(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config)


def _display_report(report: MigrationReport, max_warnings: int) -> None:
    title = "Migration (dry run)" if report.dry_run else "Migration"
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_row("Processed", str(report.processed))
    table.add_row("Modified", str(report.modified))
    table.add_row("Errors", str(len(report.errors)))
    table.add_row("Duration", f"{report.duration:.2f}s")
    rprint(table)

    if report.transformations:
        tx = Table(title="Transformations")
        tx.add_column("Transformation", style="cyan")
        tx.add_column("Count", justify="right", style="green")
        for name, count in report.transformations.items():
            tx.add_row(name, str(count))
        rprint(tx)
    else:
        rprint("[dim]No transformations applied.[/dim]")

    if report.warnings:
        rprint(f"\n[yellow]Warnings ({len(report.warnings)}):[/yellow]")
        for w in report.warnings[:max_warnings]:
            rprint(f"  [yellow]warn:[/yellow] {escape(w)}")
        if len(report.warnings) > max_warnings:
            rprint(f"  ... and {len(report.warnings) - max_warnings} more")

    for err in report.errors:
        rprint(f"  [red]error:[/red] {escape(err.file)}: {escape(err.error)}")


@app.command()
def run(
    project_root: Annotated[Path, typer.Argument(help="Docs project root")] = Path("."),
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Transform without writing files")] = False,
    version: Annotated[
        str | None, typer.Option("--version", help="Release version to replace with the placeholder")
    ] = None,
    no_version: Annotated[bool, typer.Option("--no-version", help="Skip version replacement")] = False,
    as_json: Annotated[bool, typer.Option("--json", help="Print the report as JSON")] = False,
) -> None:
    """Migrate every MDX file under the content roots in place."""
    cfg = _get_config()
    if not project_root.is_dir():
        rprint(f"[red]Error:[/red] Not a directory: {project_root}")
        raise typer.Exit(1)

    if no_version:
        release = None
    elif version:
        release = version
    else:
        release = load_version(project_root, cfg.version)

    try:
        pipeline = build_pipeline(cfg, release)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    driver = MigrationDriver(project_root, cfg, pipeline, TransformStats(), dry_run=dry_run)
    report = driver.run()

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return
    _display_report(report, cfg.report.max_warnings)


@app.command()
def passes() -> None:
    """List the passes in the order they will run."""
    cfg = _get_config()
    try:
        order = resolve_pass_order(cfg.pipeline.extra_passes, cfg.pipeline.disabled_passes)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"Passes ({len(order)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Pass", style="cyan")
    table.add_column("Kind", style="green")
    for i, cls in enumerate(order, start=1):
        table.add_row(str(i), cls.name, "opt-in" if cls.name in EXTRA_PASSES else "default")
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Print the resolved configuration and the file it was read from."""
    cfg = _get_config()
    source = str(_config_source) if _config_source else "built-in defaults"
    rprint(f"[dim]# source: {escape(source)}[/dim]")
    rprint(Syntax(yaml.safe_dump(cfg.model_dump(), sort_keys=False), "yaml"))


@config_app.command("init")
def config_init(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file")] = False,
) -> None:
    """Write a commented starter config to the current directory."""
    target = Path(CONFIG_FILENAME)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    rprint(f"[green]Created[/green] {target}")
