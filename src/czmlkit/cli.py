"""Typer CLI for loading, merging and validating CZML documents."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from czmlkit.document import LoadResult, Severity, parse_packet
from czmlkit.errors import CZMLLoadError, PacketError
from czmlkit.loader import (
    available_examples,
    example_url,
    load_and_merge,
    load_example,
    load_from_file,
    load_from_url,
    load_loader_config,
    merge_results,
)
from czmlkit.loader.config import LoaderConfig
from czmlkit.loader.config_loader import list_env_overrides, write_config
from czmlkit.logging_utils import configure_logging
from czmlkit.validator import get_czml_summary, validate_czml

app = typer.Typer(
    name="czmlkit",
    help="Load, merge and validate CZML documents",
    no_args_is_help=True,
)
console = Console()

EXAMPLE_PREFIX = "example:"


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging on stderr"
    ),
    log_dir: Optional[Path] = typer.Option(
        None,
        "--log-dir",
        help="Also write czmlkit.log to this directory (env: CZMLKIT_LOG_DIR)",
    ),
) -> None:
    configure_logging(
        console_level=logging.DEBUG if verbose else logging.WARNING,
        log_dir=log_dir,
    )


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _load_one(source: str, config: LoaderConfig) -> LoadResult:
    if source.startswith(EXAMPLE_PREFIX):
        return await load_example(source[len(EXAMPLE_PREFIX) :], config=config)
    if _is_url(source):
        return await load_from_url(source, config=config)
    return await load_from_file(Path(source).expanduser())


async def _load_sources(sources: List[str], config: LoaderConfig) -> LoadResult:
    if len(sources) > 1 and all(_is_url(source) for source in sources):
        return await load_and_merge(sources, config=config)
    results = await asyncio.gather(*(_load_one(source, config) for source in sources))
    if len(results) == 1:
        return results[0]
    return merge_results(results, ", ".join(result.source for result in results))


def _load_or_exit(sources: List[str]) -> list:
    result = asyncio.run(_load_sources(sources, load_loader_config()))
    try:
        return result.raise_for_error()
    except CZMLLoadError as exc:
        console.print(f"[red]Load failed[/red] {escape(str(exc))}")
        raise typer.Exit(2)


@app.command("validate")
def cmd_validate(
    sources: List[str] = typer.Argument(
        ..., help="Files, http(s) URLs or example:<name>; several are merged"
    ),
    as_json: bool = typer.Option(False, "--json", help="Emit the report as JSON"),
) -> None:
    """Validate one document, or the merge of several."""

    data = _load_or_exit(sources)
    report = validate_czml(data)

    if as_json:
        typer.echo(json.dumps(report.as_dict(), indent=2))
    else:
        issues = report.errors + report.warnings
        if issues:
            table = Table(title="CZML diagnostics")
            table.add_column("Severity")
            table.add_column("Path")
            table.add_column("Message")
            for issue in issues:
                colour = "red" if issue.severity is Severity.ERROR else "yellow"
                table.add_row(
                    f"[{colour}]{issue.severity.value}[/{colour}]",
                    escape(issue.path or "(root)"),
                    escape(issue.message),
                )
            console.print(table)
        status = "[green]valid[/green]" if report.valid else "[red]invalid[/red]"
        console.print(
            f"{status}: {report.packet_count} packets, "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings; "
            f"entity types: {', '.join(report.entity_types) or 'none'}"
        )

    if not report.valid:
        raise typer.Exit(1)


@app.command("summary")
def cmd_summary(source: str = typer.Argument(..., help="File, URL or example:<name>")):
    """Print the document name, clock interval and entity counts."""

    data = _load_or_exit([source])
    typer.echo(json.dumps(get_czml_summary(data).as_dict(), indent=2))


@app.command("packets")
def cmd_packets(source: str = typer.Argument(..., help="File, URL or example:<name>")):
    """List packets with their position encoding and graphics."""

    data = _load_or_exit([source])
    table = Table(title=f"Packets in {source}")
    table.add_column("#", justify="right")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Position")
    table.add_column("Graphics")
    for index, raw in enumerate(data):
        try:
            packet = parse_packet(raw, f"[{index}]")
        except PacketError as exc:
            table.add_row(str(index), "-", "-", "-", f"[red]{escape(str(exc))}[/red]")
            continue
        table.add_row(
            str(index),
            packet.id,
            packet.name or "",
            packet.position.kind if packet.position else "",
            ", ".join(packet.entity_types),
        )
    console.print(table)


@app.command("examples")
def cmd_examples(
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the configured examples base URL"
    ),
):
    """List the built-in example documents."""

    base = base_url or load_loader_config().examples_base_url
    rows = [
        {"name": name, "path": path, "url": example_url(name, base)}
        for name, path in available_examples()
    ]
    typer.echo(json.dumps(rows, indent=2))


@app.command("config")
def cmd_config(
    write: Optional[Path] = typer.Option(
        None, "--write", help="Write the effective configuration to this TOML file"
    ),
):
    """Show the effective loader configuration and active overrides."""

    cfg = load_loader_config()
    if write is not None:
        path = write_config(cfg, write)
        typer.echo(f"Wrote {path}")
        return
    typer.echo(
        json.dumps({"config": asdict(cfg), "env": list_env_overrides()}, indent=2)
    )


if __name__ == "__main__":  # pragma: no cover
    app()
