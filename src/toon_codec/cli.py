"""CLI for toon-codec - convert between JSON and TOON."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from toon_codec.decoder import decode
from toon_codec.encoder import encode
from toon_codec.errors import FormatError, ToonError
from toon_codec.estimator import compare
from toon_codec.logging import configure_logging
from toon_codec.models import DecodeOptions, EncodeOptions
from toon_codec.settings import settings
from toon_codec.transformer import to_json

app = typer.Typer(
    name="toon",
    help="Convert JSON to and from TOON (Token-Oriented Object Notation).",
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

InputFile = Annotated[
    Path | None,
    typer.Argument(help="Input file (reads stdin when omitted)", exists=True, dir_okay=False),
]
IndentOption = Annotated[
    int | None,
    typer.Option("--indent", "-i", min=1, help="Spaces per nesting level"),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        from toon_codec import __version__

        typer.echo(f"toon-codec v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Convert JSON to and from TOON."""
    configure_logging(json_output=settings.json_logs, log_level=settings.log_level)


def _read_input(path: Path | None) -> str:
    if path is None:
        return sys.stdin.read()
    return path.read_text(encoding="utf-8")


def _load_json(path: Path | None) -> Any:
    try:
        return json.loads(_read_input(path))
    except json.JSONDecodeError as e:
        error_console.print(f"[red]Invalid JSON input:[/red] {e}")
        raise typer.Exit(code=1) from e


def _fail(error: ToonError) -> typer.Exit:
    if isinstance(error, FormatError) and error.line is not None:
        error_console.print(f"[red]Invalid TOON on line {error.line}:[/red] {error.message}")
    else:
        error_console.print(f"[red]Error:[/red] {error}")
    return typer.Exit(code=1)


@app.command("encode")
def encode_command(
    file: InputFile = None,
    indent: IndentOption = None,
    banner: Annotated[
        bool | None,
        typer.Option("--banner/--no-banner", help="Prepend an estimated size/savings comment"),
    ] = None,
) -> None:
    """Encode JSON into TOON."""
    value = _load_json(file)
    options = EncodeOptions(
        indent=indent or settings.indent,
        include_size_banner=settings.include_size_banner if banner is None else banner,
        max_depth=settings.max_depth,
    )
    try:
        typer.echo(encode(value, options))
    except ToonError as e:
        raise _fail(e) from e


@app.command("decode")
def decode_command(
    file: InputFile = None,
    indent: IndentOption = None,
    pretty: Annotated[bool, typer.Option("--pretty", help="Pretty-print the JSON output")] = False,
) -> None:
    """Decode TOON into JSON."""
    options = DecodeOptions(indent=indent or settings.indent, max_depth=settings.max_depth)
    try:
        value = decode(_read_input(file), options)
    except ToonError as e:
        raise _fail(e) from e
    typer.echo(to_json(value, indent=2 if pretty else None))


@app.command("compare")
def compare_command(file: InputFile = None) -> None:
    """Compare estimated token counts of JSON and TOON for a JSON document."""
    value = _load_json(file)
    try:
        result = compare(value, settings.encode_options)
    except ToonError as e:
        raise _fail(e) from e

    table = Table(title="JSON vs TOON")
    table.add_column("Format")
    table.add_column("Characters", justify="right")
    table.add_column("Est. tokens", justify="right")
    table.add_row("JSON", str(len(result.generic_text)), str(result.generic_size))
    table.add_row("TOON", str(len(result.toon_text)), str(result.toon_size))
    console.print(table)

    color = "green" if result.savings_percent > 0 else "yellow"
    console.print(f"Savings: [{color}]{result.savings_percent:.1f}%[/{color}]")


@app.command()
def info() -> None:
    """Show codec configuration."""
    from toon_codec import __version__

    console.print(f"[bold]toon-codec[/bold] v{__version__}")
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print(f"  Indent: {settings.indent}")
    console.print(f"  Size Banner: {settings.include_size_banner}")
    console.print(f"  Max Depth: {settings.max_depth}")
    console.print(f"  Min Array Size: {settings.min_array_size}")
    console.print(f"  Server: {settings.host}:{settings.port}")
    console.print(f"  Log Level: {settings.log_level}")


@app.command()
def serve(
    host: Annotated[
        str | None,
        typer.Option("--host", "-h", help="Host to bind to"),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", "-p", help="Port to bind to"),
    ] = None,
    reload: Annotated[
        bool,
        typer.Option("--reload", help="Enable auto-reload for development"),
    ] = False,
) -> None:
    """Start the HTTP conversion service."""
    import uvicorn

    actual_host = host or settings.host
    actual_port = port or settings.port

    console.print("[green]Starting toon-codec service...[/green]")
    console.print(f"  API: http://{actual_host}:{actual_port}/")
    console.print(f"  Health: http://{actual_host}:{actual_port}/health")
    console.print()

    uvicorn.run(
        "toon_codec.server:app",
        host=actual_host,
        port=actual_port,
        reload=reload,
    )
