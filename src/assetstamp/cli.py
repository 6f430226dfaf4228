"""
assetstamp CLI - command-line interface for version tags.

Commands for inspecting tags, composing versioned URLs, writing build
manifests and stamping static markup.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from assetstamp.logging_config import setup_logging

app = typer.Typer(
    name="assetstamp",
    help="assetstamp - Build-derived version tags for cache-busting asset URLs",
    no_args_is_help=True,
)

console = Console()


def _init_logging() -> None:
    # Fall back to basic console logging if file logging is not permitted
    try:
        setup_logging(context="cli")
    except PermissionError:
        import logging

        logging.basicConfig(level=logging.INFO)


@app.command()
def tag(
    unit: str = typer.Argument(..., help="Unit reference (mylib, dist:name, dir:path)"),
) -> None:
    """
    Print the version tag of a compiled unit.
    """
    from assetstamp.exceptions import ResolutionError
    from assetstamp.resolver import get_default_resolver

    _init_logging()

    try:
        resolved = get_default_resolver().resolve(unit)
    except ResolutionError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(resolved.value)


@app.command()
def url(
    path: str = typer.Argument(..., help="Asset path, e.g. /static/app.js"),
    unit: str = typer.Option(..., "--unit", "-u", help="Unit the asset ships with"),
    param: Optional[str] = typer.Option(None, help="Query parameter name"),
) -> None:
    """
    Print the versioned URL of an asset.
    """
    from assetstamp.exceptions import InvalidAssetPathError, ResolutionError
    from assetstamp.urls import versioned_asset_url

    _init_logging()

    try:
        console.print(versioned_asset_url(path, unit, param=param), soft_wrap=True)
    except (ResolutionError, InvalidAssetPathError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def build(
    units: List[str] = typer.Argument(..., help="Units to record in the manifest"),
    output: Path = typer.Option(
        Path("assetstamp-manifest.json"), "--output", "-o", help="Manifest file to write"
    ),
    tag_length: Optional[int] = typer.Option(
        None, help="Hex characters per tag (default: ASSET_TAG_LENGTH)"
    ),
) -> None:
    """
    Write a build manifest embedding the tags of the given units.

    Tags are computed from unit content, never from an existing manifest
    or pinned tag, so the manifest reflects what was actually built.
    """
    from assetstamp.config import settings
    from assetstamp.exceptions import ResolutionError
    from assetstamp.manifest import BuildManifest
    from assetstamp.resolver import build_resolver
    from assetstamp.units import UnitReference

    _init_logging()

    length = tag_length or settings.asset_tag_length
    try:
        config = settings.model_copy(
            update={
                "asset_manifest_path": "",
                "asset_pinned_tag": "",
                "asset_tag_length": length,
            }
        )
        manifest = BuildManifest(tag_length=length)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    resolver = build_resolver(config)

    tags: dict[str, str] = {}
    failed = 0
    for unit in units:
        try:
            reference = UnitReference.parse(unit)
            resolved = resolver.resolve(reference)
        except ResolutionError as e:
            console.print(f"  [red]✗[/red] {unit}: {e}")
            failed += 1
            continue
        tags[reference.key] = resolved.value
        console.print(f"  [green]✓[/green] {reference.key} = {resolved.value}")

    if failed > 0:
        console.print(f"[bold red]Error:[/bold red] {failed} unit(s) could not be resolved")
        raise typer.Exit(1)

    manifest.tags = tags
    manifest.write(output)
    console.print(f"[bold green]Wrote manifest:[/bold green] {output} ({len(tags)} unit(s))")


@app.command()
def stamp(
    directory: Path = typer.Argument(..., help="Directory containing markup files"),
    unit: str = typer.Option(..., "--unit", "-u", help="Unit whose tag to apply"),
    pattern: str = typer.Option("*.html", help="Glob for markup files"),
    param: Optional[str] = typer.Option(None, help="Query parameter name"),
    dry_run: bool = typer.Option(False, help="Report changes without writing"),
) -> None:
    """
    Stamp local script and style references in static markup.
    """
    from assetstamp.exceptions import ResolutionError
    from assetstamp.markup import stamp_directory
    from assetstamp.resolver import get_default_resolver

    _init_logging()

    if not directory.is_dir():
        console.print(f"[bold red]Error:[/bold red] Directory not found: {directory}")
        raise typer.Exit(1)

    try:
        resolved = get_default_resolver().resolve(unit)
    except ResolutionError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print(f"[bold blue]Stamping markup in:[/bold blue] {directory}")
    console.print(f"  Unit: {unit}")
    console.print(f"  Tag: {resolved.value}")
    console.print(f"  Dry run: {dry_run}")
    console.print()

    changed = stamp_directory(directory, resolved, pattern=pattern, param=param, dry_run=dry_run)
    for path in changed:
        verb = "Would stamp" if dry_run else "Stamped"
        console.print(f"  [green]✓ {verb}[/green] {path}")

    console.print()
    console.print("[bold]Summary:[/bold]")
    console.print(f"  Changed: {len(changed)}")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind to (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, help="Port to bind to (default: API_PORT)"),
    reload: Optional[bool] = typer.Option(
        None, "--reload/--no-reload", help="Enable auto-reload (default: API_RELOAD)"
    ),
) -> None:
    """
    Start the FastAPI server.

    Serves version tags and versioned URLs over HTTP.
    """
    import uvicorn

    from assetstamp.config import settings

    host = host or settings.api_host
    port = port or settings.api_port
    reload = settings.api_reload if reload is None else reload

    console.print("[bold green]Starting assetstamp API server...[/bold green]")
    console.print(f"  Host: {host}")
    console.print(f"  Port: {port}")
    console.print(f"  Reload: {reload}")
    console.print(f"\n  API docs: http://{host}:{port}/docs")

    uvicorn.run(
        "assetstamp.api.app:app",
        host=host,
        port=port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
