"""Command line interface for Site Fabricator."""

from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from sfab.core.config import load_config
from sfab.core.fabricator import SiteFabricator
from sfab.core.models import BuildResult, FabricatorError
from sfab.logging_setup import configure_logging, console as err_console

app = typer.Typer(
    name="sfab",
    help="Build a static site from HTML, XML and markdown sources.",
    add_completion=False,
)

console = Console()


@app.command()
def main(
    ctx: typer.Context,
    folder: Annotated[Optional[Path], typer.Option("--folder", help="Folder with the site sources to build")] = None,
    file: Annotated[Optional[Path], typer.Option("--file", help="Single source file to build")] = None,
    destination: Annotated[Optional[Path], typer.Option("--destination", help="Folder the built site is written to")] = None,
    scripts: Annotated[Optional[Path], typer.Option("--scripts", help="Folder of extension scripts to load")] = None,
    copy: Annotated[Optional[List[Path]], typer.Option("--copy", help="Folder to copy to the destination as-is (repeatable)")] = None,
    serve: Annotated[bool, typer.Option("--serve", help="Serve the destination folder over HTTP")] = False,
    mount: Annotated[Optional[str], typer.Option("--mount", help="URL prefix to serve the site under")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Port for --serve")] = None,
    config: Annotated[Optional[Path], typer.Option("--config", help="YAML config file (default: ./sfab.yaml)")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Show per-file progress")] = False,
    keep_going: Annotated[bool, typer.Option("--keep-going", help="Continue past files that fail to render")] = False,
) -> None:
    """Build, copy and serve a static site."""
    if not any([folder, file, copy, serve, scripts]):
        typer.echo(ctx.get_help())
        raise typer.Exit(0)

    configure_logging(verbose)

    try:
        settings = load_config(config).merge(
            folder=folder,
            destination=destination,
            scripts=scripts,
            port=port,
            mount=mount,
            verbose=verbose or None,
            fail_fast=False if keep_going else None,
        )
        fabricator = SiteFabricator(settings)

        if settings.scripts:
            fabricator.load_scripts(settings.scripts)

        result = BuildResult()
        if folder:
            result.merge(fabricator.build_folder())
        if file:
            result.merge(fabricator.build_file(file))
        if copy:
            result.merge(fabricator.copy_folders(copy))
    except FabricatorError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if folder or file or copy:
        console.print(
            f"Rendered {len(result.transformed)} file(s), copied {len(result.copied)} file(s)"
        )
    for failure in result.failures:
        err_console.print(f"[red]Failed:[/red] {escape(str(failure.path))}: {escape(failure.error)}")
    if result.failures:
        raise typer.Exit(1)

    if serve:
        fabricator.serve()


if __name__ == "__main__":
    app()
