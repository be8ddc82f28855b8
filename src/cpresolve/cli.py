"""Command line interface for cpresolve."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from cpresolve.config import AppConfig
from cpresolve.errors import CpResolveError, UnresolvableDependenciesError
from cpresolve.pipeline import Pipeline

err_console = Console(stderr=True)
app = typer.Typer(
    help="cpresolve - resolve Maven coordinates into a cached runtime classpath",
    add_completion=False,
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _report_error(exc: CpResolveError) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
    if isinstance(exc, UnresolvableDependenciesError):
        if exc.descriptor:
            err_console.rule("Generated POM")
            err_console.print(exc.descriptor, markup=False, highlight=False)
        if exc.output:
            err_console.rule("Maven output")
            err_console.print(exc.output, markup=False, highlight=False)


@app.command()
def resolve(
    coordinates: Optional[List[str]] = typer.Argument(
        None,
        help="Coordinates as group:artifact:version[:classifier], "
        "group::artifact:version for Scala artifacts, '!group:artifact' to exclude.",
        show_default=False,
    ),
    tree: bool = typer.Option(False, "--tree", "-t", help="Print the dependency tree"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Always resolve with Maven"),
    clear_cache: bool = typer.Option(False, "--clear-cache", help="Delete cached results first"),
    template: Optional[Path] = typer.Option(
        None, "--template", help="POM template with an empty <dependencies></dependencies>"
    ),
    scala: bool = typer.Option(False, "--scala", "-s", help="Force Scala version detection"),
    scala_version: Optional[str] = typer.Option(
        None, "--scala-version", help="Scala version to use instead of detecting it"
    ),
    apply_exclusions: bool = typer.Option(
        False, "--apply-exclusions", help="Write '!group:artifact' exclusions into the POM"
    ),
    cache_backend: str = typer.Option(
        AppConfig().cache_backend, "--cache-backend", help="Cache storage: file or sqlite"
    ),
    mvn: str = typer.Option(AppConfig().mvn_executable, "--mvn", help="Maven executable"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Print the runtime classpath (or tree) of the given coordinates."""
    _setup_logging(verbose)
    try:
        config = AppConfig.from_env(
            use_cache=not no_cache,
            template_path=template,
            scala_version=scala_version,
            force_scala=scala,
            apply_exclusions=apply_exclusions,
            cache_backend=cache_backend,
            mvn_executable=mvn,
        )
    except ValueError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    try:
        with Pipeline(config) as pipeline:
            if clear_cache:
                pipeline.clear_cache()
                if not coordinates:
                    err_console.print("Cache cleared.")
                    return
            resolved = pipeline.resolve(coordinates or [])
    except CpResolveError as exc:
        _report_error(exc)
        raise typer.Exit(code=1) from exc

    typer.echo(Pipeline.render(resolved, show_tree=tree))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
