from __future__ import annotations

from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from adapters.filesystem.map_repository import FileSystemMapRepository
from adapters.filesystem.svg_repository import FileSystemSvgWriter
from adapters.raster.cairosvg_rasterizer import CairoSvgRasterizer
from app.config import AppSettings, load_settings
from app.logging_config import setup_logging
from domain.errors import MapLoadError, MapRenderError, MapWriteError
from domain.services.render_map import MapRenderService

EXIT_LOAD_ERROR = 2
EXIT_RENDER_ERROR = 3
EXIT_WRITE_ERROR = 4
EXIT_CONFIG_ERROR = 5

app = typer.Typer(no_args_is_help=True, add_completion=False)
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def _settings(
    config: Optional[Path],
    workers: Optional[int],
    scale: Optional[float],
    log_level: Optional[str],
) -> AppSettings:
    overrides: dict[str, object] = {}
    if workers is not None:
        overrides["loader"] = {"max_workers": workers}
    if scale is not None:
        overrides["render"] = {"scale": scale}
    if log_level is not None:
        overrides["log_level"] = log_level
    return load_settings(config, **overrides)


@app.command()
def render(
    output: Path = typer.Argument(..., help="PNG file to write."),
    files: List[Path] = typer.Argument(..., help="Map files, drawn in the given order."),
    svg_output: Optional[Path] = typer.Option(
        None, "--svg", help="Also write the intermediate SVG document to this path.",
    ),
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file."),
    workers: Optional[int] = typer.Option(None, "--workers", help="Files parsed in parallel."),
    scale: Optional[float] = typer.Option(None, "--scale", help="Raster zoom factor."),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="DEBUG, INFO, WARNING..."),
    debug: bool = typer.Option(False, "--debug", help="Show tracebacks for fatal errors."),
) -> None:
    """Render map annotation files into a PNG image."""
    try:
        settings = _settings(config, workers, scale, log_level)
    except (FileNotFoundError, ValidationError) as exc:
        err_console.print(f"[red]Invalid configuration:[/] {escape(str(exc))}")
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc
    setup_logging(settings.log_level_number, console=err_console)

    service = MapRenderService(
        repository=FileSystemMapRepository(
            encoding=settings.loader.encoding,
            max_workers=settings.loader.max_workers,
        ),
        rasterizer=CairoSvgRasterizer(scale=settings.render.scale),
        svg_writer=FileSystemSvgWriter(),
    )

    try:
        summary = service.render(files, output, svg_output=svg_output)
    except MapLoadError as exc:
        _fail(exc, "Could not load map", EXIT_LOAD_ERROR, debug)
    except MapRenderError as exc:
        _fail(exc, "Could not render map", EXIT_RENDER_ERROR, debug)
    except MapWriteError as exc:
        _fail(exc, "Could not write output", EXIT_WRITE_ERROR, debug)

    console.print(
        f"[green]Wrote[/] {summary.output} "
        f"({summary.point_count} points, {summary.line_count} lines)"
    )
    if summary.svg_output is not None:
        console.print(f"[green]Wrote[/] {summary.svg_output}")


def _fail(exc: Exception, title: str, code: int, debug: bool) -> NoReturn:
    if debug:
        raise exc
    err_console.print(f"[red]{title}:[/] {escape(str(exc))}")
    raise typer.Exit(code=code) from exc


if __name__ == "__main__":
    app()
