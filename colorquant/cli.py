"""
Command-line interface.

    colorquant -f photo.png -t photo_8.png -k 8 -i 1000
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import ColorQuantError
from .kmeans.kmeans import BACKENDS
from .pipeline import QuantizeConfig, quantize_file

app = typer.Typer(
    add_completion=False,
    help="Map the colors of an image to a smaller palette using k-means.",
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    pkg_logger = logging.getLogger("colorquant")
    if not any(isinstance(h, RichHandler) for h in pkg_logger.handlers):
        pkg_logger.addHandler(RichHandler(console=console, show_path=False))
    pkg_logger.setLevel(logging.INFO if verbose else logging.WARNING)


@app.command()
def quantize(
    source: Path = typer.Option(..., "--from", "-f", help="Source image path"),
    destination: Path = typer.Option(..., "--to", "-t", help="Result image path"),
    clusters: int = typer.Option(8, "--clusters", "-k", min=1, help="Number of colors (k)"),
    max_iter: int = typer.Option(
        1000, "--max-iter", "-i", min=1, help="Maximum number of k-means iterations"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", "-s", help="Random seed"),
    backend: str = typer.Option("lloyd", "--backend", help="lloyd or sklearn"),
    palette_json: Optional[Path] = typer.Option(
        None, "--palette-json", help="Also write the palette as JSON"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
) -> None:
    """Quantize SOURCE to k colors and write the result to DESTINATION."""
    if backend not in BACKENDS:
        raise typer.BadParameter(f"must be one of {', '.join(BACKENDS)}", param_hint="--backend")

    _configure_logging(verbose)

    config = QuantizeConfig(
        n_clusters=clusters,
        max_iter=max_iter,
        random_state=seed,
        backend=backend,
        palette_json=palette_json,
    )

    console.print(f"Cluster Count: {clusters}")
    try:
        report = quantize_file(source, destination, config)
    except (ColorQuantError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    status = "converged" if report.converged else "[yellow]not converged[/yellow]"
    console.print(
        f"Finished clustering {report.n_pixels:,} pixels in {report.elapsed_ms:.0f} ms "
        f"({report.n_iter} iterations, {status})."
    )
    if report.empty_cluster_count:
        console.print(
            f"[yellow]{report.empty_cluster_count} empty cluster passes; "
            f"k may exceed the number of natural color groups.[/yellow]"
        )
    console.print(f"[green]OK[/green] saved result to: {report.destination}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
