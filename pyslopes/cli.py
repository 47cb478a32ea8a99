"""
Command line interface.

    pyslopes fit boston.csv
    pyslopes fit boston.csv --runs 100 --backend sequential
    pyslopes version
"""

import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console

from pyslopes import __version__
from pyslopes.core.compute.timing import timed
from pyslopes.core.exceptions import PySlopesError
from pyslopes.marginal.datasets import load_csv
from pyslopes.marginal.features import BOSTON_TARGET
from pyslopes.marginal.solvers import fit

app = typer.Typer(help="PySlopes per-feature regression CLI", no_args_is_help=True)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)

BACKENDS = ('auto', 'threads', 'pool', 'sequential')


def _configure_logging(level: str) -> None:
    """Route the library's loguru records to stderr at `level`."""
    logger.remove()
    try:
        logger.add(
            sys.stderr,
            level=level.upper(),
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}",
        )
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e
    logger.enable("pyslopes")


def _run_once(path: Path, target: str, backend: str) -> None:
    """Load, fit and report once."""
    source = load_csv(path, target=target)
    solution = fit(source, backend=backend)
    console.print(solution.summary(), markup=False, soft_wrap=True)


@app.command()
def version():
    """Print the package version."""
    console.print(f"pyslopes {__version__}")


@app.command("fit")
def fit_command(
    path: Path = typer.Argument(Path("boston.csv"), help="CSV file to fit"),
    target: str = typer.Option(BOSTON_TARGET, help="Target column"),
    backend: str = typer.Option("auto", help=f"One of {', '.join(BACKENDS)}"),
    runs: int = typer.Option(1, min=1, help="Repeat load + fit + report N times and time it"),
    log_level: str = typer.Option("WARNING", help="Log level for stderr"),
):
    """
    Fit one slope per feature and print coefficients, MSE, AIC and BIC.
    """
    _configure_logging(log_level)
    if backend not in BACKENDS:
        raise typer.BadParameter(f"expected one of {BACKENDS}, got {backend!r}", param_hint="--backend")

    try:
        if runs == 1:
            _run_once(path, target, backend)
            return

        console.print(f"[bold]Starting all {runs} runs[/bold]")
        with timed() as total:
            for i in range(runs):
                console.print(f"[blue]Run {i + 1}:[/blue]")
                with timed() as run_timer:
                    _run_once(path, target, backend)
                elapsed = run_timer.result()['total_seconds']
                console.print(f"Run {i + 1} finished. Time taken: {elapsed:.4f}s")
        elapsed = total.result()['total_seconds']
        console.print(f"[green]All runs finished. Total time taken: {elapsed:.4f}s[/green]")

    except OSError as e:
        err_console.print(f"Error reading data: {e}", style="red", markup=False)
        raise typer.Exit(code=1)
    except PySlopesError as e:
        err_console.print(f"{type(e).__name__}: {e}", style="red", markup=False)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
