"""
Command-line interface for heated_plate.

    heated-plate [-e EPSILON] [-o OUTPUT] [-q] [-t] [--rows M] [--cols N] [--backend NAME] ...

Exit codes: 0 on success, 1 for usage and configuration errors, 2 for
runtime failures (output file, resource exhaustion, iteration cap).
"""

from __future__ import annotations

import sys

import click

from heated_plate import __version__
from heated_plate.backends import create_backend, get_available_backends, list_backends
from heated_plate.config import build_config
from heated_plate.hooks import HistoryHook, MultiHook, ProgressHook
from heated_plate.io import write_grid
from heated_plate.solvers import SolverDriver
from heated_plate.utils.exceptions import (
    ConfigurationError,
    HeatPlateError,
    OutputWriteError,
)
from heated_plate.utils.logging import configure_logging

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_RUNTIME = 2

EPSILON_MESSAGE = "Illegal Input: Epsilon (error tolerance) must be greater than 0."


def _print_banner(title: str, backend, rows: int, cols: int, epsilon: float, output_file) -> None:
    click.echo()
    click.echo(title)
    click.echo(f"  Python version, {backend.name} backend")
    click.echo("  A program to solve for the steady state temperature distribution")
    click.echo("  over a rectangular plate.")
    click.echo()
    click.echo(f"  Spatial grid of {rows} by {cols} points.")
    click.echo(f"  The iteration will be repeated until the change is <= {epsilon:e}")
    if output_file is not None:
        click.echo(f"  The steady state solution will be written to '{output_file}'.")
    for line in backend.describe_capabilities():
        click.echo(f"  {line}")


def _print_backends() -> None:
    available = get_available_backends()
    click.echo("Backends:")
    for name in list_backends():
        status = "available" if available.get(name, False) else "not installed"
        click.echo(f"  {name:<10} {status}")
    for name in ("torch_cuda", "torch_mps", "jax_gpu"):
        if available.get(name):
            click.echo(f"  {name:<10} available")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="heated-plate")
@click.option("--epsilon", "-e", type=float, default=0.001, show_default=True, help="Error tolerance")
@click.option("--output", "-o", "output_file", type=click.Path(dir_okay=False), default=None, help="Write the final grid to this file")
@click.option("--quiet", "-q", is_flag=True, help="Suppress the banner and progress table")
@click.option("--time", "-t", "report_time", is_flag=True, help="Report execution time even when quiet")
@click.option("--rows", type=int, default=500, show_default=True, help="Number of grid rows")
@click.option("--cols", type=int, default=500, show_default=True, help="Number of grid columns")
@click.option("--backend", "-b", type=str, default="numpy", show_default=True, help="Execution backend or 'auto'")
@click.option("--threads", "num_threads", type=int, default=None, help="Host worker threads (default: all cores)")
@click.option("--device", type=str, default="auto", show_default=True, help="Accelerator device (auto, cpu, cuda, mps, gpu)")
@click.option("--precision", type=click.Choice(["float32", "float64"]), default="float64", show_default=True)
@click.option("--max-iterations", type=int, default=None, help="Stop after this many sweeps")
@click.option("--list-backends", "show_backends", is_flag=True, help="List execution backends and exit")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging level (default: WARNING, ERROR with -q)",
)
@click.argument("extra_args", nargs=-1, type=click.UNPROCESSED)
def cli(
    epsilon,
    output_file,
    quiet,
    report_time,
    rows,
    cols,
    backend,
    num_threads,
    device,
    precision,
    max_iterations,
    show_backends,
    log_level,
    extra_args,
):
    """
    Solve for the steady state temperature distribution over a rectangular plate.

    Examples:
        heated-plate -e 0.01 -o plate.txt
        heated-plate --backend threaded --threads 8 -t -q
        heated-plate --backend torch --device cuda --rows 2000 --cols 2000
    """
    if epsilon <= 0:
        click.echo(EPSILON_MESSAGE)
        return EXIT_USAGE

    for arg in extra_args:
        click.echo(f"Non-option argument {arg}")

    configure_logging(level=(log_level or ("ERROR" if quiet else "WARNING")).upper())

    if show_backends:
        _print_backends()
        return EXIT_OK

    verbose = not quiet

    try:
        config = build_config(
            rows=rows,
            cols=cols,
            epsilon=epsilon,
            max_iterations=max_iterations,
            backend=backend,
            precision=precision,
            device=device,
            num_threads=num_threads,
            output_file=output_file,
            quiet=quiet,
            report_time=report_time,
        )
        solver_backend = create_backend(config.backend, **config.backend_options())
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        return EXIT_USAGE

    title = f"HEATED_PLATE_{solver_backend.name.upper()}"
    if verbose:
        _print_banner(title, solver_backend, config.rows, config.cols, config.epsilon, config.output_file)

    hooks = MultiHook(ProgressHook(), HistoryHook()) if verbose else None

    try:
        with solver_backend:
            solution = SolverDriver(config, backend=solver_backend).solve(hooks=hooks)
    except HeatPlateError as e:
        click.echo(f"Error: {e}", err=True)
        return EXIT_RUNTIME

    if verbose:
        click.echo()
        if solution.converged:
            click.echo("  Error tolerance achieved.")
        else:
            click.echo(f"  Iteration limit of {config.max_iterations} reached before the error tolerance.")
    if report_time or verbose:
        click.echo(f"  Execution time = {solution.elapsed_time:f}s")

    if config.output_file is not None:
        try:
            write_grid(config.output_file, solution.grid, fmt=solution.output_format)
        except OutputWriteError as e:
            click.echo(f"Error: {e}", err=True)
            return EXIT_RUNTIME
        click.echo()
        click.echo(f"  Solution written to the output file '{config.output_file}'")

    if not solution.converged:
        return EXIT_RUNTIME

    if verbose:
        click.echo()
        click.echo(f"{title}:")
        click.echo("  Normal end of execution.")

    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """
    Run the command and return its exit code instead of exiting.

    Usage errors (unknown option, missing value) exit with 1.
    """
    try:
        result = cli.main(args=argv, prog_name="heated-plate", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return EXIT_USAGE
    except click.Abort:
        click.echo("Aborted!", err=True)
        return EXIT_USAGE
    return result if isinstance(result, int) else EXIT_OK


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
