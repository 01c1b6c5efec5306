"""
pltreorder - PLT Pen Reorder Command-Line Interface
===================================================

This module implements the command-line interface for reordering the pen
layers of an HPGL plot file. It rewrites the file so that chosen pens are
drawn last and end up on top, without touching any geometry.

Commands
--------
- **reorder**: Write a copy of a PLT file with its pen groups reordered
- **list**: Show the header and chunk table of a PLT file

Usage Examples
--------------
Default order (pens 1 and 2 on top):
    $ pltreorder reorder scope.plt scope_out.plt

Explicit files:
    $ pltreorder reorder -i scope.plt -o scope_out.plt

Full order (pens not listed are dropped):
    $ pltreorder reorder -r 345612 scope.plt scope_out.plt

Only choose the top layers (nothing is dropped):
    $ pltreorder reorder -t 21 scope.plt scope_out.plt

Inspect the chunk table:
    $ pltreorder list scope.plt
"""

import logging
from pathlib import Path
from typing import Optional

import click

from plt_reorder import __version__
from plt_reorder.cli.errors import handle_cli_exception
from plt_reorder.config import ReorderConfig, get_default_config
from plt_reorder.errors import OrderSyntaxError
from plt_reorder.plot import (
    OrderingKind,
    OrderingSpec,
    ReorderEmitter,
    load_plot_file,
    parse_pens,
    segment,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Parameter Types and Helpers
# =============================================================================

class PenDigits(click.ParamType):
    """
    Click parameter type for a pen digit string.

    Accepts digits with optional commas or spaces: "3412", "3,4,1,2".
    Range and duplicate checks happen when the ordering is resolved.
    """
    name = "pens"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> tuple[int, ...]:
        """Convert digit text to a tuple of pens."""
        if isinstance(value, tuple):
            return value
        try:
            pens = parse_pens(value)
        except OrderSyntaxError as e:
            self.fail(str(e), param, ctx)
        if not pens:
            self.fail("expected at least one pen digit", param, ctx)
        return pens


PEN_DIGITS = PenDigits()


def setup_logging(verbose: bool, config: ReorderConfig) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else config.get_log_level()
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def resolve_paths(
    input_opt: Optional[Path],
    output_opt: Optional[Path],
    paths: tuple[Path, ...],
    ctx: Optional[click.Context] = None,
) -> tuple[Path, Path]:
    """
    Work out input and output paths from options and positional arguments.

    Positional paths fill the input first, then the output. A path left
    over after both are known is rejected.

    Raises:
        click.UsageError: A path is missing or an extra argument was given
    """
    input_path, output_path = input_opt, output_opt
    for path in paths:
        if input_path is None:
            input_path = path
        elif output_path is None:
            output_path = path
        else:
            raise click.UsageError(f"junk argument: {path}", ctx=ctx)

    if input_path is None or output_path is None:
        missing = "input" if input_path is None else "output"
        raise click.UsageError(f"missing {missing} file", ctx=ctx)
    return input_path, output_path


def resolve_ordering_spec(
    order: tuple[tuple[int, ...], ...],
    top: tuple[tuple[int, ...], ...],
    config: ReorderConfig,
    ctx: Optional[click.Context] = None,
) -> OrderingSpec:
    """
    Combine the -r/-t options into a single ordering request.

    Raises:
        click.UsageError: Both forms given, or either given more than once
    """
    if order and top:
        raise click.UsageError("-r/--order and -t/--top cannot be combined", ctx=ctx)
    if len(order) > 1:
        raise click.UsageError("-r/--order given more than once", ctx=ctx)
    if len(top) > 1:
        raise click.UsageError("-t/--top given more than once", ctx=ctx)

    if order:
        return OrderingSpec.full(order[0])
    if top:
        return OrderingSpec.top_layers(top[0])
    return OrderingSpec(OrderingKind.DEFAULT, default=config.default_order)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="pltreorder")
def main() -> None:
    """
    Pen layer reorderer for HPGL plot (PLT) files.

    Rewrites a plot so that the chosen pens are drawn last, on top of
    the others. Geometry is copied byte for byte.

    \b
    Commands:
      reorder   Write a copy with pen groups reordered
      list      Show the header and chunk table

    \b
    Examples:
      pltreorder reorder scope.plt out.plt
      pltreorder reorder -t 21 scope.plt out.plt
      pltreorder list scope.plt
    """
    pass


# =============================================================================
# Reorder Command
# =============================================================================

@main.command("reorder")
@click.argument(
    "paths",
    nargs=-1,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-i", "--input", "input_opt",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Input PLT file",
)
@click.option(
    "-o", "--output", "output_opt",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output PLT file",
)
@click.option(
    "-r", "--order",
    type=PEN_DIGITS,
    multiple=True,
    help="Full pen order, e.g. 345612 (pen 0 appended; unlisted pens dropped)",
)
@click.option(
    "-t", "--top",
    type=PEN_DIGITS,
    multiple=True,
    help="Pens to draw last, e.g. 21 (other pens keep ascending order below)",
)
@click.option(
    "--max-chunks",
    type=click.IntRange(min=1),
    default=None,
    help="Fail if the file has more than this many pen chunks",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.pass_context
def cmd_reorder(
    ctx: click.Context,
    paths: tuple[Path, ...],
    input_opt: Optional[Path],
    output_opt: Optional[Path],
    order: tuple[tuple[int, ...], ...],
    top: tuple[tuple[int, ...], ...],
    max_chunks: Optional[int],
    verbose: bool,
) -> None:
    """
    Write a copy of a PLT file with its pen groups reordered.

    Give the files as INPUT OUTPUT or with -i/-o. Without -r or -t the
    default order 3,4,5,6,7,1,2,0 is used (trace pens 1 and 2 on top).

    \b
    Examples:
      pltreorder reorder scope.plt out.plt
      pltreorder reorder -r 345612 scope.plt out.plt
      pltreorder reorder -t 21 -i scope.plt -o out.plt
    """
    config = get_default_config()
    setup_logging(verbose, config)

    try:
        input_path, output_path = resolve_paths(input_opt, output_opt, paths, ctx)
        spec = resolve_ordering_spec(order, top, config, ctx)
        ordering = spec.resolve()

        if verbose:
            click.echo(f"Reordering {input_path} -> {output_path}")
            click.echo(f"  Order: {ordering}")

        emitter = ReorderEmitter(
            ordering,
            max_chunks=max_chunks if max_chunks is not None else config.max_chunks,
            max_file_size=config.max_file_size,
        )
        result = emitter.run_file(input_path, output_path)

        if verbose:
            click.echo(f"  Header: {result.header_length} bytes")
            for pen, count in result.bytes_per_pen.items():
                click.echo(f"  SP{pen}: {count} bytes")
            if result.dropped_pens:
                dropped = ",".join(str(p) for p in result.dropped_pens)
                click.echo(f"  Dropped pens: {dropped}")
        click.echo(
            f"Wrote {output_path} ({result.bytes_written} of {result.bytes_read} bytes)"
        )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "plt_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--max-chunks",
    type=click.IntRange(min=1),
    default=None,
    help="Fail if the file has more than this many pen chunks",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show per-pen totals",
)
def cmd_list(plt_file: Path, max_chunks: Optional[int], verbose: bool) -> None:
    """
    Show the header and pen chunk table of a PLT file.

    \b
    Example:
      pltreorder list scope.plt

    \b
    Output format:
      #    Offset   Pen     Length
      0        24   SP5        118
    """
    config = get_default_config()
    setup_logging(False, config)

    try:
        data = load_plot_file(plt_file, config.max_file_size)
        plot = segment(data, max_chunks=max_chunks if max_chunks is not None else config.max_chunks)

        click.echo(f"Header: {plot.header_length} bytes")
        click.echo(f"{'#':<4} {'Offset':>8}   {'Pen':<5} {'Length':>8}")
        click.echo("-" * 30)
        for index, chunk in enumerate(plot.chunks):
            click.echo(f"{index:<4} {chunk.start:>8}   SP{chunk.pen:<3} {chunk.length:>8}")

        if verbose:
            click.echo("-" * 30)
            for pen in sorted(plot.pens()):
                count = len(list(plot.chunks_for_pen(pen)))
                click.echo(f"SP{pen}: {count} chunks, {plot.bytes_for_pen(pen)} bytes")
            click.echo(f"Total: {len(plot.chunks)} chunks, {plot.total_length} bytes")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
