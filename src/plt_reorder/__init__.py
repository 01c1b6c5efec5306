"""
PLT Reorder - Pen Layer Reordering for HPGL Plot Files
======================================================

This package rewrites HPGL plotter output ("PLT" files) so that pen
groups are drawn in a different order. Pens drawn last end up on top,
so reordering changes which color layer covers the others without
touching any geometry.

The classic use is a screen plot from an HP 4195A network analyzer,
where the measurement traces (pens 1 and 2) are drawn before the
graticule and annotations and end up hidden underneath them.

Main Components
---------------
- **plot.segmenter**: splits a PLT buffer into a header and pen chunks
- **plot.ordering**: validates pen orderings (default, full, top layers)
- **plot.emitter**: writes the header and pen groups in the new order
- **config**: conversion defaults and environment overrides
- **cli**: the `pltreorder` command

Quick Start
-----------
Reorder a file with the default order (pens 1 and 2 on top):
    >>> from plt_reorder import reorder_file
    >>> result = reorder_file("scope.plt", "scope_out.plt")

Put pen 2 on top of everything else:
    >>> from plt_reorder import OrderingSpec, reorder_file
    >>> ordering = OrderingSpec.top_layers([2]).resolve()
    >>> result = reorder_file("scope.plt", "scope_out.plt", ordering)

Or use the command-line tool:
    $ pltreorder reorder -t 2 scope.plt scope_out.plt

Version History
---------------
1.0.0 - Initial release with segmenter, ordering forms and CLI
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from plt_reorder.errors import (
    PltError,
    SourceError,
    EmptyFileError,
    FileTooLargeError,
    PlotReadError,
    SegmentationError,
    MalformedOpcodeError,
    NoChunksFoundError,
    EmptyHeaderChunkError,
    TooManyChunksError,
    OrderError,
    OrderSyntaxError,
    InvalidPenError,
    DuplicatePenError,
    UnterminatedOrderError,
    EmitError,
    PlotWriteError,
)

from plt_reorder.plot import (
    Chunk,
    SegmentedPlot,
    Pen,
    segment,
    find_chunks,
    DEFAULT_ORDER,
    DEFAULT_ORDERING,
    Ordering,
    OrderingKind,
    OrderingSpec,
    validate_ordering,
    full_order,
    top_layers_order,
    parse_pens,
    EmitResult,
    EmitterState,
    ReorderEmitter,
    load_plot_file,
    reorder_bytes,
    reorder_file,
)

from plt_reorder.config import (
    ReorderConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "PltError",
    "SourceError",
    "EmptyFileError",
    "FileTooLargeError",
    "PlotReadError",
    "SegmentationError",
    "MalformedOpcodeError",
    "NoChunksFoundError",
    "EmptyHeaderChunkError",
    "TooManyChunksError",
    "OrderError",
    "OrderSyntaxError",
    "InvalidPenError",
    "DuplicatePenError",
    "UnterminatedOrderError",
    "EmitError",
    "PlotWriteError",
    # Records and segmenter
    "Chunk",
    "SegmentedPlot",
    "Pen",
    "segment",
    "find_chunks",
    # Ordering
    "DEFAULT_ORDER",
    "DEFAULT_ORDERING",
    "Ordering",
    "OrderingKind",
    "OrderingSpec",
    "validate_ordering",
    "full_order",
    "top_layers_order",
    "parse_pens",
    # Emitter
    "EmitResult",
    "EmitterState",
    "ReorderEmitter",
    "load_plot_file",
    "reorder_bytes",
    "reorder_file",
    # Configuration
    "ReorderConfig",
    "get_default_config",
    "set_default_config",
]
