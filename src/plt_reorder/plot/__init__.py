"""
PLT Plot Handling
=================

This package holds the core of the reorderer: splitting a PLT buffer
into pen chunks and writing those chunks back in a new pen order.

This module provides:
- **segment / find_chunks**: Chunk Segmenter
- **validate_ordering / full_order / top_layers_order**: Order Validator
- **OrderingSpec**: default / full / top-layers ordering requests
- **ReorderEmitter**: state machine that writes the reordered output
- **reorder_bytes / reorder_file**: one-call conversions

Quick Start
-----------
    >>> from plt_reorder.plot import reorder_bytes, OrderingSpec
    >>> ordering = OrderingSpec.top_layers([1]).resolve()
    >>> reorder_bytes(b"IN;SP1A;SP2B;SP0;", ordering)
    b'IN;SP2B;SP1A;SP0;'
"""

# =============================================================================
# Public API Exports
# =============================================================================

from plt_reorder.plot.records import (
    Chunk,
    DRAWING_PENS,
    MAX_PEN,
    MIN_PEN,
    OPCODE_LEN,
    Pen,
    SegmentedPlot,
)

from plt_reorder.plot.segmenter import (
    find_chunks,
    segment,
)

from plt_reorder.plot.ordering import (
    DEFAULT_ORDER,
    DEFAULT_ORDERING,
    Ordering,
    OrderingKind,
    OrderingSpec,
    full_order,
    parse_pens,
    top_layers_order,
    validate_ordering,
)

from plt_reorder.plot.emitter import (
    MAX_FILE_SIZE,
    EmitResult,
    EmitterState,
    ReorderEmitter,
    load_plot_file,
    reorder_bytes,
    reorder_file,
)

__all__ = [
    # Records
    "Chunk",
    "DRAWING_PENS",
    "MAX_PEN",
    "MIN_PEN",
    "OPCODE_LEN",
    "Pen",
    "SegmentedPlot",
    # Segmenter
    "find_chunks",
    "segment",
    # Ordering
    "DEFAULT_ORDER",
    "DEFAULT_ORDERING",
    "Ordering",
    "OrderingKind",
    "OrderingSpec",
    "full_order",
    "parse_pens",
    "top_layers_order",
    "validate_ordering",
    # Emitter
    "MAX_FILE_SIZE",
    "EmitResult",
    "EmitterState",
    "ReorderEmitter",
    "load_plot_file",
    "reorder_bytes",
    "reorder_file",
]
