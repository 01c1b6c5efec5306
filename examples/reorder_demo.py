#!/usr/bin/env python3
"""
PLT Pen Reorder Demo
====================

This script demonstrates how to use the plt_reorder library to:
1. Segment a plot into its header and pen chunks
2. Build orderings in the default, full and top-layers forms
3. Reorder a plot in memory and on disk

Usage:
    source .venv/bin/activate
    python examples/reorder_demo.py [input.plt]
"""

import sys
from pathlib import Path

from plt_reorder import (
    OrderingSpec,
    PltError,
    reorder_bytes,
    reorder_file,
    segment,
)

# A tiny HP 4195A style plot: grid, two traces, annotation, terminator
DEMO_PLOT = (
    b"IN;DF;SC0,1000,0,750;"
    b"SP3;PU0,0;PD1000,0,1000,750,0,750,0,0;"
    b"SP1;PU0,375;PD500,380,1000,390;"
    b"SP2;PU0,200;PD500,210,1000,190;"
    b"SP5;PU100,700;LBREF\x03;"
    b"SP0;"
)


def main():
    source = Path(sys.argv[1]).read_bytes() if len(sys.argv) > 1 else DEMO_PLOT

    # ==========================================================================
    # 1. Look at the chunk table
    # ==========================================================================
    plot = segment(source)
    print(f"Header: {plot.header_length} bytes")
    for index, chunk in enumerate(plot.chunks):
        print(f"  #{index}: {chunk}")

    # ==========================================================================
    # 2. Build orderings
    # ==========================================================================
    orderings = {
        "default": OrderingSpec().resolve(),
        "full 3,2": OrderingSpec.full([3, 2]).resolve(),
        "top 3": OrderingSpec.top_layers([3]).resolve(),
    }

    # ==========================================================================
    # 3. Reorder in memory
    # ==========================================================================
    for name, ordering in orderings.items():
        output = reorder_bytes(source, ordering)
        pens = [chunk.pen for chunk in segment(output).chunks]
        print(f"{name:>9} ({ordering}): pens {pens}, {len(output)} bytes")

    # ==========================================================================
    # 4. Reorder on disk
    # ==========================================================================
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)
    src_path = output_dir / "demo.plt"
    src_path.write_bytes(source)

    result = reorder_file(src_path, output_dir / "demo_reordered.plt")
    print(f"Wrote {result.bytes_written} of {result.bytes_read} bytes")


if __name__ == "__main__":
    try:
        main()
    except PltError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
