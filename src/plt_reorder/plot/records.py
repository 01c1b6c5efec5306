"""
PLT Chunk Data Structures
=========================

This module defines the data structures produced by the chunk segmenter
and consumed by the reorder emitter.

Plot Structure Overview
-----------------------
A PLT file written by an HPGL plotter driver (for example the plot output
of an HP 4195A network analyzer) looks like:

    IN;DF;...;SP5;PU...;PD...;SP3;PU...;SP1;...;SP0;
    |-- header --||--- chunk ---||- chunk -||...||chunk|

1. Header: every byte before the first "SP" opcode (init, scaling, ...)
2. Chunks: each begins at an "SP<pen>" opcode and runs up to the next
   "SP" opcode or end of file. Chunk contents are opaque.

Pen 0 ("SP0") conventionally selects no pen and marks the end of the plot,
so the pen 0 chunk is normally the last chunk in the file.

Typical HP 4195A pen usage:
    SP1 yellow trace / text
    SP2 cyan trace / text
    SP3 grey graticule and text
    SP4 white text
    SP5 green comments
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator


# =============================================================================
# Constants
# =============================================================================

# "SP" followed by one pen digit
OPCODE_PREFIX = b"SP"
OPCODE_LEN = 3

MIN_PEN = 0
MAX_PEN = 7

# Pens that carry drawing commands (pen 0 only terminates)
DRAWING_PENS = tuple(range(1, MAX_PEN + 1))


class Pen(IntEnum):
    """Pen numbers understood by the reorderer."""
    TERMINATOR = 0
    PEN_1 = 1
    PEN_2 = 2
    PEN_3 = 3
    PEN_4 = 4
    PEN_5 = 5
    PEN_6 = 6
    PEN_7 = 7

    @classmethod
    def is_valid(cls, value: int) -> bool:
        """Return True if value is a supported pen number."""
        return MIN_PEN <= value <= MAX_PEN

    def opcode(self) -> bytes:
        """Return the "SPn" opcode that selects this pen."""
        return OPCODE_PREFIX + bytes([0x30 + self.value])


# =============================================================================
# Chunk
# =============================================================================

@dataclass(frozen=True)
class Chunk:
    """
    A contiguous byte range of the source drawn with one pen.

    Attributes:
        pen: Pen number 0-7 taken from the "SPn" opcode
        start: Offset of the leading 'S' in the source buffer
        length: Number of bytes, up to the next "SP" or end of buffer
    """
    pen: int
    start: int
    length: int

    @property
    def end(self) -> int:
        """Offset one past the last byte of the chunk."""
        return self.start + self.length

    @property
    def is_terminator(self) -> bool:
        """True for the pen 0 (end-of-plot) chunk."""
        return self.pen == Pen.TERMINATOR

    def __str__(self) -> str:
        return f"SP{self.pen} @ {self.start} ({self.length} bytes)"


# =============================================================================
# Segmented Plot
# =============================================================================

@dataclass(frozen=True)
class SegmentedPlot:
    """
    A source buffer split into a header and pen chunks.

    The chunks partition source[header_length:] with no gaps or
    overlaps, in source order.

    Attributes:
        source: The complete source buffer
        header_length: Bytes before the first "SP" opcode
        chunks: Pen chunks in source order
    """
    source: bytes = field(repr=False)
    header_length: int
    chunks: tuple[Chunk, ...]

    @property
    def header(self) -> bytes:
        """The header bytes, copied verbatim to the output."""
        return self.source[:self.header_length]

    @property
    def total_length(self) -> int:
        """Length of the whole source buffer."""
        return len(self.source)

    def chunk_bytes(self, chunk: Chunk) -> bytes:
        """Return the bytes covered by a chunk."""
        return self.source[chunk.start:chunk.end]

    def pens(self) -> set[int]:
        """Return the set of pens that have at least one chunk."""
        return {chunk.pen for chunk in self.chunks}

    def chunks_for_pen(self, pen: int) -> Iterator[Chunk]:
        """Yield the chunks drawn with pen, in source order."""
        for chunk in self.chunks:
            if chunk.pen == pen:
                yield chunk

    def bytes_for_pen(self, pen: int) -> int:
        """Total number of bytes drawn with pen."""
        return sum(chunk.length for chunk in self.chunks_for_pen(pen))

    def is_partition(self) -> bool:
        """Check that the chunks tile the buffer after the header exactly."""
        expected = self.header_length
        for chunk in self.chunks:
            if chunk.start != expected or chunk.length <= 0:
                return False
            expected = chunk.end
        return expected == len(self.source)
