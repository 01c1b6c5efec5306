"""
Chunk Segmenter
===============

Splits a PLT byte buffer into a header and an ordered table of
pen-tagged chunks.

The segmenter knows nothing about HPGL beyond the literal three-byte
pen select opcode "SP<digit>". Every occurrence of "SP" opens a new
chunk; the previous chunk ends where the new one begins and the last
chunk runs to the end of the buffer. Chunk payloads are never
interpreted.

Usage Examples
--------------
    >>> from plt_reorder.plot import segment
    >>> plot = segment(b"HDR;SP1AA;SP2BB;SP0;")
    >>> plot.header
    b'HDR;'
    >>> [(c.pen, c.start, c.length) for c in plot.chunks]
    [(1, 4, 6), (2, 10, 6), (0, 16, 4)]
"""

from typing import Optional
import logging

from plt_reorder.errors import (
    EmptyHeaderChunkError,
    MalformedOpcodeError,
    NoChunksFoundError,
    TooManyChunksError,
)
from plt_reorder.plot.records import (
    Chunk,
    MAX_PEN,
    OPCODE_LEN,
    OPCODE_PREFIX,
    SegmentedPlot,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Opcode Scanning
# =============================================================================

def _pen_at(src: bytes, idx: int) -> int:
    """
    Decode the pen digit of the "SP" opcode starting at idx.

    Raises:
        MalformedOpcodeError: If the digit is missing or not a supported pen
    """
    window = src[idx:idx + OPCODE_LEN]
    digit = src[idx + 2]
    if not 0x30 <= digit <= 0x39:
        raise MalformedOpcodeError(idx, window)
    pen = digit - 0x30
    if pen > MAX_PEN:
        raise MalformedOpcodeError(idx, window, reason=f"pen {pen} is not supported (0-{MAX_PEN})")
    return pen


def find_chunks(src: bytes, max_chunks: Optional[int] = None) -> list[Chunk]:
    """
    Locate every "SPn" opcode and build the chunk table.

    The scan looks for "SP" at every offset that leaves room for the pen
    digit, so an "SP" in the last two bytes of the buffer is not an opcode.

    Args:
        src: The complete source buffer
        max_chunks: Optional upper bound on the number of chunks

    Returns:
        Chunks in source order. Their lengths tile src from the first
        opcode to the end of the buffer.

    Raises:
        MalformedOpcodeError: "SP" followed by a non-digit or by 8/9
        NoChunksFoundError: No "SP" opcode in the buffer
        TooManyChunksError: More opcodes than max_chunks
    """
    starts: list[tuple[int, int]] = []
    last_idx = len(src) - OPCODE_LEN

    idx = src.find(OPCODE_PREFIX)
    while 0 <= idx <= last_idx:
        pen = _pen_at(src, idx)

        if max_chunks is not None and len(starts) >= max_chunks:
            raise TooManyChunksError(max_chunks, idx)

        logger.debug(f"Chunk {len(starts)} @ {idx}: pen {pen}")
        starts.append((pen, idx))
        idx = src.find(OPCODE_PREFIX, idx + 1)

    if not starts:
        raise NoChunksFoundError(len(src))

    chunks = []
    for i, (pen, start) in enumerate(starts):
        end = starts[i + 1][1] if i + 1 < len(starts) else len(src)
        chunks.append(Chunk(pen=pen, start=start, length=end - start))
    return chunks


def _check_terminator(chunks: list[Chunk]) -> None:
    """Log a warning if the pen 0 chunk is missing, repeated, or not last."""
    terminators = [i for i, chunk in enumerate(chunks) if chunk.is_terminator]
    if not terminators:
        logger.warning("No SP0 terminator chunk found; output will end without one")
    elif len(terminators) > 1:
        logger.warning(
            f"{len(terminators)} SP0 chunks found; all will be written at the end"
        )
    elif terminators[0] != len(chunks) - 1:
        logger.warning(
            f"SP0 chunk is #{terminators[0]} of {len(chunks)}; "
            f"it will be moved to the end"
        )


# =============================================================================
# Public Entry Point
# =============================================================================

def segment(src: bytes, max_chunks: Optional[int] = None) -> SegmentedPlot:
    """
    Partition a PLT buffer into its header and pen chunks.

    Args:
        src: The complete source buffer
        max_chunks: Optional upper bound on the number of chunks

    Returns:
        A SegmentedPlot whose header and chunks cover src exactly

    Raises:
        MalformedOpcodeError: "SP" followed by a non-digit or by 8/9
        NoChunksFoundError: No "SP" opcode in the buffer
        EmptyHeaderChunkError: The first chunk has zero length
        TooManyChunksError: More opcodes than max_chunks
    """
    src = bytes(src)
    chunks = find_chunks(src, max_chunks=max_chunks)

    if chunks[0].length == 0:
        raise EmptyHeaderChunkError(chunks[0].start)

    _check_terminator(chunks)

    header_length = chunks[0].start
    logger.debug(
        f"Segmented {len(src)} bytes: header {header_length} bytes, "
        f"{len(chunks)} chunks, pens {sorted({c.pen for c in chunks})}"
    )
    return SegmentedPlot(source=src, header_length=header_length, chunks=tuple(chunks))
