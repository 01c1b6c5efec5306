"""
Reorder Emitter
===============

Writes a segmented plot back out with its pen groups in a new order.

The emitter is a small state machine over the validated ordering and
the chunk table:

    INITIALIZING -> VALIDATING_ORDER -> EMITTING_HEADER
                 -> EMITTING_PEN_GROUP (once per ordering entry) -> DONE

Any failure moves it to FAILED; the exception is kept in `error` and
re-raised to the caller. Output already written stays written.

For each ordering entry, the whole chunk table is walked in source order
and every chunk of that pen is copied verbatim. Chunks of the same pen
therefore keep their relative order, and pens left out of the ordering
are dropped.

Usage Examples
--------------
In memory:
    >>> reorder_bytes(b"HDR;SP1AA;SP2BB;SP1CC;SP0;")
    b'HDR;SP1AA;SP1CC;SP2BB;SP0;'

File to file:
    >>> from plt_reorder.plot import OrderingSpec
    >>> ordering = OrderingSpec.top_layers([2]).resolve()
    >>> result = reorder_file("scope.plt", "scope_reordered.plt", ordering)
    >>> print(f"wrote {result.bytes_written} bytes")
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union
import io
import logging

from plt_reorder.errors import (
    EmptyFileError,
    FileTooLargeError,
    PltError,
    PlotReadError,
    PlotWriteError,
)
from plt_reorder.plot.ordering import DEFAULT_ORDERING, Ordering, validate_ordering
from plt_reorder.plot.records import Pen, SegmentedPlot
from plt_reorder.plot.segmenter import segment

# Logger for this module
logger = logging.getLogger(__name__)


# Largest input accepted by default. Chunk offsets are kept within 32 bits
# and a length of 0xFFFFFFFF is reserved for "unknown".
MAX_FILE_SIZE = 0xFFFFFFFE


# =============================================================================
# Source Loading
# =============================================================================

def load_plot_file(path: Union[str, Path], max_file_size: int = MAX_FILE_SIZE) -> bytes:
    """
    Read an entire PLT file into memory.

    Args:
        path: File to read
        max_file_size: Largest accepted file length in bytes

    Returns:
        The file contents

    Raises:
        EmptyFileError: The file has no bytes
        FileTooLargeError: The file is longer than max_file_size
        PlotReadError: The file cannot be opened or read
    """
    path = Path(path)
    try:
        size = path.stat().st_size
        if size > max_file_size:
            raise FileTooLargeError(size, max_file_size, str(path))
        data = path.read_bytes()
    except OSError as e:
        raise PlotReadError(str(path), e) from e

    if not data:
        raise EmptyFileError(str(path))
    if len(data) > max_file_size:
        raise FileTooLargeError(len(data), max_file_size, str(path))

    logger.debug(f"Loaded {len(data)} bytes from {path}")
    return data


# =============================================================================
# Emitter State
# =============================================================================

class EmitterState(Enum):
    """States of the reorder emitter."""
    INITIALIZING = "initializing"
    VALIDATING_ORDER = "validating order"
    EMITTING_HEADER = "emitting header"
    EMITTING_PEN_GROUP = "emitting pen group"
    DONE = "done"
    FAILED = "failed"


@dataclass
class EmitResult:
    """
    Summary of one conversion.

    Attributes:
        ordering: The ordering that was applied
        header_length: Header bytes written
        bytes_read: Length of the source buffer
        bytes_written: Total bytes written to the output
        bytes_per_pen: Bytes written for each pen, in emission order
        dropped_pens: Pens present in the source but not in the ordering
    """
    ordering: Ordering
    header_length: int = 0
    bytes_read: int = 0
    bytes_written: int = 0
    bytes_per_pen: dict[int, int] = field(default_factory=dict)
    dropped_pens: tuple[int, ...] = ()

    @property
    def is_complete(self) -> bool:
        """True if every source byte made it to the output."""
        return self.bytes_written == self.bytes_read


# =============================================================================
# Reorder Emitter
# =============================================================================

class ReorderEmitter:
    """
    Writes a plot's header and pen groups in a requested order.

    One emitter performs one conversion. Its state and the pen group
    being written are exposed for diagnostics.

    Attributes:
        ordering: Candidate ordering (validated on each run)
        max_chunks: Optional bound passed to the segmenter
        max_file_size: Largest input file accepted by run_file()
        state: Current EmitterState
        group_index: Index into the ordering of the group being written
        error: The exception that moved the emitter to FAILED

    Example:
        >>> emitter = ReorderEmitter(validate_ordering([2, 1, 0]))
        >>> out = io.BytesIO()
        >>> emitter.run(b"IN;SP1A;SP2B;SP0;", out).bytes_written
        17
    """

    def __init__(
        self,
        ordering: Union[Ordering, Iterable[int]] = DEFAULT_ORDERING,
        max_chunks: Optional[int] = None,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        self.ordering = ordering
        self.max_chunks = max_chunks
        self.max_file_size = max_file_size
        self.state = EmitterState.INITIALIZING
        self.group_index: Optional[int] = None
        self.error: Optional[PltError] = None

    def _enter(self, state: EmitterState) -> None:
        if state is not self.state:
            logger.debug(f"Emitter: {self.state.value} -> {state.value}")
        self.state = state

    def _fail(self, error: PltError) -> None:
        self.error = error
        self._enter(EmitterState.FAILED)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def prepare(self, source: bytes) -> tuple[SegmentedPlot, Ordering]:
        """
        Segment the source and validate the ordering without writing.

        Returns:
            The segmented plot and the validated ordering
        """
        try:
            self._enter(EmitterState.INITIALIZING)
            plot = segment(source, max_chunks=self.max_chunks)

            self._enter(EmitterState.VALIDATING_ORDER)
            ordering = self._validate(plot)
        except PltError as e:
            self._fail(e)
            raise
        return plot, ordering

    def emit(self, plot: SegmentedPlot, ordering: Ordering, output: BinaryIO) -> EmitResult:
        """
        Write an already segmented plot in the given order.

        Raises:
            PlotWriteError: The output accepted fewer bytes than given
        """
        result = EmitResult(
            ordering=ordering,
            header_length=plot.header_length,
            bytes_read=plot.total_length,
            dropped_pens=tuple(sorted(p for p in plot.pens() if p not in ordering)),
        )
        try:
            self._enter(EmitterState.EMITTING_HEADER)
            result.bytes_written += self._write(output, plot.header, "header")

            for index, pen in enumerate(ordering):
                self.group_index = index
                self._enter(EmitterState.EMITTING_PEN_GROUP)
                written = self._emit_group(plot, pen, output)
                result.bytes_per_pen[pen] = written
                result.bytes_written += written
                if pen == Pen.TERMINATOR:
                    break
        except PltError as e:
            self._fail(e)
            raise

        self._enter(EmitterState.DONE)
        logger.debug(
            f"Wrote {result.bytes_written} of {result.bytes_read} bytes "
            f"in order {ordering}"
        )
        return result

    def run(self, source: bytes, output: BinaryIO) -> EmitResult:
        """
        Segment source and write it to output in the emitter's order.

        Nothing is written unless segmentation and ordering validation
        both succeed.
        """
        plot, ordering = self.prepare(source)
        return self.emit(plot, ordering, output)

    def run_file(self, input_path: Union[str, Path], output_path: Union[str, Path]) -> EmitResult:
        """
        Reorder input_path into output_path.

        The input is loaded, segmented and validated before the output
        file is opened, so a bad input never creates an output file.
        """
        self._enter(EmitterState.INITIALIZING)
        try:
            source = load_plot_file(input_path, self.max_file_size)
        except PltError as e:
            self._fail(e)
            raise

        plot, ordering = self.prepare(source)
        output_path = Path(output_path)
        try:
            with output_path.open("wb") as output:
                return self.emit(plot, ordering, output)
        except OSError as e:
            error = PlotWriteError(str(output_path), plot.total_length, cause=e)
            self._fail(error)
            raise error from e

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _validate(self, plot: SegmentedPlot) -> Ordering:
        """Validate the ordering and report pens it will drop."""
        pens = self.ordering.pens if isinstance(self.ordering, Ordering) else self.ordering
        ordering = validate_ordering(pens)

        for pen in sorted(plot.pens()):
            if pen not in ordering:
                logger.info(f"Dropping SP{pen}: {plot.bytes_for_pen(pen)} bytes not in ordering")
        return ordering

    def _emit_group(self, plot: SegmentedPlot, pen: int, output: BinaryIO) -> int:
        """Write every chunk of one pen, in source order."""
        total = 0
        for chunk in plot.chunks_for_pen(pen):
            total += self._write(output, plot.chunk_bytes(chunk), f"SP{pen}")
            logger.debug(f"wrote {chunk.length} bytes of SP{pen}")
        return total

    @staticmethod
    def _write(output: BinaryIO, data: bytes, what: str) -> int:
        """Write data in full or raise PlotWriteError."""
        try:
            written = output.write(data)
        except OSError as e:
            raise PlotWriteError(what, len(data), cause=e) from e
        # Raw streams may return None (would block) or a short count
        if written is None or written != len(data):
            raise PlotWriteError(what, len(data), written)
        return written


# =============================================================================
# Convenience Functions
# =============================================================================

def reorder_bytes(
    source: bytes,
    ordering: Union[Ordering, Iterable[int]] = DEFAULT_ORDERING,
    max_chunks: Optional[int] = None,
) -> bytes:
    """
    Reorder a PLT buffer in memory.

    Args:
        source: Complete PLT file contents
        ordering: Pen emission order (default 3,4,5,6,7,1,2,0)
        max_chunks: Optional bound on the chunk table

    Returns:
        The reordered PLT bytes
    """
    if not source:
        raise EmptyFileError()
    output = io.BytesIO()
    ReorderEmitter(ordering, max_chunks=max_chunks).run(source, output)
    return output.getvalue()


def reorder_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    ordering: Union[Ordering, Iterable[int]] = DEFAULT_ORDERING,
    max_chunks: Optional[int] = None,
    max_file_size: int = MAX_FILE_SIZE,
) -> EmitResult:
    """
    Reorder a PLT file on disk.

    Args:
        input_path: PLT file to read
        output_path: File to write (created or truncated)
        ordering: Pen emission order (default 3,4,5,6,7,1,2,0)
        max_chunks: Optional bound on the chunk table
        max_file_size: Largest accepted input length

    Returns:
        An EmitResult describing what was written
    """
    emitter = ReorderEmitter(ordering, max_chunks=max_chunks, max_file_size=max_file_size)
    return emitter.run_file(input_path, output_path)
