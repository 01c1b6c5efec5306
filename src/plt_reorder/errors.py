"""
PLT Reorder Error Hierarchy
===========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from PltError, allowing callers to catch every
conversion failure with a single except clause if desired.

Exception Hierarchy
-------------------
PltError (base)
├── SourceError (loading the input file)
│   ├── EmptyFileError - input file has no bytes
│   ├── FileTooLargeError - input exceeds the maximum supported length
│   └── PlotReadError - open/read failure (wraps the OS error)
├── SegmentationError (splitting the buffer into pen chunks)
│   ├── MalformedOpcodeError - "SP" not followed by a usable pen digit
│   ├── NoChunksFoundError - no "SP" opcode anywhere in the buffer
│   ├── EmptyHeaderChunkError - degenerate zero-length first chunk
│   └── TooManyChunksError - chunk table exceeded its configured bound
├── OrderError (caller-supplied pen ordering)
│   ├── OrderSyntaxError - ordering text contains a non-digit
│   ├── InvalidPenError - pen outside 0-7
│   ├── DuplicatePenError - pen listed twice
│   └── UnterminatedOrderError - ordering never reaches pen 0
└── EmitError (writing the reordered output)
    └── PlotWriteError - short write or OS error while writing

Every failure is final for the conversion that raised it. Each exception
keeps its diagnostic context (offsets, offending bytes, pen values) as
attributes so the CLI and tests can inspect it without parsing messages.
"""

from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class PltError(Exception):
    """
    Base exception for all PLT reorder errors.

    Catch this to handle any conversion failure:

        try:
            reorder_file("plot.plt", "out.plt", DEFAULT_ORDERING)
        except PltError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Loading Exceptions
# =============================================================================

class SourceError(PltError):
    """Base exception for problems loading the input file."""
    pass


class EmptyFileError(SourceError):
    """The input file is empty, so there is nothing to reorder."""

    def __init__(self, path: Optional[str] = None):
        self.path = path
        where = f" '{path}'" if path else ""
        super().__init__(f"input file{where} is empty")


class FileTooLargeError(SourceError):
    """
    The input file is longer than the supported maximum.

    The whole file is buffered in memory, and chunk offsets are limited
    to the range the plotter tooling can represent.
    """

    def __init__(self, size: int, limit: int, path: Optional[str] = None):
        self.size = size
        self.limit = limit
        self.path = path
        where = f" '{path}'" if path else ""
        super().__init__(
            f"input file{where} is {size} bytes, maximum supported is {limit} bytes"
        )


class PlotReadError(SourceError):
    """
    The input file could not be opened or read.

    The underlying OS error is chained as __cause__ and also kept in
    the `cause` attribute.
    """

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"cannot read '{path}': {reason}")


# =============================================================================
# Segmentation Exceptions
# =============================================================================

class SegmentationError(PltError):
    """Base exception for failures while splitting a plot into pen chunks."""
    pass


class MalformedOpcodeError(SegmentationError):
    """
    An "SP" byte pair is not followed by a supported pen digit.

    Attributes:
        offset: Offset of the leading 'S' in the source buffer
        window: The offending 3-byte window, e.g. b"SPX"
        reason: Short description of what is wrong with the window
    """

    def __init__(self, offset: int, window: bytes, reason: str = "expected a pen digit"):
        self.offset = offset
        self.window = window
        self.reason = reason
        text = window.decode("ascii", errors="backslashreplace")
        super().__init__(f"bad SP opcode '{text}' at offset {offset}: {reason}")


class NoChunksFoundError(SegmentationError):
    """The buffer contains no "SP" opcode, so there are no pen chunks."""

    def __init__(self, length: int):
        self.length = length
        super().__init__(f"no SP opcodes found in {length} bytes")


class EmptyHeaderChunkError(SegmentationError):
    """The first chunk in the table has zero length."""

    def __init__(self, offset: int):
        self.offset = offset
        super().__init__(f"first chunk at offset {offset} is empty")


class TooManyChunksError(SegmentationError):
    """
    The chunk table would grow beyond its configured bound.

    Attributes:
        limit: The configured maximum number of chunks
        offset: Offset of the first opcode that did not fit
    """

    def __init__(self, limit: int, offset: int):
        self.limit = limit
        self.offset = offset
        super().__init__(
            f"more than {limit} chunks (next SP opcode at offset {offset}); "
            f"raise the chunk limit to process this file"
        )


# =============================================================================
# Ordering Exceptions
# =============================================================================

class OrderError(PltError):
    """Base exception for malformed pen orderings."""
    pass


class OrderSyntaxError(OrderError):
    """Ordering text contains something other than pen digits."""

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        bad = text[position] if 0 <= position < len(text) else ""
        super().__init__(
            f"invalid character {bad!r} at position {position} in ordering '{text}'"
        )


class InvalidPenError(OrderError):
    """
    A pen number is outside the supported range.

    Attributes:
        pen: The offending pen value
        position: Index of the pen within the ordering (when known)
    """

    def __init__(self, pen: int, position: Optional[int] = None, reason: Optional[str] = None):
        self.pen = pen
        self.position = position
        message = f"invalid pen {pen}"
        if position is not None:
            message += f" at position {position}"
        message += f": {reason}" if reason else ": pens must be 0-7"
        super().__init__(message)


class DuplicatePenError(OrderError):
    """A pen appears more than once in an ordering."""

    def __init__(self, pen: int, position: int, first_position: int):
        self.pen = pen
        self.position = position
        self.first_position = first_position
        super().__init__(
            f"duplicate pen {pen} at position {position} "
            f"(first listed at position {first_position})"
        )


class UnterminatedOrderError(OrderError):
    """The ordering does not contain the pen 0 terminator."""

    def __init__(self, pens: Sequence[int]):
        self.pens = tuple(pens)
        listed = ",".join(str(p) for p in self.pens) or "<empty>"
        super().__init__(f"ordering {listed} is not terminated by pen 0")


# =============================================================================
# Emission Exceptions
# =============================================================================

class EmitError(PltError):
    """Base exception for failures while writing reordered output."""
    pass


class PlotWriteError(EmitError):
    """
    Writing to the output failed part way through.

    Bytes written before the failure stay in the output; there is no
    rollback.

    Attributes:
        what: Which part was being written ("header" or "SPn")
        expected: Bytes requested for this write
        written: Bytes the writer accepted (None if it raised)
    """

    def __init__(self, what: str, expected: int, written: Optional[int] = None,
                 cause: Optional[OSError] = None):
        self.what = what
        self.expected = expected
        self.written = written
        self.cause = cause
        if cause is not None:
            reason = cause.strerror or str(cause)
            message = f"{what}: write of {expected} bytes failed: {reason}"
        else:
            message = f"{what}: short write ({written} of {expected} bytes)"
        super().__init__(message)
