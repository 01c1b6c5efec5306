"""
Reorder Emitter Unit Tests
==========================

Tests for writing plots back out in a new pen order.

Test Categories
---------------
1. Scenarios: Known inputs and their reordered output
2. Properties: Byte counts, grouping, identity and inverse orderings
3. State machine: States, failure handling, partial output
4. Files: Loading, size limits and file-to-file conversion
"""

import io
import logging
from pathlib import Path

import pytest

from plt_reorder.plot import (
    DEFAULT_ORDERING,
    EmitterState,
    ReorderEmitter,
    full_order,
    load_plot_file,
    reorder_bytes,
    reorder_file,
    segment,
    top_layers_order,
    validate_ordering,
)
from plt_reorder.errors import (
    EmptyFileError,
    FileTooLargeError,
    MalformedOpcodeError,
    NoChunksFoundError,
    PlotReadError,
    PlotWriteError,
    UnterminatedOrderError,
)


ASCENDING = validate_ordering([1, 2, 3, 4, 5, 6, 7, 0])


class ShortWriter:
    """Output stream that accepts a fixed number of writes, then writes short."""

    def __init__(self, good_writes: int):
        self.good_writes = good_writes
        self.data = bytearray()

    def write(self, data: bytes) -> int:
        if self.good_writes <= 0:
            self.data.extend(data[:1])
            return min(1, len(data))
        self.good_writes -= 1
        self.data.extend(data)
        return len(data)


class FailingWriter:
    """Output stream whose device is full."""

    def write(self, data: bytes) -> int:
        raise OSError(28, "No space left on device")


def pen_sequence(data: bytes) -> list[int]:
    """Pens of each chunk of a reordered buffer, in order."""
    return [chunk.pen for chunk in segment(data).chunks]


# =============================================================================
# Scenario Tests
# =============================================================================

class TestScenarios:
    """Known inputs with known reordered output."""

    def test_default_order(self, simple_plot):
        """Pen 1 chunks are grouped in source order, before pen 2 and SP0."""
        assert reorder_bytes(simple_plot) == b"HDR;SP1AA;SP1CC;SP2BB;SP0;"

    def test_top_layers(self, simple_plot):
        """Putting pen 1 on top moves both pen 1 chunks after pen 2."""
        result = reorder_bytes(simple_plot, top_layers_order((1,)))
        assert result == b"HDR;SP2BB;SP1AA;SP1CC;SP0;"

    def test_full_order_drops_unlisted(self, simple_plot):
        """Pens missing from a full ordering are left out."""
        assert reorder_bytes(simple_plot, full_order((2,))) == b"HDR;SP2BB;SP0;"

    def test_plain_sequence_ordering(self, simple_plot):
        """A raw pen sequence is validated and used."""
        assert reorder_bytes(simple_plot, [2, 1, 0]) == b"HDR;SP2BB;SP1AA;SP1CC;SP0;"

    def test_analyzer_plot(self, hp4195a_plot):
        """Trace pens 1 and 2 end up after the graticule and annotations."""
        output = reorder_bytes(hp4195a_plot)
        assert pen_sequence(output) == [3, 4, 5, 1, 1, 2, 0]
        assert output.startswith(segment(hp4195a_plot).header)
        assert output.endswith(b"SP0;")

    def test_malformed_source(self):
        with pytest.raises(MalformedOpcodeError) as exc_info:
            reorder_bytes(b"HDR;SPX;")
        assert exc_info.value.window == b"SPX"

    def test_no_opcodes(self):
        with pytest.raises(NoChunksFoundError):
            reorder_bytes(b"IN;PU0,0;PD1,1;")

    def test_empty_source(self):
        with pytest.raises(EmptyFileError):
            reorder_bytes(b"")


# =============================================================================
# Property Tests
# =============================================================================

class TestProperties:
    """Invariants that hold for every valid input and ordering."""

    @pytest.mark.parametrize("ordering", [
        DEFAULT_ORDERING,
        ASCENDING,
        full_order((2,)),
        full_order((5, 3)),
        top_layers_order((4, 1)),
        validate_ordering([0]),
    ])
    def test_output_length(self, hp4195a_plot, ordering):
        """Output is the header plus every chunk whose pen is in the ordering."""
        plot = segment(hp4195a_plot)
        expected = plot.header_length + sum(
            c.length for c in plot.chunks if c.pen in ordering
        )
        assert len(reorder_bytes(hp4195a_plot, ordering)) == expected

    def test_no_bytes_lost_when_nothing_dropped(self, hp4195a_plot):
        """Orderings that keep every pen preserve the exact byte multiset."""
        output = reorder_bytes(hp4195a_plot, top_layers_order((3,)))
        assert len(output) == len(hp4195a_plot)
        assert sorted(output) == sorted(hp4195a_plot)

    def test_identity_for_ascending_source(self):
        """An already ascending source is reproduced exactly."""
        source = b"IN;SP1A;SP2B;SP3C;SP5E;SP0;"
        assert reorder_bytes(source, ASCENDING) == source

    def test_inverse_ordering_restores_grouped_source(self):
        """Applying an ordering and then its inverse restores the source."""
        source = b"H;SP1a;SP2b;SP3c;SP0;"
        reversed_ = reorder_bytes(source, [3, 2, 1, 0])
        assert reversed_ == b"H;SP3c;SP2b;SP1a;SP0;"
        assert reorder_bytes(reversed_, [1, 2, 3, 0]) == source

    def test_inverse_not_identical_for_interleaved_source(self, simple_plot):
        """Interleaved same-pen chunks come back grouped, not in source layout."""
        once = reorder_bytes(simple_plot, [2, 1, 0])
        back = reorder_bytes(once, [1, 2, 0])
        assert back != simple_plot
        assert back == b"HDR;SP1AA;SP1CC;SP2BB;SP0;"

    def test_groups_contiguous_and_stable(self, hp4195a_plot):
        """After one pass each pen is contiguous; a second pass changes nothing."""
        once = reorder_bytes(hp4195a_plot)
        pens = pen_sequence(once)
        for pen in set(pens):
            first = pens.index(pen)
            last = len(pens) - 1 - pens[::-1].index(pen)
            assert set(pens[first:last + 1]) == {pen}
        assert reorder_bytes(once) == once

    def test_complementary_orderings_stable(self, hp4195a_plot):
        """Reordering twice with different orders yields stable pen groups."""
        first = reorder_bytes(hp4195a_plot, DEFAULT_ORDERING)
        second = reorder_bytes(first, top_layers_order((3,)))
        assert pen_sequence(second) == [1, 1, 2, 4, 5, 3, 0]
        assert reorder_bytes(second, top_layers_order((3,))) == second


# =============================================================================
# State Machine Tests
# =============================================================================

class TestEmitterStateMachine:
    """Tests for emitter states and failure handling."""

    def test_initial_state(self):
        emitter = ReorderEmitter()
        assert emitter.state is EmitterState.INITIALIZING
        assert emitter.error is None

    def test_done_after_run(self, simple_plot):
        """A successful run ends in DONE on the terminator group."""
        emitter = ReorderEmitter()
        result = emitter.run(simple_plot, io.BytesIO())
        assert emitter.state is EmitterState.DONE
        assert emitter.group_index == len(DEFAULT_ORDERING) - 1
        assert result.is_complete

    def test_result_counts(self, simple_plot):
        """The result records header, per-pen and total byte counts."""
        result = ReorderEmitter().run(simple_plot, io.BytesIO())
        assert result.header_length == 4
        assert result.bytes_read == 26
        assert result.bytes_written == 26
        assert result.bytes_per_pen[1] == 12
        assert result.bytes_per_pen[2] == 6
        assert result.bytes_per_pen[0] == 4
        assert result.bytes_per_pen[3] == 0
        assert list(result.bytes_per_pen) == list(DEFAULT_ORDERING)
        assert result.dropped_pens == ()

    def test_dropped_pens_reported(self, simple_plot):
        result = ReorderEmitter(full_order((2,))).run(simple_plot, io.BytesIO())
        assert result.dropped_pens == (1,)
        assert result.bytes_written == 14
        assert not result.is_complete

    def test_segmentation_failure_writes_nothing(self):
        """Bad input fails before the header is written."""
        output = io.BytesIO()
        emitter = ReorderEmitter()
        with pytest.raises(MalformedOpcodeError) as exc_info:
            emitter.run(b"HDR;SPX;", output)
        assert emitter.state is EmitterState.FAILED
        assert emitter.error is exc_info.value
        assert output.getvalue() == b""

    def test_unterminated_ordering_writes_nothing(self, simple_plot):
        """An inconsistent raw ordering fails while validating."""
        output = io.BytesIO()
        emitter = ReorderEmitter([1, 2])
        with pytest.raises(UnterminatedOrderError):
            emitter.run(simple_plot, output)
        assert emitter.state is EmitterState.FAILED
        assert output.getvalue() == b""

    def test_short_write_keeps_prefix(self, simple_plot):
        """A short write fails and leaves what was already written."""
        writer = ShortWriter(good_writes=2)
        emitter = ReorderEmitter()
        with pytest.raises(PlotWriteError) as exc_info:
            emitter.run(simple_plot, writer)
        error = exc_info.value
        assert error.what == "SP1"
        assert error.expected == 6
        assert error.written == 1
        assert emitter.state is EmitterState.FAILED
        assert bytes(writer.data).startswith(b"HDR;SP1AA;")

    def test_header_write_failure(self, simple_plot):
        """An OS error while writing is wrapped with its cause."""
        with pytest.raises(PlotWriteError) as exc_info:
            ReorderEmitter().run(simple_plot, FailingWriter())
        assert exc_info.value.what == "header"
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "No space left" in str(exc_info.value)

    def test_writes_logged(self, simple_plot, caplog):
        """Each chunk write is logged at DEBUG level."""
        with caplog.at_level(logging.DEBUG, logger="plt_reorder.plot.emitter"):
            ReorderEmitter().run(simple_plot, io.BytesIO())
        assert "wrote 6 bytes of SP1" in caplog.text
        assert "wrote 4 bytes of SP0" in caplog.text

    def test_dropped_pens_logged(self, simple_plot, caplog):
        with caplog.at_level(logging.INFO, logger="plt_reorder.plot.emitter"):
            ReorderEmitter(full_order((2,))).run(simple_plot, io.BytesIO())
        assert "Dropping SP1: 12 bytes" in caplog.text


# =============================================================================
# File Tests
# =============================================================================

class TestFiles:
    """Tests for loading and file-to-file conversion."""

    def test_load(self, tmp_path: Path, simple_plot):
        path = tmp_path / "plot.plt"
        path.write_bytes(simple_plot)
        assert load_plot_file(path) == simple_plot

    def test_load_empty(self, tmp_path: Path):
        path = tmp_path / "empty.plt"
        path.write_bytes(b"")
        with pytest.raises(EmptyFileError):
            load_plot_file(path)

    def test_load_too_large(self, tmp_path: Path, simple_plot):
        path = tmp_path / "plot.plt"
        path.write_bytes(simple_plot)
        with pytest.raises(FileTooLargeError) as exc_info:
            load_plot_file(path, max_file_size=10)
        assert exc_info.value.size == len(simple_plot)
        assert exc_info.value.limit == 10

    def test_load_missing(self, tmp_path: Path):
        """Read failures keep the OS error as the cause."""
        with pytest.raises(PlotReadError) as exc_info:
            load_plot_file(tmp_path / "missing.plt")
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_reorder_file(self, tmp_path: Path, simple_plot):
        src = tmp_path / "in.plt"
        dst = tmp_path / "out.plt"
        src.write_bytes(simple_plot)
        result = reorder_file(src, dst)
        assert dst.read_bytes() == b"HDR;SP1AA;SP1CC;SP2BB;SP0;"
        assert result.bytes_written == len(simple_plot)

    def test_reorder_file_bad_input_creates_no_output(self, tmp_path: Path):
        src = tmp_path / "in.plt"
        dst = tmp_path / "out.plt"
        src.write_bytes(b"HDR;SPX;")
        with pytest.raises(MalformedOpcodeError):
            reorder_file(src, dst)
        assert not dst.exists()

    def test_reorder_file_bad_ordering_creates_no_output(self, tmp_path: Path, simple_plot):
        src = tmp_path / "in.plt"
        dst = tmp_path / "out.plt"
        src.write_bytes(simple_plot)
        with pytest.raises(UnterminatedOrderError):
            reorder_file(src, dst, [1, 2])
        assert not dst.exists()

    def test_reorder_file_unwritable_output(self, tmp_path: Path, simple_plot):
        src = tmp_path / "in.plt"
        src.write_bytes(simple_plot)
        emitter = ReorderEmitter()
        with pytest.raises(PlotWriteError):
            emitter.run_file(src, tmp_path / "no_such_dir" / "out.plt")
        assert emitter.state is EmitterState.FAILED

    def test_run_file_size_limit(self, tmp_path: Path, simple_plot):
        src = tmp_path / "in.plt"
        src.write_bytes(simple_plot)
        emitter = ReorderEmitter(max_file_size=8)
        with pytest.raises(FileTooLargeError):
            emitter.run_file(src, tmp_path / "out.plt")
        assert emitter.state is EmitterState.FAILED
        assert not (tmp_path / "out.plt").exists()
