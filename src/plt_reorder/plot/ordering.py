"""
Pen Ordering
============

Builds and validates the order in which pen groups are written.

An ordering is a sequence of distinct pens 0-7 ending with the pen 0
terminator. Pens listed earlier are drawn first and end up underneath;
pens listed later are drawn last and end up on top, since later ink
covers earlier ink on a pen plotter.

Ordering Forms
--------------
- **Default**: 3,4,5,6,7,1,2,0 - the two trace pens of an HP 4195A
  plot (1 and 2) go on top of the graticule and annotation pens.
- **Full**: every pen to keep, in order. Pen 0 is appended if missing.
  Pens not listed are dropped from the output.
- **Top layers**: only the pens that must be drawn last. All other pens
  keep ascending order underneath them, so nothing is dropped.

Usage Examples
--------------
    >>> full_order(parse_pens("3412")).pens
    (3, 4, 1, 2, 0)
    >>> top_layers_order(parse_pens("1")).pens
    (2, 3, 4, 5, 6, 7, 1, 0)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence
import logging

from plt_reorder.errors import (
    DuplicatePenError,
    InvalidPenError,
    OrderSyntaxError,
    UnterminatedOrderError,
)
from plt_reorder.plot.records import DRAWING_PENS, Pen

# Logger for this module
logger = logging.getLogger(__name__)


# Default emission order: trace pens 1 and 2 on top
DEFAULT_ORDER: tuple[int, ...] = (3, 4, 5, 6, 7, 1, 2, 0)

# Characters allowed between digits in ordering text
_SEPARATORS = " ,\t"


# =============================================================================
# Validated Ordering
# =============================================================================

@dataclass(frozen=True)
class Ordering:
    """
    A validated pen emission order.

    Construct through validate_ordering() or one of the form helpers;
    direct construction validates as well.

    Attributes:
        pens: Distinct pens 0-7, terminated by pen 0
    """
    pens: tuple[int, ...]

    def __post_init__(self) -> None:
        pens = tuple(self.pens)
        object.__setattr__(self, "pens", pens)
        checked = _check_pens(pens)
        if len(checked) < len(pens):
            raise InvalidPenError(
                pens[len(checked)], len(checked), reason="pens may not follow the 0 terminator"
            )

    def __contains__(self, pen: object) -> bool:
        return pen in self.pens

    def __iter__(self):
        return iter(self.pens)

    def __len__(self) -> int:
        return len(self.pens)

    def __str__(self) -> str:
        return ",".join(str(p) for p in self.pens)

    def omitted_pens(self) -> tuple[int, ...]:
        """Drawing pens 1-7 that this ordering drops."""
        return tuple(p for p in DRAWING_PENS if p not in self.pens)


def _check_pens(pens: Sequence[int]) -> tuple[int, ...]:
    """
    Walk pens up to and including the first 0.

    Returns:
        The terminated prefix of pens

    Raises:
        InvalidPenError: A pen outside 0-7
        DuplicatePenError: A pen listed twice
        UnterminatedOrderError: No pen 0 in the sequence
    """
    seen: dict[int, int] = {}
    for position, pen in enumerate(pens):
        if not Pen.is_valid(pen):
            raise InvalidPenError(pen, position)
        if pen in seen:
            raise DuplicatePenError(pen, position, seen[pen])
        seen[pen] = position
        if pen == Pen.TERMINATOR:
            return tuple(pens[:position + 1])
    raise UnterminatedOrderError(pens)


def validate_ordering(pens: Iterable[int]) -> Ordering:
    """
    Validate a candidate ordering.

    Walks the sequence, stopping at the first pen 0. Entries after the
    terminator are ignored with a warning.

    Args:
        pens: Candidate pen sequence

    Returns:
        The validated Ordering

    Raises:
        InvalidPenError: A pen outside 0-7
        DuplicatePenError: A pen listed twice before the terminator
        UnterminatedOrderError: No pen 0 in the sequence
    """
    pens = tuple(int(p) for p in pens)
    checked = _check_pens(pens)
    if len(checked) < len(pens):
        ignored = ",".join(str(p) for p in pens[len(checked):])
        logger.warning(f"Ignoring pens after the SP0 terminator: {ignored}")
    return Ordering(checked)


# =============================================================================
# Ordering Forms
# =============================================================================

def parse_pens(text: str) -> tuple[int, ...]:
    """
    Parse ordering text into pen numbers, one per digit.

    Commas and whitespace between digits are ignored, so "3412" and
    "3, 4, 1, 2" are equivalent. Range checking is left to validation:
    "9" parses to (9,) and is rejected later as an invalid pen.

    Raises:
        OrderSyntaxError: Any other character
    """
    pens = []
    for position, char in enumerate(text):
        if char in _SEPARATORS:
            continue
        if not ("0" <= char <= "9"):
            raise OrderSyntaxError(text, position)
        pens.append(int(char))
    return tuple(pens)


def full_order(pens: Sequence[int]) -> Ordering:
    """
    Build an ordering from an explicit full pen sequence.

    The pen 0 terminator is appended when the sequence does not contain
    it. Drawing pens not listed are dropped from the output.
    """
    pens = tuple(pens)
    if Pen.TERMINATOR not in pens:
        pens = pens + (Pen.TERMINATOR.value,)
    ordering = validate_ordering(pens)
    if ordering.omitted_pens():
        logger.info(
            f"Pens {','.join(str(p) for p in ordering.omitted_pens())} "
            f"are not in the ordering and will be dropped"
        )
    return ordering


def top_layers_order(top_pens: Sequence[int]) -> Ordering:
    """
    Build an ordering that draws top_pens last, in the order given.

    All other drawing pens come first in ascending order, then top_pens,
    then the pen 0 terminator. No pen is dropped.

    Raises:
        InvalidPenError: A pen outside 1-7 (pen 0 is always last)
        DuplicatePenError: A pen listed twice
    """
    seen: dict[int, int] = {}
    for position, pen in enumerate(top_pens):
        if pen == Pen.TERMINATOR:
            raise InvalidPenError(pen, position, reason="pen 0 is always drawn last")
        if not Pen.is_valid(pen):
            raise InvalidPenError(pen, position)
        if pen in seen:
            raise DuplicatePenError(pen, position, seen[pen])
        seen[pen] = position

    under = [p for p in DRAWING_PENS if p not in seen]
    return validate_ordering(under + list(top_pens) + [Pen.TERMINATOR.value])


DEFAULT_ORDERING = validate_ordering(DEFAULT_ORDER)


# =============================================================================
# Ordering Specification
# =============================================================================

class OrderingKind(Enum):
    """How the caller described the ordering."""
    DEFAULT = "default"
    FULL = "full"
    TOP_LAYERS = "top"


@dataclass(frozen=True)
class OrderingSpec:
    """
    A caller's ordering request, resolved once into an Ordering.

    Attributes:
        kind: Which ordering form was requested
        pens: Pens given by the caller (empty for DEFAULT)
        default: Order used for DEFAULT
    """
    kind: OrderingKind = OrderingKind.DEFAULT
    pens: tuple[int, ...] = ()
    default: tuple[int, ...] = field(default=DEFAULT_ORDER, repr=False)

    @classmethod
    def full(cls, pens: Iterable[int]) -> "OrderingSpec":
        """Request an explicit full ordering."""
        return cls(OrderingKind.FULL, tuple(pens))

    @classmethod
    def top_layers(cls, pens: Iterable[int]) -> "OrderingSpec":
        """Request the given pens on top of all others."""
        return cls(OrderingKind.TOP_LAYERS, tuple(pens))

    @classmethod
    def from_text(cls, kind: OrderingKind, text: str) -> "OrderingSpec":
        """Build a spec from digit text such as "3412"."""
        if kind is OrderingKind.DEFAULT:
            return cls()
        return cls(kind, parse_pens(text))

    def resolve(self) -> Ordering:
        """Validate the request and return the full emission order."""
        if self.kind is OrderingKind.FULL:
            return full_order(self.pens)
        if self.kind is OrderingKind.TOP_LAYERS:
            return top_layers_order(self.pens)
        return validate_ordering(self.default)
