"""Per-line state packing.

A line state is the only scanner context persisted between lines::

    bit  0      property_value
    bit  1      attribute_selector
    bits 2-7    calc_level
    bits 8-15   paren_count
    bits 16-23  selector_level

Fold levels keep the level carried into the line in the low half and the
level carried out of it in the high half.
"""

from __future__ import annotations

from .constants import (
    ATTRIBUTE_SELECTOR_BITS,
    CALC_LEVEL_BITS,
    FOLD_LEVEL_BASE,
    FOLD_LEVEL_HEADER_FLAG,
    FOLD_LEVEL_NUMBER_MASK,
    FOLD_LEVEL_SHIFT,
    PAREN_COUNT_BITS,
    PROPERTY_VALUE_BITS,
    SELECTOR_LEVEL_BITS,
)
from .exceptions import LineStateError
from .models import ScanState

_FIELDS = (
    ("property_value", PROPERTY_VALUE_BITS),
    ("attribute_selector", ATTRIBUTE_SELECTOR_BITS),
    ("calc_level", CALC_LEVEL_BITS),
    ("paren_count", PAREN_COUNT_BITS),
    ("selector_level", SELECTOR_LEVEL_BITS),
)


def _mask(width: int) -> int:
    return (1 << width) - 1


def encode_line_state(state: ScanState) -> int:
    """Pack the restartable part of `state` into one integer.

    Counters wider than their field are clamped to the field maximum.

    Args:
        state: Scan state at the end of a line.

    Returns:
        int: Packed line state.

    Raises:
        LineStateError: If a counter is negative.

    Examples:
        encode_line_state(ScanState(property_value=True, paren_count=2))  # 0x201
    """
    packed = 0
    for name, (shift, width) in _FIELDS:
        value = int(getattr(state, name))
        if value < 0:
            raise LineStateError(f"`{name}` must not be negative, got {value}")
        packed |= min(value, _mask(width)) << shift
    return packed


def decode_line_state(value: int, state: ScanState | None = None) -> ScanState:
    """Unpack a line state into `state` (or a fresh `ScanState`).

    Bits above the last field are ignored.

    Raises:
        LineStateError: If `value` is negative or not an integer.
    """
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise LineStateError(f"Invalid line state: {value!r}")

    state = state if state is not None else ScanState()
    for name, (shift, width) in _FIELDS:
        field_value = (value >> shift) & _mask(width)
        if width == 1:
            setattr(state, name, bool(field_value))
        else:
            setattr(state, name, field_value)
    return state


def pack_fold_level(current: int, next_level: int) -> int:
    """Combine the levels carried into and out of a line.

    The header flag is set when the line opens a deeper region.

    Examples:
        pack_fold_level(0x400, 0x401)  # 0x4012400
    """
    if current < 0 or next_level < 0:
        raise LineStateError("fold levels must not be negative")
    current = min(current, FOLD_LEVEL_NUMBER_MASK)
    next_level = min(next_level, FOLD_LEVEL_NUMBER_MASK)
    level = current | (next_level << FOLD_LEVEL_SHIFT)
    if current < next_level:
        level |= FOLD_LEVEL_HEADER_FLAG
    return level


def unpack_fold_level(level: int) -> tuple[int, int, bool]:
    """Split a stored fold level into ``(current, next, is_header)``."""
    return (
        level & FOLD_LEVEL_NUMBER_MASK,
        (level >> FOLD_LEVEL_SHIFT) & FOLD_LEVEL_NUMBER_MASK,
        bool(level & FOLD_LEVEL_HEADER_FLAG),
    )


def carried_fold_level(previous_level: int | None) -> int:
    """Fold level a line inherits from the stored level of the line above."""
    if previous_level is None:
        return FOLD_LEVEL_BASE
    return (previous_level >> FOLD_LEVEL_SHIFT) & FOLD_LEVEL_NUMBER_MASK
