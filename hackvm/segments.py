"""Resolve a (segment, index) pair to an addressing plan."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from .commands import Segment
from .errors import SegmentRangeError
from .labels import GeneratorState, static_label

LITERAL = "literal"
DIRECT = "direct"
INDIRECT = "indirect"

POINTER_BASE = 3
TEMP_BASE = 5
TEMP_SIZE = 8
POINTER_SIZE = 2
MAX_ADDRESS_LITERAL = 0x7FFF  # widest value an @-instruction can load

BASE_REGISTERS: Dict[Segment, str] = {
    Segment.LOCAL: "LCL",
    Segment.ARGUMENT: "ARG",
    Segment.THIS: "THIS",
    Segment.THAT: "THAT",
}


@dataclass(frozen=True)
class SegmentPlan:
    """How to reach one segment slot.

    ``literal``: ``value`` is the operand itself.
    ``direct``: the slot lives at ``symbol`` (a number or a label).
    ``indirect``: the slot lives at ``RAM[symbol] + offset``.
    """

    kind: str
    symbol: str = ""
    offset: int = 0
    value: Optional[int] = None


def _check_window(segment: Segment, index: int, size: int) -> None:
    if not 0 <= index < size:
        raise SegmentRangeError(f"{segment} index {index} out of range 0..{size - 1}")


def resolve(state: GeneratorState, segment: Segment, index: int, *, for_pop: bool = False) -> SegmentPlan:
    if index < 0 or index > MAX_ADDRESS_LITERAL:
        raise SegmentRangeError(f"{segment} index {index} out of range 0..{MAX_ADDRESS_LITERAL}")
    if segment is Segment.CONSTANT:
        if for_pop:
            raise SegmentRangeError("cannot pop into the constant segment")
        return SegmentPlan(LITERAL, value=index)
    base = BASE_REGISTERS.get(segment)
    if base is not None:
        return SegmentPlan(INDIRECT, symbol=base, offset=index)
    if segment is Segment.POINTER:
        _check_window(segment, index, POINTER_SIZE)
        return SegmentPlan(DIRECT, symbol=str(POINTER_BASE + index))
    if segment is Segment.TEMP:
        _check_window(segment, index, TEMP_SIZE)
        return SegmentPlan(DIRECT, symbol=str(TEMP_BASE + index))
    if segment is Segment.STATIC:
        return SegmentPlan(DIRECT, symbol=static_label(state, index))
    raise SegmentRangeError(f"unsupported segment '{segment}'")


__all__ = [
    "LITERAL",
    "DIRECT",
    "INDIRECT",
    "BASE_REGISTERS",
    "MAX_ADDRESS_LITERAL",
    "SegmentPlan",
    "resolve",
]
