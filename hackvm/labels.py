"""Generation state and collision-free label allocation.

Every allocator mutates exactly one counter on the state it is handed and
returns a name that has not been produced before:

    static         <unit>.<NNN>          one per (unit, index), program-wide counter
    comparison     .<OP>.true.<NNN>      counter never resets
                   .<OP>.end.<NNN>
    return address <function>$ret.<NNN> counter resets on each ``function``
    user label     <function>$<name>
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Tuple

LOGGER = logging.getLogger("hackvm.labels")

HALT_LABEL = ".END"


def _seq(counter: int) -> str:
    return f"{counter:03d}"


@dataclass
class GeneratorState:
    """Mutable state threaded through one whole program translation."""

    unit_name: str = ""
    function_prefix: str = ""
    comparison_counter: int = 0
    return_counter: int = 0
    static_counter: int = 0
    static_slots: Dict[Tuple[str, int], str] = field(default_factory=dict)

    def begin_unit(self, name: str) -> None:
        self.unit_name = name

    def enter_function(self, name: str) -> None:
        self.function_prefix = name
        self.return_counter = 0


def static_label(state: GeneratorState, index: int) -> str:
    key = (state.unit_name, index)
    label = state.static_slots.get(key)
    if label is None:
        label = f"{state.unit_name}.{_seq(state.static_counter)}"
        state.static_counter += 1
        state.static_slots[key] = label
        LOGGER.debug("static %s[%d] -> %s", state.unit_name, index, label)
    return label


def comparison_labels(state: GeneratorState, op: str) -> Tuple[str, str]:
    """Return the (true, end) label pair for one comparison."""
    tag = op.upper()
    seq = _seq(state.comparison_counter)
    state.comparison_counter += 1
    return f".{tag}.true.{seq}", f".{tag}.end.{seq}"


def return_label(state: GeneratorState) -> str:
    label = f"{state.function_prefix}$ret.{_seq(state.return_counter)}"
    state.return_counter += 1
    return label


def scoped_label(state: GeneratorState, name: str) -> str:
    return f"{state.function_prefix}${name}"


__all__ = [
    "HALT_LABEL",
    "GeneratorState",
    "static_label",
    "comparison_labels",
    "return_label",
    "scoped_label",
]
