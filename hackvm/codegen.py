"""Hack assembly generation for VM commands.

The generator owns all translation state for a whole program.  Units are
fed in sequence (``begin_unit`` then ``write`` for every command) and the
program is closed with ``finish``.

Memory map used by the generated code::

    RAM[0]      SP    next free operand stack slot
    RAM[1]      LCL   base of the current function's locals
    RAM[2]      ARG   base of the current function's arguments
    RAM[3..4]   THIS, THAT (the pointer segment)
    RAM[5..12]  temp segment
    RAM[13..15] scratch registers used by the generated code
    RAM[16..]   static variables (allocated by the assembler)
    RAM[256..]  operand stack

Call frame layout, built by ``call`` and unwound by ``return``::

    ARG ->  arg 0 .. arg n-1
            return address
            saved LCL
            saved ARG
            saved THIS
            saved THAT
    LCL ->  local 0 .. local k-1
            working stack

Comparisons branch on the sign of the wrapped difference ``x - y``, so
``gt`` and ``lt`` are wrong when that difference overflows 16 bits
(``32767 gt -1`` yields false).
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List, Optional, Type

from .commands import (
    BINARY_OPS,
    COMPARISON_OPS,
    UNARY_OPS,
    Arithmetic,
    Call,
    Command,
    Function,
    Goto,
    IfGoto,
    Label,
    Pop,
    Push,
    Return,
)
from .config import TranslatorConfig
from .errors import GeneratorError
from .labels import (
    HALT_LABEL,
    GeneratorState,
    comparison_labels,
    return_label,
    scoped_label,
)
from .segments import DIRECT, INDIRECT, LITERAL, MAX_ADDRESS_LITERAL, SegmentPlan, resolve

LOGGER = logging.getLogger("hackvm.codegen")

INDENT = "    "
FRAME_SIZE = 5
SAVED_REGISTERS = ("LCL", "ARG", "THIS", "THAT")

# Scratch registers
R_OPERAND = "R13"
R_FRAME = "R14"
R_RETURN = "R15"

UNARY_COMP = {"neg": "-D", "not": "!D"}
BINARY_COMP = {"add": "D+M", "sub": "D-M", "and": "D&M", "or": "D|M"}
COMPARISON_JUMP = {"eq": "JEQ", "gt": "JGT", "lt": "JLT"}


def is_instruction(line: str) -> bool:
    text = line.strip()
    return bool(text) and not text.startswith("//") and not text.startswith("(")


def count_instructions(lines: Iterable[str]) -> int:
    return sum(1 for line in lines if is_instruction(line))


def _check_count(what: str, value: int) -> None:
    if not 0 <= value <= MAX_ADDRESS_LITERAL:
        raise GeneratorError(f"{what} {value} out of range 0..{MAX_ADDRESS_LITERAL}")


class CodeGenerator:
    """Translate VM commands into Hack assembly lines."""

    def __init__(self, config: Optional[TranslatorConfig] = None) -> None:
        self.config = config or TranslatorConfig()
        self.state = GeneratorState()
        self.lines: List[str] = []
        self.finished = False
        self._dispatch: Dict[Type[Command], Callable[[Command], None]] = {
            Arithmetic: self._write_arithmetic,
            Push: self._write_push,
            Pop: self._write_pop,
            Label: self._write_label,
            Goto: self._write_goto,
            IfGoto: self._write_if_goto,
            Function: self._write_function,
            Call: self._write_call,
            Return: self._write_return,
        }
        self._write_bootstrap()

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------
    def begin_unit(self, name: str) -> None:
        LOGGER.debug("begin unit %s", name)
        self.state.begin_unit(name)

    def write(self, command: Command) -> None:
        if self.finished:
            raise GeneratorError(f"cannot translate '{command}' after the program was finished")
        handler = self._dispatch.get(type(command))
        if handler is None:
            raise GeneratorError(f"unknown command {command!r}")
        if self.config.annotate:
            self._comment(str(command))
        handler(command)

    def write_all(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.write(command)

    def finish(self) -> None:
        """Append the terminal halt loop; idempotent."""
        if self.finished:
            return
        if self.config.annotate:
            self._comment("halt")
        self._define(HALT_LABEL)
        self._emit(f"@{HALT_LABEL}", "0;JMP")
        self.finished = True

    def render(self) -> str:
        return "\n".join(self.lines) + "\n"

    @property
    def instruction_count(self) -> int:
        return count_instructions(self.lines)

    # ------------------------------------------------------------------
    # Emission helpers
    # ------------------------------------------------------------------
    def _emit(self, *instructions: str) -> None:
        self.lines.extend(INDENT + ins for ins in instructions)

    def _define(self, label: str) -> None:
        self.lines.append(f"({label})")

    def _comment(self, text: str) -> None:
        self.lines.append(f"// {text}")

    def _push_d(self) -> None:
        self._emit("@SP", "A=M", "M=D", "@SP", "M=M+1")

    def _pop_d(self) -> None:
        self._emit("@SP", "AM=M-1", "D=M")

    def _pop_operands(self) -> None:
        """Leave y in R13 and x in D."""
        self._pop_d()
        self._emit(f"@{R_OPERAND}", "M=D")
        self._pop_d()

    def _load_d(self, plan: SegmentPlan) -> None:
        if plan.kind == LITERAL:
            self._emit(f"@{plan.value}", "D=A")
        elif plan.kind == DIRECT:
            self._emit(f"@{plan.symbol}", "D=M")
        elif plan.kind == INDIRECT:
            self._emit(f"@{plan.symbol}", "D=M", f"@{plan.offset}", "A=D+A", "D=M")
        else:
            raise GeneratorError(f"unknown addressing plan '{plan.kind}'")

    # ------------------------------------------------------------------
    # Program prologue
    # ------------------------------------------------------------------
    def _write_bootstrap(self) -> None:
        entry = self.config.entry_function
        LOGGER.debug("bootstrap: SP=%d, call %s", self.config.stack_base, entry)
        if self.config.annotate:
            self._comment(f"bootstrap: SP={self.config.stack_base}")
        self._emit(f"@{self.config.stack_base}", "D=A", "@SP", "M=D")
        self.write(Call(entry, 0))

    # ------------------------------------------------------------------
    # Command handlers
    # ------------------------------------------------------------------
    def _write_arithmetic(self, command: Command) -> None:
        op = command.op
        if op in UNARY_OPS:
            self._pop_d()
            self._emit(f"D={UNARY_COMP[op]}")
        elif op in BINARY_OPS:
            self._pop_operands()
            self._emit(f"@{R_OPERAND}", f"D={BINARY_COMP[op]}")
        elif op in COMPARISON_OPS:
            true_label, end_label = comparison_labels(self.state, op)
            self._pop_operands()
            self._emit(f"@{R_OPERAND}", "D=D-M", f"@{true_label}", f"D;{COMPARISON_JUMP[op]}")
            self._emit("D=0", f"@{end_label}", "0;JMP")
            self._define(true_label)
            self._emit("D=-1")
            self._define(end_label)
        else:
            raise GeneratorError(f"unknown arithmetic command '{op}'")
        self._push_d()

    def _write_push(self, command: Command) -> None:
        plan = resolve(self.state, command.segment, command.index)
        self._load_d(plan)
        self._push_d()

    def _write_pop(self, command: Command) -> None:
        plan = resolve(self.state, command.segment, command.index, for_pop=True)
        if plan.kind == DIRECT:
            self._pop_d()
            self._emit(f"@{plan.symbol}", "M=D")
        elif plan.kind == INDIRECT:
            self._emit(f"@{plan.symbol}", "D=M", f"@{plan.offset}", "D=D+A", f"@{R_OPERAND}", "M=D")
            self._pop_d()
            self._emit(f"@{R_OPERAND}", "A=M", "M=D")
        else:
            raise GeneratorError(f"cannot pop into '{command.segment}'")

    def _write_label(self, command: Command) -> None:
        self._define(scoped_label(self.state, command.name))

    def _write_goto(self, command: Command) -> None:
        self._emit(f"@{scoped_label(self.state, command.name)}", "0;JMP")

    def _write_if_goto(self, command: Command) -> None:
        self._pop_d()
        self._emit(f"@{scoped_label(self.state, command.name)}", "D;JNE")

    def _write_function(self, command: Command) -> None:
        _check_count("local count", command.n_locals)
        self.state.enter_function(command.name)
        self._define(command.name)
        if command.n_locals:
            self._emit("D=0")
            for _ in range(command.n_locals):
                self._push_d()

    def _write_call(self, command: Command) -> None:
        _check_count("argument count", command.n_args)
        ret = return_label(self.state)
        self._emit(f"@{ret}", "D=A")
        self._push_d()
        for register in SAVED_REGISTERS:
            self._emit(f"@{register}", "D=M")
            self._push_d()
        # ARG = SP - 5 - nArgs
        self._emit("@SP", "D=M", f"@{FRAME_SIZE}", "D=D-A", f"@{command.n_args}", "D=D-A", "@ARG", "M=D")
        # LCL = SP
        self._emit("@SP", "D=M", "@LCL", "M=D")
        self._emit(f"@{command.name}", "0;JMP")
        self._define(ret)

    def _write_return(self, command: Command) -> None:
        # frame = LCL; the return address must be read before the result
        # overwrites ARG[0], which is the same slot when there are no arguments.
        self._emit("@LCL", "D=M", f"@{R_FRAME}", "M=D")
        self._emit(f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{R_RETURN}", "M=D")
        self._pop_d()
        self._emit("@ARG", "A=M", "M=D")
        self._emit("@ARG", "D=M", "@SP", "M=D+1")
        for distance, register in enumerate(reversed(SAVED_REGISTERS), start=1):
            self._emit(f"@{R_FRAME}", "D=M", f"@{distance}", "A=D-A", "D=M", f"@{register}", "M=D")
        self._emit(f"@{R_RETURN}", "A=M", "0;JMP")


__all__ = ["CodeGenerator", "count_instructions", "is_instruction", "FRAME_SIZE", "SAVED_REGISTERS"]
