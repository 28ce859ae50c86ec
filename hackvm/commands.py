"""Typed VM commands produced by the parser and consumed by the code generator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, FrozenSet


class Segment(str, Enum):
    CONSTANT = "constant"
    LOCAL = "local"
    ARGUMENT = "argument"
    THIS = "this"
    THAT = "that"
    POINTER = "pointer"
    TEMP = "temp"
    STATIC = "static"

    def __str__(self) -> str:
        return self.value


UNARY_OPS: FrozenSet[str] = frozenset({"neg", "not"})
BINARY_OPS: FrozenSet[str] = frozenset({"add", "sub", "and", "or"})
COMPARISON_OPS: FrozenSet[str] = frozenset({"eq", "gt", "lt"})
ARITHMETIC_OPS: FrozenSet[str] = UNARY_OPS | BINARY_OPS | COMPARISON_OPS


class Command:
    """Base class for all VM commands."""

    keyword: ClassVar[str] = ""


@dataclass(frozen=True)
class Arithmetic(Command):
    op: str

    def __str__(self) -> str:
        return self.op


@dataclass(frozen=True)
class Push(Command):
    keyword: ClassVar[str] = "push"
    segment: Segment
    index: int

    def __str__(self) -> str:
        return f"push {self.segment} {self.index}"


@dataclass(frozen=True)
class Pop(Command):
    keyword: ClassVar[str] = "pop"
    segment: Segment
    index: int

    def __str__(self) -> str:
        return f"pop {self.segment} {self.index}"


@dataclass(frozen=True)
class Label(Command):
    keyword: ClassVar[str] = "label"
    name: str

    def __str__(self) -> str:
        return f"label {self.name}"


@dataclass(frozen=True)
class Goto(Command):
    keyword: ClassVar[str] = "goto"
    name: str

    def __str__(self) -> str:
        return f"goto {self.name}"


@dataclass(frozen=True)
class IfGoto(Command):
    keyword: ClassVar[str] = "if-goto"
    name: str

    def __str__(self) -> str:
        return f"if-goto {self.name}"


@dataclass(frozen=True)
class Function(Command):
    keyword: ClassVar[str] = "function"
    name: str
    n_locals: int

    def __str__(self) -> str:
        return f"function {self.name} {self.n_locals}"


@dataclass(frozen=True)
class Call(Command):
    keyword: ClassVar[str] = "call"
    name: str
    n_args: int

    def __str__(self) -> str:
        return f"call {self.name} {self.n_args}"


@dataclass(frozen=True)
class Return(Command):
    keyword: ClassVar[str] = "return"

    def __str__(self) -> str:
        return "return"


__all__ = [
    "Segment",
    "UNARY_OPS",
    "BINARY_OPS",
    "COMPARISON_OPS",
    "ARITHMETIC_OPS",
    "Command",
    "Arithmetic",
    "Push",
    "Pop",
    "Label",
    "Goto",
    "IfGoto",
    "Function",
    "Call",
    "Return",
]
