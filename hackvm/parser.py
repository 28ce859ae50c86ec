"""Line-oriented parser for VM intermediate code.

Each non-blank, non-comment line holds exactly one command::

    push <segment> <index>
    pop <segment> <index>
    add | sub | neg | eq | gt | lt | and | or | not
    label <name> | goto <name> | if-goto <name>
    function <name> <nLocals> | call <name> <nArgs> | return

``//`` starts a comment that runs to the end of the line.
"""

from __future__ import annotations

import re
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from .commands import (
    ARITHMETIC_OPS,
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
    Segment,
)
from .errors import ParseError

COMMENT = "//"
_COUNT_RE = re.compile(r"[0-9]+")
_RETURN_LABEL_RE = re.compile(r"ret\.[0-9]+")  # generated by every call


def strip_comment(text: str) -> str:
    pos = text.find(COMMENT)
    if pos >= 0:
        text = text[:pos]
    return text.strip()


def _expect_operands(keyword: str, operands: List[str], count: int) -> None:
    if len(operands) < count:
        noun = "operand" if count == 1 else "operands"
        raise ParseError(f"'{keyword}' expects {count} {noun}, got {len(operands)}")
    if len(operands) > count:
        extra = " ".join(operands[count:])
        raise ParseError(f"'{keyword}' has unexpected trailing tokens: {extra}")


def parse_count(token: str, what: str) -> int:
    """Parse a non-negative decimal integer operand."""
    if not _COUNT_RE.fullmatch(token):
        raise ParseError(f"{what} must be a non-negative integer, got '{token}'")
    return int(token, 10)


def parse_segment(token: str) -> Segment:
    try:
        return Segment(token)
    except ValueError:
        raise ParseError(f"unknown segment '{token}'") from None


def _parse_push_pop(keyword: str, operands: List[str]) -> Command:
    _expect_operands(keyword, operands, 2)
    segment = parse_segment(operands[0])
    index = parse_count(operands[1], "segment index")
    if keyword == "push":
        return Push(segment, index)
    return Pop(segment, index)


def _parse_branch(keyword: str, operands: List[str]) -> Command:
    _expect_operands(keyword, operands, 1)
    name = operands[0]
    if _RETURN_LABEL_RE.fullmatch(name):
        raise ParseError(f"label '{name}' is reserved for return addresses")
    if keyword == "label":
        return Label(name)
    if keyword == "goto":
        return Goto(name)
    return IfGoto(name)


def _parse_function(keyword: str, operands: List[str]) -> Command:
    _expect_operands(keyword, operands, 2)
    return Function(operands[0], parse_count(operands[1], "local count"))


def _parse_call(keyword: str, operands: List[str]) -> Command:
    _expect_operands(keyword, operands, 2)
    return Call(operands[0], parse_count(operands[1], "argument count"))


def _parse_return(keyword: str, operands: List[str]) -> Command:
    _expect_operands(keyword, operands, 0)
    return Return()


_HANDLERS: Dict[str, Callable[[str, List[str]], Command]] = {
    "push": _parse_push_pop,
    "pop": _parse_push_pop,
    "label": _parse_branch,
    "goto": _parse_branch,
    "if-goto": _parse_branch,
    "function": _parse_function,
    "call": _parse_call,
    "return": _parse_return,
}


def parse_line(text: str) -> Optional[Command]:
    """Parse one source line; returns None for blank or comment-only lines."""
    body = strip_comment(text)
    if not body:
        return None
    keyword, *operands = body.split()
    if keyword in ARITHMETIC_OPS:
        _expect_operands(keyword, operands, 0)
        return Arithmetic(keyword)
    handler = _HANDLERS.get(keyword)
    if handler is None:
        raise ParseError(f"unknown command '{keyword}'")
    return handler(keyword, operands)


class Parser:
    """Sequential reader over the commands of one translation unit."""

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines = iter(lines)
        self._source_line = 0
        self._pending: Optional[Tuple[int, Command]] = None
        self._exhausted = False
        self.line_number = 0

    def _read_next(self) -> Optional[Tuple[int, Command]]:
        for raw in self._lines:
            self._source_line += 1
            try:
                command = parse_line(raw)
            except ParseError as exc:
                self.line_number = self._source_line
                exc.line = self._source_line
                raise
            if command is not None:
                return self._source_line, command
        self._exhausted = True
        return None

    def peek(self) -> Optional[Command]:
        """Return the next command without consuming it."""
        if self._pending is None and not self._exhausted:
            self._pending = self._read_next()
        return self._pending[1] if self._pending else None

    def has_more_commands(self) -> bool:
        return self.peek() is not None

    def advance(self) -> Optional[Command]:
        """Consume and return the next command, or None at end of input."""
        self.peek()
        pending, self._pending = self._pending, None
        if pending is None:
            return None
        self.line_number, command = pending
        return command

    def __iter__(self) -> Iterator[Command]:
        while True:
            command = self.advance()
            if command is None:
                return
            yield command


def parse_text(text: str) -> List[Command]:
    return list(Parser(text.splitlines()))


__all__ = ["Parser", "parse_line", "parse_text", "parse_count", "parse_segment", "strip_comment"]
