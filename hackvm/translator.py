"""Drive the parser and code generator over one or more translation units."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .codegen import CodeGenerator, count_instructions
from .config import TranslatorConfig
from .errors import SourceError, TranslationError
from .parser import Parser

LOGGER = logging.getLogger("hackvm.translator")

SOURCE_SUFFIX = ".vm"
OUTPUT_SUFFIX = ".asm"


@dataclass
class SourceUnit:
    name: str
    lines: Sequence[str]
    path: str = ""

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SourceUnit":
        src = Path(path)
        try:
            text = src.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"cannot read source: {exc.strerror or exc}", path=src) from exc
        except UnicodeDecodeError as exc:
            raise SourceError(f"source is not valid UTF-8 (byte {exc.start})", path=src) from exc
        return cls(name=unit_name(src), lines=text.splitlines(), path=str(src))


@dataclass
class UnitReport:
    unit: str
    path: str
    commands: int
    instructions: int


@dataclass
class TranslationResult:
    text: str
    units: List[UnitReport]

    @property
    def instructions(self) -> int:
        return count_instructions(self.text.splitlines())


def unit_name(path: Union[str, Path]) -> str:
    """Static-variable namespace for a unit: the file name without extension."""
    return Path(path).stem


def discover_sources(path: Union[str, Path]) -> List[Path]:
    root = Path(path)
    if root.is_dir():
        sources = sorted(p for p in root.glob(f"*{SOURCE_SUFFIX}") if p.is_file())
        if not sources:
            raise SourceError(f"no {SOURCE_SUFFIX} files found", path=root)
        return sources
    if not root.exists():
        raise SourceError("no such file or directory", path=root)
    if root.suffix != SOURCE_SUFFIX:
        raise SourceError(f"expected a {SOURCE_SUFFIX} file or a directory", path=root)
    return [root]


def default_output_path(path: Union[str, Path]) -> Path:
    src = Path(path)
    if src.is_dir():
        resolved = src.resolve()
        return resolved.parent / f"{resolved.name}{OUTPUT_SUFFIX}"
    return src.with_suffix(OUTPUT_SUFFIX)


def translate_units(
    units: Iterable[Union[SourceUnit, Tuple[str, Sequence[str]]]],
    config: Optional[TranslatorConfig] = None,
) -> TranslationResult:
    """Translate units in order through one shared generator.

    The first error aborts the whole translation; it carries the unit path
    (or unit name) and the 1-based source line.
    """
    generator = CodeGenerator(config)
    reports: List[UnitReport] = []
    for unit in units:
        if not isinstance(unit, SourceUnit):
            name, lines = unit
            unit = SourceUnit(name=name, lines=lines)
        where = unit.path or unit.name
        LOGGER.info("translating %s", where)
        generator.begin_unit(unit.name)
        parser = Parser(unit.lines)
        start = len(generator.lines)
        commands = 0
        try:
            for command in parser:
                generator.write(command)
                commands += 1
        except TranslationError as exc:
            raise exc.locate(where, parser.line_number)
        emitted = count_instructions(generator.lines[start:])
        LOGGER.debug("%s: %d commands, %d instructions", where, commands, emitted)
        reports.append(UnitReport(unit=unit.name, path=unit.path, commands=commands, instructions=emitted))
    generator.finish()
    return TranslationResult(text=generator.render(), units=reports)


def translate_text(text: str, name: str = "Main", config: Optional[TranslatorConfig] = None) -> str:
    return translate_units([SourceUnit(name=name, lines=text.splitlines())], config).text


def translate_path(
    path: Union[str, Path],
    output: Optional[Union[str, Path]] = None,
    config: Optional[TranslatorConfig] = None,
) -> Tuple[Path, TranslationResult]:
    sources = discover_sources(path)
    result = translate_units((SourceUnit.from_file(src) for src in sources), config)
    out_path = Path(output) if output is not None else default_output_path(path)
    out_path.write_text(result.text, encoding="utf-8")
    LOGGER.info("wrote %s (%d units)", out_path, len(result.units))
    return out_path, result


__all__ = [
    "SourceUnit",
    "UnitReport",
    "TranslationResult",
    "unit_name",
    "discover_sources",
    "default_output_path",
    "translate_units",
    "translate_text",
    "translate_path",
]
