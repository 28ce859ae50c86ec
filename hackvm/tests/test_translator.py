import textwrap
from pathlib import Path

import pytest

from hack_host import load
from hackvm.config import TranslatorConfig
from hackvm.errors import GeneratorError, ParseError, SegmentRangeError, SourceError
from hackvm.translator import (
    SourceUnit,
    default_output_path,
    discover_sources,
    translate_path,
    translate_text,
    translate_units,
    unit_name,
)

SYS_VM = textwrap.dedent(
    """\
    // entry point
    function Sys.init 0
    push constant 4
    call Main.double 1
    pop static 0
    push static 0
    label HALT
    goto HALT
    """
)

MAIN_VM = textwrap.dedent(
    """\
    function Main.double 0
    push argument 0
    push argument 0
    add
    return
    """
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_unit_name_is_file_stem():
    assert unit_name("/tmp/prog/Main.vm") == "Main"
    assert unit_name(Path("Sys.vm")) == "Sys"


def test_discover_sources_in_directory_sorted(tmp_path):
    _write(tmp_path / "Sys.vm", SYS_VM)
    _write(tmp_path / "Main.vm", MAIN_VM)
    _write(tmp_path / "notes.txt", "ignored")
    assert [p.name for p in discover_sources(tmp_path)] == ["Main.vm", "Sys.vm"]


def test_discover_sources_single_file(tmp_path):
    src = _write(tmp_path / "Main.vm", MAIN_VM)
    assert discover_sources(src) == [src]


def test_discover_sources_errors(tmp_path):
    with pytest.raises(SourceError, match="no .vm files"):
        discover_sources(tmp_path)
    with pytest.raises(SourceError, match="expected a .vm file"):
        discover_sources(_write(tmp_path / "Main.jack", ""))
    with pytest.raises(SourceError, match="no such file"):
        discover_sources(tmp_path / "missing.vm")


def test_default_output_path(tmp_path):
    prog = tmp_path / "Prog"
    prog.mkdir()
    assert default_output_path(prog) == tmp_path / "Prog.asm"
    assert default_output_path(tmp_path / "Main.vm") == tmp_path / "Main.asm"


def test_translate_path_directory_writes_runnable_program(tmp_path):
    prog = tmp_path / "Prog"
    prog.mkdir()
    _write(prog / "Sys.vm", SYS_VM)
    _write(prog / "Main.vm", MAIN_VM)

    out_path, result = translate_path(prog)
    assert out_path == tmp_path / "Prog.asm"
    assert out_path.read_text(encoding="utf-8") == result.text
    assert [r.unit for r in result.units] == ["Main", "Sys"]
    assert [r.commands for r in result.units] == [5, 7]
    assert all(r.instructions > 0 for r in result.units)
    assert result.instructions > sum(r.instructions for r in result.units)

    cpu = load(result.text)
    cpu.run()
    assert cpu.top == 8
    assert cpu.ram[cpu.program.variables["Sys.000"]] == 8


def test_translate_path_explicit_output(tmp_path):
    src = _write(tmp_path / "Main.vm", MAIN_VM)
    target = tmp_path / "out" / "prog.asm"
    target.parent.mkdir()
    out_path, _ = translate_path(src, target, TranslatorConfig(annotate=False))
    assert out_path == target
    assert "//" not in target.read_text(encoding="utf-8")


def test_parse_error_is_located_by_path_and_line(tmp_path):
    src = _write(tmp_path / "Bad.vm", "function Bad.f 0\n\npush constant x\n")
    with pytest.raises(ParseError) as excinfo:
        translate_path(src)
    assert excinfo.value.path == str(src)
    assert excinfo.value.line == 3
    assert str(excinfo.value).startswith(f"{src}:3: ")
    assert not (tmp_path / "Bad.asm").exists()


def test_segment_error_is_located_by_unit_and_line():
    with pytest.raises(SegmentRangeError) as excinfo:
        translate_units([("Good", ["push constant 1"]), ("Bad", ["push constant 1", "pop pointer 2"])])
    assert str(excinfo.value) == "Bad:2: pointer index 2 out of range 0..1"


def test_oversized_argument_count_is_located_by_unit_and_line():
    with pytest.raises(GeneratorError) as excinfo:
        translate_units([("Sys", ["function Sys.init 0", "call Foo.f 40000"])])
    assert str(excinfo.value) == "Sys:2: argument count 40000 out of range 0..32767"


def test_translation_is_deterministic():
    units = [SourceUnit("Sys", SYS_VM.splitlines()), SourceUnit("Main", MAIN_VM.splitlines())]
    assert translate_units(units).text == translate_units(units).text


def test_translate_text_single_unit():
    text = translate_text("push static 1\npush static 1\n", name="Counter", config=TranslatorConfig(annotate=False))
    assert text.count("@Counter.000") == 2
    assert "Counter.001" not in text
