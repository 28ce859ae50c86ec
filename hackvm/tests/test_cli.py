from pathlib import Path

from hackvm import cli


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_cli_translates_file_and_reports_output(tmp_path, capsys):
    src = _write(tmp_path / "Main.vm", "function Main.main 0\npush constant 1\nreturn\n")
    rc = cli.main([str(src)])
    assert rc == 0
    out = capsys.readouterr().out
    assert f"Wrote {tmp_path / 'Main.asm'}" in out
    text = (tmp_path / "Main.asm").read_text(encoding="utf-8")
    assert "(Main.main)" in text
    assert "// push constant 1" in text


def test_cli_options_feed_translator_config(tmp_path, capsys):
    src = _write(tmp_path / "Main.vm", "function Main.main 0\nreturn\n")
    out_file = tmp_path / "custom.asm"
    rc = cli.main([str(src), "-o", str(out_file), "--entry", "Main.main", "--stack-base", "512", "--no-comments"])
    assert rc == 0
    text = out_file.read_text(encoding="utf-8")
    assert text.startswith("    @512\n")
    assert "@Main.main" in text
    assert "//" not in text


def test_cli_stats_table(tmp_path, capsys):
    prog = tmp_path / "Prog"
    prog.mkdir()
    _write(prog / "A.vm", "function A.f 0\npush constant 1\nreturn\n")
    _write(prog / "B.vm", "function B.g 0\npush constant 2\npush constant 3\nadd\nreturn\n")
    rc = cli.main([str(prog), "--stats"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "| unit" in out
    assert "commands" in out and "instructions" in out
    rows = [line for line in out.splitlines() if line.startswith("| ")]
    assert any(row.split("|")[1].strip() == "A" and row.split("|")[2].strip() == "3" for row in rows)
    assert any(row.split("|")[1].strip() == "(total)" and row.split("|")[2].strip() == "8" for row in rows)


def test_cli_reports_located_errors(tmp_path, capsys):
    src = _write(tmp_path / "Bad.vm", "push constant 1\npop constant 0\n")
    rc = cli.main([str(src)])
    assert rc == 1
    err = capsys.readouterr().err
    assert f"error: {src}:2: cannot pop into the constant segment" in err
    assert not (tmp_path / "Bad.asm").exists()


def test_cli_reports_undecodable_source(tmp_path, capsys):
    src = tmp_path / "Bad.vm"
    src.write_bytes(b"push constant 1 // caf\xe9\n")
    rc = cli.main([str(src)])
    assert rc == 1
    err = capsys.readouterr().err
    assert f"error: {src}: source is not valid UTF-8 (byte 22)" in err
    assert not (tmp_path / "Bad.asm").exists()


def test_cli_missing_input(tmp_path, capsys):
    rc = cli.main([str(tmp_path / "nope.vm")])
    assert rc == 1
    assert "no such file or directory" in capsys.readouterr().err
