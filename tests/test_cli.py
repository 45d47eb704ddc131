"""Tests for the ``ratson`` command."""

import subprocess
import sys

import pytest

from ratson.cli import main


@pytest.fixture
def program(tmp_path):
    def write(data: bytes):
        path = tmp_path / "prog.rat"
        path.write_bytes(data)
        return str(path)
    return write


# ---------------------------------------------------------------------------
# Running programs
# ---------------------------------------------------------------------------

def test_prints_json_result(program, capsys):
    assert main([program(b"Buu")]) == 0
    assert capsys.readouterr().out == "2\n"

def test_nested_result(program, capsys):
    assert main([program(b"~?Shaaaaaah-vSh?^!?g")]) == 0
    assert capsys.readouterr().out == '{"A":[1,true]}\n'

def test_indent(program, capsys):
    assert main([program(b"@Bs"), "--indent", "2"]) == 0
    assert capsys.readouterr().out == "[\n  0\n]\n"

def test_nan_renders_null(program, capsys):
    assert main([program(b"t")]) == 0
    assert capsys.readouterr().out == "null\n"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.rat")]) == 1
    assert "Error reading" in capsys.readouterr().err

def test_no_value(program, capsys):
    assert main([program(b"xcd fgjk\n")]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "no value" in captured.err

def test_swap_underflow(program, capsys):
    assert main([program(b"B%")]) == 1
    assert "swap" in capsys.readouterr().err

def test_requires_input_argument(capsys):
    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 2


# ---------------------------------------------------------------------------
# --tokens
# ---------------------------------------------------------------------------

def test_tokens_listing(program, capsys):
    assert main([program(b"b? b"), "--tokens"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split() for line in lines] == [
        ["0", "PRIMARY", "ISHL"],
        ["1", "PRIMARY", "SNEW"],
        ["3", "SECONDARY", "FNAN"],
    ]

def test_tokens_does_not_execute(program, capsys):
    assert main([program(b"%"), "--tokens"]) == 0
    assert "GSWP" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Module entry point
# ---------------------------------------------------------------------------

def test_python_dash_m(program):
    proc = subprocess.run(
        [sys.executable, "-m", "ratson", program(b"zo")],
        capture_output=True,
        text=True,
    )
    assert proc.returncode == 0
    assert proc.stdout == "true\n"


# ---------------------------------------------------------------------------
# Deep nesting
# ---------------------------------------------------------------------------

def test_deeply_nested_result(program, capsys):
    # 3000 nested arrays, duplicated before the outermost is printed
    assert main([program(b"@" * 3000 + b"s" * 2999 + b"E")]) == 0
    assert capsys.readouterr().out == "[" * 3000 + "]" * 3000 + "\n"
