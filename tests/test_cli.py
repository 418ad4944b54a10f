"""
Command-line driver: exit codes and streams.
"""

import io
import sys

import pytest

from bfstep import cli


@pytest.fixture
def streams(monkeypatch):
    """Swap stdio for in-memory binary-backed streams."""
    def install(input_data=b""):
        stdin = io.TextIOWrapper(io.BytesIO(input_data))
        stdout = io.TextIOWrapper(io.BytesIO())
        stderr = io.StringIO()
        monkeypatch.setattr(sys, "stdin", stdin)
        monkeypatch.setattr(sys, "stdout", stdout)
        monkeypatch.setattr(sys, "stderr", stderr)
        return stdout.buffer, stderr
    return install


def _write(tmp_path, text):
    path = tmp_path / "prog.bf"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_normal_completion(tmp_path, streams):
    out, err = streams()
    code = cli.main([_write(tmp_path, "+" * 72 + ".+.")])
    assert code == cli.EXIT_OK
    assert out.getvalue() == b"HI"


def test_reads_stdin(tmp_path, streams):
    out, err = streams(b"xyz")
    assert cli.main([_write(tmp_path, ",.,.")]) == 0
    assert out.getvalue() == b"xy"


def test_missing_file(tmp_path, streams):
    out, err = streams()
    code = cli.main([str(tmp_path / "nope.bf")])
    assert code == cli.EXIT_READ_FAILED
    assert "File read failed" in err.getvalue()


def test_parse_failure(tmp_path, streams):
    out, err = streams()
    code = cli.main([_write(tmp_path, "+]")])
    assert code == cli.EXIT_PARSE_FAILED
    assert "unmatched ']'" in err.getvalue()
    assert out.getvalue() == b""


def test_tape_fault(tmp_path, streams):
    out, err = streams()
    code = cli.main([_write(tmp_path, "+.<"), "--tape-size", "4"])
    assert code == cli.EXIT_TAPE_FAULT
    assert out.getvalue() == b"\x01"
    assert "TapeUnderflow" in err.getvalue()


def test_trace_renders_each_step(tmp_path, streams):
    out, err = streams()
    code = cli.main([_write(tmp_path, "++"), "--trace", "--no-color"])
    assert code == 0
    frames = err.getvalue()
    assert "001 0x01" in frames
    assert "002 0x02" in frames


def test_rejects_bad_tape_size(tmp_path, streams):
    streams()
    with pytest.raises(SystemExit) as exc_info:
        cli.main([_write(tmp_path, "+"), "--tape-size", "0"])
    assert exc_info.value.code == cli.EXIT_USAGE


def test_unknown_flag_is_a_usage_error(tmp_path, streams):
    streams()
    with pytest.raises(SystemExit) as exc_info:
        cli.main([_write(tmp_path, "+"), "--bogus"])
    assert exc_info.value.code == cli.EXIT_USAGE
    assert exc_info.value.code != cli.EXIT_PARSE_FAILED


class _BrokenPipe(io.BytesIO):
    def write(self, data):
        raise BrokenPipeError("reader went away")


def test_broken_stdout(tmp_path, streams, monkeypatch):
    out, err = streams()
    monkeypatch.setattr(sys, "stdout", io.TextIOWrapper(_BrokenPipe()))
    code = cli.main([_write(tmp_path, "+.")])
    assert code == cli.EXIT_OUTPUT_FAILED
    assert "Output failed" in err.getvalue()
