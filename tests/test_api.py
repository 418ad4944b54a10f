"""
Library entry points and options.
"""

import io

import pytest

from bfstep import (
    MachineOptions,
    Status,
    TapeOverflow,
    UnmatchedOpenBracket,
    load_machine,
    read_source,
    run_file,
    run_string,
)


def test_run_string_collects_output():
    result = run_string("+" * 33 + ".")
    assert result.status is Status.COMPLETED
    assert result.output == b"!"
    assert result.fault is None
    assert result.snapshot.status is Status.COMPLETED


def test_run_string_feeds_input():
    result = run_string(",+.", input_data=b"a")
    assert result.output == b"b"


def test_run_string_reports_fault():
    result = run_string(">>", options=MachineOptions(tape_size=2))
    assert result.status is Status.FAILED
    assert isinstance(result.fault, TapeOverflow)
    assert result.snapshot.data_ptr == 1


def test_run_string_step_budget():
    result = run_string("+[]", max_steps=10)
    assert result.status is Status.RUNNING
    assert result.snapshot.step_count == 10


def test_parse_errors_propagate():
    with pytest.raises(UnmatchedOpenBracket):
        run_string("[")


def test_load_machine_uses_options():
    sink = io.BytesIO()
    m = load_machine("+.", options=MachineOptions(tape_size=8), output_stream=sink)
    assert m.tape.size == 8
    m.run_to_completion()
    assert sink.getvalue() == b"\x01"


def test_options_reject_non_positive_tape():
    with pytest.raises(ValueError):
        MachineOptions(tape_size=0)


def test_run_file(tmp_path):
    path = tmp_path / "prog.bf"
    path.write_text("+" * 72 + ".\n", encoding="utf-8")
    result = run_file(path)
    assert result.output == b"H"


def test_read_source_errors_propagate(tmp_path):
    with pytest.raises(OSError):
        read_source(tmp_path / "missing.bf")
    bad = tmp_path / "bad.bf"
    bad.write_bytes(b"\xff\xfe+")
    with pytest.raises(UnicodeDecodeError):
        read_source(bad)
