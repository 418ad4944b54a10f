from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import MachineFault
from .machine import MEM_SIZE, Machine
from .state import MachineSnapshot, Status


@dataclass(frozen=True)
class MachineOptions:
    tape_size: int = MEM_SIZE

    def __post_init__(self) -> None:
        if self.tape_size <= 0:
            raise ValueError(f"tape_size must be positive, got {self.tape_size}")


@dataclass(frozen=True)
class RunResult:
    status: Status
    output: bytes
    snapshot: MachineSnapshot
    fault: Optional[MachineFault] = None


def load_machine(
    source: str,
    *,
    options: Optional[MachineOptions] = None,
    input_stream: Optional[BinaryIO] = None,
    output_stream: Optional[BinaryIO] = None,
) -> Machine:
    opts = options or MachineOptions()
    return Machine.from_source(
        source,
        tape_size=opts.tape_size,
        input_stream=input_stream,
        output_stream=output_stream,
    )


def run_string(
    source: str,
    *,
    options: Optional[MachineOptions] = None,
    input_data: bytes = b"",
    output_stream: Optional[BinaryIO] = None,
    max_steps: Optional[int] = None,
) -> RunResult:
    machine = load_machine(
        source,
        options=options,
        input_stream=io.BytesIO(input_data),
        output_stream=output_stream,
    )
    status = machine.run_to_completion(max_steps=max_steps)
    return RunResult(
        status=status,
        output=bytes(machine.output),
        snapshot=machine.snapshot(),
        fault=machine.fault,
    )


def read_source(path: str | Path, *, encoding: str = "utf-8") -> str:
    """Read program text. OSError and UnicodeDecodeError propagate to the caller."""
    return Path(path).read_text(encoding=encoding)


def run_file(
    path: str | Path,
    *,
    options: Optional[MachineOptions] = None,
    encoding: str = "utf-8",
    input_data: bytes = b"",
    output_stream: Optional[BinaryIO] = None,
    max_steps: Optional[int] = None,
) -> RunResult:
    return run_string(
        read_source(path, encoding=encoding),
        options=options,
        input_data=input_data,
        output_stream=output_stream,
        max_steps=max_steps,
    )
