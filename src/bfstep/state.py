from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple


class Status(enum.Enum):
    RUNNING = 'running'
    COMPLETED = 'completed'
    FAILED = 'failed'

    @property
    def terminal(self) -> bool:
        return self is not Status.RUNNING


@dataclass(frozen=True)
class MachineSnapshot:
    """Read-only copy of machine state, taken between two steps."""

    tape: bytes
    data_ptr: int
    instr_ptr: int
    position: Optional[Tuple[int, int]]
    output: bytes
    active_extent: int
    step_count: int
    status: Status

    @property
    def output_text(self) -> str:
        return self.output.decode('latin-1')
