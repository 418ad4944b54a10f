from __future__ import annotations

import logging
from typing import BinaryIO, List, Optional

import numpy as np

from .errors import MachineFault, MachineHalted, make_tape_fault
from .parser import Command, Instruction, parse, source_lines
from .state import MachineSnapshot, Status

logger = logging.getLogger(__name__)

MEM_SIZE = 30_000


class Machine:
    """Stepping virtual machine over a linked instruction list.

    The machine is driven by its caller: each ``step()`` executes one real
    instruction and reports the resulting status. Nothing here exits the
    process; faults are recorded and surfaced through the status.
    """

    def __init__(
        self,
        instructions: List[Instruction],
        *,
        tape_size: int = MEM_SIZE,
        input_stream: Optional[BinaryIO] = None,
        output_stream: Optional[BinaryIO] = None,
        source: str = "",
    ) -> None:
        if tape_size <= 0:
            raise ValueError(f"tape_size must be positive, got {tape_size}")
        self.prog = instructions
        self.tape_size = tape_size
        self.tape = np.zeros(tape_size, dtype=np.uint8)
        self.instr_ptr = 0
        self.data_ptr = 0
        self.active_extent = 0
        self.step_count = 0
        self.output = bytearray()
        self.status = Status.RUNNING
        self.fault: Optional[MachineFault] = None

        self.input_stream = input_stream
        self.output_stream = output_stream
        self.source_lines = source_lines(source)
        logger.debug("machine ready: %d instructions, %d cells", len(self.prog), tape_size)

    @classmethod
    def from_source(cls, source: str, **kwargs) -> "Machine":
        return cls(parse(source), source=source, **kwargs)

    # -- driving -----------------------------------------------------------

    def step(self) -> Status:
        """Execute the next non-noop instruction and return the new status."""
        if self.status.terminal:
            raise MachineHalted(message=f"machine already {self.status.value}")

        self._skip_noops()
        if self.instr_ptr >= len(self.prog):
            self._complete()
            return self.status

        try:
            jumped = self._execute(self.prog[self.instr_ptr])
        except MachineFault as fault:
            self.fault = fault
            self.status = Status.FAILED
            logger.debug("machine failed: %s", fault)
            return self.status

        self.step_count += 1
        if not jumped:
            self.instr_ptr += 1
        self._skip_noops()
        if self.instr_ptr >= len(self.prog):
            self._complete()
        return self.status

    def run_to_completion(self, max_steps: Optional[int] = None) -> Status:
        """Step until the machine completes or fails.

        With ``max_steps`` the run stops after that many executed
        instructions and returns RUNNING if the program has not finished.
        """
        start = self.step_count
        while not self.status.terminal:
            if max_steps is not None and self.step_count - start >= max_steps:
                break
            self.step()
        return self.status

    def raise_for_status(self) -> None:
        if self.status is Status.FAILED and self.fault is not None:
            raise self.fault

    def snapshot(self) -> MachineSnapshot:
        position = None
        if self.instr_ptr < len(self.prog):
            position = self.prog[self.instr_ptr].position
        return MachineSnapshot(
            tape=self.tape.tobytes(),
            data_ptr=self.data_ptr,
            instr_ptr=self.instr_ptr,
            position=position,
            output=bytes(self.output),
            active_extent=self.active_extent,
            step_count=self.step_count,
            status=self.status,
        )

    # -- internals ---------------------------------------------------------

    def _skip_noops(self) -> None:
        n = len(self.prog)
        while self.instr_ptr < n and self.prog[self.instr_ptr].command is Command.NOOP:
            self.instr_ptr += 1

    def _complete(self) -> None:
        self.status = Status.COMPLETED
        logger.debug("machine completed after %d steps", self.step_count)

    def _execute(self, inst: Instruction) -> bool:
        """Run one instruction. Returns True when it set the instruction pointer."""
        cmd = inst.command
        if cmd is Command.MOVE_LEFT:
            self._move(-1)
        elif cmd is Command.MOVE_RIGHT:
            self._move(1)
        elif cmd is Command.DECREMENT:
            self._write((int(self.tape[self.data_ptr]) - 1) & 0xFF)
        elif cmd is Command.INCREMENT:
            self._write((int(self.tape[self.data_ptr]) + 1) & 0xFF)
        elif cmd is Command.OUTPUT:
            self._emit(int(self.tape[self.data_ptr]))
        elif cmd is Command.INPUT:
            self._write(self._read_byte())
        elif cmd is Command.JUMP_IF_ZERO:
            if self.tape[self.data_ptr] == 0:
                self.instr_ptr = inst.target
                return True
        elif cmd is Command.JUMP_IF_NONZERO:
            if self.tape[self.data_ptr] != 0:
                self.instr_ptr = inst.target
                return True
        return False

    def _move(self, delta: int) -> None:
        new_ptr = self.data_ptr + delta
        if new_ptr < 0 or new_ptr >= self.tape_size:
            raise make_tape_fault(
                underflow=new_ptr < 0,
                instr_ptr=self.instr_ptr,
                data_ptr=self.data_ptr,
                tape_size=self.tape_size,
            )
        self.data_ptr = new_ptr

    def _write(self, value: int) -> None:
        ptr = self.data_ptr
        self.tape[ptr] = value
        if value != 0:
            if ptr > self.active_extent:
                self.active_extent = ptr
        elif ptr == self.active_extent:
            self.active_extent = self._last_nonzero_below(ptr)

    def _last_nonzero_below(self, ptr: int) -> int:
        # leftward scan; stops at the first non-zero cell or at cell 0
        nonzero = np.flatnonzero(self.tape[:ptr])
        return int(nonzero[-1]) if nonzero.size else 0

    def _emit(self, value: int) -> None:
        # a failing sink leaves the output buffer untouched
        if self.output_stream is not None:
            self.output_stream.write(bytes((value,)))
            self.output_stream.flush()
        self.output.append(value)

    def _read_byte(self) -> int:
        if self.input_stream is None:
            return 0
        data = self.input_stream.read(1)
        # exhausted input stores 0
        return data[0] if data else 0
