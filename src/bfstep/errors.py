from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * column}^")
    return "\n".join(out)


def _hint_for(kind: str) -> Optional[str]:
    if kind == 'close':
        return 'Remove the extra "]" or add the "[" it was meant to close.'
    if kind == 'open':
        return 'Every "[" needs a matching "]" later in the program.'
    return None


@dataclass(eq=False)
class BFStepError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ParseError(BFStepError):
    line: int
    column: int
    context: str


class UnmatchedCloseBracket(ParseError):
    pass


class UnmatchedOpenBracket(ParseError):
    pass


@dataclass(eq=False)
class MachineFault(BFStepError):
    instr_ptr: int
    data_ptr: int


class TapeUnderflow(MachineFault):
    pass


class TapeOverflow(MachineFault):
    pass


class MachineHalted(BFStepError):
    """Raised when stepping a machine that already completed or failed."""


def make_parse_error(*, kind: str, source: str, line: int, column: int) -> ParseError:
    """Build a parse error for a bracket at 0-based (line, column)."""
    lines = source.split('\n')
    ctx = _build_context(lines, line + 1, column)
    hint = _hint_for(kind)
    hint_block = f"\nHint: {hint}" if hint else ""
    if kind == 'close':
        cls, what = UnmatchedCloseBracket, "unmatched ']'"
    else:
        cls, what = UnmatchedOpenBracket, "unmatched '['"
    return cls(
        message=f"ParseError: {what} (line {line + 1}, column {column + 1})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )


def make_tape_fault(*, underflow: bool, instr_ptr: int, data_ptr: int, tape_size: int) -> MachineFault:
    if underflow:
        return TapeUnderflow(
            message=f"TapeUnderflow: '<' at instruction {instr_ptr} moved below cell 0",
            instr_ptr=instr_ptr,
            data_ptr=data_ptr,
        )
    return TapeOverflow(
        message=f"TapeOverflow: '>' at instruction {instr_ptr} moved past cell {tape_size - 1}",
        instr_ptr=instr_ptr,
        data_ptr=data_ptr,
    )
