from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

from .errors import make_parse_error


class Command(enum.Enum):
    MOVE_LEFT = '<'
    MOVE_RIGHT = '>'
    DECREMENT = '-'
    INCREMENT = '+'
    OUTPUT = '.'
    INPUT = ','
    JUMP_IF_ZERO = '['
    JUMP_IF_NONZERO = ']'
    NOOP = ''


_SIMPLE: Dict[str, Command] = {
    '<': Command.MOVE_LEFT,
    '>': Command.MOVE_RIGHT,
    '-': Command.DECREMENT,
    '+': Command.INCREMENT,
    '.': Command.OUTPUT,
    ',': Command.INPUT,
}


@dataclass(frozen=True)
class Instruction:
    command: Command
    char: str
    line: int
    column: int
    target: Optional[int] = None  # only for the jump commands

    @property
    def position(self) -> tuple:
        return (self.line, self.column)

    def __repr__(self) -> str:
        if self.target is not None:
            return f"{self.char} (target: {self.target})"
        if self.command is Command.NOOP:
            return f"noop {self.char!r}"
        return self.char


def parse(source: str) -> List[Instruction]:
    """Turn source text into one instruction per character with brackets linked.

    Raises UnmatchedCloseBracket on a ']' with nothing open, and
    UnmatchedOpenBracket for the innermost '[' still open at the end.
    """
    instructions: List[Instruction] = []
    brack_stack: List[int] = []
    line, column = 0, 0

    for i, ch in enumerate(source):
        if ch == '[':
            brack_stack.append(i)
            # patched once the matching ']' is seen
            inst = Instruction(Command.JUMP_IF_ZERO, ch, line, column)
        elif ch == ']':
            if not brack_stack:
                raise make_parse_error(kind='close', source=source, line=line, column=column)
            match_pos = brack_stack.pop()
            instructions[match_pos] = replace(instructions[match_pos], target=i)
            inst = Instruction(Command.JUMP_IF_NONZERO, ch, line, column, target=match_pos)
        else:
            inst = Instruction(_SIMPLE.get(ch, Command.NOOP), ch, line, column)

        instructions.append(inst)

        if ch == '\n':
            line += 1
            column = 0
        else:
            column += 1

    if brack_stack:
        open_inst = instructions[brack_stack[-1]]
        raise make_parse_error(kind='open', source=source, line=open_inst.line, column=open_inst.column)

    return instructions


def source_lines(source: str) -> List[str]:
    return source.split('\n')
