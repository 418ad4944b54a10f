from .api import MachineOptions, RunResult, load_machine, read_source, run_file, run_string
from .errors import (
    BFStepError,
    MachineFault,
    MachineHalted,
    ParseError,
    TapeOverflow,
    TapeUnderflow,
    UnmatchedCloseBracket,
    UnmatchedOpenBracket,
)
from .machine import Machine
from .parser import Command, Instruction, parse
from .state import MachineSnapshot, Status

__all__ = [
    'Machine',
    'MachineSnapshot',
    'Status',
    'Command',
    'Instruction',
    'parse',
    'MachineOptions',
    'RunResult',
    'load_machine',
    'read_source',
    'run_string',
    'run_file',
    'BFStepError',
    'ParseError',
    'UnmatchedCloseBracket',
    'UnmatchedOpenBracket',
    'MachineFault',
    'TapeUnderflow',
    'TapeOverflow',
    'MachineHalted',
]
