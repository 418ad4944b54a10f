"""
Plain-text rendering of machine snapshots.

The view pairs the data tape (one cell per row, up to the active extent or
the data pointer, whichever is further) with the program source (one line
per row) and puts the output produced so far on top. It only reads
snapshots and never drives the machine.
"""
from __future__ import annotations

from dataclasses import dataclass
from itertools import zip_longest
from typing import List, Optional

from .state import MachineSnapshot


class Colors:
    GREEN = '\033[92m'
    BG_BLUE = '\033[44m'
    ENDC = '\033[0m'


@dataclass
class DisplaySpec:
    decimal: bool = True
    hex: bool = True
    ascii: bool = True
    color: bool = True

    def highlight(self, text: str) -> str:
        if not self.color:
            return f"[{text}]"
        return f"{Colors.BG_BLUE}{text}{Colors.ENDC}"


def _printable(value: int) -> str:
    return chr(value) if 0x20 <= value < 0x7F else ' '


def _cell_text(value: int, spec: DisplaySpec) -> str:
    parts: List[str] = []
    if spec.decimal:
        parts.append(f"{value:03}")
    if spec.hex:
        parts.append(f"0x{value:02x}")
    if spec.ascii:
        parts.append(_printable(value))
    return ' '.join(parts)


def format_cell(snapshot: MachineSnapshot, index: int, spec: DisplaySpec) -> str:
    text = _cell_text(snapshot.tape[index], spec)
    if index == snapshot.data_ptr:
        return spec.highlight(text)
    return text


def format_source_line(snapshot: MachineSnapshot, lines: List[str], linum: int, spec: DisplaySpec) -> str:
    line = lines[linum]
    if snapshot.position is None:
        return line
    row, col = snapshot.position
    if row != linum or col >= len(line):
        return line
    return line[:col] + spec.highlight(line[col]) + line[col + 1:]


def render(snapshot: MachineSnapshot, lines: List[str], spec: Optional[DisplaySpec] = None) -> str:
    spec = spec or DisplaySpec()
    output = snapshot.output_text
    if spec.color:
        output = f"{Colors.GREEN}{output}{Colors.ENDC}"

    # width of an un-highlighted cell, used to pad rows with no cell
    blank = ' ' * len(_cell_text(0, spec))
    last_cell = max(snapshot.active_extent, snapshot.data_ptr)

    rows: List[str] = [output]
    for cell, linum in zip_longest(range(last_cell + 1), range(len(lines))):
        left = blank if cell is None else format_cell(snapshot, cell, spec)
        if linum is None:
            rows.append(left)
        else:
            rows.append(f"{left} {format_source_line(snapshot, lines, linum, spec)}")
    return '\n'.join(rows)
