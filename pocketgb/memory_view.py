"""Text views of the address space: hex dump lines and memory dumps."""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .memory_map import MemoryMap

BYTES_PER_ROW = 0x10
MEMORY_ROWS = 0x1000
LINE_WIDTH = 57


def hex_digits(value: int, width: int) -> str:
    """Lower-case hex of the low ``width`` nibbles of ``value``, zero padded."""
    if width < 1:
        raise ValueError(f"width must be positive, not {width}")
    return f"{value & ((1 << (width * 4)) - 1):0{width}x}"


def _printable(value: int) -> str:
    return chr(value) if 0x21 <= value <= 0x7E else "."


def format_memory_line(memory_map: MemoryMap, row: int) -> str:
    """One dump line: address, sixteen bytes in hex and their printable form."""
    start = (row * BYTES_PER_ROW) & 0xFFFF
    values = [memory_map.get((start + offset) & 0xFFFF) for offset in range(BYTES_PER_ROW)]
    hex_part = "".join(hex_digits(value, 2) for value in values)
    text_part = "".join(_printable(value) for value in values)
    line = f"{hex_digits(start, 4)}: {hex_part} {text_part}"
    return line.ljust(LINE_WIDTH)


def _memory_lines(memory_map: MemoryMap) -> Iterator[str]:
    for row in range(MEMORY_ROWS):
        yield format_memory_line(memory_map, row) + "\n"


def dump_memory(path: str | os.PathLike[str], memory_map: MemoryMap) -> None:
    """Write the whole 64KB address space to ``path`` as dump lines."""
    with open(path, "w", encoding="ascii", newline="\n") as file:
        file.writelines(_memory_lines(memory_map))


def round_to_row(value: int) -> int:
    """Round an address to the nearest multiple of 0x10: 0x105 -> 0x100, 0x108 -> 0x110."""
    floored = value & 0xFFF0
    return floored if value % 0x10 < 0x8 else floored + 0x10