"""The background and object pixel FIFOs of the PPU."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

from .io_registers import Io

if TYPE_CHECKING:
    from .memory_map import MemoryMap

_MASK32 = 0xFFFF_FFFF


class PixelSource(IntEnum):
    """Where a pixel in a FIFO came from."""

    BACKGROUND = 0
    OBJECT0 = 1
    OBJECT1 = 2
    WINDOW = 3


_PALETTE_REGISTERS = {
    PixelSource.BACKGROUND: Io.BGP,
    PixelSource.WINDOW: Io.BGP,
    PixelSource.OBJECT0: Io.OBP0,
    PixelSource.OBJECT1: Io.OBP1,
}


def color_palette(color_shades: Sequence[int], palette_register: int) -> tuple[int, int, int, int]:
    """Map the four colour indices to shades as a palette register selects them."""
    return tuple(color_shades[(palette_register >> shift) & 0x3] for shift in (0, 2, 4, 6))


@dataclass
class PixelFifo:
    """A FIFO of 2-bit pixels packed into integers, oldest pixel in the low bits.

    The background FIFO and the object FIFO are separate instances.
    """

    color_values: int = 0
    pixel_sources: int = 0
    background_priority: int = 0
    pixel_count: int = 0

    def pop(
        self, memory_map: MemoryMap, color_shades: Sequence[int]
    ) -> tuple[int, int, int]:
        """Remove the oldest pixel; return its shade, colour index and priority."""
        if self.pixel_count < 0:
            raise IndexError("pop from an exhausted pixel fifo")

        color = self.color_values & 0x3
        source = PixelSource(self.pixel_sources & 0x3)
        priority = self.background_priority & 0x1

        self.color_values >>= 2
        self.pixel_sources >>= 2
        self.background_priority >>= 1
        self.pixel_count -= 1

        palette = color_palette(color_shades, memory_map.get_io(_PALETTE_REGISTERS[source]))
        return palette[color], color, priority

    def push(self, tile: int, source: PixelSource | int, priority: int) -> None:
        """Add eight pixels of ``tile`` (2 bits each, leftmost in the low bits).

        Object pixels are mixed into the first eight slots; background and
        window pixels are appended behind the ones already queued.
        """
        source = PixelSource(source)
        if source in (PixelSource.OBJECT0, PixelSource.OBJECT1):
            color_values = 0
            pixel_sources = 0
            background_priority = 0
            for i in range(8):
                shift = i * 2
                current_source = (self.pixel_sources >> shift) & 0x3
                current_color = (self.color_values >> shift) & 0x3
                if i >= self.pixel_count or current_color == 0 or source < current_source:
                    color_values |= tile & (0x3 << shift)
                    pixel_sources |= int(source) << shift
                    background_priority |= (priority & 0xFFFF) << i
                else:
                    color_values |= current_color << shift
                    pixel_sources |= current_source << shift
                    background_priority |= self.background_priority & (1 << i)
            self.pixel_count = 8
            self.color_values = color_values & _MASK32
            self.pixel_sources = pixel_sources & _MASK32
            self.background_priority = background_priority & 0xFFFF
        else:
            shift = self.pixel_count * 2
            self.color_values = (self.color_values | ((tile & 0xFFFF) << shift)) & _MASK32
            self.pixel_sources = (self.pixel_sources | (int(source) << shift)) & _MASK32
            self.pixel_count += 8