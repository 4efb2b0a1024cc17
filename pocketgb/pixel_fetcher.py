"""The PPU pixel fetcher, which feeds tiles into the pixel FIFOs."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .io_registers import Io
from .pixel_fifo import PixelFifo, PixelSource

if TYPE_CHECKING:
    from .memory_map import MemoryMap


def _object_height(lcdc: int) -> int:
    return 8 if lcdc & 0x4 == 0 else 16


@dataclass(frozen=True)
class SpriteObject:
    """One OAM entry: position, tile and attribute flags."""

    pos_y: int = 0
    pos_x: int = 0
    tile_index: int = 0
    attributes: int = 0

    def is_visible(self, ly: int, lcdc: int) -> bool:
        """Whether the object covers scanline ``ly``."""
        top_y = self.pos_y - 16
        return top_y <= ly < top_y + _object_height(lcdc)


class FetcherStep(Enum):
    """Steps of the fetcher; each takes two dots except a push."""

    GET_TILE = "get_tile"
    GET_TILE_LOW = "get_tile_low"
    GET_TILE_HIGH = "get_tile_high"
    SLEEP = "sleep"
    PUSH = "push"


@dataclass
class PixelFetcher:
    """Fetches background, window and object tiles one step at a time."""

    pos_x: int = 0
    fetching_object: SpriteObject | None = None
    # Set when an object is hit; the current fetch is then dropped at push.
    hit_object: bool = False
    is_window: bool = False
    step: FetcherStep = FetcherStep.GET_TILE

    _tile_map_value: int = 0
    _tile_address: int = 0
    _tile_low: int = 0
    _tile_high: int = 0

    def cycle(
        self,
        memory_map: MemoryMap,
        fifo: PixelFifo,
        oam_fifo: PixelFifo,
        window_line_counter: int,
    ) -> int:
        """Run one step and return how many dots it took."""
        lcdc = memory_map.get_io(Io.LCDC)
        ly = memory_map.get_io(Io.LY)
        scy = memory_map.get_io(Io.SCY)

        if self.step is FetcherStep.GET_TILE:
            self._tile_map_value = self._fetch_tile_number(
                memory_map, lcdc, ly, scy, window_line_counter
            )
            self.step = FetcherStep.GET_TILE_LOW
        elif self.step is FetcherStep.GET_TILE_LOW:
            self._tile_address = self._tile_row_address(lcdc, ly, scy)
            self._tile_low = memory_map.ppu_get_vram(self._tile_address)
            self.step = FetcherStep.GET_TILE_HIGH
        elif self.step is FetcherStep.GET_TILE_HIGH:
            self._tile_high = memory_map.ppu_get_vram((self._tile_address + 1) & 0xFFFF)
            self.step = FetcherStep.SLEEP
        elif self.step is FetcherStep.SLEEP:
            self.step = FetcherStep.PUSH
        else:
            if self.hit_object:
                # The fetched tile is thrown away and fetched again later.
                self.hit_object = False
                self.step = FetcherStep.GET_TILE
                return 1
            if self.fetching_object is None and fifo.pixel_count > 8:
                # Background tiles wait until the FIFO has room.
                return 1
            self._push(fifo, oam_fifo)
            self.fetching_object = None
            self.step = FetcherStep.GET_TILE

        # Reaching GET_TILE here means a push happened, which takes one dot.
        return 1 if self.step is FetcherStep.GET_TILE else 2

    def _fetch_tile_number(
        self, memory_map: MemoryMap, lcdc: int, ly: int, scy: int, window_line_counter: int
    ) -> int:
        if self.fetching_object is not None:
            return self.fetching_object.tile_index
        if self.is_window:
            map_start = 0x9800 if lcdc & 0x40 == 0 else 0x9C00
            address = (
                map_start + ((self.pos_x // 8) & 0x1F) + (window_line_counter // 8) * 32
            )
        else:
            map_start = 0x9800 if lcdc & 0x8 == 0 else 0x9C00
            scx = memory_map.get_io(Io.SCX)
            address = (
                map_start
                + ((scx // 8 + self.pos_x // 8) & 0x1F)
                + (((ly + scy) % 256) // 8) * 32
            )
        return memory_map.ppu_get_vram(address & 0xFFFF)

    def _tile_row_address(self, lcdc: int, ly: int, scy: int) -> int:
        tile_number = self._tile_map_value
        sprite = self.fetching_object
        if sprite is not None:
            height = _object_height(lcdc)
            tile_y = ly - (sprite.pos_y - 16)
            if height == 16:
                tile_number &= 0xFE
            if sprite.attributes & 0x40:
                tile_y = height - tile_y - 1
            data_start = 0x8000
        else:
            if lcdc & 0x10 == 0:
                # Tile numbers are signed when data starts at 0x8800.
                data_start = 0x9000
                if tile_number >= 0x80:
                    tile_number -= 0x100
            else:
                data_start = 0x8000
            pos_y = ly if self.is_window else ly + scy
            tile_y = (pos_y % 256) % 8
        return (data_start + tile_number * 16 + tile_y * 2) & 0xFFFF

    def _push(self, fifo: PixelFifo, oam_fifo: PixelFifo) -> None:
        sprite = self.fetching_object
        horizontal_flip = sprite is not None and sprite.attributes & 0x20 != 0

        tile = 0
        for bit in range(7, -1, -1):
            pixel = (((self._tile_high >> bit) & 1) << 1) | ((self._tile_low >> bit) & 1)
            shift = bit * 2 if horizontal_flip else (7 - bit) * 2
            tile |= pixel << shift

        if sprite is not None:
            source = PixelSource.OBJECT0 if sprite.attributes & 0x10 == 0 else PixelSource.OBJECT1
            oam_fifo.push(tile, source, sprite.attributes >> 7)
        else:
            source = PixelSource.WINDOW if self.is_window else PixelSource.BACKGROUND
            fifo.push(tile, source, 0)
            self.pos_x = (self.pos_x + 8) & 0xFFFF