"""The picture processing unit: mode timing, object search and pixel output."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

from .io_registers import Io
from .pixel_fetcher import FetcherStep, PixelFetcher, SpriteObject
from .pixel_fifo import PixelFifo, PixelSource

if TYPE_CHECKING:
    from .memory_map import MemoryMap

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 144

PPU_CLOCK_RATE = 4_194_304
PPU_ONE_FRAME = 70_224
PPU_ONE_LINE = 456

OAM_SEARCH_DOTS = 80
MAX_OBJECTS_PER_LINE = 10
OAM_ENTRIES = 40

DEFAULT_COLOR_SHADES = (0xFF0FBC9B, 0xFF0FAC8B, 0xFF306230, 0xFF0F380F)


class Mode(IntEnum):
    """PPU modes, valued as they appear in the low bits of STAT."""

    OAM_SEARCH = 2
    PIXEL_TRANSFER = 3
    HBLANK = 0
    VBLANK = 1


class Ppu:
    """Renders scanlines into ``screen_buffer`` as the LCD controller does.

    ``screen_buffer`` holds SCREEN_WIDTH * SCREEN_HEIGHT colours row by row;
    ``color_shades`` are the four shades the palettes pick from.
    """

    def __init__(self) -> None:
        self.clock_cycles = 0
        self._mode = Mode.OAM_SEARCH
        self._enabled = False
        self._is_first_frame = True

        self._pos_x = 0
        self._scroll_x = 0
        # Internal line counter of the window; advances with each window line drawn.
        self._window_line_counter = 0

        self._fifo = PixelFifo()
        self._oam_fifo = PixelFifo()
        self._fetcher = PixelFetcher()

        self.found_objects: list[SpriteObject] = []

        self.screen_buffer: list[int] = [0] * (SCREEN_WIDTH * SCREEN_HEIGHT)
        self.color_shades: list[int] = list(DEFAULT_COLOR_SHADES)

    def mode(self) -> Mode:
        return self._mode

    def is_first_frame(self) -> bool:
        """True until a whole frame has passed since the LCD was switched on."""
        return self._is_first_frame

    def cycle(self, memory_map: MemoryMap, dots: int) -> None:
        """Advance the PPU by ``dots`` dots (always 4 while the LCD is on)."""
        if memory_map.get_io(Io.LCDC) & 0x80 == 0:
            if self._enabled:
                # A switched-off LCD shows an empty screen.
                self.screen_buffer[:] = [self.color_shades[0]] * len(self.screen_buffer)
                memory_map.set_io(Io.LY, 0)
                memory_map.set_io(Io.STAT, 0)
                self.clock_cycles = dots
                self._mode = Mode.OAM_SEARCH
                self._enabled = False
                self._is_first_frame = True
            return

        self._enabled = True

        if dots != 4:
            raise ValueError(f"the PPU advances 4 dots at a time, not {dots}")

        if self._mode is Mode.OAM_SEARCH:
            self._oam_search(memory_map, dots)
        elif self._mode is Mode.PIXEL_TRANSFER:
            self._pixel_transfer(memory_map, dots)
        else:
            self._advance(memory_map, dots)

    def _advance(self, memory_map: MemoryMap, dots: int) -> None:
        self.clock_cycles += dots
        self._update_mode(memory_map)

    def _oam_search(self, memory_map: MemoryMap, dots: int) -> None:
        # The search does not affect the CPU, so it is done at the start of the mode.
        if self.clock_cycles % PPU_ONE_LINE == 0:
            ly = memory_map.get_io(Io.LY)
            lcdc = memory_map.get_io(Io.LCDC)
            found: list[SpriteObject] = []
            for address in range(0xFE00, 0xFE00 + OAM_ENTRIES * 4, 4):
                sprite = SpriteObject(
                    *(memory_map.ppu_get_oam(address + offset) for offset in range(4))
                )
                if sprite.is_visible(ly, lcdc):
                    found.append(sprite)
                    if len(found) == MAX_OBJECTS_PER_LINE:
                        break
            found.sort(key=lambda sprite: sprite.pos_x, reverse=True)
            self.found_objects = found

        self._advance(memory_map, dots)

    def _pixel_transfer(self, memory_map: MemoryMap, dots: int) -> None:
        lcdc = memory_map.get_io(Io.LCDC)
        bg_w_enable = lcdc & 0x01 != 0
        obj_enable = lcdc & 0x02 != 0
        window_enable = bg_w_enable and lcdc & 0x20 != 0

        wx = memory_map.get_io(Io.WX)
        wy = memory_map.get_io(Io.WY)
        ly = memory_map.get_io(Io.LY)
        scx = memory_map.get_io(Io.SCX)

        fetcher = self._fetcher
        fetcher_cycles = 0

        for _ in range(dots):
            if self._pos_x >= SCREEN_WIDTH + 8:
                break

            if window_enable and ly >= wy and self._pos_x == wx + 1:
                if not fetcher.is_window:
                    self._fifo = PixelFifo()
                    fetcher.step = FetcherStep.GET_TILE
                    fetcher.pos_x = 0
                fetcher.is_window = True

            # A fetcher step usually takes two dots, a push only one.
            if fetcher_cycles < dots:
                fetcher_cycles += fetcher.cycle(
                    memory_map, self._fifo, self._oam_fifo, self._window_line_counter
                )

            # Objects are sorted by decreasing x, so the next one is last.
            if self.found_objects and self._pos_x == self.found_objects[-1].pos_x:
                if fetcher.step is not FetcherStep.GET_TILE:
                    fetcher.hit_object = True
                    continue
                fetcher.fetching_object = self.found_objects.pop()

            # Output stalls while an object is fetched.
            if fetcher.fetching_object is not None:
                continue

            if self._fifo.pixel_count > 8:
                color, color_index, _ = self._fifo.pop(memory_map, self.color_shades)

                # Pixels scrolled out of the leftmost tile are discarded.
                if self._scroll_x < scx % 8:
                    self._scroll_x += 1
                    continue

                if self._oam_fifo.pixel_count > 0:
                    object_color, object_index, priority = self._oam_fifo.pop(
                        memory_map, self.color_shades
                    )
                    if obj_enable and (
                        not bg_w_enable
                        or (object_index != 0 and (priority == 0 or color_index == 0))
                    ):
                        color = object_color
                elif not bg_w_enable:
                    color = self.color_shades[0]

                # The first frame after the LCD is switched on stays blank.
                if not self._is_first_frame and self._pos_x >= 8:
                    self.screen_buffer[(self._pos_x - 8) + ly * SCREEN_WIDTH] = color

                self._pos_x += 1

        self._advance(memory_map, dots)

    def _request_interrupt(self, memory_map: MemoryMap, bit: int) -> None:
        memory_map.set_io(Io.IF, memory_map.get_io(Io.IF) | bit)

    def _update_mode(self, memory_map: MemoryMap) -> None:
        line_remainder = self.clock_cycles % PPU_ONE_LINE
        line = (self.clock_cycles % PPU_ONE_FRAME) // PPU_ONE_LINE

        if line_remainder == 0:
            memory_map.set_io(Io.LY, line)
            coincident = memory_map.get_io(Io.LYC) == line
            memory_map.set_io(
                Io.STAT, (memory_map.get_io(Io.STAT) & 0xFB) | (int(coincident) << 2)
            )
            if coincident and memory_map.get_io(Io.STAT) & 0x40:
                self._request_interrupt(memory_map, 0x2)

        memory_map.current_oam_row = 1 if line_remainder == 0 else None

        if self._mode is Mode.OAM_SEARCH:
            memory_map.current_oam_row = line_remainder // 4 + 1
            if line_remainder < OAM_SEARCH_DOTS:
                return
            self._pos_x = 0
            self._scroll_x = 0
            self._fifo = PixelFifo()
            self._oam_fifo = PixelFifo()
            self._fetcher = PixelFetcher()
            # A background tile that never reaches the screen, so objects with x < 8 render.
            self._fifo.push(0, PixelSource.BACKGROUND, 0)
            new_mode = Mode.PIXEL_TRANSFER
        elif self._mode is Mode.PIXEL_TRANSFER:
            if self._pos_x < SCREEN_WIDTH + 8:
                return
            if self._fetcher.is_window:
                self._window_line_counter += 1
            new_mode = Mode.HBLANK
        elif self._mode is Mode.HBLANK:
            if line_remainder != 0:
                return
            new_mode = Mode.VBLANK if line == SCREEN_HEIGHT else Mode.OAM_SEARCH
        else:
            if self.clock_cycles % PPU_ONE_FRAME != 0:
                return
            self._is_first_frame = False
            self._window_line_counter = 0
            new_mode = Mode.OAM_SEARCH

        stat = memory_map.get_io(Io.STAT)
        memory_map.set_io(Io.STAT, (stat & 0xFC) | int(new_mode))

        if (
            (new_mode is Mode.OAM_SEARCH and stat & 0x20)
            or (new_mode is Mode.VBLANK and stat & 0x10)
            or (new_mode is Mode.HBLANK and stat & 0x08)
        ):
            self._request_interrupt(memory_map, 0x2)

        if new_mode is Mode.VBLANK:
            self._request_interrupt(memory_map, 0x1)

        self._mode = new_mode