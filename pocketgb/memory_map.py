"""The 64KB address space as seen by the CPU and the PPU.

    0000-3FFF   16KB ROM bank 00
    4000-7FFF   16KB ROM bank 01..NN (switchable)
    8000-9FFF   8KB video RAM
    A000-BFFF   8KB external RAM (switchable, if any)
    C000-CFFF   4KB work RAM bank 0
    D000-DFFF   4KB work RAM bank 1
    E000-FDFF   echo of C000-DDFF
    FE00-FE9F   sprite attribute table (OAM)
    FEA0-FEFF   not usable
    FF00-FF7F   I/O ports
    FF80-FFFE   high RAM
    FFFF        interrupt enable register
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from .io_registers import Io, OamCorruption
from .mbc import CartridgeError, Mbc, NoMbc, create_mbc, ram_bank_count_from_header

ROM_BANK_SIZE = 0x4000
VRAM_SIZE = 0x2000
EXTERNAL_RAM_SIZE = 0x2000
WRAM_SIZE = 0x1000

_POST_BOOT_IO = (
    (Io.TIMA, 0x00),
    (Io.TMA, 0x00),
    (Io.TAC, 0x00),
    (Io.NR10, 0x80),
    (Io.NR11, 0xBF),
    (Io.NR12, 0xF3),
    (Io.NR14, 0xBF),
    (Io.NR21, 0x3F),
    (Io.NR22, 0x00),
    (Io.NR24, 0xBF),
    (Io.NR30, 0x7F),
    (Io.NR31, 0xFF),
    (Io.NR32, 0x9F),
    (Io.NR33, 0xBF),
    (Io.NR41, 0xFF),
    (Io.NR42, 0x00),
    (Io.NR43, 0x00),
    (Io.NR30, 0xBF),
    (Io.NR50, 0x77),
    (Io.NR51, 0xF3),
    (Io.NR52, 0xF1),
    (Io.LCDC, 0x91),
    (Io.SCY, 0x00),
    (Io.SCX, 0x00),
    (Io.LYC, 0x00),
    (Io.BGP, 0xFC),
    (Io.OBP0, 0xFF),
    (Io.OBP1, 0xFF),
    (Io.WY, 0x00),
    (Io.WX, 0x00),
    (Io.IE, 0x00),
)


def _resized(banks: list[bytearray], count: int, size: int) -> list[bytearray]:
    kept = banks[:count]
    return kept + [bytearray(size) for _ in range(count - len(kept))]


class MemoryMap:
    """Memory of the machine with the access rules of CPU and PPU.

    ``sync_hook`` is called (with no arguments) before each CPU access while
    syncing is opened with :meth:`open_sync`; it lets the rest of the machine
    catch up with the CPU. Nested accesses made during a hook or during the
    same CPU access do not call it again.
    """

    def __init__(self, sync_hook: Callable[[], None] | None = None) -> None:
        self.rom_banks: list[bytearray] = []
        self.vrams: list[bytearray] = [bytearray(VRAM_SIZE)]
        self.external_ram: list[bytearray] = []
        self.wrams: list[bytearray] = [bytearray(WRAM_SIZE) for _ in range(2)]
        self.oam = bytearray(0x100)
        self.io_ports = bytearray(0x80)
        self.high_ram = bytearray(0x7F)
        self.ier = 0

        self._mbc: Mbc = NoMbc()

        self.sync_hook = sync_hook
        self._is_syncing = False
        self._old_is_syncing = False

        self.current_oam_row: int | None = None
        self._oam_corruption_enabled = True

        self.boot_rom = b""

        self.memory_watches: list[tuple[int, int | None]] = []
        self.triggered_watch: int | None = None

        self.on_dma_transfer = False

        self.vram_changed = False
        self.oam_changed = False

    @classmethod
    def after_boot(cls, sync_hook: Callable[[], None] | None = None) -> MemoryMap:
        """A memory map with the I/O registers the boot ROM leaves behind."""
        memory = cls(sync_hook)
        for io, value in _POST_BOOT_IO:
            memory.cpu_set_io(io, value)
        return memory

    # Cartridge and boot ROM.

    def load_rom(self, path: str | os.PathLike[str]) -> None:
        """Load a cartridge image from a file."""
        with open(path, "rb") as file:
            self.load_rom_bytes(file.read())

    def load_rom_bytes(self, rom: bytes) -> None:
        """Load a cartridge image; the header selects banks and controller."""
        if len(rom) < 0x150:
            raise CartridgeError("cartridge image is too short to hold a header")
        cartridge_type = rom[0x147]
        rom_bank_count = 1 << (rom[0x148] + 1)
        ram_bank_count = ram_bank_count_from_header(rom[0x149])

        if len(rom) > rom_bank_count * ROM_BANK_SIZE:
            raise CartridgeError(
                f"cartridge image of {len(rom)} bytes exceeds {rom_bank_count} ROM banks"
            )

        self._mbc = create_mbc(cartridge_type, rom_bank_count, ram_bank_count)

        self.rom_banks = _resized(self.rom_banks, rom_bank_count, ROM_BANK_SIZE)
        self.external_ram = _resized(self.external_ram, ram_bank_count, EXTERNAL_RAM_SIZE)
        self.vrams = _resized(self.vrams, 1, VRAM_SIZE)
        self.wrams = _resized(self.wrams, 2, WRAM_SIZE)

        for bank_index, start in enumerate(range(0, len(rom), ROM_BANK_SIZE)):
            chunk = rom[start:start + ROM_BANK_SIZE]
            self.rom_banks[bank_index][: len(chunk)] = chunk

    def load_boot_rom(self, path: str | os.PathLike[str]) -> None:
        """Map a boot ROM over the start of the address space."""
        with open(path, "rb") as file:
            self.boot_rom = file.read()

    def clear_boot_rom(self) -> None:
        self.boot_rom = b""

    # Syncing.

    def open_sync(self) -> None:
        self._is_syncing = True

    def close_sync(self) -> None:
        self._is_syncing = False

    @contextmanager
    def _synced(self) -> Iterator[None]:
        if not self._is_syncing:
            yield
            return
        self._old_is_syncing = self._is_syncing
        self._is_syncing = False
        try:
            if self.sync_hook is not None:
                self.sync_hook()
            yield
        finally:
            self._is_syncing = self._old_is_syncing

    # Unrestricted access.

    def get(self, address: int) -> int:
        """Read a byte without any access restriction."""
        address &= 0xFFFF
        if address < len(self.boot_rom):
            return self.boot_rom[address]
        if address < 0x4000:
            return self.rom_banks[0][address]
        if address < 0x8000:
            return self.rom_banks[self._mbc.rom_bank()][address - 0x4000]
        if address < 0xA000:
            return self.vrams[0][address - 0x8000]
        if address < 0xC000:
            ram_bank = self._mbc.ram_bank()
            if ram_bank is not None and self.external_ram:
                return self.external_ram[ram_bank][address - 0xA000]
            return 0xFF
        if address < 0xD000:
            return self.wrams[0][address - 0xC000]
        if address < 0xE000:
            return self.wrams[1][address - 0xD000]
        if address < 0xFE00:
            return self.get(address - 0x2000)
        if address < 0xFEA0:
            return self.oam[address - 0xFE00]
        if address < 0xFF00:
            return 0
        if address < 0xFF80:
            return self.io_ports[address - 0xFF00]
        if address < 0xFFFF:
            return self.high_ram[address - 0xFF80]
        return self.ier

    def set(self, address: int, value: int) -> None:
        """Write a byte without any access restriction; ROM is left as is."""
        address &= 0xFFFF
        value &= 0xFF
        if address < 0x8000:
            return
        if address < 0xA000:
            self.vrams[0][address - 0x8000] = value
        elif address < 0xC000:
            ram_bank = self._mbc.ram_bank()
            if ram_bank is not None and self.external_ram:
                self.external_ram[ram_bank][address - 0xA000] = value
        elif address < 0xD000:
            self.wrams[0][address - 0xC000] = value
        elif address < 0xE000:
            self.wrams[1][address - 0xD000] = value
        elif address < 0xFE00:
            self.set(address - 0x2000, value)
        elif address < 0xFEA0:
            self.oam[address - 0xFE00] = value
        elif address < 0xFF00:
            pass
        elif address < 0xFF80:
            self.io_ports[address - 0xFF00] = value
        elif address < 0xFFFF:
            self.high_ram[address - 0xFF80] = value
        else:
            self.ier = value

    def get_io(self, io: Io) -> int:
        return self.get(int(io))

    def set_io(self, io: Io, value: int) -> None:
        self.set(int(io), value)

    def get_u16(self, address: int) -> int:
        """Read a little-endian 16-bit value."""
        return (self.get((address + 1) & 0xFFFF) << 8) | self.get(address)

    def set_u16(self, address: int, value: int) -> None:
        """Write a little-endian 16-bit value."""
        self.set(address, value & 0xFF)
        self.set((address + 1) & 0xFFFF, (value >> 8) & 0xFF)

    # CPU access.

    def cpu_set(self, address: int, value: int) -> None:
        """Write a byte as the CPU does, with all hardware restrictions."""
        address &= 0xFFFF
        value &= 0xFF
        with self._synced():
            lcd_disabled = self.cpu_get_io(Io.LCDC) & 0x80 == 0

            if self._oam_corruption_enabled:
                self.try_corrupt_oam(address, OamCorruption.WRITE)

            if self.on_dma_transfer and (address < 0xFF80 or address == 0xFFFF):
                # Only high RAM is reachable during a DMA transfer.
                can_set = False
            elif 0x8000 <= address < 0xA000:
                can_set = lcd_disabled or self.cpu_get_io(Io.STAT) & 0x3 != 0x3
                if can_set:
                    self.vram_changed = True
            elif 0xFE00 <= address < 0xFEA0:
                can_set = lcd_disabled or self.cpu_get_io(Io.STAT) & 0x2 == 0
                if can_set:
                    self.oam_changed = True
            elif address == Io.DMA:
                self.dma_transfer(value)
                can_set = False
            else:
                can_set = True

            if address == Io.DIV:
                # Any write resets the divider.
                value = 0

            if can_set:
                self.set(address, value)
                self.triggered_watch = next(
                    (
                        index
                        for index, (watch_address, watch_value) in enumerate(self.memory_watches)
                        if watch_address == address
                        and (watch_value is None or watch_value == value)
                    ),
                    None,
                )

            self._mbc.write(address, value)

    def cpu_get(self, address: int) -> int:
        """Read a byte as the CPU does, with all hardware restrictions."""
        address &= 0xFFFF
        with self._synced():
            if self._oam_corruption_enabled:
                self.try_corrupt_oam(address, OamCorruption.READ)

            value = self.get(address)

            if self.on_dma_transfer and (address < 0xFF80 or address == 0xFFFF):
                value = 0xFF

            if 0x8000 <= address < 0xA000:
                if self.cpu_get_io(Io.STAT) & 0x3 == 0x3:
                    value = 0xFF
            elif 0xFE00 <= address < 0xFEA0:
                if self.cpu_get_io(Io.STAT) & 0x2 != 0:
                    value = 0xFF
        return value

    def cpu_get_u16(self, address: int) -> int:
        low = self.cpu_get(address)
        high = self.cpu_get((address + 1) & 0xFFFF)
        return (high << 8) | low

    def cpu_set_u16(self, address: int, value: int) -> None:
        self.cpu_set(address, value & 0xFF)
        self.cpu_set((address + 1) & 0xFFFF, (value >> 8) & 0xFF)

    def cpu_get_io(self, io: Io) -> int:
        return self.cpu_get(int(io))

    def cpu_set_io(self, io: Io, value: int) -> None:
        self.cpu_set(int(io), value)

    def enable_oam_corruption(self) -> None:
        self._oam_corruption_enabled = True

    def disable_oam_corruption(self) -> None:
        self._oam_corruption_enabled = False

    # PPU access.

    def ppu_get_vram(self, address: int) -> int:
        """Read VRAM as the PPU does: 0xFF unless the LCD is in pixel transfer."""
        lcdc = self.cpu_get_io(Io.LCDC)
        stat = self.cpu_get_io(Io.STAT)
        if lcdc & 0x80 == 0 or stat & 0x3 != 0x3:
            return 0xFF
        return self.vrams[0][address - 0x8000]

    def ppu_get_oam(self, address: int) -> int:
        return self.oam[address - 0xFE00]

    def get_vram(self, address: int) -> int:
        """Read VRAM directly, ignoring the PPU mode."""
        return self.vrams[0][address - 0x8000]

    def increment_div(self) -> None:
        """Advance the divider register, wrapping at 256."""
        offset = Io.DIV - 0xFF00
        self.io_ports[offset] = (self.io_ports[offset] + 1) & 0xFF

    def dma_transfer(self, source: int) -> None:
        """Copy 160 bytes from ``source << 8`` into OAM and start the DMA period."""
        if source > 0xDF:
            return
        start = source << 8
        for offset in range(0xA0):
            self.cpu_set(0xFE00 + offset, self.cpu_get(start + offset))
        self.on_dma_transfer = True

    # OAM corruption bug.

    def _set_oam_u16(self, address: int, value: int) -> None:
        offset = address - 0xFE00
        if not 0 <= offset < len(self.oam) - 1:
            raise IndexError(f"address {address:#06x} is outside OAM")
        self.oam[offset] = value & 0xFF
        self.oam[offset + 1] = (value >> 8) & 0xFF

    def try_corrupt_oam(self, address: int, corruption: OamCorruption) -> None:
        """Apply the OAM corruption pattern for an access at ``address``.

        Only accesses to FE00-FEFF while the PPU scans OAM (a current OAM row
        is set) corrupt memory.
        """
        if not 0xFE00 <= address < 0xFF00:
            return
        row = self.current_oam_row
        if row is None:
            return

        if corruption is OamCorruption.INC_DEC_READ:
            if row < 20:
                start = 0xFE00 + (row - 1) * 8
                a = self.get_u16(start - 8)
                b = self.get_u16(start)
                c = self.get_u16(start + 8)
                d = self.get_u16(start + 4)
                self._set_oam_u16(start, (b & (a | c | d)) | (a & c & d))
                for offset in range(0, 8, 2):
                    word = self.get_u16(start + offset)
                    self._set_oam_u16(start - 8 + offset, word)
                    self._set_oam_u16(start + 8 + offset, word)
            # A normal read corruption follows in any case.
            corruption = OamCorruption.READ

        if 0 < row < 20:
            start = 0xFE00 + row * 8
            a = self.get_u16(start)
            b = self.get_u16(start - 8)
            c = self.get_u16(start - 4)
            if corruption is OamCorruption.READ:
                result = b | (a & c)
            else:
                result = ((a ^ c) & (b ^ c)) ^ c
            self._set_oam_u16(start, result)
            self._set_oam_u16(start + 2, self.get_u16(start - 6))
            self._set_oam_u16(start + 4, self.get_u16(start - 4))
            self._set_oam_u16(start + 6, self.get_u16(start - 2))