"""Cartridge memory bank controllers."""

from __future__ import annotations

from abc import ABC, abstractmethod


class CartridgeError(ValueError):
    """A cartridge header describes something that cannot be loaded."""


_RAM_BANK_COUNTS = {0x00: 0, 0x02: 1, 0x03: 4, 0x04: 16, 0x05: 8}


def ram_bank_count_from_header(code: int) -> int:
    """Number of 8KB external RAM banks for header byte 0x149."""
    try:
        return _RAM_BANK_COUNTS[code]
    except KeyError:
        raise CartridgeError(f"ram size(0x149) is not valid: {code:#04x}") from None


class Mbc(ABC):
    """Maps cartridge register writes to ROM and RAM bank selections."""

    @abstractmethod
    def write(self, address: int, value: int) -> None:
        """Handle a write to the cartridge address space."""

    @abstractmethod
    def rom_bank(self) -> int:
        """Bank mapped at 0x4000-0x7FFF."""

    @abstractmethod
    def ram_bank(self) -> int | None:
        """Bank mapped at 0xA000-0xBFFF, or None when RAM is disabled."""


class NoMbc(Mbc):
    """A plain 32KB cartridge without banking."""

    def write(self, address: int, value: int) -> None:
        pass

    def rom_bank(self) -> int:
        return 1

    def ram_bank(self) -> int | None:
        return 0


class Mbc1(Mbc):
    """The MBC1 controller."""

    def __init__(self, rom_bank_count: int, ram_bank_count: int) -> None:
        self.rom_bank_count = rom_bank_count
        self.ram_bank_count = ram_bank_count
        self._rom_bank = 1
        self._secondary_bank = 0
        self._banking_mode = 0
        self._ram_enabled = False

    def write(self, address: int, value: int) -> None:
        if address < 0x2000:
            self._ram_enabled = value & 0x0F == 0x0A
        elif address < 0x4000:
            bank = (value & 0x1F) or 1
            self._rom_bank = bank & (((self.rom_bank_count & 0xFF) - 1) & 0xFF)
        elif address < 0x6000:
            self._secondary_bank = value & 0x03
        elif address < 0x8000:
            self._banking_mode = value & 0x01

    def rom_bank(self) -> int:
        if self._banking_mode == 0 and self.rom_bank_count > 0x20:
            return (self._secondary_bank << 5) + self._rom_bank
        return self._rom_bank

    def ram_bank(self) -> int | None:
        if not self._ram_enabled:
            return None
        if self._banking_mode == 1 and self.ram_bank_count <= 4:
            return self._secondary_bank
        return 0


def create_mbc(cartridge_type: int, rom_bank_count: int, ram_bank_count: int) -> Mbc:
    """Build the controller named by header byte 0x147."""
    if cartridge_type == 0x00:
        return NoMbc()
    if cartridge_type in (0x01, 0x02, 0x03):
        return Mbc1(rom_bank_count, ram_bank_count)
    raise CartridgeError(f"unsupported cartridge type {cartridge_type:#04x}")