"""Emulator core parts for the original monochrome handheld console: registers, memory map, bank controllers, PPU and peripherals."""

__version__ = "0.1.0"