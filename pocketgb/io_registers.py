"""Memory-mapped I/O register addresses and OAM corruption kinds."""

from __future__ import annotations

from enum import Enum, IntEnum


class Io(IntEnum):
    """Addresses of the memory-mapped I/O registers."""

    LCDC = 0xFF40  # LCD Control (R/W)
    STAT = 0xFF41  # LCDC Status (R/W)
    SCY = 0xFF42  # Scroll Y (R/W)
    SCX = 0xFF43  # Scroll X (R/W)
    LY = 0xFF44  # LCDC Y-Coordinate (R)
    LYC = 0xFF45  # LY Compare (R/W)
    WY = 0xFF4A  # Window Y Position (R/W)
    WX = 0xFF4B  # Window X Position minus 7 (R/W)
    BGP = 0xFF47  # BG Palette Data (R/W)
    OBP0 = 0xFF48  # Object Palette 0 Data (R/W)
    OBP1 = 0xFF49  # Object Palette 1 Data (R/W)
    BGPI = 0xFF68  # CGB Mode Only - Background Palette Index
    BGPD = 0xFF69  # CGB Mode Only - Background Palette Data
    OBPI = 0xFF6A  # CGB Mode Only - Sprite Palette Index
    OBPD = 0xFF6B  # CGB Mode Only - Sprite Palette Data
    VBK = 0xFF4F  # CGB Mode Only - VRAM Bank
    DMA = 0xFF46  # DMA Transfer and Start Address (W)
    HDMA1 = 0xFF51  # CGB Mode Only - New DMA Source, High
    HDMA2 = 0xFF52  # CGB Mode Only - New DMA Source, Low
    HDMA3 = 0xFF53  # CGB Mode Only - New DMA Destination, High
    HDMA4 = 0xFF54  # CGB Mode Only - New DMA Destination, Low
    HDMA5 = 0xFF55  # CGB Mode Only - New DMA Length/Mode/Start
    NR10 = 0xFF10  # Channel 1 Sweep register (R/W)
    NR11 = 0xFF11  # Channel 1 Sound length/Wave pattern duty (R/W)
    NR12 = 0xFF12  # Channel 1 Volume Envelope (R/W)
    NR13 = 0xFF13  # Channel 1 Frequency lo (W)
    NR14 = 0xFF14  # Channel 1 Frequency hi (R/W)
    NR21 = 0xFF16  # Channel 2 Sound Length/Wave Pattern Duty (R/W)
    NR22 = 0xFF17  # Channel 2 Volume Envelope (R/W)
    NR23 = 0xFF18  # Channel 2 Frequency lo data (W)
    NR24 = 0xFF19  # Channel 2 Frequency hi data (R/W)
    NR30 = 0xFF1A  # Channel 3 Sound on/off (R/W)
    NR31 = 0xFF1B  # Channel 3 Sound Length
    NR32 = 0xFF1C  # Channel 3 Select output level (R/W)
    NR33 = 0xFF1D  # Channel 3 Frequency's lower data (W)
    NR34 = 0xFF1E  # Channel 3 Frequency's higher data (R/W)
    NR41 = 0xFF20  # Channel 4 Sound Length (R/W)
    NR42 = 0xFF21  # Channel 4 Volume Envelope (R/W)
    NR43 = 0xFF22  # Channel 4 Polynomial Counter (R/W)
    NR44 = 0xFF23  # Channel 4 Counter/consecutive; Initial (R/W)
    NR50 = 0xFF24  # Channel control / ON-OFF / Volume (R/W)
    NR51 = 0xFF25  # Selection of Sound output terminal (R/W)
    NR52 = 0xFF26  # Sound on/off
    JOYP = 0xFF00  # Joypad (R/W)
    SB = 0xFF01  # Serial transfer data (R/W)
    SC = 0xFF02  # Serial Transfer Control (R/W)
    DIV = 0xFF04  # Divider Register (R/W)
    TIMA = 0xFF05  # Timer counter (R/W)
    TMA = 0xFF06  # Timer Modulo (R/W)
    TAC = 0xFF07  # Timer Control (R/W)
    IE = 0xFFFF  # Interrupt Enable (R/W)
    IF = 0xFF0F  # Interrupt Flag (R/W)
    KEY1 = 0xFF4D  # CGB Mode Only - Prepare Speed Switch
    RP = 0xFF56  # CGB Mode Only - Infrared Communications Port
    SVBK = 0xFF70  # CGB Mode Only - WRAM Bank

    @classmethod
    def from_name(cls, name: str) -> Io:
        """Look a register up by name, ignoring case."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise KeyError(f"no I/O register named {name!r}") from None


class OamCorruption(Enum):
    """Kinds of access that trigger the OAM corruption bug."""

    READ = "read"
    WRITE = "write"
    INC_DEC_READ = "inc_dec_read"