"""The eight 8-bit CPU registers and their 16-bit pairings."""

from __future__ import annotations

_NAMES = "bcdehlfa"
_PAIRS = ("bc", "de", "hl", "af")

_F_INDEX = _NAMES.index("f")


class Registers:
    """CPU registers B, C, D, E, H, L, F and A.

    Single registers are reached by index (0-7 in the order B, C, D, E,
    H, L, F, A) or by their lower-case letter. The flag bits of F are read
    with :meth:`z`, :meth:`n`, :meth:`h` and :meth:`cy`.
    """

    __slots__ = ("_bytes",)

    def __init__(self) -> None:
        self._bytes = bytearray(len(_NAMES))

    @classmethod
    def after_boot(cls) -> Registers:
        """Registers as the boot ROM leaves them."""
        registers = cls()
        registers.set_u16_at(3, 0x01B0)
        registers.set_u16_at(0, 0x0013)
        registers.set_u16_at(1, 0x00D8)
        registers.set_u16_at(2, 0x014D)
        return registers

    @staticmethod
    def _position(index: int | str) -> int:
        if isinstance(index, str):
            position = _NAMES.find(index.lower()) if len(index) == 1 else -1
            if position < 0:
                raise KeyError(f"no register named {index!r}")
            return position
        if not 0 <= index < len(_NAMES):
            raise IndexError(f"register index {index} out of range")
        return index

    def get_u16_at(self, index: int) -> int:
        """Return register pair ``index``: 0=BC, 1=DE, 2=HL, 3=AF."""
        if not 0 <= index < len(_PAIRS):
            raise IndexError(f"register pair index {index} out of range")
        high, low = (_NAMES.index(letter) for letter in _PAIRS[index])
        return (self._bytes[high] << 8) | self._bytes[low]

    def set_u16_at(self, index: int, value: int) -> None:
        """Store ``value`` (wrapped to 16 bits) in register pair ``index``."""
        if not 0 <= index < len(_PAIRS):
            raise IndexError(f"register pair index {index} out of range")
        value &= 0xFFFF
        high, low = (_NAMES.index(letter) for letter in _PAIRS[index])
        self._bytes[high] = value >> 8
        lower = value & 0xFF
        if low == _F_INDEX:
            # The low nibble of F always reads as zero.
            lower &= 0xF0
        self._bytes[low] = lower

    def bc(self) -> int:
        return self.get_u16_at(0)

    def de(self) -> int:
        return self.get_u16_at(1)

    def hl(self) -> int:
        return self.get_u16_at(2)

    def af(self) -> int:
        return self.get_u16_at(3)

    def set_bc(self, value: int) -> None:
        self.set_u16_at(0, value)

    def set_de(self, value: int) -> None:
        self.set_u16_at(1, value)

    def set_hl(self, value: int) -> None:
        self.set_u16_at(2, value)

    def set_af(self, value: int) -> None:
        self.set_u16_at(3, value)

    def cy(self) -> int:
        """Carry flag: carry from or borrow to bit 7."""
        return (self._bytes[_F_INDEX] >> 4) & 1

    def h(self) -> int:
        """Half-carry flag: carry from or borrow to bit 3."""
        return (self._bytes[_F_INDEX] >> 5) & 1

    def n(self) -> int:
        """Subtract flag: set after a subtraction."""
        return (self._bytes[_F_INDEX] >> 6) & 1

    def z(self) -> int:
        """Zero flag: set when a result is zero."""
        return (self._bytes[_F_INDEX] >> 7) & 1

    def set_flags(self, z: int, n: int, h: int, cy: int) -> None:
        """Replace all four flags at once; any true value sets a flag."""
        self._bytes[_F_INDEX] = (
            (bool(z) << 7) | (bool(n) << 6) | (bool(h) << 5) | (bool(cy) << 4)
        )

    def __getitem__(self, index: int | str) -> int:
        return self._bytes[self._position(index)]

    def __setitem__(self, index: int | str, value: int) -> None:
        self._bytes[self._position(index)] = value & 0xFF

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registers):
            return NotImplemented
        return self._bytes == other._bytes

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value:#04x}" for name, value in zip(_NAMES, self._bytes))
        return f"Registers({fields})"

    def __str__(self) -> str:
        return (
            f"registers = ( AF: {self.af():#06x} BC: {self.bc():#06x} "
            f"DE: {self.de():#06x} HL: {self.hl():#06x} )"
        )