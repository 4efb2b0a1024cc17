# pocketgb

Building blocks of an emulator for the original monochrome handheld console.
It is a plain Python library with no third-party dependencies.

## What is in it

- `pocketgb.registers.Registers`: the CPU register file. Single registers are
  reached by index (`0`-`7`, in the order B, C, D, E, H, L, F, A) or by letter
  (`regs["a"]`). The 16-bit pairs come from `bc()`, `de()`, `hl()` and `af()`
  and are written with `set_bc()` and the like or `set_u16_at()`. The flags are
  read with `z()`, `n()`, `h()` and `cy()` and written with `set_flags()`.
  `Registers.after_boot()` gives the values the boot ROM leaves behind.
- `pocketgb.mbc`: cartridge bank controllers `NoMbc` and `Mbc1`.
  `create_mbc(cartridge_type, rom_bank_count, ram_bank_count)` builds one from
  the cartridge header, and `ram_bank_count_from_header(code)` decodes header
  byte 0x149. An unsupported cartridge type or RAM size raises
  `CartridgeError`.
- `pocketgb.io_registers`: the `Io` enumeration of I/O register addresses
  (with `Io.from_name()`, which ignores case) and the `OamCorruption` kinds.
- `pocketgb.memory_map.MemoryMap`: the 64 KiB address space, covering ROM
  banks, VRAM, external RAM, work RAM, echo RAM, OAM, I/O ports, high RAM and
  IE.
  - `get` and `set` give unrestricted access.
  - `cpu_get` and `cpu_set` apply what a running CPU sees: VRAM and OAM are
    locked in the matching PPU modes, DMA is started by writing `Io.DMA`, only
    high RAM is reachable during DMA, and any write to DIV resets it.
  - CPU writes also update `memory_watches` and `triggered_watch`, and trigger
    the OAM corruption bug.
  - `load_rom`/`load_rom_bytes` load a cartridge image, and `load_boot_rom`
    maps a boot ROM over the start of memory.
  - An optional `sync_hook`, called before each CPU access once `open_sync()`
    has been called, lets other parts catch up with the CPU.
- `pocketgb.pixel_fifo`, `pocketgb.pixel_fetcher`, `pocketgb.ppu`: a
  dot-stepped pixel pipeline. It covers background, window and sprite
  fetching; the mode state machine (`Mode`: OAM search, pixel transfer, HBlank,
  VBlank); LY/LYC coincidence; and the STAT and VBlank interrupt requests.
  `Ppu.screen_buffer` holds 160×144 colour values taken from
  `Ppu.color_shades`.
- `pocketgb.peripherals`: `Peripherals` steps the joypad, the TIMA/TMA/TAC
  timer, the DIV counter and the PPU, four base clock cycles at a time.
  `JoypadKeys` is a flag set of the eight buttons.
- `pocketgb.keyboard_map.KeyboardMap`: turns pressed host key names into
  `JoypadKeys`, with default bindings and rebinding.
- `pocketgb.memory_view`: hex dumps of the address space, through
  `format_memory_line`, `dump_memory`, `hex_digits` and `round_to_row`.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Example

```python
from pocketgb.io_registers import Io
from pocketgb.memory_map import MemoryMap
from pocketgb.peripherals import JoypadKeys, Peripherals
from pocketgb.ppu import Ppu

ppu = Ppu()
peripherals = Peripherals(ppu)
memory = MemoryMap.after_boot(None)
memory.load_rom("game.gb")

peripherals.update_joypad_keys(JoypadKeys.START | JoypadKeys.BUTTON_A)

# Advance joypad, timer, divider and PPU by one 4-cycle step.
peripherals.sync(memory)
print(hex(memory.get_io(Io.LY)), ppu.mode())
```

To let the peripherals keep pace with CPU memory accesses, use `sync` as the
memory map's hook:

```python
memory.sync_hook = lambda: peripherals.sync(memory)
memory.open_sync()
```

To write a hex dump of the whole address space:

```python
from pocketgb.memory_view import dump_memory

dump_memory("memory_dump.txt", memory)
```

Each line holds the address, sixteen bytes in hex and their printable
characters. Characters that cannot be printed are shown as `.`.

## What it does not do

- There is no CPU and no instruction decoder, so the package cannot run a
  cartridge by itself. The caller drives `Peripherals` and the `MemoryMap`
  and sets `Peripherals.stopped` when the CPU stops.
- There is no sound, and no cartridge controller other than none or MBC1.
- There is no command, window or debugger. Frames are left in
  `Ppu.screen_buffer` for the caller to display.