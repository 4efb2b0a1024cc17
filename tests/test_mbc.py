import pytest

from pocketgb.mbc import (
    CartridgeError,
    Mbc1,
    NoMbc,
    create_mbc,
    ram_bank_count_from_header,
)


@pytest.mark.parametrize(
    "code, count",
    [(0x00, 0), (0x02, 1), (0x03, 4), (0x04, 16), (0x05, 8)],
)
def test_ram_bank_counts(code, count):
    assert ram_bank_count_from_header(code) == count


@pytest.mark.parametrize("code", [0x01, 0x06, 0xFF])
def test_invalid_ram_size(code):
    with pytest.raises(CartridgeError):
        ram_bank_count_from_header(code)


def test_cartridge_error_is_value_error():
    with pytest.raises(ValueError):
        ram_bank_count_from_header(0x01)


def test_no_mbc_is_fixed():
    mbc = NoMbc()
    mbc.write(0x2000, 0x05)
    mbc.write(0x0000, 0x00)
    assert mbc.rom_bank() == 1
    assert mbc.ram_bank() == 0


def test_mbc1_initial_state():
    mbc = Mbc1(32, 1)
    assert mbc.rom_bank() == 1
    assert mbc.ram_bank() is None


def test_mbc1_ram_enable_and_disable():
    mbc = Mbc1(32, 1)
    mbc.write(0x0000, 0x0A)
    assert mbc.ram_bank() == 0
    mbc.write(0x1FFF, 0x00)
    assert mbc.ram_bank() is None


def test_mbc1_ram_enable_uses_low_nibble_only():
    mbc = Mbc1(32, 1)
    mbc.write(0x0000, 0xFA)
    assert mbc.ram_bank() == 0


def test_mbc1_bank_zero_maps_to_one():
    mbc = Mbc1(32, 0)
    mbc.write(0x2000, 0x00)
    assert mbc.rom_bank() == 1


@pytest.mark.parametrize("bank", [1, 5, 0x1F])
def test_mbc1_selects_rom_bank(bank):
    mbc = Mbc1(32, 0)
    mbc.write(0x2000, bank)
    assert mbc.rom_bank() == bank


def test_mbc1_rom_bank_masked_to_bank_count():
    mbc = Mbc1(4, 0)
    mbc.write(0x3FFF, 0x07)
    assert mbc.rom_bank() == 3
    assert 0 <= mbc.rom_bank() < 4


def test_mbc1_secondary_bank_extends_rom_bank():
    mbc = Mbc1(64, 0)
    mbc.write(0x2000, 0x02)
    mbc.write(0x4000, 0x01)
    assert mbc.rom_bank() == 34


def test_mbc1_secondary_bank_ignored_for_small_roms():
    mbc = Mbc1(32, 0)
    mbc.write(0x2000, 0x02)
    mbc.write(0x4000, 0x01)
    assert mbc.rom_bank() == 2


def test_mbc1_mode_one_selects_ram_bank():
    mbc = Mbc1(64, 4)
    mbc.write(0x0000, 0x0A)
    mbc.write(0x4000, 0x02)
    mbc.write(0x6000, 0x01)
    assert mbc.ram_bank() == 2
    mbc.write(0x2000, 0x03)
    assert mbc.rom_bank() == 3


def test_mbc1_mode_one_with_large_ram_uses_bank_zero():
    mbc = Mbc1(64, 16)
    mbc.write(0x0000, 0x0A)
    mbc.write(0x4000, 0x02)
    mbc.write(0x6000, 0x01)
    assert mbc.ram_bank() == 0


def test_mbc1_ignores_writes_outside_rom_area():
    mbc = Mbc1(32, 1)
    mbc.write(0x8000, 0x0A)
    mbc.write(0xA000, 0x05)
    assert mbc.rom_bank() == 1
    assert mbc.ram_bank() is None


def test_create_no_mbc():
    mbc = create_mbc(0x00, 2, 0)
    assert isinstance(mbc, NoMbc)
    assert mbc.rom_bank() == 1


@pytest.mark.parametrize("cartridge_type", [0x01, 0x02, 0x03])
def test_create_mbc1(cartridge_type):
    mbc = create_mbc(cartridge_type, 32, 1)
    assert isinstance(mbc, Mbc1)
    mbc.write(0x2000, 0x05)
    assert mbc.rom_bank() == 5


@pytest.mark.parametrize("cartridge_type", [0x05, 0x13, 0x19])
def test_create_unsupported(cartridge_type):
    with pytest.raises(CartridgeError):
        create_mbc(cartridge_type, 32, 1)