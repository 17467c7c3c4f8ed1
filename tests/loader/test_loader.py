# tests/loader/test_loader.py
"""
RomLoaderの単体テスト。
"""
import pytest

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.loader.loader import RomLoader

# @intent:test_suite 生バイナリROMの読み込みとエラー処理を検証します。

# @intent:test_case_load ROMファイルの内容が0x200以降に配置されることを検証します。
def test_load_rom(tmp_path):
    rom = tmp_path / "test.ch8"
    rom.write_bytes(bytes([0x00, 0xE0, 0x12, 0x00]))
    cpu = Chip8Cpu()
    assert RomLoader().load_rom(str(rom), cpu) == 4
    assert list(cpu.peek_memory(0x200, 4)) == [0x00, 0xE0, 0x12, 0x00]
    assert cpu.get_state().pc == 0x200

# @intent:test_case_too_large 3584バイトを超えるROMはValueErrorになることを検証します。
def test_load_rom_too_large(tmp_path):
    rom = tmp_path / "big.ch8"
    rom.write_bytes(bytes(3585))
    with pytest.raises(ValueError, match="ROM too large"):
        RomLoader().load_rom(str(rom), Chip8Cpu())

# @intent:test_case_missing 存在しないファイルはOSErrorとなり、マシン状態は変更されないことを検証します。
def test_load_rom_missing_file(tmp_path):
    cpu = Chip8Cpu()
    cpu.get_state().v[0] = 0x55
    with pytest.raises(OSError):
        RomLoader().load_rom(str(tmp_path / "missing.ch8"), cpu)
    assert cpu.get_state().v[0] == 0x55
