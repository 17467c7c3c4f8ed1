# tests/test_chip8_integration.py
"""
設定からシステムを構築し、小さなテストROMを実行して
命令トレースと最終状態が参照値と一致することを確認する統合テスト。
"""
import pytest

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import EmulatorConfig
from retro_chip8.loader.loader import RomLoader

# 0x200: LD V0, 5 / LD V1, 3 / CALL 0x210 / LD I, 0x300 / LD B, V2 / JP 0x20A
# 0x210: ADD V0, V1 / ADD V2, V0 / ADD V2, V2 / RET
TRACE_ROM = bytes([
    0x60, 0x05, 0x61, 0x03, 0x22, 0x10, 0xA3, 0x00, 0xF2, 0x33, 0x12, 0x0A,
    0x00, 0x00, 0x00, 0x00,
    0x80, 0x14, 0x82, 0x04, 0x82, 0x24, 0x00, 0xEE,
])

EXPECTED_TRACE = [
    (0x200, "LD V0, $05"),
    (0x202, "LD V1, $03"),
    (0x204, "CALL $210"),
    (0x210, "ADD V0, V1"),
    (0x212, "ADD V2, V0"),
    (0x214, "ADD V2, V2"),
    (0x216, "RET"),
    (0x206, "LD I, $300"),
    (0x208, "LD B, V2"),
    (0x20A, "JP $20A"),
    (0x20A, "JP $20A"),
]

@pytest.fixture
def system(tmp_path):
    rom = tmp_path / "trace.ch8"
    rom.write_bytes(TRACE_ROM)
    cpu, scheduler = SystemBuilder().build_system(EmulatorConfig(clock_frequency=60_000, seed=0))
    RomLoader().load_rom(str(rom), cpu)
    return cpu, scheduler

# @intent:test_case_trace 各サイクルで実行された命令が参照トレースと一致することを検証します。
def test_reference_trace(system):
    cpu, scheduler = system
    trace = []
    for _ in range(len(EXPECTED_TRACE)):
        pc = cpu.get_state().pc
        snapshot = scheduler.run_cycle()
        trace.append((pc, snapshot.metadata.symbol_info))
    assert trace == EXPECTED_TRACE

    state = cpu.get_state()
    assert state.v[0] == 8
    assert state.v[1] == 3
    assert state.v[2] == 16
    assert state.v[0xF] == 0
    assert state.i == 0x300
    assert state.sp == 0
    assert list(cpu.peek_memory(0x300, 3)) == [0, 1, 6]
    assert scheduler.get_last_snapshot().metadata.cycle_count == len(EXPECTED_TRACE)
