# tests/core/test_cpu.py
"""
retro_chip8.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict, List, Optional, Tuple

from retro_chip8.core.state import CpuState
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus, BusAccessType
from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo

# @intent:test_suite 抽象CPUのテンプレートメソッド（step）と状態管理を検証します。

class FakeCpu(AbstractCpu):
    """1バイト命令、実行時に0x20へ0xFFを書き込むだけのテスト用CPU。"""
    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0x10, sp=0)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="NOP", operands=["A"], length=1)

    def _execute(self, operation: Operation) -> None:
        self._bus.write(0x20, 0xFF)

    def get_register_map(self, state: Optional[CpuState] = None) -> Dict[str, int]:
        s = state if state is not None else self._state
        return {"PC": s.pc, "SP": s.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 8)])]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return [(start_addr + i, "00", "NOP") for i in range(length)]


@pytest.fixture
def cpu():
    return FakeCpu(Bus(0x100))

# @intent:test_case_step stepがPCを命令長だけ進め、Snapshotにバスアクティビティを含めることを検証します。
def test_step_produces_snapshot(cpu):
    snapshot = cpu.step()
    assert snapshot.state.pc == 0x11
    assert snapshot.metadata.cycle_count == 1
    assert snapshot.metadata.symbol_info == "NOP A"
    assert snapshot.accessed_addresses(BusAccessType.READ) == [0x10]
    assert snapshot.accessed_addresses(BusAccessType.WRITE) == [0x20]

# @intent:test_case_isolation Snapshotの状態は以後の実行から切り離されたコピーであることを検証します。
def test_snapshot_state_is_copy(cpu):
    snapshot = cpu.step()
    cpu.step()
    assert snapshot.state.pc == 0x11
    assert cpu.get_state().pc == 0x12
    assert snapshot.state is not cpu.get_state()

# @intent:test_case_log 前サイクル以前のログがSnapshotに混入しないことを検証します。
def test_stale_log_discarded(cpu):
    cpu.get_bus().write(0x50, 1)
    snapshot = cpu.step()
    assert 0x50 not in snapshot.accessed_addresses(BusAccessType.WRITE)

# @intent:test_case_reset resetで状態とサイクル数が初期化されることを検証します。
def test_reset(cpu):
    cpu.step()
    cpu.step()
    assert cpu.get_cycle_count() == 2
    cpu.reset()
    assert cpu.get_state().pc == 0x10
    assert cpu.get_cycle_count() == 0
