# retro_chip8/core/cpu.py
"""
Core Layer (命令サイクル)

1命令分の処理の流れ（フェッチ → デコード → PC更新 → 実行 → Snapshot）を固定し、
各段の中身をアーキテクチャ側のサブクラスに任せます。
スレッドや実時間は扱いません。ペース配分はscheduler層が行います。
"""
import copy
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.types import RegisterLayoutInfo
from retro_chip8.core.snapshot import Metadata, Operation, Snapshot
from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import Bus

# @intent:responsibility 命令サイクルのテンプレートと、インスペクタ向けの問い合わせインターフェースを定義します。
class AbstractCpu(ABC):
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        ...

    # @intent:responsibility レジスタを起動直後の値に戻し、サイクル数を0にします。メモリには触れません。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:rationale 実行スレッドが更新中の生オブジェクトを返す。別スレッドから読む場合はcopy_state()を使う。
    def get_state(self) -> CpuState:
        return self._state

    def copy_state(self) -> CpuState:
        return copy.deepcopy(self._state)

    def get_bus(self) -> Bus:
        return self._bus

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # --- 命令サイクルの各段 ---

    @abstractmethod
    def _fetch(self) -> int:
        ...

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        ...

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        ...

    # @intent:responsibility 実行前のPC更新。既定では命令長だけ進めます。
    def _update_pc(self, operation: Operation) -> None:
        self._state.pc += operation.length

    # @intent:responsibility 1命令を実行し、その結果のSnapshotを返します。
    # @intent:post-condition 途中で例外が送出された場合、Snapshotは作られずサイクル数も増えない。
    def step(self) -> Snapshot:
        """
        Snapshotのバスアクティビティには、このサイクルのフェッチと実行で発生したアクセスだけが含まれます。
        """
        self._bus.get_and_clear_activity_log()
        operation = self._decode(self._fetch())
        self._update_pc(operation)
        self._execute(operation)
        return self._create_snapshot(operation)

    def _create_snapshot(self, operation: Operation) -> Snapshot:
        self._cycle_count += operation.cycle_count
        text = operation.mnemonic
        if operation.operands:
            text = f"{text} {', '.join(operation.operands)}"
        return Snapshot(
            state=self.copy_state(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=text),
            bus_activity=self._bus.get_and_clear_activity_log(),
        )

    # --- インスペクタ向け ---

    @abstractmethod
    def get_register_map(self, state: Optional[CpuState] = None) -> Dict[str, int]:
        """
        レジスタ名から値への辞書を返します。stateを省略した場合は現在の状態を使います。
        """

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        ...

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        (アドレス, オペコードの16進表記, ニーモニック) のリストを返します。
        """
