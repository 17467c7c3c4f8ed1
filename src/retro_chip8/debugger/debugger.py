# retro_chip8/debugger/debugger.py
"""
ブレークポイント評価モジュール。

Schedulerは各サイクルの直後にSnapshotを渡し、いずれかの条件が成立していれば一時停止します。
条件は実行済みのサイクルに対して評価されるため、ヒットした時点で原因の命令は完了しています。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from retro_chip8.core.snapshot import Snapshot
from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType

# @intent:responsibility ブレークポイントの条件種別。値は設定ファイル上の表記と一致します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"
    MEMORY_READ = "MEMORY_READ"
    MEMORY_WRITE = "MEMORY_WRITE"
    REGISTER_VALUE = "REGISTER_VALUE"
    REGISTER_CHANGE = "REGISTER_CHANGE"

# @intent:responsibility 1つのブレークポイント条件。種別ごとに使うフィールドが異なります。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    PC_MATCH: value / MEMORY_READ, MEMORY_WRITE: address /
    REGISTER_VALUE: register_name と value / REGISTER_CHANGE: register_name
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None
    address: Optional[int] = None
    register_name: Optional[str] = None
    enabled: bool = True

_REGISTER_ALIASES = {"DT": "delay_timer", "ST": "sound_timer", "OP": "opcode"}

# @intent:utility_function インスペクタ上の表示名（"V3", "DT", "pc" など）で状態からレジスタ値を引きます。
# @intent:return 該当するレジスタがなければNone。
def read_register(state: CpuState, name: str) -> Optional[int]:
    upper = name.upper()
    if len(upper) == 2 and upper[0] == "V" and hasattr(state, "v"):
        try:
            return state.v[int(upper[1], 16)]
        except ValueError:
            return None
    return getattr(state, _REGISTER_ALIASES.get(upper, name.lower()), None)


class Debugger:
    def __init__(self):
        self._breakpoints: List[BreakpointCondition] = []
        self._previous_state: Optional[CpuState] = None
        self._evaluators: Dict[BreakpointConditionType, Callable[[BreakpointCondition, Snapshot], bool]] = {
            BreakpointConditionType.PC_MATCH: self._pc_matches,
            BreakpointConditionType.MEMORY_READ: self._memory_read,
            BreakpointConditionType.MEMORY_WRITE: self._memory_written,
            BreakpointConditionType.REGISTER_VALUE: self._register_equals,
            BreakpointConditionType.REGISTER_CHANGE: self._register_changed,
        }

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    # @intent:responsibility 有効なブレークポイントのいずれかがこのSnapshotで成立するかを判定します。
    # @intent:post-condition REGISTER_CHANGEの比較用に、このSnapshotの状態を前回値として保持する。
    def check(self, snapshot: Snapshot) -> bool:
        hit = any(
            self._evaluators[bp.condition_type](bp, snapshot)
            for bp in self._breakpoints if bp.enabled
        )
        self._previous_state = snapshot.state
        return hit

    # PC_MATCHは実行後のPC、つまり次に実行される命令のアドレスと比較する
    def _pc_matches(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        return snapshot.state.pc == bp.value

    def _memory_read(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        return bp.address in snapshot.accessed_addresses(BusAccessType.READ)

    def _memory_written(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        return bp.address in snapshot.accessed_addresses(BusAccessType.WRITE)

    def _register_equals(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        return bool(bp.register_name) and read_register(snapshot.state, bp.register_name) == bp.value

    def _register_changed(self, bp: BreakpointCondition, snapshot: Snapshot) -> bool:
        if not bp.register_name or self._previous_state is None:
            return False
        before = read_register(self._previous_state, bp.register_name)
        return before is not None and before != read_register(snapshot.state, bp.register_name)
