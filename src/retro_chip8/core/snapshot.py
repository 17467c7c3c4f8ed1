# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1サイクル実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
UI（インスペクタ）への情報提供と、ブレークポイント判定に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccessType, BusAccess


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True)
class Operation:
    """
    デコードされた命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A2F0"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$2F0"]
    operand_bytes: List[int] = field(default_factory=list) # デコード済みフィールド (X, Y, N, KK, NNN)
    cycle_count: int = 1 # CHIP-8では全命令を1サイクルとして数える
    length: int = 2 # 命令のバイト長

# @intent:responsibility サイクル単位の付帯情報（累計サイクル数と表示用テキスト）。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、表示用テキスト）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "DRW V0, V1, 5"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    stateはスケジューラスレッドと共有されないコピーでなければなりません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)

    # @intent:responsibility 指定種別のアクセスがあったアドレスを返します。
    def accessed_addresses(self, access_type: BusAccessType) -> List[int]:
        return [a.address for a in self.bus_activity if a.access_type == access_type]
