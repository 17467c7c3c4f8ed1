# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の平坦な4KiBアドレス空間を提供します。
命令実行中の読み書きはサイクル単位で記録され、Snapshotとデバッガから参照されます。
ロードやインスペクタからの参照は記録されない経路（load/peek）を使います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

# @intent:responsibility バスアクセスの種別。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 1回分のバスアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType

# @intent:responsibility 0番地から始まる単一のRAMをアドレス空間として公開し、アクセスを記録します。
# @intent:rationale 範囲外アドレスはIndexErrorとし、CPU側ではこれを致命的フォルトとして扱う。
class Bus:
    """
    CHIP-8のメモリバス。

    フォント領域(0x000-0x04F)とプログラム領域(0x200-)を含む全メモリを1つのbytearrayで保持します。
    """
    def __init__(self, size: int = 0x1000):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size
        self._activity_log: List[BusAccess] = []

    def get_size(self) -> int:
        return self._size

    def _check_address(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise IndexError(f"Address {address:#06x} outside the {self._size:#06x}-byte address space.")

    # @intent:responsibility 1バイト読み出し、ログに記録します。
    def read(self, address: int) -> int:
        self._check_address(address)
        data = self._memory[address]
        self._activity_log.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # @intent:responsibility 1バイト書き込み、ログに記録します。
    def write(self, address: int, data: int) -> None:
        self.load(address, data)
        self._activity_log.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility ログに残さずに読み出します（インスペクタ、逆アセンブラ用）。
    def peek(self, address: int) -> int:
        self._check_address(address)
        return self._memory[address]

    # @intent:responsibility ログに残さずに書き込みます（フォント・ROMのロード用）。
    def load(self, address: int, data: int) -> None:
        self._check_address(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data

    # @intent:responsibility 指定範囲をログに残さずにまとめて取り出します。
    def dump(self, start: int, length: int) -> bytes:
        if length > 0:
            self._check_address(start)
            self._check_address(start + length - 1)
        return bytes(self._memory[start:start + length])

    # @intent:responsibility 記録されたアクセスを取り出し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._activity_log
        self._activity_log = []
        return log

    # @intent:responsibility 全メモリをゼロクリアし、ログも破棄します。
    def clear(self) -> None:
        self._memory[:] = bytes(self._size)
        self._activity_log = []
