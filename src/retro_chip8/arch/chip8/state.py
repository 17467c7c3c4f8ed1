# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義とメモリマップ定数。
"""
from dataclasses import dataclass, field
from typing import List
from retro_chip8.core.state import CpuState

# @intent:constant CHIP-8のメモリマップ。
MEMORY_SIZE = 0x1000        # 4KiB
FONT_START = 0x000          # フォントセット (16グリフ x 5バイト) は 0x000-0x04F
PROGRAM_START = 0x200       # プログラムのロード開始アドレス
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START  # 3584バイト

NUM_REGISTERS = 16
STACK_DEPTH = 16
NUM_KEYS = 16

VF = 0xF  # キャリー/ボロー/衝突フラグとして上書きされるレジスタ

# @intent:constant 16進フォントセット。各グリフは4x5ピクセルで、上位4ビットのみを使用します。
FONT_SET = (
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
)
FONT_GLYPH_SIZE = 5

# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC, SP, スタック, タイマ）の状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    spはスタック上の次の空きスロットのインデックス（0-16）です。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)  # V0-VF
    i: int = 0x000                 # Index Register (12bit)
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    opcode: int = 0x0000           # 直近にフェッチした命令

    # @intent:accessor キャリー/ボロー/衝突フラグ(VF)へのアクセスを提供します。
    @property
    def flag(self) -> int:
        return self.v[VF]

    @flag.setter
    def flag(self, value: int) -> None:
        self.v[VF] = 1 if value else 0
