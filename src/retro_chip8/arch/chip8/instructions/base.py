# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
import random
from dataclasses import dataclass
from typing import List, NamedTuple

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.display import FrameBuffer
from retro_chip8.arch.chip8.state import Chip8CpuState, MEMORY_SIZE, STACK_DEPTH

# @intent:data_structure オペコードから切り出した各フィールド。
class Fields(NamedTuple):
    x: int    # 0x0F00
    y: int    # 0x00F0
    n: int    # 0x000F
    kk: int   # 0x00FF
    nnn: int  # 0x0FFF

# @intent:responsibility 命令ハンドラが読み書きするマシン状態一式を束ねます。
# @intent:rationale モジュールレベルのグローバル状態を持たず、所有者（Chip8Cpu）から明示的に渡すための構造体。
@dataclass
class ExecutionContext:
    state: Chip8CpuState
    bus: Bus
    display: FrameBuffer
    keyboard: List[bool]
    rng: random.Random

# @intent:utility_function 16ビットオペコードをフィールドに分解します。
def split_fields(opcode: int) -> Fields:
    return Fields(
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        n=opcode & 0x000F,
        kk=opcode & 0x00FF,
        nnn=opcode & 0x0FFF,
    )

# @intent:utility_function 次の命令へ進めます。skipが真なら次の命令を飛ばします。
def advance(state: Chip8CpuState, skip: bool = False) -> None:
    state.pc += 4 if skip else 2

# @intent:utility_function Iを起点とするメモリ範囲が4KiBに収まることを検証します。
# @intent:rationale 範囲外アクセスは致命的フォルトとして扱い、状態を変更する前に検出する。
def check_memory_range(start: int, count: int) -> None:
    if start < 0 or start + count > MEMORY_SIZE:
        raise IndexError(f"Memory access {start:#05x}+{count} exceeds {MEMORY_SIZE:#06x} bytes.")

# @intent:utility_function 戻りアドレスをスタックに積みます。
def push(state: Chip8CpuState, address: int) -> None:
    if state.sp >= STACK_DEPTH:
        raise IndexError(f"Stack overflow at PC {state.pc:#05x}: {STACK_DEPTH} nested calls already active.")
    state.stack[state.sp] = address
    state.sp += 1

# @intent:utility_function スタックから戻りアドレスを取り出します。
def pop(state: Chip8CpuState) -> int:
    if state.sp <= 0:
        raise IndexError(f"Stack underflow at PC {state.pc:#05x}: return without matching call.")
    state.sp -= 1
    return state.stack[state.sp]
