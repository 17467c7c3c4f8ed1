# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

純粋な状態遷移エンジンであり、スレッドやタイミングを意識しません。
サイクルのペース配分とタイマの60Hz駆動はSchedulerが担当します。
"""
import random
from typing import Dict, List, Optional, Tuple

from retro_chip8.common.types import RegisterLayoutInfo, RegisterInfo
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.display import FrameBuffer
from retro_chip8.arch.chip8.state import (
    Chip8CpuState, FONT_SET, FONT_START, MAX_PROGRAM_SIZE, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS, PROGRAM_START,
)
from retro_chip8.arch.chip8.instructions import ExecutionContext, decode_opcode, execute_instruction
from retro_chip8.arch.chip8 import disassembler

# @intent:responsibility 0x000-0xFFFの4KiBアドレス空間を持つバスを生成します。
def create_bus() -> Bus:
    return Bus(MEMORY_SIZE)

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    メモリ(Bus)、レジスタ(Chip8CpuState)、フレームバッファ、キーボード、乱数源を所有します。
    """
    # @intent:pre-condition busは4KiB(0x000-0xFFF)のアドレス空間を持つ必要があります。
    def __init__(self, bus: Optional[Bus] = None, display: Optional[FrameBuffer] = None, seed: Optional[int] = None):
        self._display = display if display is not None else FrameBuffer()
        self._keyboard: List[bool] = [False] * NUM_KEYS
        self._seed = seed
        self._rng = random.Random(seed)
        super().__init__(bus if bus is not None else create_bus())
        self.initialize()

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility マシン全体を起動直後の状態に戻します。
    # @intent:post-condition メモリ・レジスタ・スタック・キーボード・タイマ・画面はゼロ、
    #                        0x000にフォントセット、PC=0x200。何度呼んでも同じ結果になる。
    def initialize(self) -> None:
        """
        マシン状態を初期化します。実行中のSchedulerは呼び出し側が先に停止しておく必要があります。
        """
        self._bus.clear()
        for offset, value in enumerate(FONT_SET):
            self._bus.load(FONT_START + offset, value)
        self.reset()
        self._keyboard[:] = [False] * NUM_KEYS
        self._display.reset()
        self._rng.seed(self._seed)

    # @intent:responsibility プログラムイメージを0x200からロードします。
    # @intent:rationale サイズ検査の前に必ず初期化する。大きすぎるROMでも既存の状態は破棄される。
    def load_program(self, data: bytes) -> None:
        """
        マシンを初期化してから、dataを0x200以降にコピーします。

        Raises:
            ValueError: dataが利用可能なメモリ (3584バイト) を超える場合。
        """
        self.initialize()
        if len(data) > MAX_PROGRAM_SIZE:
            raise ValueError(
                f"ROM too large: {len(data)} bytes (maximum {MAX_PROGRAM_SIZE} bytes)."
            )
        for offset, value in enumerate(data):
            self._bus.load(PROGRAM_START + offset, value)

    # @intent:responsibility PCから2バイトをビッグエンディアンで読み、オペコードレジスタに保持します。
    # @intent:post-condition PCが0xFFF以上の場合、BusがIndexErrorを送出する（致命的フォルト）。
    def _fetch(self) -> int:
        pc = self._state.pc
        opcode = (self._bus.read(pc) << 8) | self._bus.read(pc + 1)
        self._state.opcode = opcode
        return opcode

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    # @intent:rationale CHIP-8では各命令が自分でPCを動かすため、実行前のPC更新は行わない。
    def _update_pc(self, operation: Operation) -> None:
        pass

    def _execute(self, operation: Operation) -> None:
        ctx = ExecutionContext(
            state=self._state,
            bus=self._bus,
            display=self._display,
            keyboard=self._keyboard,
            rng=self._rng,
        )
        execute_instruction(operation, ctx)

    # @intent:responsibility 60Hzのタイマティックを1回分適用します。
    # @intent:return サウンドタイマが1から0に変化した（発音すべき）場合にTrue。
    def tick_timers(self) -> bool:
        state = self._state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        beep = False
        if state.sound_timer > 0:
            beep = state.sound_timer == 1
            state.sound_timer -= 1
        return beep

    # --- Keyboard (入力コラボレータ向け) ---

    # @intent:responsibility 1キー分の押下状態を更新します。
    def set_key(self, key: int, pressed: bool) -> None:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index {key} out of range 0x0-0xF.")
        self._keyboard[key] = pressed

    def get_keyboard(self) -> Tuple[bool, ...]:
        return tuple(self._keyboard)

    # --- Display (表示コラボレータ向け) ---

    def get_display(self) -> FrameBuffer:
        return self._display

    @property
    def draw_flag(self) -> bool:
        return self._display.draw_flag

    def clear_draw_flag(self) -> None:
        self._display.clear_draw_flag()

    # --- Inspector ---

    def get_register_map(self, state: Optional[Chip8CpuState] = None) -> Dict[str, int]:
        s = state if state is not None else self._state
        reg_map = {
            "OP": s.opcode, "PC": s.pc, "I": s.i, "SP": s.sp,
            "DT": s.delay_timer, "ST": s.sound_timer,
        }
        for index in range(NUM_REGISTERS):
            reg_map[f"V{index:X}"] = s.v[index]
        return reg_map

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [
            RegisterLayoutInfo("Pointers", [
                RegisterInfo("OP", 16), RegisterInfo("PC", 12), RegisterInfo("I", 12), RegisterInfo("SP", 8)
            ]),
            RegisterLayoutInfo("Timers", [
                RegisterInfo("DT", 8), RegisterInfo("ST", 8)
            ]),
            RegisterLayoutInfo("V Registers", [
                RegisterInfo(f"V{index:X}", 8) for index in range(NUM_REGISTERS)
            ]),
        ]

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._bus, start_addr, length)

    # @intent:responsibility 指定範囲のメモリをログなしで読み出します（インスペクタ、テスト用）。
    def peek_memory(self, start_addr: int, length: int) -> bytes:
        return self._bus.dump(start_addr, length)
