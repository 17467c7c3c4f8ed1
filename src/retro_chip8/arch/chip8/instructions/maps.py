# src/retro_chip8/arch/chip8/instructions/maps.py
"""
CHIP-8 命令マップ。

(上位ニブル, 副キー) をキーとするフラットなディスパッチテーブルで、
35種類の命令それぞれを1エントリとして明示します。
"""
from typing import Callable, Dict, List, NamedTuple, Optional, Tuple

from retro_chip8.arch.chip8.instructions import alu, control, draw, load
from retro_chip8.arch.chip8.instructions.base import ExecutionContext, Fields

# Execution Function Type
ExecFunc = Callable[[ExecutionContext, Fields], None]

# Dispatch Key: (上位ニブル, 副キー)。副キーを使わないグループはNone。
DispatchKey = Tuple[int, Optional[int]]

# @intent:data_structure 命令テーブルの1エントリ。patternは命令の識別タグ（例: "8XY4"）。
class OpcodeEntry(NamedTuple):
    pattern: str
    mnemonic: str
    operand_format: List[str]
    execute: ExecFunc

OPCODE_MAP: Dict[DispatchKey, OpcodeEntry] = {
    # --- 0x0 group ---
    (0x0, 0x0E0): OpcodeEntry("00E0", "CLS", [], draw.cls),
    (0x0, 0x0EE): OpcodeEntry("00EE", "RET", [], control.ret),
    (0x0, None): OpcodeEntry("0NNN", "SYS", ["${nnn:03X}"], control.sys_call),

    # --- Jump / Call / Skip ---
    (0x1, None): OpcodeEntry("1NNN", "JP", ["${nnn:03X}"], control.jp),
    (0x2, None): OpcodeEntry("2NNN", "CALL", ["${nnn:03X}"], control.call),
    (0x3, None): OpcodeEntry("3XKK", "SE", ["V{x:X}", "${kk:02X}"], control.se_vx_byte),
    (0x4, None): OpcodeEntry("4XKK", "SNE", ["V{x:X}", "${kk:02X}"], control.sne_vx_byte),
    (0x5, None): OpcodeEntry("5XY0", "SE", ["V{x:X}", "V{y:X}"], control.se_vx_vy),

    # --- Immediate ---
    (0x6, None): OpcodeEntry("6XKK", "LD", ["V{x:X}", "${kk:02X}"], load.ld_vx_byte),
    (0x7, None): OpcodeEntry("7XKK", "ADD", ["V{x:X}", "${kk:02X}"], alu.add_vx_byte),

    # --- 0x8 group (ALU) ---
    (0x8, 0x0): OpcodeEntry("8XY0", "LD", ["V{x:X}", "V{y:X}"], load.ld_vx_vy),
    (0x8, 0x1): OpcodeEntry("8XY1", "OR", ["V{x:X}", "V{y:X}"], alu.or_vx_vy),
    (0x8, 0x2): OpcodeEntry("8XY2", "AND", ["V{x:X}", "V{y:X}"], alu.and_vx_vy),
    (0x8, 0x3): OpcodeEntry("8XY3", "XOR", ["V{x:X}", "V{y:X}"], alu.xor_vx_vy),
    (0x8, 0x4): OpcodeEntry("8XY4", "ADD", ["V{x:X}", "V{y:X}"], alu.add_vx_vy),
    (0x8, 0x5): OpcodeEntry("8XY5", "SUB", ["V{x:X}", "V{y:X}"], alu.sub_vx_vy),
    (0x8, 0x6): OpcodeEntry("8XY6", "SHR", ["V{x:X}"], alu.shr_vx),
    (0x8, 0x7): OpcodeEntry("8XY7", "SUBN", ["V{x:X}", "V{y:X}"], alu.subn_vx_vy),
    (0x8, 0xE): OpcodeEntry("8XYE", "SHL", ["V{x:X}"], alu.shl_vx),

    (0x9, None): OpcodeEntry("9XY0", "SNE", ["V{x:X}", "V{y:X}"], control.sne_vx_vy),
    (0xA, None): OpcodeEntry("ANNN", "LD", ["I", "${nnn:03X}"], load.ld_i_addr),
    (0xB, None): OpcodeEntry("BNNN", "JP", ["V0", "${nnn:03X}"], control.jp_v0),
    (0xC, None): OpcodeEntry("CXKK", "RND", ["V{x:X}", "${kk:02X}"], alu.rnd_vx_byte),
    (0xD, None): OpcodeEntry("DXYN", "DRW", ["V{x:X}", "V{y:X}", "{n}"], draw.drw),

    # --- 0xE group (Keyboard skip) ---
    (0xE, 0x9E): OpcodeEntry("EX9E", "SKP", ["V{x:X}"], control.skp),
    (0xE, 0xA1): OpcodeEntry("EXA1", "SKNP", ["V{x:X}"], control.sknp),

    # --- 0xF group ---
    (0xF, 0x07): OpcodeEntry("FX07", "LD", ["V{x:X}", "DT"], load.ld_vx_dt),
    (0xF, 0x0A): OpcodeEntry("FX0A", "LD", ["V{x:X}", "K"], load.ld_vx_key),
    (0xF, 0x15): OpcodeEntry("FX15", "LD", ["DT", "V{x:X}"], load.ld_dt_vx),
    (0xF, 0x18): OpcodeEntry("FX18", "LD", ["ST", "V{x:X}"], load.ld_st_vx),
    (0xF, 0x1E): OpcodeEntry("FX1E", "ADD", ["I", "V{x:X}"], alu.add_i_vx),
    (0xF, 0x29): OpcodeEntry("FX29", "LD", ["F", "V{x:X}"], load.ld_f_vx),
    (0xF, 0x33): OpcodeEntry("FX33", "LD", ["B", "V{x:X}"], load.ld_bcd_vx),
    (0xF, 0x55): OpcodeEntry("FX55", "LD", ["[I]", "V{x:X}"], load.ld_mem_regs),
    (0xF, 0x65): OpcodeEntry("FX65", "LD", ["V{x:X}", "[I]"], load.ld_regs_mem),
}

# @intent:responsibility オペコードからディスパッチキーを算出します。
def dispatch_key(opcode: int) -> DispatchKey:
    group = (opcode & 0xF000) >> 12
    if group == 0x0:
        # 00E0/00EE以外の0NNNはSYSとして扱う
        sub = opcode & 0x0FFF
        return (group, sub) if sub in (0x0E0, 0x0EE) else (group, None)
    if group == 0x8:
        return (group, opcode & 0x000F)
    if group in (0xE, 0xF):
        return (group, opcode & 0x00FF)
    return (group, None)

# @intent:responsibility オペコードに対応するエントリを返します。未定義ならNone。
def lookup(opcode: int) -> Optional[OpcodeEntry]:
    return OPCODE_MAP.get(dispatch_key(opcode))
