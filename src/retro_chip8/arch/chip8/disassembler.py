# src/retro_chip8/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
Instruction Layerのデコードロジックを再利用し、読み出しにはpeek（ログなし）を用いるため、
バスアクセスログを汚しません。
"""
from typing import List, Tuple
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.instructions import decode_opcode
from retro_chip8.arch.chip8.state import MEMORY_SIZE

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(bus: Bus, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを2バイト単位で逆アセンブルします。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    end_addr = min(start_addr + length, MEMORY_SIZE - 1)
    addr = start_addr
    while addr < end_addr:
        opcode = (bus.peek(addr) << 8) | bus.peek(addr + 1)
        op = decode_opcode(opcode)
        text = op.mnemonic
        if op.operands:
            text += " " + ", ".join(op.operands)
        result.append((addr, op.opcode_hex, text))
        addr += 2
    return result
