# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
import warnings

from retro_chip8.core.snapshot import Operation
from .base import ExecutionContext, split_fields, advance
from .maps import lookup

# @intent:responsibility CHIP-8のオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    16ビットのオペコードをデコードし、Operationオブジェクトを返します。
    未定義のオペコードはニーモニック"UNKNOWN"のOperationになります。
    """
    fields = split_fields(opcode)
    entry = lookup(opcode)
    if entry is None:
        return Operation(opcode_hex=f"{opcode:04X}", mnemonic="UNKNOWN", operands=[f"${opcode:04X}"])
    operands = [fmt.format(**fields._asdict()) for fmt in entry.operand_format]
    return Operation(
        opcode_hex=f"{opcode:04X}",
        mnemonic=entry.mnemonic,
        operands=operands,
        operand_bytes=list(fields),
    )

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:rationale 未定義のオペコードは診断を出したうえでNOPとして扱い、PCを2進める（不正なROMでも停止しない）。
def execute_instruction(operation: Operation, ctx: ExecutionContext) -> None:
    """
    デコードされた命令を実行し、マシン状態を変更します。
    """
    opcode = int(operation.opcode_hex, 16)
    entry = lookup(opcode)
    if entry is None:
        warnings.warn(f"Unknown opcode {opcode:#06x} at PC {ctx.state.pc:#05x}", RuntimeWarning)
        advance(ctx.state)
        return
    entry.execute(ctx, split_fields(opcode))
