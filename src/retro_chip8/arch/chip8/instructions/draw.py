# src/retro_chip8/arch/chip8/instructions/draw.py
"""
画面描画命令 (CLS, DRW)。実際の合成処理はFrameBufferに委譲します。
"""
from retro_chip8.arch.chip8.instructions.base import ExecutionContext, Fields, advance, check_memory_range

# @intent:responsibility 00E0 CLS
def cls(ctx: ExecutionContext, f: Fields) -> None:
    ctx.display.clear()
    ctx.display.set_draw_flag()
    advance(ctx.state)

# @intent:responsibility DXYN DRW Vx, Vy, nibble: Iから読んだNバイトのスプライトを(Vx, Vy)に描画します。
# @intent:post-condition VFは衝突があれば1、なければ0。描画フラグは常に立つ。
def drw(ctx: ExecutionContext, f: Fields) -> None:
    i = ctx.state.i
    check_memory_range(i, f.n)
    rows = [ctx.bus.read(i + row) for row in range(f.n)]
    collision = ctx.display.draw_sprite(ctx.state.v[f.x], ctx.state.v[f.y], rows)
    ctx.state.flag = collision
    ctx.display.set_draw_flag()
    advance(ctx.state)
