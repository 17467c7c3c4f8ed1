# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア、タイマ、キー入力待ち命令の実装。
"""
from retro_chip8.arch.chip8.instructions.base import ExecutionContext, Fields, advance, check_memory_range
from retro_chip8.arch.chip8.state import FONT_START, FONT_GLYPH_SIZE

# --- Register Loads ---

# @intent:responsibility 6XKK LD Vx, byte
def ld_vx_byte(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] = f.kk
    advance(ctx.state)

# @intent:responsibility 8XY0 LD Vx, Vy
def ld_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] = ctx.state.v[f.y]
    advance(ctx.state)

# @intent:responsibility ANNN LD I, addr
def ld_i_addr(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.i = f.nnn
    advance(ctx.state)

# --- Timers ---

# @intent:responsibility FX07 LD Vx, DT
def ld_vx_dt(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] = ctx.state.delay_timer
    advance(ctx.state)

# @intent:responsibility FX15 LD DT, Vx
def ld_dt_vx(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.delay_timer = ctx.state.v[f.x]
    advance(ctx.state)

# @intent:responsibility FX18 LD ST, Vx
def ld_st_vx(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.sound_timer = ctx.state.v[f.x]
    advance(ctx.state)

# --- Keyboard ---

# @intent:responsibility FX0A LD Vx, K: キーが押されるまで待機します。
# @intent:post-condition 押下なしならPCは進まず、同じ命令が次サイクルで再実行される。
#                        押下があれば最小番号のキーをVxに格納してPCを進める。
def ld_vx_key(ctx: ExecutionContext, f: Fields) -> None:
    for key, pressed in enumerate(ctx.keyboard):
        if pressed:
            ctx.state.v[f.x] = key
            advance(ctx.state)
            return

# --- Memory ---

# @intent:responsibility FX29 LD F, Vx: 数字Vxのフォントグリフのアドレスを I に設定します。
def ld_f_vx(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.i = FONT_START + ctx.state.v[f.x] * FONT_GLYPH_SIZE
    advance(ctx.state)

# @intent:responsibility FX33 LD B, Vx: Vxの10進表記（百、十、一の位）をI, I+1, I+2に格納します。
def ld_bcd_vx(ctx: ExecutionContext, f: Fields) -> None:
    value = ctx.state.v[f.x]
    i = ctx.state.i
    check_memory_range(i, 3)
    ctx.bus.write(i, value // 100)
    ctx.bus.write(i + 1, (value // 10) % 10)
    ctx.bus.write(i + 2, value % 10)
    advance(ctx.state)

# @intent:responsibility FX55 LD [I], Vx: V0からVxまで（Vxを含む）をIから順に格納します。
# @intent:rationale Iは変更しない（COSMAC VIPはIを進めるが、現行の多くのインタプリタはIを保持する）。
def ld_mem_regs(ctx: ExecutionContext, f: Fields) -> None:
    i = ctx.state.i
    check_memory_range(i, f.x + 1)
    for offset in range(f.x + 1):
        ctx.bus.write(i + offset, ctx.state.v[offset])
    advance(ctx.state)

# @intent:responsibility FX65 LD Vx, [I]: Iから順にV0からVxまで（Vxを含む）を読み込みます。
def ld_regs_mem(ctx: ExecutionContext, f: Fields) -> None:
    i = ctx.state.i
    check_memory_range(i, f.x + 1)
    for offset in range(f.x + 1):
        ctx.state.v[offset] = ctx.bus.read(i + offset)
    advance(ctx.state)
