# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

結果は8ビットで折り返します。VFを書き換える命令では、
演算結果をVxに格納した後にフラグを書き込みます（X=Fの場合はフラグが残る）。
"""
from retro_chip8.arch.chip8.instructions.base import ExecutionContext, Fields, advance

# @intent:responsibility 7XKK ADD Vx, byte (フラグ変化なし)
def add_vx_byte(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] = (ctx.state.v[f.x] + f.kk) & 0xFF
    advance(ctx.state)

# @intent:responsibility 8XY1 OR Vx, Vy
def or_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] |= ctx.state.v[f.y]
    advance(ctx.state)

# @intent:responsibility 8XY2 AND Vx, Vy
def and_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] &= ctx.state.v[f.y]
    advance(ctx.state)

# @intent:responsibility 8XY3 XOR Vx, Vy
def xor_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] ^= ctx.state.v[f.y]
    advance(ctx.state)

# @intent:responsibility 8XY4 ADD Vx, Vy (VF = キャリー)
def add_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    v = ctx.state.v
    res = v[f.x] + v[f.y]
    v[f.x] = res & 0xFF
    ctx.state.flag = res > 0xFF
    advance(ctx.state)

# @intent:responsibility 8XY5 SUB Vx, Vy (VF = 1 ならボローなし)
# @intent:rationale Vx == Vy の場合はVF=0とする（厳密な比較 Vy < Vx）。
def sub_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    v = ctx.state.v
    vx, vy = v[f.x], v[f.y]
    v[f.x] = (vx - vy) & 0xFF
    ctx.state.flag = vy < vx
    advance(ctx.state)

# @intent:responsibility 8XY6 SHR Vx (VF = シフトアウトされる最下位ビット)
def shr_vx(ctx: ExecutionContext, f: Fields) -> None:
    v = ctx.state.v
    vx = v[f.x]
    v[f.x] = vx >> 1
    ctx.state.flag = vx & 0x01
    advance(ctx.state)

# @intent:responsibility 8XY7 SUBN Vx, Vy (Vx = Vy - Vx, VF = 1 ならボローなし)
# @intent:rationale 8XY5と同じ規約で厳密な比較 Vx < Vy を用いる。
def subn_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    v = ctx.state.v
    vx, vy = v[f.x], v[f.y]
    v[f.x] = (vy - vx) & 0xFF
    ctx.state.flag = vx < vy
    advance(ctx.state)

# @intent:responsibility 8XYE SHL Vx (VF = シフトアウトされる最上位ビット)
def shl_vx(ctx: ExecutionContext, f: Fields) -> None:
    v = ctx.state.v
    vx = v[f.x]
    v[f.x] = (vx << 1) & 0xFF
    ctx.state.flag = vx & 0x80
    advance(ctx.state)

# @intent:responsibility FX1E ADD I, Vx (I+Vxが12ビットを超えたらVF=1)
def add_i_vx(ctx: ExecutionContext, f: Fields) -> None:
    total = ctx.state.i + ctx.state.v[f.x]
    ctx.state.i = total & 0x0FFF
    ctx.state.flag = total > 0x0FFF
    advance(ctx.state)

# @intent:responsibility CXKK RND Vx, byte
def rnd_vx_byte(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.v[f.x] = ctx.rng.randint(0, 0xFF) & f.kk
    advance(ctx.state)
