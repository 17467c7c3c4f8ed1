# src/retro_chip8/arch/chip8/instructions/control.py
"""
CHIP-8 制御系命令 (Jump, Call/Return, Skip)。

全ての命令は自分でPCを動かします（+2、条件成立時のスキップで+4、または直接代入）。
"""
from retro_chip8.arch.chip8.instructions.base import ExecutionContext, Fields, advance, push, pop

# --- Subroutine / Jump ---

# @intent:responsibility 0NNN SYS: マシン語ルーチン呼び出し。インタプリタでは無視して次へ進む。
def sys_call(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state)

# @intent:responsibility 00EE RET: サブルーチンから復帰します。
def ret(ctx: ExecutionContext, f: Fields) -> None:
    # スタックにはCALL命令自身のアドレスが積まれているため、+2して次の命令へ
    ctx.state.pc = pop(ctx.state) + 2

# @intent:responsibility 1NNN JP addr
def jp(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.pc = f.nnn

# @intent:responsibility 2NNN CALL addr
def call(ctx: ExecutionContext, f: Fields) -> None:
    push(ctx.state, ctx.state.pc)
    ctx.state.pc = f.nnn

# @intent:responsibility BNNN JP V0, addr
def jp_v0(ctx: ExecutionContext, f: Fields) -> None:
    ctx.state.pc = ctx.state.v[0] + f.nnn

# --- Skip Instructions ---

# @intent:responsibility 3XKK SE Vx, byte
def se_vx_byte(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, ctx.state.v[f.x] == f.kk)

# @intent:responsibility 4XKK SNE Vx, byte
def sne_vx_byte(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, ctx.state.v[f.x] != f.kk)

# @intent:responsibility 5XY0 SE Vx, Vy
def se_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, ctx.state.v[f.x] == ctx.state.v[f.y])

# @intent:responsibility 9XY0 SNE Vx, Vy
def sne_vx_vy(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, ctx.state.v[f.x] != ctx.state.v[f.y])

# @intent:responsibility EX9E SKP Vx: キーVxが押されていればスキップ。
# @intent:rationale キー番号はVxの下位4ビットで解釈する（16キーを超える値でも範囲外参照しない）。
def skp(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, ctx.keyboard[ctx.state.v[f.x] & 0x0F])

# @intent:responsibility EXA1 SKNP Vx: キーVxが押されていなければスキップ。
def sknp(ctx: ExecutionContext, f: Fields) -> None:
    advance(ctx.state, not ctx.keyboard[ctx.state.v[f.x] & 0x0F])
