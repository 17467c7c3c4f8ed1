# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8 Display Compositor

64x32のビットプレーンに対するXORスプライト描画と、
ピクセルバッファへの変換を提供します。
"""
from typing import List, Sequence

from retro_chip8.common.types import Color

WIDTH = 64
HEIGHT = 32

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)

# @intent:responsibility 64x32のモノクロフレームバッファを保持し、スプライト合成と描画用変換を行います。
class FrameBuffer:
    """
    CHIP-8のフレームバッファ。

    描画はスケジューラスレッドからのみ行われます。各描画の完了時に
    プレーン全体の不変コピー（公開フレーム）を作成し、render()はその公開フレームのみを読みます。
    これにより、表示側が描画途中のプレーンを読むことはありません。
    """
    def __init__(self):
        self._plane = bytearray(WIDTH * HEIGHT)
        self._published: bytes = bytes(self._plane)
        self._draw_flag = False

    # @intent:responsibility プレーンを消去し、描画フラグを下ろします（マシンのリセット用）。
    def reset(self) -> None:
        self.clear()
        self._draw_flag = False

    # @intent:responsibility 全ピクセルを消去します。
    def clear(self) -> None:
        self._plane[:] = bytes(WIDTH * HEIGHT)
        self._publish()

    # @intent:responsibility スプライトをXOR合成し、衝突の有無を返します。
    # @intent:post-condition 座標はトーラス状に折り返されます（クリップしない）。
    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """
        rowsの各バイトを上から順に、MSBを左端として(x, y)にXOR合成します。
        セット状態から消去状態に遷移したピクセルが1つでもあればTrueを返します。
        """
        collision = False
        for row, bits in enumerate(rows):
            py = (y + row) % HEIGHT
            for col in range(8):
                if bits & (0x80 >> col):
                    index = py * WIDTH + (x + col) % WIDTH
                    if self._plane[index]:
                        collision = True
                    self._plane[index] ^= 1
        self._publish()
        return collision

    def _publish(self) -> None:
        # 参照の差し替えは単一の代入なので、読み手からはアトミックに見える
        self._published = bytes(self._plane)

    def get_pixel(self, x: int, y: int) -> int:
        return self._plane[(y % HEIGHT) * WIDTH + (x % WIDTH)]

    # @intent:responsibility 最新の公開フレーム（行優先、1バイト1ピクセル）を返します。
    def get_frame(self) -> bytes:
        return self._published

    @property
    def draw_flag(self) -> bool:
        return self._draw_flag

    def set_draw_flag(self) -> None:
        self._draw_flag = True

    # @intent:responsibility 表示側がフレームを取り込んだ後に呼び出します。
    def clear_draw_flag(self) -> None:
        self._draw_flag = False

    # @intent:responsibility 公開フレームを色の2次元配列（[y][x]）に変換します。
    def render(self, foreground: Color = WHITE, background: Color = BLACK) -> List[List[Color]]:
        frame = self._published
        return [
            [foreground if frame[y * WIDTH + x] else background for x in range(WIDTH)]
            for y in range(HEIGHT)
        ]
