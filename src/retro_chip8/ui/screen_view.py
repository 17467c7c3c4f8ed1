# src/retro_chip8/ui/screen_view.py
"""
CHIP-8の画面を表示し、キーボード入力をキーパッドに中継するウィジェット。

描画はポーリング方式です。QTimerで一定間隔ごとにCPUの描画フラグを確認し、
立っていれば公開フレームを取り込んでQImageを作り直します。
"""
from typing import Dict, Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtCore import Qt, QTimer, QRect
from PySide6.QtGui import QImage, QPainter, QColor, QKeyEvent, qRgb

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.display import WIDTH, HEIGHT, WHITE, BLACK
from retro_chip8.common.types import Color
from retro_chip8.config.models import DEFAULT_KEYMAP

# @intent:responsibility フレームバッファのスケーリング表示と、キー押下/解放のキーパッドへの反映を行います。
class ScreenView(QWidget):
    def __init__(
        self,
        parent=None,
        foreground: Color = WHITE,
        background: Color = BLACK,
        scale: int = 10,
        refresh_interval_ms: int = 15,
        keymap: Optional[Dict[str, int]] = None,
    ):
        super().__init__(parent)
        self._foreground = foreground
        self._background = background
        self._cpu: Optional[Chip8Cpu] = None
        self._image = QImage(WIDTH, HEIGHT, QImage.Format_RGB32)
        self._image.fill(QColor(*background))

        # Qt.Key_A..Key_Z, Key_0..Key_9 はASCIIコードと一致する
        self._key_codes: Dict[int, int] = {
            ord(name.upper()): index for name, index in (keymap or DEFAULT_KEYMAP).items() if len(name) == 1
        }

        self.setMinimumSize(WIDTH * scale, HEIGHT * scale)
        self.setFocusPolicy(Qt.StrongFocus)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.poll_frame)
        self._timer.start(refresh_interval_ms)

    def set_cpu(self, cpu: Chip8Cpu) -> None:
        self._cpu = cpu
        self.refresh_image()

    def get_image(self) -> QImage:
        return self._image

    # @intent:responsibility 描画フラグが立っていればフレームを取り込み、再描画を要求します。
    # @intent:return 画面を更新した場合True。
    def poll_frame(self) -> bool:
        if self._cpu is None or not self._cpu.draw_flag:
            return False
        self._cpu.clear_draw_flag()
        self.refresh_image()
        return True

    def refresh_image(self) -> None:
        if self._cpu is None:
            return
        pixels = self._cpu.get_display().render(self._foreground, self._background)
        for y, row in enumerate(pixels):
            for x, (r, g, b) in enumerate(row):
                self._image.setPixel(x, y, qRgb(r, g, b))
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(*self._background))
        # アスペクト比 2:1 を保ったまま中央に配置する
        scale = max(1, min(self.width() // WIDTH, self.height() // HEIGHT))
        w, h = WIDTH * scale, HEIGHT * scale
        target = QRect((self.width() - w) // 2, (self.height() - h) // 2, w, h)
        painter.drawImage(target, self._image)
        painter.end()

    # @intent:responsibility ホストのキーコードを対応するキーパッドの押下状態に変換します。
    # @intent:return 割り当てのあるキーだった場合True。
    def handle_key(self, key_code: int, pressed: bool) -> bool:
        index = self._key_codes.get(key_code)
        if index is None or self._cpu is None:
            return False
        self._cpu.set_key(index, pressed)
        return True

    def keyPressEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.handle_key(int(event.key()), True):
            super().keyPressEvent(event)

    def keyReleaseEvent(self, event: QKeyEvent):
        if event.isAutoRepeat() or not self.handle_key(int(event.key()), False):
            super().keyReleaseEvent(event)
