import sys
import unittest

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import qRgb

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.ui.screen_view import ScreenView

FG = (0, 255, 0)
BG = (10, 20, 30)

# (62, 0) に数字"0"の1行目(0xF0)を描画し、その後CLSする
PROGRAM = bytes([
    0x60, 0x3E,  # LD V0, $3E
    0x61, 0x00,  # LD V1, $00
    0xA0, 0x00,  # LD I, $000
    0xD0, 0x11,  # DRW V0, V1, 1
    0x00, 0xE0,  # CLS
])

class TestScreenRender(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        self.cpu = Chip8Cpu()
        self.cpu.load_program(PROGRAM)
        self.view = ScreenView(foreground=FG, background=BG)
        self.view.set_cpu(self.cpu)

    def test_initial_image(self):
        image = self.view.get_image()
        self.assertEqual((image.width(), image.height()), (64, 32))
        self.assertEqual(image.pixel(0, 0), qRgb(*BG))
        self.assertEqual(image.pixel(63, 31), qRgb(*BG))

    def test_wrapped_sprite(self):
        """
        画面右端からはみ出したスプライトが左端に折り返して表示されることを確認します。
        """
        for _ in range(4):
            self.cpu.step()
        self.assertTrue(self.view.poll_frame())
        image = self.view.get_image()
        for x in (62, 63, 0, 1):
            self.assertEqual(image.pixel(x, 0), qRgb(*FG), f"x={x}")
        self.assertEqual(image.pixel(2, 0), qRgb(*BG))
        self.assertEqual(image.pixel(62, 1), qRgb(*BG))

    def test_cls_clears_image(self):
        for _ in range(4):
            self.cpu.step()
        self.view.poll_frame()
        self.cpu.step()  # CLS
        self.assertTrue(self.view.poll_frame())
        self.assertEqual(self.view.get_image().pixel(62, 0), qRgb(*BG))

if __name__ == '__main__':
    unittest.main()
