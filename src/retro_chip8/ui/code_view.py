"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import List, Tuple

from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableWidget, QTableWidgetItem, QHeaderView
from PySide6.QtGui import QColor

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.ui.fonts import get_monospace_font

HIGHLIGHT_COLOR = QColor("#404000")
NORMAL_COLOR = QColor("#101010")

# @intent:responsibility PC周辺の逆アセンブル結果を表形式で表示し、現在のPCをハイライトします。
class CodeView(QWidget):
    def __init__(self, parent=None, window_size: int = 512):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Opcode", "Mnemonic"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB; gridline-color: #303030;")
        self.layout.addWidget(self.table)

        self._window_size = window_size
        self.highlighted_row = -1
        # 現在表示している逆アセンブルデータ [(addr, hex, mnemonic), ...]
        self.disassembled_data: List[Tuple[int, str, str]] = []

    # @intent:responsibility PCが表示範囲内ならハイライトのみ移動し、範囲外なら逆アセンブルし直します。
    def update_code(self, cpu: Chip8Cpu, pc: int):
        row_index = self._find_row(pc)
        if row_index == -1:
            self._refresh(cpu, pc)
            row_index = self._find_row(pc)

        if row_index != self.highlighted_row:
            if self.highlighted_row != -1:
                self._paint_row(self.highlighted_row, NORMAL_COLOR)
            if row_index != -1:
                self._paint_row(row_index, HIGHLIGHT_COLOR)
                self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)
            self.highlighted_row = row_index

    def _find_row(self, pc: int) -> int:
        for row, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return row
        return -1

    def _refresh(self, cpu: Chip8Cpu, pc: int):
        self.disassembled_data = cpu.disassemble(pc, self._window_size)
        self.highlighted_row = -1
        self.table.setRowCount(len(self.disassembled_data))
        for row, (addr, opcode_hex, mnemonic) in enumerate(self.disassembled_data):
            self.table.setItem(row, 0, QTableWidgetItem(f"{addr:03X}"))
            self.table.setItem(row, 1, QTableWidgetItem(opcode_hex))
            self.table.setItem(row, 2, QTableWidgetItem(mnemonic))

    def _paint_row(self, row: int, color: QColor):
        for column in range(3):
            item = self.table.item(row, column)
            if item is not None:
                item.setBackground(color)

    # @intent:responsibility 新しいROMのロード後など、メモリ内容が変わった際にキャッシュを破棄します。
    def reset_cache(self):
        self.disassembled_data = []
        self.highlighted_row = -1
        self.table.setRowCount(0)
