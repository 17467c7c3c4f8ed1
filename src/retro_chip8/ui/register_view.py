# src/retro_chip8/ui/register_view.py
"""
CHIP-8のレジスタとタイマ、クロック周波数を表示するウィジェット。
CPUが提供するレイアウト情報（get_register_layout）から表示行を組み立てます。
"""
from typing import Dict, Optional, Tuple

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QFormLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.state import CpuState
from retro_chip8.ui.fonts import get_monospace_font_family

_GROUP_STYLE = """
    QGroupBox {
        font-weight: bold;
        border: 1px solid #222;
        border-radius: 4px;
        margin-top: 20px;
        color: #EEE;
        background-color: #121212;
    }
    QGroupBox::title {
        subcontrol-origin: margin;
        subcontrol-position: top left;
        padding: 0 5px;
        left: 10px;
        color: #00AAAA;
    }
"""
_VIEW_STYLE = "background-color: #121212; color: #BBBBBB;"
_NAME_STYLE = "font-weight: bold; color: #BBBBBB;"
_VALUE_COLOR = "#FFD700"

# @intent:responsibility レジスタ値とクロック周波数をグループごとに表示します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet(_VIEW_STYLE)
        outer = QVBoxLayout(self)
        outer.setContentsMargins(5, 5, 5, 5)
        self._outer = outer
        self._content: Optional[QWidget] = None

        self._value_style = f"font-family: '{get_monospace_font_family()}', monospace; color: {_VALUE_COLOR};"
        # 表示名 -> (値ラベル, 16進桁数)
        self._rows: Dict[str, Tuple[QLabel, int]] = {}
        self._clock_label: Optional[QLabel] = None
        self._cpu: Optional[AbstractCpu] = None

    # @intent:responsibility 表示対象のCPUを差し替え、そのレイアウトで表示行を作り直します。
    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()

    def _rebuild(self) -> None:
        if self._content is not None:
            self._outer.removeWidget(self._content)
            self._content.deleteLater()
        self._rows = {}

        content = QWidget()
        column = QVBoxLayout(content)
        column.setContentsMargins(0, 0, 0, 0)
        for group in self._cpu.get_register_layout():
            box, form = self._create_group(group.group_name)
            for reg in group.registers:
                digits = (reg.width + 3) // 4  # 12bit -> 3桁, 8bit -> 2桁
                self._rows[reg.name] = (self._add_row(form, reg.name, "0x" + "0" * digits), digits)
            column.addWidget(box)

        # クロック周波数はCPU状態ではなくスケジューラ側の値
        box, form = self._create_group("Clock")
        self._clock_label = self._add_row(form, "Hz", "-")
        column.addWidget(box)
        column.addStretch()

        self._outer.addWidget(content)
        self._content = content

    def _create_group(self, title: str):
        box = QGroupBox(title)
        box.setStyleSheet(_GROUP_STYLE)
        form = QFormLayout(box)
        form.setLabelAlignment(Qt.AlignLeft)
        form.setContentsMargins(10, 15, 10, 10)
        form.setSpacing(5)
        return box, form

    def _add_row(self, form: QFormLayout, name: str, initial: str) -> QLabel:
        name_label = QLabel(f"{name}:")
        name_label.setStyleSheet(_NAME_STYLE)
        value_label = QLabel(initial)
        value_label.setStyleSheet(self._value_style)
        value_label.setAlignment(Qt.AlignRight)
        form.addRow(name_label, value_label)
        return value_label

    # @intent:responsibility 公開されたSnapshotの状態（省略時はCPUの現在状態）で表示を更新します。
    def update_registers(self, state: Optional[CpuState] = None, clock_frequency: Optional[int] = None):
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map(state).items():
            row = self._rows.get(name)
            if row is not None:
                label, digits = row
                label.setText(f"0x{value:0{digits}X}")
        if clock_frequency is not None and self._clock_label is not None:
            self._clock_label.setText(f"{clock_frequency:,}")

    def get_register_text(self, name: str) -> str:
        return self._rows[name][0].text()

    def get_clock_text(self) -> str:
        return "" if self._clock_label is None else self._clock_label.text()
