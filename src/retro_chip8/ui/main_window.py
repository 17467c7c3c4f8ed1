# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
画面、インスペクタ、実行制御を組み立て、スケジューラを専用スレッドで駆動します。
"""
from typing import Optional, Tuple

import yaml

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QTabWidget, QToolBar, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeySequence
from PySide6.QtCore import Qt, QThread, QTimer, Slot

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import EmulatorConfig
from retro_chip8.loader.loader import RomLoader
from retro_chip8.scheduler.scheduler import Scheduler
from .code_view import CodeView
from .fonts import get_monospace_font_family
from .register_view import RegisterView
from .screen_view import ScreenView
from .sound import ToneGenerator

_DARK_PALETTE = (
    (QPalette.Window, (29, 29, 29)),
    (QPalette.WindowText, (224, 224, 224)),
    (QPalette.Base, (30, 30, 30)),
    (QPalette.Text, (224, 224, 224)),
    (QPalette.Button, (53, 53, 53)),
    (QPalette.ButtonText, (224, 224, 224)),
    (QPalette.Highlight, (42, 130, 218)),
    (QPalette.HighlightedText, (0, 0, 0)),
)

# @intent:responsibility スケジューラのrunループをバックグラウンドで実行します。
class SchedulerThread(QThread):
    """
    Scheduler.run()をノンブロッキングで実行するためのスレッド。
    マシン状態を変更するのはこのスレッドのみです。
    """
    def __init__(self, scheduler: Scheduler):
        super().__init__()
        self.scheduler = scheduler

    def run(self):
        self.scheduler.run()

    # @intent:responsibility ループの停止を要求し、スレッドの終了を待ちます。
    def shutdown(self):
        self.scheduler.stop()
        self.wait()


# @intent:responsibility CHIP-8画面とインスペクタを持つメインウィンドウ。ROM・設定のロードと実行制御を受け持ちます。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[EmulatorConfig] = None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Retro CHIP-8")
        self.setDockNestingEnabled(True)

        self.config = config if config is not None else EmulatorConfig()
        self.tone_generator = ToneGenerator(self)
        self._rom_path: Optional[str] = None
        self._last_shown = None

        self._set_dark_theme()
        self._create_screen()
        self._create_status_inspector()
        self._create_toolbar()
        self._create_menus()
        self._setup_backend()

        self._inspector_timer = QTimer(self)
        self._inspector_timer.timeout.connect(self.refresh_inspector)
        self._inspector_timer.start(self.config.display.refresh_interval_ms)

    # @intent:responsibility 設定からCPUとスケジューラを生成します。ウィンドウの状態には触れません。
    def _build_backend(self, config: EmulatorConfig) -> Tuple[Chip8Cpu, Scheduler]:
        return SystemBuilder().build_system(config, tone=self.tone_generator)

    # @intent:responsibility 生成済みのCPUとスケジューラを接続し、一時停止状態でスレッドを起動します。
    def _setup_backend(self, backend: Optional[Tuple[Chip8Cpu, Scheduler]] = None):
        self.cpu, self.scheduler = backend if backend is not None else self._build_backend(self.config)
        self.scheduler.pause()  # ROMのロードまたはRunまで待機する
        self.scheduler_thread = SchedulerThread(self.scheduler)

        self.screen_view.set_cpu(self.cpu)
        self.register_view.set_cpu(self.cpu)
        self.code_view.reset_cache()
        self._last_shown = None

        self.scheduler_thread.start()
        self._update_ui_state()

    def _create_screen(self):
        display = self.config.display
        self.screen_view = ScreenView(
            foreground=display.foreground,
            background=display.background,
            scale=display.scale,
            refresh_interval_ms=display.refresh_interval_ms,
            keymap=self.config.keymap,
        )
        self.setCentralWidget(self.screen_view)

    # @intent:responsibility 右側のドックにレジスタ表示と逆アセンブル表示をタブで配置します。
    def _create_status_inspector(self):
        self.register_view = RegisterView()
        self.code_view = CodeView()
        tabs = QTabWidget()
        tabs.addTab(self.register_view, "Registers")
        tabs.addTab(self.code_view, "Assembler")

        dock = QDockWidget("Status Inspector", self)
        dock.setAllowedAreas(Qt.RightDockWidgetArea | Qt.LeftDockWidgetArea)
        dock.setWidget(tabs)
        self.addDockWidget(Qt.RightDockWidgetArea, dock)

    # @intent:utility_function QActionを生成し、シグナル接続とショートカットをまとめて設定します。
    def _make_action(self, text: str, slot, *shortcuts: str) -> QAction:
        action = QAction(text, self)
        if shortcuts:
            action.setShortcuts([QKeySequence(s) for s in shortcuts])
        action.triggered.connect(slot)
        return action

    # @intent:responsibility Run/Pause、Step、Reset、クロック変更のボタンを並べます。
    def _create_toolbar(self):
        controls = QToolBar("Execution", self)
        self.addToolBar(controls)
        self.run_action = self._make_action("Run", self._toggle_run, "F5", "Pause")
        self.step_action = self._make_action("Step", self._step, "F10", "Space")
        self.reset_action = self._make_action("Reset", self._reset)
        self.faster_action = self._make_action("Clock x2", self._double_clock, "PgUp")
        self.slower_action = self._make_action("Clock /2", self._halve_clock, "PgDown")
        for action in (self.run_action, self.step_action, self.reset_action):
            controls.addAction(action)
        controls.addSeparator()
        controls.addAction(self.faster_action)
        controls.addAction(self.slower_action)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")
        self.load_rom_action = self._make_action("Load ROM...", self._open_rom_dialog, "Ctrl+O")
        self.load_config_action = self._make_action("Load Config...", self._open_config_dialog)
        file_menu.addActions([self.load_rom_action, self.load_config_action])
        file_menu.addSeparator()
        file_menu.addAction(self._make_action("Exit", self.close))

    # @intent:responsibility 一時停止状態に応じてツールバーの表示と有効/無効を切り替えます。
    def _update_ui_state(self):
        paused = self.scheduler.is_paused()
        self.run_action.setText("Run" if paused else "Pause")
        self.step_action.setEnabled(paused)

    @Slot()
    def _toggle_run(self):
        if self.scheduler.is_paused():
            self.scheduler.resume()
        else:
            self.scheduler.pause()
        self._update_ui_state()

    @Slot()
    def _step(self):
        if self.scheduler.is_paused():
            self.scheduler.request_step()

    @Slot()
    def _double_clock(self):
        self.scheduler.double_clock()
        self.refresh_inspector(force=True)

    @Slot()
    def _halve_clock(self):
        self.scheduler.halve_clock()
        self.refresh_inspector(force=True)

    # @intent:responsibility スレッドを止めてマシンを初期化し、ロード済みのROMがあれば再ロードします。
    @Slot()
    def _reset(self):
        if self._rom_path is not None:
            self.load_rom(self._rom_path)
            return
        self.scheduler_thread.shutdown()
        self.cpu.initialize()
        self.scheduler.reset()
        self.code_view.reset_cache()
        self.screen_view.refresh_image()
        self.scheduler_thread.start()
        self.refresh_inspector(force=True)

    # @intent:responsibility ROMをロードします。実行中のスケジューラは先に停止し、ロード後に再開します。
    # @intent:post-condition 失敗した場合もマシンは初期化済みの状態で残り、エラーを表示します。
    def load_rom(self, file_path: str) -> bool:
        self.scheduler_thread.shutdown()
        try:
            RomLoader().load_rom(file_path, self.cpu)
        except (OSError, ValueError) as e:
            self._rom_path = None
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            return False
        finally:
            self.scheduler.reset()
            self.code_view.reset_cache()
            self.screen_view.refresh_image()
            self.scheduler_thread.start()
            self.refresh_inspector(force=True)

        self._rom_path = file_path
        self.setWindowTitle(f"Retro CHIP-8 - {file_path}")
        return True

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name and self.load_rom(file_name):
            self.scheduler.resume()
            self._update_ui_state()

    # @intent:responsibility 設定ファイルを読み込み、バックエンドを作り直します。
    def load_config(self, file_path: str) -> bool:
        # 新しいバックエンドの構築まで成功してから古いスレッドを止める
        try:
            config = ConfigLoader().load_from_file(file_path)
            backend = self._build_backend(config)
        except (OSError, ValueError, yaml.YAMLError) as e:
            QMessageBox.critical(self, "Error", f"Failed to load config: {e}")
            return False

        self.scheduler_thread.shutdown()
        self.config = config
        self._rom_path = None
        self._setup_backend(backend)
        return True

    @Slot()
    def _open_config_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open Config", "", "YAML Files (*.yaml *.yml);;All Files (*)")
        if file_name:
            self.load_config(file_name)

    # @intent:responsibility 公開されたSnapshotからインスペクタを更新します（マシン状態には直接触れない）。
    @Slot()
    def refresh_inspector(self, force: bool = False):
        snapshot = self.scheduler.get_last_snapshot()
        if snapshot is not None and snapshot is self._last_shown and not force:
            return
        self._last_shown = snapshot

        if snapshot is not None:
            state = snapshot.state
        else:
            state = self.cpu.copy_state()
        self.register_view.update_registers(state, self.scheduler.get_clock_frequency())
        if self.scheduler.is_paused():
            self.code_view.update_code(self.cpu, state.pc)

        if self.scheduler.last_fault is not None:
            self.statusBar().showMessage(f"Fault: {self.scheduler.last_fault}")
        self._update_ui_state()

    # @intent:responsibility 暗色のパレットとスタイルシートをウィンドウに適用します。
    def _set_dark_theme(self):
        palette = QPalette()
        for role, rgb in _DARK_PALETTE:
            palette.setColor(role, QColor(*rgb))
        QApplication.setPalette(palette)

        self.setStyleSheet(f"""
            QWidget {{ font-family: '{get_monospace_font_family()}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
            QTabWidget::pane {{ border-top: 2px solid #2A82DA; }}
            QTabBar::tab {{ background: #1E1E1E; border: 1px solid #1E1E1E; padding: 8px 12px; min-width: 80px; }}
            QTabBar::tab:selected {{ background: #101010; border: 1px solid #2A82DA; border-bottom-color: #101010; }}
        """)

    # @intent:responsibility ウィンドウを閉じる際にスケジューラスレッドを停止し、再生中の音も止めます。
    def closeEvent(self, event: QCloseEvent):
        self._inspector_timer.stop()
        self.scheduler_thread.shutdown()
        self.tone_generator.stop()
        event.accept()

