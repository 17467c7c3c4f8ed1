# src/retro_chip8/ui/app.py
"""
PySide6アプリケーションのエントリポイント。
コマンドライン引数で設定ファイルとROMを指定できます。
"""
import argparse
import sys
from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from .main_window import MainWindow

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main():
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 virtual machine")
    parser.add_argument("rom", nargs="?", help="ROM file to load at startup")
    parser.add_argument("--config", help="YAML configuration file")
    args, qt_args = parser.parse_known_args()

    config = ConfigLoader().load_from_file(args.config) if args.config else None

    app = QApplication([sys.argv[0]] + qt_args)
    main_win = MainWindow(config)
    if args.rom and main_win.load_rom(args.rom):
        main_win.scheduler.resume()
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
