# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8のプログラムイメージ（ヘッダのない生バイナリ）をファイルから読み込み、CPUにロードします。
"""
from retro_chip8.arch.chip8.cpu import Chip8Cpu

class RomLoader:
    """
    生バイナリ形式のROMファイルを読み込み、0x200以降に配置するローダー。
    """
    # @intent:responsibility ROMファイルを読み込み、マシンを初期化してからプログラムを配置します。
    # @intent:return 読み込んだバイト数。
    def load_rom(self, file_path: str, cpu: Chip8Cpu) -> int:
        """
        Raises:
            OSError: ファイルが読めない場合（マシン状態は変更されない）。
            ValueError: ROMが3584バイトを超える場合（マシンは初期化済みの状態で残る）。
        """
        with open(file_path, 'rb') as f:
            data = f.read()
        cpu.load_program(data)
        return len(data)
