# retro_chip8/core/state.py
"""
命令サイクルの駆動とブレークポイント評価が共通で参照するレジスタ。
"""
from dataclasses import dataclass

# @intent:responsibility 全てのCPU状態が持つPCとSPを定義します。アーキテクチャ固有の状態はこれを継承します。
@dataclass
class CpuState:
    pc: int = 0
    sp: int = 0
