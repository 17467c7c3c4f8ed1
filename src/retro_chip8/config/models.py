from dataclasses import dataclass, field
from typing import Dict, List, Optional

from retro_chip8.common.types import Color

# 物理キーボードの4x4配置 → CHIP-8キーパッドの16進キー
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class DisplayConfig:
    foreground: Color = (255, 255, 255)
    background: Color = (0, 0, 0)
    scale: int = 10
    refresh_interval_ms: int = 15

@dataclass
class AudioConfig:
    frequency_hz: int = 1000
    duration_ms: int = 50
    enabled: bool = True

@dataclass
class BreakpointConfig:
    type: str  # "PC_MATCH", "MEMORY_READ", "MEMORY_WRITE", "REGISTER_VALUE", "REGISTER_CHANGE"
    value: Optional[int] = None
    address: Optional[int] = None
    register: Optional[str] = None

@dataclass
class EmulatorConfig:
    clock_frequency: int = 1_760_000
    seed: Optional[int] = None
    display: DisplayConfig = field(default_factory=DisplayConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
    breakpoints: List[BreakpointConfig] = field(default_factory=list)
