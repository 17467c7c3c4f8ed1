import yaml
from typing import Any, Dict, Optional

from retro_chip8.common.types import Color
from retro_chip8.debugger.debugger import BreakpointConditionType
from retro_chip8.scheduler.scheduler import MIN_CLOCK_FREQUENCY
from .models import AudioConfig, BreakpointConfig, DisplayConfig, EmulatorConfig

_KNOWN_KEYS = {"clock_frequency", "seed", "display", "audio", "keymap", "breakpoints"}

class ConfigLoader:
    def load_from_file(self, path: str) -> EmulatorConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {})

    def _parse_config(self, data: Dict[str, Any]) -> EmulatorConfig:
        if not isinstance(data, dict):
            raise ValueError(f"Configuration root must be a mapping, got {type(data).__name__}")
        unknown = set(data) - _KNOWN_KEYS
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        defaults = EmulatorConfig()

        # Parse Display
        display_data = self._section(data, "display")
        display = DisplayConfig(
            foreground=self._parse_color(display_data.get("foreground", defaults.display.foreground)),
            background=self._parse_color(display_data.get("background", defaults.display.background)),
            scale=self._parse_int(display_data.get("scale", defaults.display.scale)),
            refresh_interval_ms=self._parse_int(
                display_data.get("refresh_interval_ms", defaults.display.refresh_interval_ms)
            ),
        )

        # Parse Audio
        audio_data = self._section(data, "audio")
        audio = AudioConfig(
            frequency_hz=self._parse_int(audio_data.get("frequency_hz", defaults.audio.frequency_hz)),
            duration_ms=self._parse_int(audio_data.get("duration_ms", defaults.audio.duration_ms)),
            enabled=bool(audio_data.get("enabled", defaults.audio.enabled)),
        )

        # Parse Keymap (指定されたキーのみ既定値を上書き)
        keymap = dict(defaults.keymap)
        for key_name, index in self._section(data, "keymap").items():
            value = self._parse_int(index)
            if not 0 <= value <= 0xF:
                raise ValueError(f"Keypad index for '{key_name}' out of range 0x0-0xF: {index}")
            keymap[str(key_name).upper()] = value

        # Parse Breakpoints
        breakpoints = []
        bp_list = data.get("breakpoints") or []
        if not isinstance(bp_list, list):
            raise ValueError(f"'breakpoints' must be a list, got {type(bp_list).__name__}")
        for bp_data in bp_list:
            if not isinstance(bp_data, dict):
                raise ValueError(f"Breakpoint entry must be a mapping: {bp_data!r}")
            bp_type = str(bp_data.get("type", "PC_MATCH")).upper()
            if bp_type not in BreakpointConditionType.__members__:
                raise ValueError(f"Unknown breakpoint type: {bp_type}")
            breakpoints.append(BreakpointConfig(
                type=bp_type,
                value=self._parse_optional_int(bp_data.get("value")),
                address=self._parse_optional_int(bp_data.get("address")),
                register=bp_data.get("register"),
            ))

        clock_frequency = self._parse_int(data.get("clock_frequency", defaults.clock_frequency))
        if clock_frequency < MIN_CLOCK_FREQUENCY:
            raise ValueError(f"clock_frequency must be at least {MIN_CLOCK_FREQUENCY} Hz, got {clock_frequency}")

        seed = data.get("seed")
        return EmulatorConfig(
            clock_frequency=clock_frequency,
            seed=self._parse_optional_int(seed),
            display=display,
            audio=audio,
            keymap=keymap,
            breakpoints=breakpoints,
        )

    # @intent:utility_function 省略またはnullのセクションは空の辞書として扱い、それ以外の型は拒否します。
    def _section(self, data: Dict[str, Any], key: str) -> Dict[Any, Any]:
        section = data.get(key) or {}
        if not isinstance(section, dict):
            raise ValueError(f"'{key}' must be a mapping, got {type(section).__name__}")
        return section

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                raise ValueError(f"Invalid integer format: {value}")
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    # @intent:utility_function "#RRGGBB" 形式の文字列、または [r, g, b] のリストを色タプルに変換します。
    def _parse_color(self, value: Any) -> Color:
        if isinstance(value, (list, tuple)) and len(value) == 3:
            r, g, b = (self._parse_int(c) for c in value)
        elif isinstance(value, str) and value.startswith("#") and len(value) == 7:
            try:
                r, g, b = int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16)
            except ValueError:
                raise ValueError(f"Invalid color format: {value}")
        else:
            raise ValueError(f"Invalid color format: {value}")
        for component in (r, g, b):
            if not 0 <= component <= 0xFF:
                raise ValueError(f"Color component out of range: {value}")
        return (r, g, b)
