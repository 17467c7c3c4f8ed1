# tests/config/test_config.py
"""
YAML設定の読み込みとSystemBuilderの単体テスト。
"""
import pytest

from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import DEFAULT_KEYMAP, BreakpointConfig, EmulatorConfig
from retro_chip8.debugger.debugger import BreakpointConditionType

# @intent:test_suite 設定ファイルの解釈と、それに基づくシステム構築を検証します。

CONFIG_YAML = """
clock_frequency: "0x1000"
seed: 42
display:
  foreground: "#33FF66"
  background: [16, 16, 16]
  scale: 8
audio:
  frequency_hz: 440
  enabled: false
keymap:
  x: 0x0
  k: 0xC
breakpoints:
  - type: pc_match
    value: "0x2A0"
  - type: REGISTER_CHANGE
    register: I
"""

class TestConfigLoader:
    # @intent:test_case_file YAMLファイルから全ての項目が読み込まれることを検証します。
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "chip8.yaml"
        path.write_text(CONFIG_YAML)
        config = ConfigLoader().load_from_file(str(path))

        assert config.clock_frequency == 0x1000
        assert config.seed == 42
        assert config.display.foreground == (0x33, 0xFF, 0x66)
        assert config.display.background == (16, 16, 16)
        assert config.display.scale == 8
        assert config.display.refresh_interval_ms == 15
        assert config.audio.frequency_hz == 440
        assert config.audio.duration_ms == 50
        assert config.audio.enabled is False
        assert config.keymap["K"] == 0xC
        assert config.keymap["Q"] == DEFAULT_KEYMAP["Q"]
        assert config.breakpoints == [
            BreakpointConfig(type="PC_MATCH", value=0x2A0),
            BreakpointConfig(type="REGISTER_CHANGE", register="I"),
        ]

    # @intent:test_case_defaults 空のファイルは既定値になることを検証します。
    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert ConfigLoader().load_from_file(str(path)) == EmulatorConfig()

    @pytest.mark.parametrize("data", [
        {"clock_frequency": "fast"},
        {"clock_frequency": True},
        {"display": {"foreground": "#12345"}},
        {"display": {"background": [0, 0, 300]}},
        {"keymap": {"Q": 16}},
        {"keymap": ["Q", "W"]},
        {"display": "green"},
        {"breakpoints": {"type": "PC_MATCH"}},
        {"breakpoints": ["PC_MATCH"]},
        {"breakpoints": [{"type": "WATCH"}]},
        {"clock_frequency": 10},
        {"unknown_key": 1},
    ])
    def test_invalid_values(self, data):
        with pytest.raises(ValueError):
            ConfigLoader()._parse_config(data)

    def test_root_must_be_mapping(self):
        with pytest.raises(ValueError, match="mapping"):
            ConfigLoader()._parse_config([1, 2, 3])


class TestSystemBuilder:
    # @intent:test_case_build 設定のクロック・シード・ブレークポイントがシステムに反映されることを検証します。
    def test_build_system(self):
        config = EmulatorConfig(
            clock_frequency=1200,
            seed=7,
            breakpoints=[BreakpointConfig(type="PC_MATCH", value=0x202)],
        )
        tone = lambda frequency, duration: None
        cpu, scheduler = SystemBuilder().build_system(config, tone=tone)

        assert scheduler.get_clock_frequency() == 1200
        assert cpu.get_state().pc == 0x200
        assert scheduler._tone is tone

        cpu.load_program(bytes([0x60, 0x01]))
        scheduler._run_guarded_cycle()
        assert scheduler.is_paused()

    # @intent:test_case_audio 音声が無効な場合はトーンを接続しないことを検証します。
    def test_audio_disabled(self):
        config = EmulatorConfig()
        config.audio.enabled = False
        _, scheduler = SystemBuilder().build_system(config, tone=lambda f, d: None)
        assert scheduler._tone is None
        assert scheduler._debugger is None

    def test_unknown_breakpoint_type(self):
        with pytest.raises(ValueError, match="Unknown breakpoint type"):
            SystemBuilder().build_breakpoint(BreakpointConfig(type="WATCH"))

    def test_build_breakpoint(self):
        condition = SystemBuilder().build_breakpoint(BreakpointConfig(type="MEMORY_WRITE", address=0x300))
        assert condition.condition_type == BreakpointConditionType.MEMORY_WRITE
        assert condition.address == 0x300
