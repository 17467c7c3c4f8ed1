from typing import Optional, Tuple

from retro_chip8.arch.chip8.cpu import Chip8Cpu, create_bus
from retro_chip8.common.types import ToneCallback
from retro_chip8.debugger.debugger import BreakpointCondition, BreakpointConditionType, Debugger
from retro_chip8.scheduler.scheduler import Scheduler
from .models import BreakpointConfig, EmulatorConfig

# @intent:responsibility 設定（Config）に基づいて、Bus、CPU、デバッガ、スケジューラを生成・接続します。
class SystemBuilder:
    def build_system(self, config: EmulatorConfig, tone: Optional[ToneCallback] = None) -> Tuple[Chip8Cpu, Scheduler]:
        bus = create_bus()
        cpu = Chip8Cpu(bus, seed=config.seed)

        debugger = None
        if config.breakpoints:
            debugger = Debugger()
            for bp in config.breakpoints:
                debugger.add_breakpoint(self.build_breakpoint(bp))

        scheduler = Scheduler(
            cpu,
            clock_frequency=config.clock_frequency,
            tone=tone if config.audio.enabled else None,
            debugger=debugger,
            tone_frequency_hz=config.audio.frequency_hz,
            tone_duration_ms=config.audio.duration_ms,
        )
        return cpu, scheduler

    # @intent:responsibility 設定上のブレークポイント定義をデバッガの条件に変換します。
    def build_breakpoint(self, bp: BreakpointConfig) -> BreakpointCondition:
        try:
            condition_type = BreakpointConditionType(bp.type)
        except ValueError:
            raise ValueError(f"Unknown breakpoint type: {bp.type}")
        return BreakpointCondition(
            condition_type=condition_type,
            value=bp.value,
            address=bp.address,
            register_name=bp.register,
        )
