# retro_chip8/scheduler/scheduler.py
"""
サイクルスケジューラモジュール。

CPUのstep()を専用ループで駆動し、設定されたクロック周波数に合わせてペースを調整します。
経過した実時間をサイクル数に換算して積算し、clock_frequency/60 サイクルごとに
遅延タイマとサウンドタイマを1ずつ減算します（60Hz固定）。
"""
import time
from typing import Callable, Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.common.types import ToneCallback
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.debugger.debugger import Debugger

DEFAULT_CLOCK_FREQUENCY = 1_760_000  # COSMAC VIP相当 (Hz)
TIMER_FREQUENCY = 60                 # Hz
TONE_FREQUENCY_HZ = 1000
TONE_DURATION_MS = 50
MIN_CLOCK_FREQUENCY = 60             # 1ティック = 1サイクル未満にならないための下限

# @intent:responsibility CPUの実行ループ、タイマ駆動、一時停止/ステップ実行、クロック変更を管理します。
class Scheduler:
    """
    CPUを駆動するスケジューラ。

    run()はブロッキングループで、ホスト側が専用スレッド（QThreadなど）から呼び出します。
    マシン状態を変更するのはこのスレッドのみで、読み手には各サイクル後の
    Snapshot（get_last_snapshot）を公開します。
    """
    def __init__(
        self,
        cpu: Chip8Cpu,
        clock_frequency: int = DEFAULT_CLOCK_FREQUENCY,
        tone: Optional[ToneCallback] = None,
        debugger: Optional[Debugger] = None,
        tone_frequency_hz: int = TONE_FREQUENCY_HZ,
        tone_duration_ms: int = TONE_DURATION_MS,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = time.perf_counter_ns,
    ):
        self._cpu = cpu
        self._tone = tone
        self._debugger = debugger
        self._tone_frequency_hz = tone_frequency_hz
        self._tone_duration_ms = tone_duration_ms
        self._sleep = sleep
        self._clock = clock
        self._clock_frequency = DEFAULT_CLOCK_FREQUENCY
        self.set_clock_frequency(clock_frequency)

        self._running: bool = False
        self._stop_requested: bool = False
        self._paused: bool = False
        self._step_requested: bool = False
        self._accumulated_cycles: float = 0.0
        self._last_snapshot: Optional[Snapshot] = None
        self.last_fault: Optional[Exception] = None

    # --- Clock ---

    def get_clock_frequency(self) -> int:
        return self._clock_frequency

    # @intent:responsibility 実行中でもクロック周波数を変更できます（次サイクルから反映）。
    def set_clock_frequency(self, frequency: int) -> None:
        if frequency < MIN_CLOCK_FREQUENCY:
            raise ValueError(f"Clock frequency must be at least {MIN_CLOCK_FREQUENCY} Hz, got {frequency}.")
        self._clock_frequency = int(frequency)

    def double_clock(self) -> None:
        self.set_clock_frequency(self._clock_frequency * 2)

    def halve_clock(self) -> None:
        self.set_clock_frequency(max(MIN_CLOCK_FREQUENCY, self._clock_frequency // 2))

    # --- Pause / Single-step ---

    def is_running(self) -> bool:
        return self._running

    def is_paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        self._step_requested = False
        self._paused = True

    def resume(self) -> None:
        self._step_requested = False
        self._paused = False

    # @intent:responsibility 一時停止中に1サイクルだけ実行させます。実行後は再び一時停止状態に戻ります。
    # @intent:pre-condition 一時停止中でなければ要求は無視される（後のpause()で実行されることはない）。
    def request_step(self) -> None:
        if self._paused:
            self._step_requested = True

    # @intent:responsibility 直近のサイクル実行後に公開されたSnapshot（読み取り専用のコピー）を返します。
    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 新しいプログラムのロード後など、タイミング積算とフォールト状態を破棄します。
    # @intent:post-condition 以前のstop()要求も取り消され、再びrun()できる。
    def reset(self) -> None:
        self._stop_requested = False
        self._accumulated_cycles = 0.0
        self._step_requested = False
        self._last_snapshot = None
        self.last_fault = None

    # --- Cycle ---

    # @intent:responsibility 1サイクル（step + 待機 + タイマ積算）を実行します。
    # @intent:post-condition 経過時間は最低でも1サイクルとして積算される。
    def run_cycle(self) -> Snapshot:
        period_ns = 1_000_000_000 / self._clock_frequency
        start = self._clock()
        snapshot = self._cpu.step()
        self._sleep(period_ns / 1_000_000_000)
        elapsed_cycles = max(1.0, (self._clock() - start) / period_ns)
        self._accumulate(elapsed_cycles)
        self._last_snapshot = snapshot
        return snapshot

    def _accumulate(self, cycles: float) -> None:
        self._accumulated_cycles += cycles
        cycles_per_tick = self._clock_frequency / TIMER_FREQUENCY
        while self._accumulated_cycles >= cycles_per_tick:
            self._accumulated_cycles -= cycles_per_tick
            if self._cpu.tick_timers():
                self._play_tone()

    # @intent:rationale 音声デバイスが使えない場合は報告のみ行い、実行は継続する。
    def _play_tone(self) -> None:
        if self._tone is None:
            return
        try:
            self._tone(self._tone_frequency_hz, self._tone_duration_ms)
        except RuntimeError as e:
            print(f"Warning: tone skipped: {e}")

    # @intent:responsibility stop()されるまでサイクルを繰り返します。
    # @intent:rationale 停止は粗粒度で、サイクルの間でのみ行われる。
    #                   run()の開始前に届いたstop()も有効で、その場合は1サイクルも実行せずに戻る。
    def run(self) -> None:
        self._running = True
        try:
            while not self._stop_requested:
                if self._paused:
                    if not self._step_requested:
                        time.sleep(0.001)
                        continue
                    self._step_requested = False
                self._run_guarded_cycle()
        finally:
            self._running = False

    def _run_guarded_cycle(self) -> None:
        pc = self._cpu.get_state().pc
        try:
            snapshot = self.run_cycle()
        except IndexError as e:
            # 範囲外のPC/I/スタック操作は致命的フォルトとして扱い、一時停止する
            self.last_fault = e
            self._paused = True
            print(f"Fault at PC: {pc:#05x}: {e}")
            return

        if self._debugger is not None and self._debugger.check(snapshot):
            self._paused = True
            print(f"Breakpoint hit at PC: {snapshot.state.pc:#05x}")

    def stop(self) -> None:
        self._stop_requested = True
