# tests/scheduler/test_scheduler.py
"""
Scheduler（ペース配分、60Hzタイマ、一時停止/ステップ、フォルト処理）の単体テスト。

実時間に依存しないよう、clockとsleepには偽物を注入します。
clockが進まない場合、各サイクルは最低1サイクル分として積算されます。
"""
import threading
import time

import pytest
from unittest import mock

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.debugger.debugger import BreakpointCondition, BreakpointConditionType, Debugger
from retro_chip8.scheduler.scheduler import Scheduler, MIN_CLOCK_FREQUENCY

LOOP = bytes([0x12, 0x00])  # JP 0x200

def make_scheduler(program=LOOP, frequency=600, **kwargs):
    cpu = Chip8Cpu(seed=0)
    cpu.load_program(program)
    kwargs.setdefault("sleep", lambda seconds: None)
    kwargs.setdefault("clock", lambda: 0)
    return cpu, Scheduler(cpu, clock_frequency=frequency, **kwargs)


class TestTimers:
    # @intent:test_case_decay 遅延タイマはちょうどF/60サイクルごとに1減ることを検証します。
    def test_delay_timer_decays_every_f_over_60_cycles(self):
        cpu, scheduler = make_scheduler(frequency=600)  # 10サイクルで1ティック
        cpu.get_state().delay_timer = 5
        for _ in range(9):
            scheduler.run_cycle()
        assert cpu.get_state().delay_timer == 5
        scheduler.run_cycle()
        assert cpu.get_state().delay_timer == 4
        for _ in range(40):
            scheduler.run_cycle()
        assert cpu.get_state().delay_timer == 0
        for _ in range(20):
            scheduler.run_cycle()
        assert cpu.get_state().delay_timer == 0

    # @intent:test_case_elapsed 実経過時間が長ければ1サイクルで複数ティック分が積算されることを検証します。
    def test_elapsed_time_is_converted_to_cycles(self):
        ticks = iter([0, 50_000_000])  # 50ms = 600Hzで30サイクル = 3ティック
        cpu, scheduler = make_scheduler(frequency=600, clock=lambda: next(ticks))
        cpu.get_state().delay_timer = 10
        scheduler.run_cycle()
        assert cpu.get_state().delay_timer == 7

    # @intent:test_case_tone サウンドタイマが1から0になる時に1回だけ発音されることを検証します。
    def test_tone_played_once(self):
        tone = mock.Mock()
        cpu, scheduler = make_scheduler(frequency=600, tone=tone)
        cpu.get_state().sound_timer = 2
        for _ in range(30):
            scheduler.run_cycle()
        tone.assert_called_once_with(1000, 50)
        assert cpu.get_state().sound_timer == 0

    # @intent:test_case_tone_error 発音の失敗は報告のみで、実行とタイマ減算は継続することを検証します。
    def test_tone_error_is_reported(self, capsys):
        tone = mock.Mock(side_effect=RuntimeError("no device"))
        cpu, scheduler = make_scheduler(frequency=600, tone=tone)
        cpu.get_state().sound_timer = 1
        for _ in range(10):
            scheduler.run_cycle()
        assert cpu.get_state().sound_timer == 0
        assert "tone skipped: no device" in capsys.readouterr().out

    # @intent:test_case_pacing 1サイクルごとにクロック周期分だけ待機することを検証します。
    def test_sleep_for_one_period(self):
        sleep = mock.Mock()
        _, scheduler = make_scheduler(frequency=1000, sleep=sleep)
        scheduler.run_cycle()
        sleep.assert_called_once_with(pytest.approx(0.001))


class TestClock:
    def test_set_clock_below_minimum(self):
        _, scheduler = make_scheduler()
        with pytest.raises(ValueError):
            scheduler.set_clock_frequency(MIN_CLOCK_FREQUENCY - 1)

    # @intent:test_case_clock 倍速・半速の変更と下限でのクランプを検証します。
    def test_double_and_halve(self):
        _, scheduler = make_scheduler(frequency=100)
        scheduler.double_clock()
        assert scheduler.get_clock_frequency() == 200
        scheduler.halve_clock()
        scheduler.halve_clock()
        assert scheduler.get_clock_frequency() == MIN_CLOCK_FREQUENCY


class TestRunLoop:
    # @intent:test_case_run stop()されるまでサイクルを実行し続けることを検証します。
    def test_run_until_stopped(self):
        cycles = []
        def sleep(seconds):
            cycles.append(seconds)
            if len(cycles) == 5:
                scheduler.stop()
        cpu, scheduler = make_scheduler(sleep=sleep)
        scheduler.run()
        assert len(cycles) == 5
        assert cpu.get_cycle_count() == 5
        assert not scheduler.is_running()
        assert scheduler.get_last_snapshot().state.pc == 0x200

    # @intent:test_case_step 一時停止中のステップ要求で1サイクルだけ実行されることを検証します。
    def test_single_step_while_paused(self):
        def sleep(seconds):
            scheduler.stop()
        cpu, scheduler = make_scheduler(bytes([0x60, 0x01, 0x61, 0x02]), sleep=sleep)
        scheduler.pause()
        scheduler.request_step()
        scheduler.run()
        assert cpu.get_state().pc == 0x202
        assert scheduler.is_paused()

    def test_resume_clears_pending_step(self):
        _, scheduler = make_scheduler()
        scheduler.pause()
        scheduler.request_step()
        scheduler.resume()
        assert not scheduler.is_paused()
        assert scheduler._step_requested is False

    # @intent:test_case_step_running 実行中のステップ要求は保持されず、後のpause()で余分なサイクルが走らないことを検証します。
    def test_step_request_while_running_is_ignored(self):
        cpu, scheduler = make_scheduler(bytes([0x60, 0x01, 0x61, 0x02]))
        scheduler.request_step()
        scheduler.pause()
        worker = threading.Thread(target=scheduler.run)
        worker.start()
        time.sleep(0.05)
        scheduler.stop()
        worker.join(timeout=1.0)
        assert not worker.is_alive()
        assert cpu.get_state().pc == 0x200
        assert cpu.get_cycle_count() == 0

    # @intent:test_case_stop_before_run run()の開始前に届いたstop()でもループが即座に終了することを検証します。
    def test_stop_before_run(self):
        cpu, scheduler = make_scheduler()
        scheduler.stop()
        worker = threading.Thread(target=scheduler.run)
        worker.start()
        worker.join(timeout=1.0)
        assert not worker.is_alive()
        assert not scheduler.is_running()
        assert cpu.get_cycle_count() == 0

    # @intent:test_case_restart reset()で停止要求が取り消され、再びrun()できることを検証します。
    def test_reset_rearms_after_stop(self):
        def sleep(seconds):
            scheduler.stop()
        cpu, scheduler = make_scheduler(sleep=sleep)
        scheduler.stop()
        scheduler.run()
        assert cpu.get_cycle_count() == 0
        scheduler.reset()
        scheduler.run()
        assert cpu.get_cycle_count() == 1


class TestFaults:
    # @intent:test_case_fault 範囲外アクセスは記録され、スケジューラは一時停止することを検証します。
    def test_fault_pauses(self, capsys):
        cpu, scheduler = make_scheduler(bytes([0x00, 0xEE]))
        scheduler._run_guarded_cycle()
        assert isinstance(scheduler.last_fault, IndexError)
        assert scheduler.is_paused()
        assert cpu.get_state().pc == 0x200
        assert "Fault at PC: 0x200" in capsys.readouterr().out

    # @intent:test_case_reset reset()でフォールト状態と公開Snapshotが破棄されることを検証します。
    def test_reset_clears_fault(self):
        _, scheduler = make_scheduler(bytes([0x00, 0xEE]))
        scheduler._run_guarded_cycle()
        scheduler.reset()
        assert scheduler.last_fault is None
        assert scheduler.get_last_snapshot() is None

    # @intent:test_case_breakpoint ブレークポイントにヒットすると一時停止することを検証します。
    def test_breakpoint_pauses(self, capsys):
        debugger = Debugger()
        debugger.add_breakpoint(BreakpointCondition(BreakpointConditionType.PC_MATCH, value=0x204))
        _, scheduler = make_scheduler(bytes([0x60, 0x01, 0x61, 0x02, 0x62, 0x03]), debugger=debugger)
        scheduler._run_guarded_cycle()
        assert not scheduler.is_paused()
        scheduler._run_guarded_cycle()
        assert scheduler.is_paused()
        assert "Breakpoint hit at PC: 0x204" in capsys.readouterr().out
