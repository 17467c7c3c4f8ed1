# tests/ui/test_register_view.py
"""
RegisterViewの表示更新ロジックのテスト。
"""
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.ui.register_view import RegisterView

# @intent:test_case_update Snapshotの状態とクロック周波数が表示されることを検証します。
def test_update_from_snapshot(qapp):
    cpu = Chip8Cpu()
    cpu.load_program(bytes([0x6A, 0x42, 0xA1, 0x23]))
    view = RegisterView()
    view.set_cpu(cpu)

    first = cpu.step()
    cpu.step()
    view.update_registers(first.state, 1_760_000)

    assert view.get_register_text("PC") == "0x202"
    assert view.get_register_text("OP") == "0x6A42"
    assert view.get_register_text("VA") == "0x42"
    assert view.get_register_text("I") == "0x000"
    assert view.get_clock_text() == "1,760,000"

    # 状態省略時はCPUの現在状態を表示する
    view.update_registers()
    assert view.get_register_text("I") == "0x123"
    assert view.get_clock_text() == "1,760,000"
