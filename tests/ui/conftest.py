# tests/ui/conftest.py
"""
UIテスト共通のフィクスチャ。ディスプレイのない環境でも動くようoffscreenプラットフォームを使います。
"""
import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtWidgets import QApplication

# PySide6のテストにはQApplicationのインスタンスが必要
@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app
