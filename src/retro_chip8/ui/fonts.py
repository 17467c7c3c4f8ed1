"""
UIフォント管理モジュール。

インスペクタ表示用の等幅フォントを、プラットフォームごとに利用可能なものから選択します。
"""
from typing import Optional

from PySide6.QtGui import QFont, QFontDatabase

_PREFERRED_FAMILIES = ("Consolas", "Menlo", "Monaco", "DejaVu Sans Mono", "Courier New")
_resolved_family: Optional[str] = None

# @intent:responsibility 利用可能な等幅フォントファミリー名を返します。結果は初回のみ解決します。
def get_monospace_font_family() -> str:
    global _resolved_family
    if _resolved_family is None:
        available = set(QFontDatabase.families())
        _resolved_family = next(
            (family for family in _PREFERRED_FAMILIES if family in available),
            QFontDatabase.systemFont(QFontDatabase.FixedFont).family(),
        )
    return _resolved_family

def get_monospace_font(size: int = 10) -> QFont:
    return QFont(get_monospace_font_family(), size)
