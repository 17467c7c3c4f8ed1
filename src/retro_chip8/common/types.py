"""
パッケージ横断で使う型エイリアスと表示用の定義。
"""
from typing import Callable, List, NamedTuple, Tuple

# @intent:data_structure インスペクタに並べるレジスタ1つ分。widthは16進表示の桁数計算に使う。
class RegisterInfo(NamedTuple):
    name: str
    width: int

# @intent:data_structure インスペクタ上でまとめて表示するレジスタの組（"Pointers", "Timers" など）。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]

Color = Tuple[int, int, int]  # (R, G, B)

# @intent:data_structure 発音要求の受け手。引数は (周波数Hz, 長さms)。
ToneCallback = Callable[[int, int], None]
