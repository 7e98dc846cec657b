# asm_computer/operators/maps.py
"""
オペコードとオペレータ実装のマッピング定義。
"""
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from asm_computer.core.operator import Operator
from . import arithmetic
from . import compare
from . import control
from . import load

# @intent:map 組み込みオペレータの一覧。
OPERATORS: Tuple[Operator, ...] = (
    *arithmetic.ARITHMETIC_OPERATORS,
    *load.LOAD_OPERATORS,
    *compare.COMPARE_OPERATORS,
    *control.CONTROL_OPERATORS,
)


# @intent:responsibility オペコードからオペレータへの不変マッピングを構築します。
# @intent:rationale テーブルはホストがマシン構築時に一度だけ生成して渡すもので、プロセス全体で共有される可変状態ではありません。
def build_operator_table(operators: Iterable[Operator] = OPERATORS,
                         extra: Iterable[Operator] = ()) -> Mapping[str, Operator]:
    """
    組み込みオペレータに追加のオペレータを加えたテーブルを返します。
    オペコードの重複はValueErrorとなります。
    """
    table = {}
    for operator in (*operators, *extra):
        if operator.opcode in table:
            raise ValueError(f"Duplicate opcode: {operator.opcode}")
        table[operator.opcode] = operator
    return MappingProxyType(table)
