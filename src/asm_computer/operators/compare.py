# asm_computer/operators/compare.py
"""
比較命令の実装。

`op dst a b` の形式で、a と b を比較した結果（真なら1、偽なら0）を整数レジスタ dst へ書き込みます。
a と b はオペレータの数値種別で解決されますが、dst は常に整数レジスタです。
"""
import operator as py_operator
from typing import Callable, List, Sequence

from asm_computer.core.operand import resolve_operands
from asm_computer.core.operator import Operator, OperatorDescriptor
from asm_computer.core.registers import Number, RegisterKind


# @intent:responsibility 2値を比較し、結果を整数レジスタへ格納するオペレータ。
class CompareOperator(Operator):
    def __init__(self, opcode: str, kind: RegisterKind, predicate: Callable[[Number, Number], bool],
                 cost: float = 0.0):
        super().__init__(OperatorDescriptor(opcode, 3, 3, cost))
        self.kind = kind
        self.predicate = predicate

    def execute(self, args: Sequence[str], machine) -> None:
        bank = machine.registers
        destination = args[0]
        bank.require(RegisterKind.INT, destination)
        left, right = resolve_operands(bank, self.kind, args[1:])
        bank.set(RegisterKind.INT, destination, 1 if self.predicate(left, right) else 0)


def _pair(suffix: str, predicate: Callable[[Number, Number], bool]) -> List[CompareOperator]:
    return [
        CompareOperator(f"c{suffix}i", RegisterKind.INT, predicate),
        CompareOperator(f"c{suffix}d", RegisterKind.DOUBLE, predicate),
    ]


# @intent:map 比較オペレータの一覧（ceqi, ceqd, cnei, cned, clti, cltd, cgti, cgtd）。
COMPARE_OPERATORS: List[CompareOperator] = (
    _pair("eq", py_operator.eq)
    + _pair("ne", py_operator.ne)
    + _pair("lt", py_operator.lt)
    + _pair("gt", py_operator.gt)
)
