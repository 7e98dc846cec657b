# asm_computer/operators/load.py
"""
データ転送命令の実装。
"""
import math
from typing import Callable, List, Sequence

from asm_computer.core.errors import ConversionFault
from asm_computer.core.operand import resolve_operand
from asm_computer.core.operator import Operator, OperatorDescriptor
from asm_computer.core.registers import Number, RegisterKind


# @intent:utility_function 倍精度値を0方向へ切り捨てて整数化します。NaNと無限大は変換できません。
def _double_to_int(value: float) -> int:
    if math.isnan(value) or math.isinf(value):
        raise ConversionFault(value)
    return int(value)


# @intent:responsibility `op dst src` 形式の転送命令。srcはsource_kindで解決され、dst_kindへ変換して書き込まれます。
class TransferOperator(Operator):
    def __init__(self, opcode: str, source_kind: RegisterKind, dest_kind: RegisterKind,
                 convert: Callable[[Number], Number], cost: float = 0.0):
        super().__init__(OperatorDescriptor(opcode, 2, 2, cost))
        self.source_kind = source_kind
        self.dest_kind = dest_kind
        self.convert = convert

    def execute(self, args: Sequence[str], machine) -> None:
        bank = machine.registers
        destination, source = args
        bank.require(self.dest_kind, destination)
        value = self.convert(resolve_operand(bank, self.source_kind, source))
        bank.set(self.dest_kind, destination, value)


# @intent:map データ転送オペレータの一覧。
LOAD_OPERATORS: List[TransferOperator] = [
    TransferOperator("movi", RegisterKind.INT, RegisterKind.INT, int),
    TransferOperator("movd", RegisterKind.DOUBLE, RegisterKind.DOUBLE, float),
    TransferOperator("itod", RegisterKind.INT, RegisterKind.DOUBLE, float),
    TransferOperator("dtoi", RegisterKind.DOUBLE, RegisterKind.INT, _double_to_int),
]
