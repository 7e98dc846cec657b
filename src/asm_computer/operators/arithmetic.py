# asm_computer/operators/arithmetic.py
"""
算術論理演算命令の実装。

全ての命令は ArithmeticOperator テンプレートのインスタンスであり、
数値種別と結合関数（と、その初期値となるデスティネーションレジスタ）だけが異なります。
"""
import math
from typing import Callable, List

from asm_computer.core.errors import DivisionByZero
from asm_computer.core.operator import ArithmeticOperator, CombineFunc
from asm_computer.core.registers import INT_BITS, RegisterKind, to_int32

INT = RegisterKind.INT
DOUBLE = RegisterKind.DOUBLE


# @intent:utility_function 0方向へ切り捨てる整数除算を返します。
def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


# @intent:utility_function 被除数の符号を持つ剰余を返します。
def _trunc_mod(a: int, b: int) -> int:
    return a - b * _trunc_div(a, b)


def _int_div(opcode: str) -> CombineFunc:
    def combine(a, b):
        if b == 0:
            raise DivisionByZero(opcode)
        return to_int32(_trunc_div(a, b))
    return combine


def _int_mod(opcode: str) -> CombineFunc:
    def combine(a, b):
        if b == 0:
            raise DivisionByZero(opcode)
        return _trunc_mod(a, b)
    return combine


# @intent:utility_function IEEE-754に従う倍精度除算（ゼロ除算は±infまたはnan）。
def _double_div(a: float, b: float) -> float:
    if b == 0.0:
        if a == 0.0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


# @intent:utility_function シフト量は下位5ビットのみ使用します（32ビット整数のシフト規則）。
def _shift_left(a: int, b: int) -> int:
    return to_int32(a << (b & (INT_BITS - 1)))


def _shift_right(a: int, b: int) -> int:
    return a >> (b & (INT_BITS - 1))


def _int_op(opcode: str, combine: Callable[[int, int], int]) -> ArithmeticOperator:
    return ArithmeticOperator(opcode, INT, lambda a, b: to_int32(combine(a, b)))


def _double_op(opcode: str, combine: Callable[[float, float], float]) -> ArithmeticOperator:
    return ArithmeticOperator(opcode, DOUBLE, combine)


# @intent:map 算術論理演算オペレータの一覧。
ARITHMETIC_OPERATORS: List[ArithmeticOperator] = [
    # Add
    _int_op("addi", lambda a, b: a + b),
    _double_op("addd", lambda a, b: a + b),
    # Subtract
    _int_op("subi", lambda a, b: a - b),
    _double_op("subd", lambda a, b: a - b),
    # Multiply
    _int_op("muli", lambda a, b: a * b),
    _double_op("muld", lambda a, b: a * b),
    # Divide
    ArithmeticOperator("divi", INT, _int_div("divi")),
    _double_op("divd", _double_div),
    ArithmeticOperator("modi", INT, _int_mod("modi")),
    # Bitwise
    _int_op("andi", lambda a, b: a & b),
    _int_op("ori", lambda a, b: a | b),
    _int_op("xori", lambda a, b: a ^ b),
    _int_op("shli", _shift_left),
    _int_op("shri", _shift_right),
]
