# asm_computer/core/operand.py
"""
Core Layer (オペランド解決)

オペランドトークンを「レジスタの値」または「リテラル値」のいずれかに解決します。
解決規則:
  1. トークンが指定種別のレジスタ名に一致すれば、その現在値を返す（レジスタ名がリテラル解釈より優先）
  2. 他方の種別のレジスタ名に一致すれば NoSuchRegister を送出する（暗黙の型変換は行わない）
  3. そうでなければ、指定種別のリテラルとして解釈する
  4. どちらでもなければ UnresolvedOperand を送出する
整数と倍精度の名前空間が交差して解決されることはありません。
"""
import re
from typing import Iterable, List, Optional

from asm_computer.core.errors import NoSuchRegister, UnresolvedOperand
from asm_computer.core.registers import INT_MAX, INT_MIN, Number, RegisterBank, RegisterKind

_INT_LITERAL = re.compile(r"[+-]?[0-9]+")
_DOUBLE_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_DOUBLE_SPECIAL = {
    "NaN": float("nan"),
    "Infinity": float("inf"),
    "+Infinity": float("inf"),
    "-Infinity": float("-inf"),
}


# @intent:responsibility トークンを指定種別のリテラルとして解釈します。
# @intent:post-condition 解釈できない場合はNoneを返します。整数は32ビット範囲外ならリテラルとみなしません。
def parse_literal(kind: RegisterKind, token: str) -> Optional[Number]:
    if kind is RegisterKind.INT:
        if not _INT_LITERAL.fullmatch(token):
            return None
        value = int(token)
        if not INT_MIN <= value <= INT_MAX:
            return None
        return value

    if token in _DOUBLE_SPECIAL:
        return _DOUBLE_SPECIAL[token]
    if not _DOUBLE_LITERAL.fullmatch(token):
        return None
    return float(token)


# @intent:responsibility 単一のオペランドトークンを値に解決します。
# @intent:rationale 解決はレジスタバンクを読み取るだけで、副作用を持ちません。
def resolve_operand(bank: RegisterBank, kind: RegisterKind, token: str) -> Number:
    """
    トークンをレジスタの現在値またはリテラル値に解決します。
    他方の種別のレジスタ名は NoSuchRegister、どちらにも該当しない場合は UnresolvedOperand を送出します。
    """
    if bank.contains(kind, token):
        return bank.require(kind, token)
    if bank.contains(kind.other, token):
        raise NoSuchRegister(token, kind)
    value = parse_literal(kind, token)
    if value is None:
        raise UnresolvedOperand(token, kind)
    return value


# @intent:responsibility オペランド列をすべて解決します。最初の失敗で中断します（all-or-nothing）。
def resolve_operands(bank: RegisterBank, kind: RegisterKind, tokens: Iterable[str]) -> List[Number]:
    return [resolve_operand(bank, kind, token) for token in tokens]
