# asm_computer/core/registers.py
"""
Core Layer (レジスタバンク)

このモジュールは、マシンの型付きレジスタ群（整数・倍精度浮動小数点）を保持するデータ構造を定義します。
レジスタはマシンのプロビジョニング時に固定で生成され、実行中に追加・削除されることはありません。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Union

Number = Union[int, float]

INT_BITS = 32
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1


# @intent:responsibility レジスタの数値種別を定義します。2つの種別の名前空間は互いに独立です。
class RegisterKind(Enum):
    INT = "int"
    DOUBLE = "double"

    @property
    def zero(self) -> Number:
        return 0 if self is RegisterKind.INT else 0.0

    @property
    def other(self) -> "RegisterKind":
        return RegisterKind.DOUBLE if self is RegisterKind.INT else RegisterKind.INT


# @intent:utility_function 整数を32ビット2の補数で表現できる範囲へ折り返します。
def to_int32(value: int) -> int:
    """Wrap to signed 32-bit."""
    return ((value - INT_MIN) & 0xFFFFFFFF) + INT_MIN


# @intent:utility_function 種別に応じて値を格納形式へ変換します。
def coerce(kind: RegisterKind, value: Number) -> Number:
    if kind is RegisterKind.INT:
        return to_int32(int(value))
    return float(value)


# @intent:responsibility 単一の名前付きレジスタとその現在値を保持します。
@dataclass
class Register:
    """
    名前付きの可変セル。contentsは種別に応じてintまたはfloatです。
    """
    name: str
    kind: RegisterKind
    contents: Number = 0


# @intent:responsibility 種別ごとに分離された名前空間でレジスタを管理します。
# @intent:rationale 存在しないレジスタへの書き込みでゼロ値のレジスタを暗黙に生成することはありません。
class RegisterBank:
    """
    整数レジスタと倍精度レジスタの2つの名前空間を持つレジスタバンク。
    """
    # @intent:pre-condition 同じ名前が両方の種別に存在してはいけません。
    def __init__(self, int_registers: Optional[Mapping[str, int]] = None,
                 double_registers: Optional[Mapping[str, float]] = None):
        int_registers = dict(int_registers or {})
        double_registers = dict(double_registers or {})

        shared = set(int_registers) & set(double_registers)
        if shared:
            raise ValueError(f"Register names used by both kinds: {', '.join(sorted(shared))}")

        self._initial: Dict[RegisterKind, Dict[str, Number]] = {
            RegisterKind.INT: {name: coerce(RegisterKind.INT, v) for name, v in int_registers.items()},
            RegisterKind.DOUBLE: {name: coerce(RegisterKind.DOUBLE, v) for name, v in double_registers.items()},
        }
        self._registers: Dict[RegisterKind, Dict[str, Register]] = {kind: {} for kind in RegisterKind}
        for kind, values in self._initial.items():
            for name, value in values.items():
                if not name:
                    raise ValueError("Register name must not be empty.")
                self._registers[kind][name] = Register(name, kind, value)

    def contains(self, kind: RegisterKind, name: str) -> bool:
        return name in self._registers[kind]

    def names(self, kind: RegisterKind) -> List[str]:
        return list(self._registers[kind])

    # @intent:responsibility レジスタの現在値を返します。存在しない場合はNoneです。
    def get(self, kind: RegisterKind, name: str) -> Optional[Number]:
        register = self._registers[kind].get(name)
        if register is None:
            return None
        return register.contents

    # @intent:responsibility レジスタの現在値を返します。存在しない場合はNoSuchRegisterを送出します。
    def require(self, kind: RegisterKind, name: str) -> Number:
        register = self._registers[kind].get(name)
        if register is None:
            from asm_computer.core.errors import NoSuchRegister
            raise NoSuchRegister(name, kind)
        return register.contents

    # @intent:responsibility 既存のレジスタの値を置き換えます。
    # @intent:post-condition 整数は32ビットに折り返され、倍精度はfloatとして格納されます。
    def set(self, kind: RegisterKind, name: str, value: Number) -> None:
        register = self._registers[kind].get(name)
        if register is None:
            from asm_computer.core.errors import NoSuchRegister
            raise NoSuchRegister(name, kind)
        register.contents = coerce(kind, value)

    def dump(self, kind: RegisterKind) -> Dict[str, Number]:
        """
        指定種別の全レジスタの値をコピーとして返します。
        """
        return {name: reg.contents for name, reg in self._registers[kind].items()}

    # @intent:responsibility スナップショットなどから複数のレジスタ値を復元します。
    def load(self, kind: RegisterKind, values: Mapping[str, Number]) -> None:
        for name, value in values.items():
            self.set(kind, name, value)

    # @intent:responsibility 全てのレジスタをプロビジョニング時の初期値に戻します。
    def reset(self) -> None:
        for kind, values in self._initial.items():
            self.load(kind, values)
