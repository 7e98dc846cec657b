# asm_computer/core/errors.py
"""
マシンフォールトの型定義

このモジュールは、命令実行中に発生しうる障害（フォールト）を構造化された値として定義します。
フォールトは問題のトークンやレジスタ名をフィールドとして保持し、
メッセージの整形（reasoning文字列の生成）は別の関心事として `describe()` に分離されています。
"""
from typing import Optional

from asm_computer.core.registers import RegisterKind


# @intent:responsibility 全てのマシンフォールトの基底クラス。
# @intent:rationale フォールトは Operator.run / Dispatcher の境界で捕捉され、Errored状態への遷移に変換されます。
#                  ホストのティックループまで巻き戻ることはありません。
class MachineFault(Exception):
    """
    マシンレベルで回復可能な障害の基底クラス。
    """
    kind: str = "MachineFault"

    def __init__(self) -> None:
        super().__init__(self.describe())

    def describe(self) -> str:
        """
        フォールトの内容を人間が読める文字列で返します。
        """
        return "machine fault"


# @intent:responsibility 存在しない（または種別の異なる）レジスタへの参照を表します。
class NoSuchRegister(MachineFault):
    kind = "NoSuchRegister"

    def __init__(self, name: str, register_kind: RegisterKind):
        self.name = name
        self.register_kind = register_kind
        super().__init__()

    def describe(self) -> str:
        return f"Nonexistent {self.register_kind.value} register {self.name}"


# @intent:responsibility レジスタ名でもリテラルでもないオペランドトークンを表します。
class UnresolvedOperand(MachineFault):
    kind = "UnresolvedOperand"

    def __init__(self, token: str, register_kind: RegisterKind):
        self.token = token
        self.register_kind = register_kind
        super().__init__()

    def describe(self) -> str:
        return f"Cannot resolve {self.token} as {self.register_kind.value} value or register"


# @intent:responsibility オペランド数がオペレータのアリティ範囲外であることを表します。
class ArityMismatch(MachineFault):
    kind = "ArityMismatch"

    def __init__(self, opcode: str, given: int, min_args: int, max_args: int):
        self.opcode = opcode
        self.given = given
        self.min_args = min_args
        self.max_args = max_args
        super().__init__()

    def describe(self) -> str:
        if self.min_args == self.max_args:
            expected = f"{self.min_args}"
        else:
            expected = f"{self.min_args}..{self.max_args}"
        return f"{self.opcode} expects {expected} operands, got {self.given}"


# @intent:responsibility 登録されていないオペコードを表します。
class UnknownOpcode(MachineFault):
    kind = "UnknownOpcode"

    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__()

    def describe(self) -> str:
        return f"Unknown opcode {self.opcode}"


# @intent:responsibility ジャンプ先ラベルがプログラム中に存在しないことを表します。
class NoSuchLabel(MachineFault):
    kind = "NoSuchLabel"

    def __init__(self, label: str):
        self.label = label
        super().__init__()

    def describe(self) -> str:
        return f"Nonexistent label {self.label}"


# @intent:responsibility 整数のゼロ除算を表します。
class DivisionByZero(MachineFault):
    kind = "DivisionByZero"

    def __init__(self, opcode: str):
        self.opcode = opcode
        super().__init__()

    def describe(self) -> str:
        return f"{self.opcode} divided by zero"


# @intent:responsibility 浮動小数点値を整数へ変換できないこと（NaN, 無限大）を表します。
class ConversionFault(MachineFault):
    kind = "ConversionFault"

    def __init__(self, value: float):
        self.value = value
        super().__init__()

    def describe(self) -> str:
        return f"{self.value} cannot be converted to int"


# @intent:responsibility フォールトからMachine Stateのreasoning文字列を生成します。
def render_reasoning(fault: Optional[MachineFault]) -> str:
    """
    フォールトを "<種別>: <説明>" 形式の診断文字列に整形します。
    フォールトがない場合は空文字列を返します。
    """
    if fault is None:
        return ""
    return f"{fault.kind}: {fault.describe()}"
