# asm_computer/operators/control.py
"""
制御命令の実装。
"""
from typing import List, Sequence

from asm_computer.core.errors import NoSuchLabel
from asm_computer.core.operand import resolve_operand
from asm_computer.core.operator import Operator, OperatorDescriptor
from asm_computer.core.registers import RegisterKind


# --- NOP ---
# @intent:responsibility 何もしない命令。
class NopOperator(Operator):
    def __init__(self, cost: float = 0.0):
        super().__init__(OperatorDescriptor("nop", 0, 0, cost))

    def execute(self, args: Sequence[str], machine) -> None:
        pass


# --- HLT ---
# @intent:responsibility マシンをHALTED状態へ遷移させ、正常停止させます。
class HaltOperator(Operator):
    def __init__(self, cost: float = 0.0):
        super().__init__(OperatorDescriptor("hlt", 0, 0, cost))

    def execute(self, args: Sequence[str], machine) -> None:
        machine.halt()


# --- JMP ---
# @intent:responsibility 無条件にラベルへジャンプします。
class JumpOperator(Operator):
    def __init__(self, cost: float = 0.0):
        super().__init__(OperatorDescriptor("jmp", 1, 1, cost))

    def execute(self, args: Sequence[str], machine) -> None:
        machine.jump(args[0])


# --- JZ / JNZ ---
# @intent:responsibility 整数オペランドがゼロか（jz）非ゼロか（jnz）でラベルへ分岐します。
# @intent:rationale 分岐しない場合もラベルの存在を検証し、到達しない分岐先の誤りも検出します。
class BranchOperator(Operator):
    def __init__(self, opcode: str, jump_if_zero: bool, cost: float = 0.0):
        super().__init__(OperatorDescriptor(opcode, 2, 2, cost))
        self.jump_if_zero = jump_if_zero

    def execute(self, args: Sequence[str], machine) -> None:
        condition, label = args
        value = resolve_operand(machine.registers, RegisterKind.INT, condition)
        if label not in machine.program.labels:
            raise NoSuchLabel(label)
        if (value == 0) == self.jump_if_zero:
            machine.jump(label)


# @intent:map 制御オペレータの一覧。
CONTROL_OPERATORS: List[Operator] = [
    NopOperator(),
    HaltOperator(),
    JumpOperator(),
    BranchOperator("jz", jump_if_zero=True),
    BranchOperator("jnz", jump_if_zero=False),
]
