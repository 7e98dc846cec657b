# asm_computer/core/operator.py
"""
Core Layer (オペレータ)

このモジュールは、オペコードごとの振る舞いの単位であるOperatorのインターフェースと、
n項算術演算の共通テンプレート（ArithmeticOperator）を提供します。
具体的なオペコード群は asm_computer.operators パッケージで定義されます。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

from asm_computer.core.errors import MachineFault
from asm_computer.core.operand import resolve_operands
from asm_computer.core.registers import Number, RegisterKind

if TYPE_CHECKING:
    from asm_computer.core.machine import AsmComputer

CombineFunc = Callable[[Number, Number], Number]

DEFAULT_MAX_OPERANDS = 16


# @intent:responsibility オペコードごとの不変メタデータ（アリティ範囲とコスト）を保持します。
@dataclass(frozen=True)
class OperatorDescriptor:
    """
    opcode: 一意なキー
    min_args / max_args: オペランド数の包含的な範囲
    cost: ホストがスケジューリングに利用する非負の重み（コア自身は解釈しない）
    """
    opcode: str
    min_args: int
    max_args: int
    cost: float = 0.0

    def __post_init__(self):
        if not self.opcode:
            raise ValueError("Operator opcode must not be empty.")
        if not 0 <= self.min_args <= self.max_args:
            raise ValueError(f"Invalid arity range for {self.opcode}: {self.min_args}..{self.max_args}")
        if self.cost < 0:
            raise ValueError(f"Operator cost must be non-negative: {self.opcode}")


# @intent:responsibility 全てのオペレータが満たすべき契約（opcode, アリティ, cost, run）を定義します。
# @intent:rationale Template Methodパターンを採用し、run()がフォールトを捕捉してErrored遷移に変換します。
#                  具象オペレータはexecute()を実装し、失敗時はMachineFaultを送出するだけでよい。
class Operator(ABC):
    """
    命令の振る舞いの単位。runは例外を送出せず、失敗はマシン状態の遷移で通知します。
    """
    def __init__(self, descriptor: OperatorDescriptor):
        self._descriptor = descriptor

    @property
    def descriptor(self) -> OperatorDescriptor:
        return self._descriptor

    @property
    def opcode(self) -> str:
        return self._descriptor.opcode

    @property
    def min_args(self) -> int:
        return self._descriptor.min_args

    @property
    def max_args(self) -> int:
        return self._descriptor.max_args

    @property
    def cost(self) -> float:
        return self._descriptor.cost

    def accepts(self, count: int) -> bool:
        return self.min_args <= count <= self.max_args

    # @intent:responsibility 命令を実行します。フォールトはマシンのErrored遷移として報告されます。
    def run(self, args: Sequence[str], machine: "AsmComputer") -> None:
        try:
            self.execute(args, machine)
        except MachineFault as fault:
            machine.set_fault(fault)

    # @intent:responsibility オペレータ固有の処理を実行します。
    # @intent:pre-condition len(args)はアリティ範囲内であることがDispatcherにより保証されています。
    @abstractmethod
    def execute(self, args: Sequence[str], machine: "AsmComputer") -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.opcode!r})"


# @intent:responsibility 数値種別と結合関数でパラメータ化されたn項算術演算のテンプレートです。
# @intent:rationale 全オペランドを先に解決・検証し、畳み込み結果を最後に1回だけ書き込みます。
#                  途中で失敗した場合、デスティネーションレジスタは変更されません。
class ArithmeticOperator(Operator):
    """
    `op dst a b ...` を dst = combine(combine(dst, a), b) ... として実行します。
    """
    def __init__(self, opcode: str, kind: RegisterKind, combine: CombineFunc, cost: float = 0.0,
                 min_args: int = 2, max_args: int = DEFAULT_MAX_OPERANDS):
        super().__init__(OperatorDescriptor(opcode, min_args, max_args, cost))
        self.kind = kind
        self.combine = combine

    def execute(self, args: Sequence[str], machine: "AsmComputer") -> None:
        bank = machine.registers
        destination = args[0]
        # 1. デスティネーションの検証と累積値の読み出し
        accumulator = bank.require(self.kind, destination)
        # 2. 全オペランドを書き込み前に解決
        operands = resolve_operands(bank, self.kind, args[1:])
        # 3. 左から順に畳み込み（減算などは非可換）
        for value in operands:
            accumulator = self.combine(accumulator, value)
        # 4. 単一の最終書き込み
        bank.set(self.kind, destination, accumulator)
