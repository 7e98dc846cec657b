# asm_computer/core/dispatcher.py
"""
Core Layer (ディスパッチャ)

命令のオペコードを対応するOperatorへ完全一致で引き当て、アリティを検証してからrunを呼び出します。
オペレータテーブルはホストが所有し、マシン構築時に一度だけ渡される不変マッピングです。
"""
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping, Optional

from asm_computer.core.errors import ArityMismatch, MachineFault, UnknownOpcode
from asm_computer.core.operator import Operator
from asm_computer.core.snapshot import Instruction

if TYPE_CHECKING:
    from asm_computer.core.machine import AsmComputer


# @intent:responsibility 命令を対応するOperatorへディスパッチします。
class Dispatcher:
    """
    オペコードからOperatorへの不変マッピングを保持し、命令を実行へ振り分けるクラス。
    """
    # @intent:pre-condition operatorsのキーは各Operatorのopcodeと一致している必要があります。
    def __init__(self, operators: Mapping[str, Operator]):
        for opcode, operator in operators.items():
            if not isinstance(operator, Operator):
                raise TypeError(f"Operator for {opcode} must be an instance of Operator.")
            if operator.opcode != opcode:
                raise ValueError(f"Operator table key {opcode} does not match operator opcode {operator.opcode}.")
        self._operators: Mapping[str, Operator] = MappingProxyType(dict(operators))

    @property
    def operators(self) -> Mapping[str, Operator]:
        return self._operators

    def lookup(self, opcode: str) -> Optional[Operator]:
        return self._operators.get(opcode)

    # @intent:responsibility 1命令を実行します。
    # @intent:post-condition オペレータが呼び出された場合にTrueを返します。
    #                       マシンが実行中でない場合、または検証に失敗した場合はFalseです。
    def dispatch(self, instruction: Instruction, machine: "AsmComputer") -> bool:
        """
        マシンが実行中であることを確認し、命令をマシンの累計へ計上した上で、オペコードの引き当てとアリティ検証を行ってからrunを呼び出します。
        検証の失敗はマシンのErrored遷移として報告され、レジスタは変更されません。
        """
        if not machine.is_running:
            return False

        # 検証に失敗する命令も1命令として計上する
        machine.account(instruction)

        operator = self._operators.get(instruction.opcode)
        if operator is None:
            machine.set_fault(UnknownOpcode(instruction.opcode))
            return False

        if not operator.accepts(len(instruction.args)):
            machine.set_fault(ArityMismatch(instruction.opcode, len(instruction.args),
                                            operator.min_args, operator.max_args))
            return False

        try:
            operator.run(instruction.args, machine)
        except MachineFault as fault:
            # run()を上書きした外部オペレータがフォールトを送出した場合の受け皿
            machine.set_fault(fault)
        return True

    # @intent:responsibility 命令列を順に実行し、マシンが実行中でなくなった時点で以降をスキップします。
    def execute_batch(self, instructions: Iterable[Instruction], machine: "AsmComputer") -> int:
        executed = 0
        for instruction in instructions:
            if not machine.is_running:
                break
            if self.dispatch(instruction, machine):
                executed += 1
        return executed
