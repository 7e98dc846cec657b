# tests/core/test_dispatcher.py
"""
asm_computer.core.dispatcherモジュールの単体テスト。
"""
import pytest

from asm_computer.core.dispatcher import Dispatcher
from asm_computer.core.errors import ArityMismatch, MachineFault, UnknownOpcode
from asm_computer.core.machine import AsmComputer
from asm_computer.core.operator import Operator, OperatorDescriptor
from asm_computer.core.registers import RegisterBank, RegisterKind
from asm_computer.core.snapshot import Instruction
from asm_computer.core.state import MachineState
from asm_computer.operators.maps import build_operator_table

INT = RegisterKind.INT

# @intent:test_suite オペコード引き当て、アリティ検証、状態チェックの検証。

class LeakyOperator(Operator):
    """runを上書きしてフォールトをそのまま送出する外部オペレータを模したもの。"""
    def __init__(self):
        super().__init__(OperatorDescriptor("leak", 0, 0))

    def run(self, args, machine):
        raise UnknownOpcode("inner")

    def execute(self, args, machine):
        pass


class TestDispatcher:
    @pytest.fixture
    def machine(self):
        return AsmComputer(RegisterBank({"a": 10, "b": 2}, {"x": 0.0}), build_operator_table())

    def test_dispatch_valid_instruction(self, machine):
        assert machine.dispatcher.dispatch(Instruction("subi", ("a", "3", "2")), machine) is True
        assert machine.get_register(INT, "a") == 5

    # @intent:test_case_unknown_opcode 未登録のオペコードはUnknownOpcodeとなり、レジスタは変化しません。
    def test_unknown_opcode(self, machine):
        assert machine.dispatcher.dispatch(Instruction("frobnicate", ("a",)), machine) is False
        assert machine.state is MachineState.ERRORED
        assert isinstance(machine.fault, UnknownOpcode)
        assert "frobnicate" in machine.reasoning
        assert machine.registers.dump(INT) == {"a": 10, "b": 2}

    # @intent:test_case_exact_match オペコードは完全一致でのみ引き当てられます。
    def test_opcode_lookup_is_exact(self, machine):
        assert machine.dispatcher.lookup("subi") is not None
        assert machine.dispatcher.lookup("SUBI") is None

    # @intent:test_case_arity アリティ範囲外の命令はrunを呼ばずにArityMismatchとなります。
    @pytest.mark.parametrize("args", [(), ("a",)])
    def test_too_few_operands(self, machine, args):
        assert machine.dispatcher.dispatch(Instruction("subi", args), machine) is False
        assert isinstance(machine.fault, ArityMismatch)
        assert machine.fault.given == len(args)
        assert machine.get_register(INT, "a") == 10

    def test_too_many_operands(self, machine):
        assert machine.dispatcher.dispatch(Instruction("movi", ("a", "b", "1")), machine) is False
        assert isinstance(machine.fault, ArityMismatch)
        assert machine.fault.min_args == 2 and machine.fault.max_args == 2

    # @intent:test_case_skip_when_errored Errored状態のマシンでは命令が実行されないことを検証します。
    def test_skips_when_not_running(self, machine):
        machine.dispatcher.dispatch(Instruction("bogus"), machine)
        assert machine.dispatcher.dispatch(Instruction("subi", ("a", "1")), machine) is False
        assert machine.get_register(INT, "a") == 10

    def test_execute_batch_stops_after_fault(self, machine):
        batch = [
            Instruction("subi", ("a", "1")),
            Instruction("subi", ("a", "zzz")),
            Instruction("subi", ("a", "1")),
        ]
        executed = machine.dispatcher.execute_batch(batch, machine)
        assert executed == 2
        assert machine.get_register(INT, "a") == 9
        assert machine.state is MachineState.ERRORED

    # @intent:test_case_accounting 実行中に受理された命令だけが累計命令数に計上されることを検証します。
    def test_dispatch_accounts_instructions(self, machine):
        machine.dispatcher.dispatch(Instruction("subi", ("a", "1")), machine)
        machine.dispatcher.dispatch(Instruction("bogus"), machine)
        machine.dispatcher.dispatch(Instruction("subi", ("a", "1")), machine)
        assert machine.instruction_count == 2

    def test_machine_execute_uses_batch(self, machine):
        executed = machine.execute([
            Instruction("subi", ("a", "1")),
            Instruction("subi", ("a", "x")),
            Instruction("subi", ("a", "1")),
        ])
        assert executed == 2
        assert machine.instruction_count == 2
        assert machine.get_register(INT, "a") == 9

    def test_leaked_fault_is_contained(self):
        machine = AsmComputer(RegisterBank(), build_operator_table(extra=[LeakyOperator()]))
        machine.dispatcher.dispatch(Instruction("leak"), machine)
        assert machine.state is MachineState.ERRORED
        assert "inner" in machine.reasoning

    def test_table_is_read_only(self, machine):
        with pytest.raises(TypeError):
            machine.dispatcher.operators["subi"] = None

    def test_mismatched_table_key_rejected(self):
        table = dict(build_operator_table())
        table["minus"] = table["subi"]
        with pytest.raises(ValueError):
            Dispatcher(table)

    def test_non_operator_rejected(self):
        with pytest.raises(TypeError):
            Dispatcher({"subi": object()})

    # @intent:test_case_determinism 同じ初期状態から同じ命令を実行すると同じ結果になることを検証します。
    def test_dispatch_is_deterministic(self):
        results = []
        for _ in range(2):
            machine = AsmComputer(RegisterBank({"a": 10, "b": 2}), build_operator_table())
            machine.dispatcher.dispatch(Instruction("subi", ("a", "b", "3")), machine)
            results.append((machine.registers.dump(INT), machine.state, machine.reasoning))
        assert results[0] == results[1]
        assert results[0][0]["a"] == 5
