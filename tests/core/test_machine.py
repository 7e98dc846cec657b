# tests/core/test_machine.py
"""
asm_computer.core.machineモジュールの単体テスト。
状態遷移、命令サイクル、ティック予算、スナップショットと復元を検証します。
"""
import pytest

from asm_computer.core.errors import NoSuchRegister, UnresolvedOperand, render_reasoning
from asm_computer.core.machine import AsmComputer
from asm_computer.core.operator import ArithmeticOperator
from asm_computer.core.registers import RegisterBank, RegisterKind
from asm_computer.core.snapshot import Instruction, Snapshot
from asm_computer.core.state import MachineState
from asm_computer.loader.assembler import parse_program
from asm_computer.operators.maps import build_operator_table

INT = RegisterKind.INT
DOUBLE = RegisterKind.DOUBLE

# @intent:test_suite マシン状態コントローラと実行ループの検証。

@pytest.fixture
def machine():
    return AsmComputer(RegisterBank({"a": 10, "b": 0}, {"x": 0.0}), build_operator_table())


class TestStateController:
    def test_initial_state(self, machine):
        assert machine.state is MachineState.RUNNING
        assert machine.is_running
        assert machine.reasoning == ""
        assert machine.fault is None

    # @intent:test_case_atomic_reasoning Errored遷移とreasoningが同時に設定されることを検証します。
    def test_set_fault_sets_state_and_reasoning(self, machine):
        fault = NoSuchRegister("q", INT)
        machine.set_fault(fault)
        assert machine.state is MachineState.ERRORED
        assert machine.fault is fault
        assert machine.reasoning == "NoSuchRegister: Nonexistent int register q"

    # @intent:test_case_first_fault_wins 既に終端状態なら後続のフォールトで理由が上書きされないことを検証します。
    def test_first_fault_wins(self, machine):
        machine.set_fault(NoSuchRegister("q", INT))
        machine.set_fault(UnresolvedOperand("zz", INT))
        assert isinstance(machine.fault, NoSuchRegister)

    def test_halt_keeps_reasoning_empty(self, machine):
        machine.halt()
        assert machine.state is MachineState.HALTED
        assert machine.reasoning == ""

    def test_fault_after_halt_is_ignored(self, machine):
        machine.halt()
        machine.set_fault(NoSuchRegister("q", INT))
        assert machine.state is MachineState.HALTED
        assert machine.fault is None

    # @intent:test_case_reset 外部リセットでRUNNINGに戻り、レジスタとreasoningが初期化されることを検証します。
    def test_reset(self, machine):
        machine.execute([Instruction("subi", ("a", "3")), Instruction("subi", ("a", "nope"))])
        assert machine.state is MachineState.ERRORED
        assert machine.get_register(INT, "a") == 7

        machine.reset()
        assert machine.state is MachineState.RUNNING
        assert machine.reasoning == ""
        assert machine.fault is None
        assert machine.get_register(INT, "a") == 10
        assert machine.instruction_count == 0


class TestExecution:
    # @intent:test_case_partial_mutation 失敗前の命令による変更は保持され、失敗した命令は何も書き込まないことを検証します。
    def test_execute_keeps_earlier_mutations(self, machine):
        executed = machine.execute([
            Instruction("addi", ("a", "5")),
            Instruction("addi", ("b", "1", "oops")),
            Instruction("addi", ("a", "100")),
        ])
        assert executed == 2
        assert machine.get_register(INT, "a") == 15
        assert machine.get_register(INT, "b") == 0
        assert "oops" in machine.reasoning

    def test_step_runs_program(self, machine):
        machine.load_program(parse_program("subi a 3 2\naddd x 1.5"))
        snapshot = machine.step()
        assert isinstance(snapshot, Snapshot)
        assert snapshot.instruction.opcode == "subi"
        assert snapshot.int_registers["a"] == 5
        assert snapshot.pc == 1
        assert snapshot.metadata.instruction_count == 1

        machine.step()
        assert machine.get_register(DOUBLE, "x") == 1.5

    # @intent:test_case_end_of_program プログラム終端に達するとHALTEDへ遷移することを検証します。
    def test_step_past_end_halts(self, machine):
        machine.load_program(parse_program("nop"))
        machine.step()
        snapshot = machine.step()
        assert snapshot.instruction is None
        assert snapshot.state is MachineState.HALTED
        assert machine.step() is None

    def test_step_after_error_returns_none(self, machine):
        machine.load_program(parse_program("bogus\nsubi a 1"))
        snapshot = machine.step()
        assert snapshot.state is MachineState.ERRORED
        assert "bogus" in snapshot.reasoning
        assert machine.step() is None
        assert machine.get_register(INT, "a") == 10

    def test_run_loop_program(self, machine):
        machine.load_program(parse_program("""
        loop:
            subi a 1
            addi b 2
            jnz a loop
            hlt
        """))
        executed = machine.run(max_instructions=1000)
        assert machine.state is MachineState.HALTED
        assert machine.get_register(INT, "a") == 0
        assert machine.get_register(INT, "b") == 20
        assert executed == 31

    # @intent:test_case_instruction_budget 命令数の予算で実行が中断され、次回の呼び出しで再開できることを検証します。
    def test_run_respects_instruction_budget(self, machine):
        machine.load_program(parse_program("loop:\naddi b 1\njmp loop"))
        assert machine.run(max_instructions=5) == 5
        assert machine.is_running
        assert machine.get_register(INT, "b") == 3
        assert machine.run(max_instructions=5) == 5
        assert machine.get_register(INT, "b") == 5

    # @intent:test_case_cost_budget オペレータのコストによる予算制限を検証します。
    def test_run_respects_cost_budget(self):
        table = build_operator_table(extra=[ArithmeticOperator("slowadd", INT, lambda a, b: a + b, cost=2.0)])
        machine = AsmComputer(RegisterBank({"a": 0}), table)
        machine.load_program(parse_program("loop:\nslowadd a 1\njmp loop"))
        # slowadd(2.0) + jmp + slowadd(2.0) + jmp = 4.0, 次のslowaddで超過
        assert machine.run(max_instructions=100, cost_budget=5.0) == 4
        assert machine.get_register(INT, "a") == 2
        assert machine.total_cost == 4.0

    def test_run_always_makes_progress(self):
        table = build_operator_table(extra=[ArithmeticOperator("slowadd", INT, lambda a, b: a + b, cost=10.0)])
        machine = AsmComputer(RegisterBank({"a": 0}), table)
        machine.load_program(parse_program("slowadd a 1\nslowadd a 1"))
        assert machine.run(max_instructions=10, cost_budget=1.0) == 1
        assert machine.get_register(INT, "a") == 1

    def test_jump_to_unknown_label_errors(self, machine):
        machine.load_program(parse_program("jmp nowhere\nsubi a 1"))
        machine.run(max_instructions=10)
        assert machine.state is MachineState.ERRORED
        assert "nowhere" in machine.reasoning
        assert machine.get_register(INT, "a") == 10


class TestSnapshotAndRestore:
    def test_snapshot_is_a_copy(self, machine):
        snapshot = machine.create_snapshot(None)
        machine.registers.set(INT, "a", 1)
        assert snapshot.int_registers["a"] == 10

    def test_restore(self, machine):
        machine.load_program(parse_program("subi a 1\nsubi a 1\nbad"))
        first = machine.step()
        machine.step()
        machine.step()
        assert machine.state is MachineState.ERRORED

        machine.restore(first)
        assert machine.state is MachineState.RUNNING
        assert machine.reasoning == ""
        assert machine.fault is None
        assert machine.pc == 1
        assert machine.get_register(INT, "a") == 9

    # @intent:test_case_restore_fault ERRORED時点のスナップショットから復元するとfaultとreasoningが一致することを検証します。
    def test_restore_errored_snapshot_keeps_fault_consistent(self, machine):
        machine.execute([Instruction("subi", ("a", "nope"))])
        errored = machine.create_snapshot(None)
        assert errored.fault is machine.fault

        machine.reset()
        machine.execute([Instruction("subi", ("q", "1"))])
        assert isinstance(machine.fault, NoSuchRegister)

        machine.restore(errored)
        assert machine.state is MachineState.ERRORED
        assert isinstance(machine.fault, UnresolvedOperand)
        assert machine.fault.token == "nope"
        assert machine.reasoning == render_reasoning(machine.fault)


class TestInspection:
    def test_register_map(self, machine):
        assert machine.get_register_map() == {"a": 10, "b": 0, "x": 0.0}

    def test_register_layout(self, machine):
        layout = machine.get_register_layout()
        assert [group.group_name for group in layout] == ["Integer", "Double"]
        assert [reg.name for reg in layout[0].registers] == ["a", "b"]
        assert layout[1].registers[0].kind is DOUBLE
