# tests/operators/test_arithmetic.py
"""
算術論理演算命令の単体テスト。
"""
import math
import unittest

from asm_computer.core.errors import DivisionByZero, NoSuchRegister, UnresolvedOperand
from asm_computer.core.machine import AsmComputer
from asm_computer.core.registers import INT_MAX, INT_MIN, RegisterBank, RegisterKind
from asm_computer.core.snapshot import Instruction
from asm_computer.core.state import MachineState
from asm_computer.operators.maps import build_operator_table

INT = RegisterKind.INT
DOUBLE = RegisterKind.DOUBLE


class TestArithmeticInstructions(unittest.TestCase):
    def setUp(self):
        self.machine = AsmComputer(
            RegisterBank({"a": 0, "b": 0}, {"x": 0.0, "y": 0.0}),
            build_operator_table(),
        )

    def _execute(self, opcode, *args):
        self.machine.execute([Instruction(opcode, tuple(args))])

    def _int(self, name):
        return self.machine.get_register(INT, name)

    def _double(self, name):
        return self.machine.get_register(DOUBLE, name)

    def test_subi_fold(self):
        self.machine.registers.set(INT, "a", 10)
        # SUBI a 3 2 -> 10 - 3 - 2
        self._execute("subi", "a", "3", "2")
        self.assertEqual(self._int("a"), 5)

    def test_subd_fold(self):
        self.machine.registers.set(DOUBLE, "x", 10.0)
        self._execute("subd", "x", "2.5", "0.5")
        self.assertEqual(self._double("x"), 7.0)

    def test_subi_order_matters(self):
        self.machine.registers.set(INT, "a", 1)
        self.machine.registers.set(INT, "b", 10)
        self._execute("subi", "b", "a", "4")
        self.assertEqual(self._int("b"), 5)

    def test_addi_and_addd(self):
        self._execute("addi", "a", "1", "2", "3")
        self._execute("addd", "x", "0.5", "0.25")
        self.assertEqual(self._int("a"), 6)
        self.assertEqual(self._double("x"), 0.75)

    def test_addi_wraps_at_32_bits(self):
        self.machine.registers.set(INT, "a", INT_MAX)
        self._execute("addi", "a", "1")
        self.assertEqual(self._int("a"), INT_MIN)

    def test_muli(self):
        self.machine.registers.set(INT, "a", 3)
        self._execute("muli", "a", "-4", "2")
        self.assertEqual(self._int("a"), -24)

    def test_muld(self):
        self.machine.registers.set(DOUBLE, "x", 1.5)
        self._execute("muld", "x", "4")
        self.assertEqual(self._double("x"), 6.0)

    def test_divi_truncates_toward_zero(self):
        self.machine.registers.set(INT, "a", -7)
        self._execute("divi", "a", "2")
        self.assertEqual(self._int("a"), -3)

    def test_modi_sign_follows_dividend(self):
        self.machine.registers.set(INT, "a", -7)
        self._execute("modi", "a", "3")
        self.assertEqual(self._int("a"), -1)

    def test_divi_overflow_wraps(self):
        self.machine.registers.set(INT, "a", INT_MIN)
        self._execute("divi", "a", "-1")
        self.assertEqual(self._int("a"), INT_MIN)

    def test_divi_by_zero_errors_without_commit(self):
        self.machine.registers.set(INT, "a", 9)
        self._execute("divi", "a", "3", "0")
        self.assertEqual(self.machine.state, MachineState.ERRORED)
        self.assertIsInstance(self.machine.fault, DivisionByZero)
        self.assertEqual(self._int("a"), 9)

    def test_divd_by_zero_follows_ieee(self):
        self.machine.registers.set(DOUBLE, "x", 1.0)
        self.machine.registers.set(DOUBLE, "y", -1.0)
        self._execute("divd", "x", "0")
        self._execute("divd", "y", "0")
        self.assertEqual(self._double("x"), math.inf)
        self.assertEqual(self._double("y"), -math.inf)
        self.assertEqual(self.machine.state, MachineState.RUNNING)

    def test_divd_zero_by_zero_is_nan(self):
        self._execute("divd", "x", "0")
        self.assertTrue(math.isnan(self._double("x")))

    def test_bitwise(self):
        self.machine.registers.set(INT, "a", 0b1100)
        self._execute("andi", "a", "10")
        self.assertEqual(self._int("a"), 0b1000)
        self._execute("ori", "a", "1")
        self.assertEqual(self._int("a"), 0b1001)
        self._execute("xori", "a", "15")
        self.assertEqual(self._int("a"), 0b0110)

    def test_shifts(self):
        self.machine.registers.set(INT, "a", 1)
        self._execute("shli", "a", "31")
        self.assertEqual(self._int("a"), INT_MIN)
        self._execute("shri", "a", "30")
        self.assertEqual(self._int("a"), -2)

    def test_unparseable_operand(self):
        self.machine.registers.set(INT, "a", 10)
        self._execute("subi", "a", "abc")
        self.assertEqual(self.machine.state, MachineState.ERRORED)
        self.assertIsInstance(self.machine.fault, UnresolvedOperand)
        self.assertIn("abc", self.machine.reasoning)
        self.assertEqual(self._int("a"), 10)

    def test_int_instruction_rejects_double_register(self):
        self._execute("addi", "x", "1")
        self.assertIsInstance(self.machine.fault, NoSuchRegister)
        self.assertEqual(self._double("x"), 0.0)

    def test_double_register_operand_is_no_such_register(self):
        self.machine.registers.set(INT, "a", 10)
        self.machine.registers.set(DOUBLE, "x", 2.5)
        self._execute("subi", "a", "x")
        self.assertEqual(self.machine.state, MachineState.ERRORED)
        self.assertIsInstance(self.machine.fault, NoSuchRegister)
        self.assertEqual(self.machine.reasoning, "NoSuchRegister: Nonexistent int register x")
        self.assertEqual(self._int("a"), 10)

    def test_int_register_operand_in_double_instruction(self):
        self._execute("addd", "y", "1.5", "a")
        self.assertIsInstance(self.machine.fault, NoSuchRegister)
        self.assertEqual(self._double("y"), 0.0)

    def test_int_instruction_rejects_double_literal(self):
        self._execute("addi", "a", "1.5")
        self.assertIsInstance(self.machine.fault, UnresolvedOperand)


if __name__ == '__main__':
    unittest.main()
