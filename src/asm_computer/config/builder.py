from typing import Mapping, Optional, Tuple

from asm_computer.core.machine import AsmComputer
from asm_computer.core.operator import Operator
from asm_computer.core.registers import RegisterBank
from asm_computer.loader.assembler import load_program_file
from asm_computer.operators.maps import build_operator_table
from asm_computer.transport.points import PointMap, RegisterPoint
from .models import MachineConfig

# @intent:responsibility マシン構成（Config）に基づいて、レジスタバンク・オペレータテーブル・マシン・ポイントを生成・接続します。
class MachineBuilder:
    def build(self, config: MachineConfig,
              operators: Optional[Mapping[str, Operator]] = None) -> Tuple[AsmComputer, PointMap]:
        bank = RegisterBank(config.int_registers, config.double_registers)

        # オペレータテーブルはマシンごとに構築時に一度だけ渡す
        if operators is None:
            operators = build_operator_table()
        machine = AsmComputer(bank, operators)

        points = PointMap(bank)
        for point in config.points:
            points.register_point(RegisterPoint(
                name=point.name,
                kind=point.kind,
                register=point.register,
                direction=point.direction,
            ))

        if config.program_path:
            machine.load_program(load_program_file(config.program_path))

        return machine, points
