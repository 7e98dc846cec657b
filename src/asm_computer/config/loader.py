import os
import warnings
from typing import Any, Dict, List, Optional

import yaml

from asm_computer.core.registers import RegisterKind
from asm_computer.transport.points import PointDirection
from .models import BudgetConfig, MachineConfig, PointConfig

_KNOWN_KEYS = {"int_registers", "double_registers", "points", "budget", "program"}


class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        return self._parse_config(data or {}, base_dir=os.path.dirname(os.path.abspath(path)))

    def load_from_string(self, text: str) -> MachineConfig:
        return self._parse_config(yaml.safe_load(text) or {})

    def _parse_config(self, data: Dict[str, Any], base_dir: Optional[str] = None) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError("Machine config must be a mapping.")

        for key in data:
            if key not in _KNOWN_KEYS:
                warnings.warn(f"Unknown config key '{key}' ignored")

        int_registers = {
            name: self._parse_int(value)
            for name, value in self._parse_registers(data.get("int_registers", {})).items()
        }
        double_registers = {
            name: self._parse_float(value)
            for name, value in self._parse_registers(data.get("double_registers", {})).items()
        }

        # Parse Points
        points: List[PointConfig] = []
        for point_data in data.get("points", []):
            points.append(PointConfig(
                name=str(point_data["name"]),
                kind=self._parse_kind(point_data.get("kind", "int")),
                register=str(point_data.get("register", point_data["name"])),
                direction=self._parse_direction(point_data.get("direction", "inout")),
            ))

        # Parse Budget
        budget_data = data.get("budget", {})
        cost_per_tick = budget_data.get("cost_per_tick")
        budget = BudgetConfig(
            instructions_per_tick=self._parse_int(budget_data.get("instructions_per_tick", 64)),
            cost_per_tick=None if cost_per_tick is None else self._parse_float(cost_per_tick),
        )
        if budget.instructions_per_tick <= 0:
            raise ValueError("instructions_per_tick must be positive.")

        program_path = data.get("program")
        if program_path is not None and base_dir is not None and not os.path.isabs(program_path):
            program_path = os.path.join(base_dir, program_path)

        return MachineConfig(
            int_registers=int_registers,
            double_registers=double_registers,
            points=points,
            budget=budget,
            program_path=program_path,
        )

    # レジスタ定義はリスト（初期値0）またはマッピング（名前: 初期値）で記述できる
    def _parse_registers(self, value: Any) -> Dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, list):
            return {str(name): 0 for name in value}
        if isinstance(value, dict):
            return {str(name): (0 if v is None else v) for name, v in value.items()}
        raise ValueError(f"Invalid register definition: {value}")

    def _parse_kind(self, value: Any) -> RegisterKind:
        try:
            return RegisterKind(str(value).lower())
        except ValueError:
            raise ValueError(f"Invalid register kind: {value}")

    def _parse_direction(self, value: Any) -> PointDirection:
        try:
            return PointDirection(str(value).lower())
        except ValueError:
            raise ValueError(f"Invalid point direction: {value}")

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            if value.startswith("0x"):
                return int(value, 16)
            return int(value)
        raise ValueError(f"Invalid integer format: {value}")

    def _parse_float(self, value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError(f"Invalid float format: {value}")
        if isinstance(value, (int, float)):
            return float(value)
        if isinstance(value, str):
            return float(value)
        raise ValueError(f"Invalid float format: {value}")
