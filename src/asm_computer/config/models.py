from dataclasses import dataclass, field
from typing import Dict, List, Optional

from asm_computer.core.registers import RegisterKind
from asm_computer.transport.points import PointDirection

@dataclass
class PointConfig:
    name: str
    kind: RegisterKind
    register: str
    direction: PointDirection = PointDirection.INOUT

@dataclass
class BudgetConfig:
    instructions_per_tick: int = 64
    cost_per_tick: Optional[float] = None # Noneならコストによる制限なし

@dataclass
class MachineConfig:
    int_registers: Dict[str, int] = field(default_factory=dict)
    double_registers: Dict[str, float] = field(default_factory=dict)
    points: List[PointConfig] = field(default_factory=list)
    budget: BudgetConfig = field(default_factory=BudgetConfig)
    program_path: Optional[str] = None # 設定ファイルからの相対パスは解決済み
