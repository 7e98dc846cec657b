# asm_computer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、命令と、その実行直後のマシン状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッガの履歴（ステップバック）に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from asm_computer.core.errors import MachineFault
from asm_computer.core.registers import Number
from asm_computer.core.state import MachineState


# @intent:responsibility デコード済みの1命令（オペコードとオペランドトークン列）を記録します。
@dataclass(frozen=True) # 不変データ構造
class Instruction:
    """
    オペコード文字列と順序付きオペランドトークン列からなる命令。
    """
    opcode: str # 例: "subi"
    args: Tuple[str, ...] = () # 例: ("a", "3", "b")
    line: int = 0 # ソース上の行番号（不明な場合は0）
    label: Optional[str] = None # この命令に付与されたラベル

    def __str__(self) -> str:
        if self.args:
            return f"{self.opcode} {' '.join(self.args)}"
        return self.opcode


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計命令数、累計コスト、シンボル情報）を記録するデータクラス。
    """
    instruction_count: int
    total_cost: float = 0.0
    symbol_info: Optional[str] = None # 例: "loop: subi a 1"


# @intent:responsibility ある一時点におけるマシンの完全な状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    命令実行直後のマシン状態を記録した不変のデータ構造。
    レジスタの値はスナップショット生成時点のコピーです。
    """
    instruction: Optional[Instruction]
    state: MachineState
    pc: int
    metadata: Metadata
    reasoning: str = ""
    fault: Optional[MachineFault] = None # ERRORED時の構造化フォールト
    int_registers: Dict[str, int] = field(default_factory=dict)
    double_registers: Dict[str, float] = field(default_factory=dict)

    # @intent:accessor 種別を問わずレジスタ値を名前で引きます。
    def register(self, name: str) -> Optional[Number]:
        if name in self.int_registers:
            return self.int_registers[name]
        return self.double_registers.get(name)
