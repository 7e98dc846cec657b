# asm_computer/debugger/debugger.py
"""
デバッガモジュール。

レジスタマシンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from asm_computer.core.machine import AsmComputer
from asm_computer.core.registers import Number
from asm_computer.core.snapshot import Snapshot
from asm_computer.core.state import MachineState

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定の命令インデックスに一致
    LABEL_MATCH = "LABEL_MATCH"         # プログラムカウンタが特定のラベル位置に一致
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した
    STATE_CHANGE = "STATE_CHANGE"       # マシン状態が特定の状態になった

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    """
    condition_type: BreakpointConditionType
    value: Optional[Number] = None         # PC_MATCH, REGISTER_VALUEで使用
    label: Optional[str] = None            # LABEL_MATCHで使用
    register_name: Optional[str] = None    # REGISTER_VALUE, REGISTER_CHANGEで使用
    state: Optional[MachineState] = None   # STATE_CHANGEで使用
    enabled: bool = True                   # 有効/無効状態

    # @intent:rationale ブレークポイント条件は、一度設定したら変更されないため、不変にします（frozen=True）。

# @intent:responsibility マシンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    マシンの実行を制御し、ブレークポイントの管理を行うクラス。
    """
    def __init__(self, machine: AsmComputer):
        self._machine = machine
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._last_snapshot: Optional[Snapshot] = None
        # @intent:responsibility 実行履歴を保持し、ステップバックをサポートします。
        self._history: List[Snapshot] = []
        # @intent:responsibility 履歴が尽きた時に戻るための初期状態を保持します。
        self._initial_snapshot: Snapshot = self._machine.create_snapshot(None)

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイント条件を追加します。
        """
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        """
        ブレークポイント条件を削除します。
        """
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 現在のpcで停止すべきブレークポイント（PC_MATCH, LABEL_MATCH）を判定します。
    def _check_pc_breakpoints(self, pc: int) -> bool:
        labels = self._machine.program.labels
        for bp in self._breakpoints:
            if not bp.enabled:
                continue
            if bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc:
                return True
            if bp.condition_type == BreakpointConditionType.LABEL_MATCH and labels.get(bp.label) == pc:
                return True
        return False

    def _check_other_breakpoints(self, snapshot: Snapshot, previous: Snapshot) -> bool:
        """
        Snapshotに基づいてpc以外のブレークポイントをチェックします。
        """
        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and snapshot.register(bp.register_name) == bp.value:
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name:
                    if snapshot.register(bp.register_name) != previous.register(bp.register_name):
                        return True
            elif bp.condition_type == BreakpointConditionType.STATE_CHANGE:
                if snapshot.state == bp.state and previous.state != bp.state:
                    return True
        return False

    def step_instruction(self) -> Optional[Snapshot]:
        """
        マシンを1命令分実行し、その結果のSnapshotを返します。
        マシンが実行中でなければNoneを返します。
        """
        snapshot = self._machine.step()
        if snapshot is None:
            return None
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def step_back(self) -> Optional[Snapshot]:
        """
        実行履歴を1つ戻り、マシンの状態を復元します。
        """
        if not self._history:
            return None

        self._history.pop()

        if self._history:
            # 1つ前のスナップショットがあれば、その時点の状態に復元
            previous_snapshot = self._history[-1]
            self._machine.restore(previous_snapshot)
            self._last_snapshot = previous_snapshot
            return previous_snapshot
        else:
            # 履歴が尽きた場合は初期状態に復元
            self._machine.restore(self._initial_snapshot)
            self._last_snapshot = None
            return None

    def run(self, max_steps: Optional[int] = None) -> int:
        """
        マシンの実行を継続します。
        ブレークポイントにヒットするか、マシンが停止するか、max_stepsに達した時点で戻ります。
        実行した命令数を返します。
        """
        self._running = True
        steps = 0

        # 現在のpcにあるブレークポイントは、最初の1命令では無視する
        first = True
        while self._running and self._machine.is_running:
            if max_steps is not None and steps >= max_steps:
                break

            pc = self._machine.pc
            if not first and self._check_pc_breakpoints(pc):
                self._running = False
                print(f"Breakpoint hit at PC: {pc}")
                break
            first = False

            previous = self._last_snapshot or self._initial_snapshot
            snapshot = self.step_instruction()
            if snapshot is None:
                break
            steps += 1

            if snapshot.state is MachineState.ERRORED:
                print(f"Machine errored at PC: {snapshot.pc}: {snapshot.reasoning}")
            elif snapshot.state is MachineState.HALTED:
                print(f"Machine halted at PC: {snapshot.pc}")

            if self._check_other_breakpoints(snapshot, previous):
                self._running = False
                print(f"Breakpoint hit at PC: {snapshot.pc}")

        self._running = False
        return steps

    def stop(self) -> None:
        self._running = False
