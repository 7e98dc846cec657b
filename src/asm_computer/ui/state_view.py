# src/asm_computer/ui/state_view.py
"""
マシン状態と診断メッセージ（reasoning）を表示するウィジェット。
"""
from typing import Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel

from asm_computer.core.machine import AsmComputer
from asm_computer.core.state import MachineState

# @intent:constant 状態ごとの表示色。
STATE_COLORS = {
    MachineState.RUNNING: "#00CC66",
    MachineState.HALTED: "#BBBBBB",
    MachineState.ERRORED: "#FF4444",
}

# @intent:responsibility 「なぜプログラムが停止したか」を利用者へ示す診断表示を提供します。
class StateView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(5, 5, 5, 5)

        self.state_label = QLabel("-")
        self.pc_label = QLabel("PC: 0")
        self.reasoning_label = QLabel("")
        self.reasoning_label.setWordWrap(True)

        layout.addWidget(self.state_label)
        layout.addWidget(self.pc_label)
        layout.addWidget(self.reasoning_label)
        layout.addStretch()

        self._machine: Optional[AsmComputer] = None

    def set_machine(self, machine: AsmComputer) -> None:
        self._machine = machine
        self.update_state()

    # @intent:responsibility マシンの現在状態・PC・reasoningを表示に反映します。
    def update_state(self):
        if not self._machine:
            return
        state = self._machine.state
        self.state_label.setText(state.value)
        self.state_label.setStyleSheet(f"font-weight: bold; color: {STATE_COLORS[state]};")
        self.pc_label.setText(f"PC: {self._machine.pc}  Instructions: {self._machine.instruction_count}")
        self.reasoning_label.setText(self._machine.reasoning)
