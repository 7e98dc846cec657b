# src/asm_computer/ui/register_view.py
"""
マシンのレジスタを表示する汎用ウィジェット。
AsmComputerのレイアウト情報を利用して動的にUIを構築します。
"""
from typing import Dict, Optional
from PySide6.QtWidgets import QWidget, QVBoxLayout, QFormLayout, QLabel, QGroupBox
from PySide6.QtGui import QFontDatabase
from PySide6.QtCore import Qt

from asm_computer.core.machine import AsmComputer
from asm_computer.core.registers import Number, RegisterKind

# @intent:utility_function レジスタ値を種別に応じた表示文字列へ整形します。
def format_register_value(kind: RegisterKind, value: Number) -> str:
    if kind is RegisterKind.INT:
        return f"{value} (0x{value & 0xFFFFFFFF:08X})"
    return f"{value:.6g}"

# @intent:responsibility マシンのレジスタ値を表示する汎用UIウィジェットを提供します。
class RegisterView(QWidget):
    """
    マシンのレジスタ状態を表示するウィジェット。
    AsmComputerから取得したレイアウト情報に基づいて動的にフィールドを生成します。
    """
    def __init__(self, parent=None):
        super().__init__(parent)

        # Apply dark theme
        self.setStyleSheet("background-color: #121212; color: #BBBBBB;")

        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(5, 5, 5, 5)

        self._font_family = QFontDatabase.systemFont(QFontDatabase.FixedFont).family()
        self._register_labels: Dict[str, QLabel] = {}
        self._register_kinds: Dict[str, RegisterKind] = {}
        self._machine: Optional[AsmComputer] = None

    # @intent:responsibility 表示対象のマシンを設定し、UIレイアウトを構築します。
    def set_machine(self, machine: AsmComputer) -> None:
        self._machine = machine
        self._setup_ui()
        self.update_registers()

    # @intent:responsibility マシンから取得したレイアウト情報に基づいてUIを構築します。
    def _setup_ui(self):
        # 既存のウィジェットをクリア
        while self.layout.count():
            item = self.layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._register_labels.clear()
        self._register_kinds.clear()

        for group in self._machine.get_register_layout():
            if not group.registers:
                continue
            group_box = QGroupBox(group.group_name)
            group_box.setStyleSheet("""
                QGroupBox {
                    font-weight: bold;
                    border: 1px solid #222;
                    border-radius: 4px;
                    margin-top: 20px;
                    color: #EEE;
                }
                QGroupBox::title {
                    subcontrol-origin: margin;
                    subcontrol-position: top left;
                    padding: 0 5px;
                    left: 10px;
                    color: #00AAAA;
                }
            """)
            group_layout = QFormLayout(group_box)
            group_layout.setLabelAlignment(Qt.AlignLeft)
            group_layout.setContentsMargins(10, 15, 10, 10)
            group_layout.setSpacing(5)

            for reg in group.registers:
                label_name = QLabel(f"{reg.name}:")
                label_name.setStyleSheet("font-weight: bold; color: #BBBBBB;")

                label_value = QLabel(format_register_value(reg.kind, reg.kind.zero))
                label_value.setStyleSheet(f"font-family: '{self._font_family}', monospace; color: #FFD700;") # Gold color
                label_value.setAlignment(Qt.AlignRight)

                group_layout.addRow(label_name, label_value)
                self._register_labels[reg.name] = label_value
                self._register_kinds[reg.name] = reg.kind

            self.layout.addWidget(group_box)

        self.layout.addStretch()

    # @intent:responsibility 現在のマシン状態を取得し、レジスタの表示値を更新します。
    def update_registers(self):
        if not self._machine:
            return

        for name, value in self._machine.get_register_map().items():
            if name in self._register_labels:
                self._register_labels[name].setText(format_register_value(self._register_kinds[name], value))

    def get_displayed_value(self, name: str) -> Optional[str]:
        label = self._register_labels.get(name)
        return label.text() if label else None
