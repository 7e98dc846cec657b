# src/asm_computer/ui/main_window.py
"""
メインウィンドウの実装。
プログラムエディタ、レジスタ表示、状態表示を保持し、レイアウトを管理します。
"""
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QPlainTextEdit, QDockWidget, QToolBar, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QFontDatabase
from PySide6.QtCore import Qt, QTimer

from asm_computer.config.builder import MachineBuilder
from asm_computer.config.loader import ConfigLoader
from asm_computer.config.models import BudgetConfig, MachineConfig
from asm_computer.debugger.debugger import Debugger
from asm_computer.loader.assembler import parse_program
from .register_view import RegisterView
from .state_view import StateView

# @intent:constant 設定ファイルが読み込まれていない場合の既定構成。
DEFAULT_CONFIG = MachineConfig(
    int_registers={"a": 0, "b": 0, "c": 0, "d": 0},
    double_registers={"x": 0.0, "y": 0.0, "z": 0.0},
)

SAMPLE_PROGRAM = """; count down a from 10
    movi a 10
loop:
    subi a 1
    addd x 0.5
    jnz a loop
    hlt
"""

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    def __init__(self, parent=None, config: Optional[MachineConfig] = None):
        super().__init__(parent)
        self.setWindowTitle("ASM Computer")
        self.setGeometry(100, 100, 1000, 700)

        self._config = config or DEFAULT_CONFIG
        self._run_timer = QTimer(self)
        self._run_timer.setInterval(50) # ゲームのティック相当
        self._run_timer.timeout.connect(self._run_tick)

        self.editor = QPlainTextEdit(self)
        self.editor.setFont(QFontDatabase.systemFont(QFontDatabase.FixedFont))
        self.editor.setPlainText(SAMPLE_PROGRAM)
        self.setCentralWidget(self.editor)

        self.register_view = RegisterView()
        self.state_view = StateView()
        self._add_dock("Registers", self.register_view, Qt.RightDockWidgetArea)
        self._add_dock("State", self.state_view, Qt.RightDockWidgetArea)

        self._create_actions()
        self._setup_backend()

    def _add_dock(self, title: str, widget, area) -> None:
        dock = QDockWidget(title, self)
        dock.setWidget(widget)
        self.addDockWidget(area, dock)

    # @intent:responsibility ツールバーとメニューにアクションを登録します。
    def _create_actions(self):
        toolbar = QToolBar("Execution", self)
        self.addToolBar(toolbar)

        self.assemble_action = QAction("Assemble", self)
        self.assemble_action.triggered.connect(self.assemble)
        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self.step)
        self.step_back_action = QAction("Step Back", self)
        self.step_back_action.triggered.connect(self.step_back)
        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.toggle_run)
        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self.reset)

        for action in (self.assemble_action, self.step_action, self.step_back_action, self.run_action, self.reset_action):
            toolbar.addAction(action)

        file_menu = self.menuBar().addMenu("File")
        load_config_action = QAction("Load Machine Config...", self)
        load_config_action.triggered.connect(self._load_machine_config)
        file_menu.addAction(load_config_action)

    # @intent:responsibility 現在の構成からマシン・ポイント・デバッガを生成し、表示を接続します。
    def _setup_backend(self):
        self.machine, self.points = MachineBuilder().build(self._config)
        self.debugger = Debugger(self.machine)
        self.register_view.set_machine(self.machine)
        self.state_view.set_machine(self.machine)
        if self.machine.program.source_lines:
            self.editor.setPlainText("\n".join(self.machine.program.source_lines))

    @property
    def budget(self) -> BudgetConfig:
        return self._config.budget

    def _load_machine_config(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load Machine Config", "", "YAML Files (*.yaml *.yml)")
        if not path:
            return
        try:
            self._config = ConfigLoader().load_from_file(path)
            self._setup_backend()
        except (OSError, ValueError) as e:
            QMessageBox.critical(self, "Config Error", str(e))

    # @intent:responsibility エディタの内容をアセンブルしてマシンへ読み込みます。
    def assemble(self) -> bool:
        self._stop_run()
        try:
            program = parse_program(self.editor.toPlainText())
        except ValueError as e:
            QMessageBox.critical(self, "Assemble Error", str(e))
            return False
        self.machine.load_program(program)
        self.debugger = Debugger(self.machine)
        self.refresh()
        return True

    def step(self):
        self.debugger.step_instruction()
        self.refresh()

    def step_back(self):
        self.debugger.step_back()
        self.refresh()

    def reset(self):
        self._stop_run()
        self.machine.reset()
        self.debugger = Debugger(self.machine)
        self.refresh()

    def toggle_run(self):
        if self._run_timer.isActive():
            self._stop_run()
        else:
            self.run_action.setText("Stop")
            self._run_timer.start()

    def _stop_run(self):
        self._run_timer.stop()
        self.run_action.setText("Run")

    # @intent:responsibility 1ティック分の予算でマシンを実行します。
    def _run_tick(self):
        self.machine.run(self.budget.instructions_per_tick, self.budget.cost_per_tick)
        # 連続実行は履歴を残さないため、ステップバックの起点をここに置き直す
        self.debugger = Debugger(self.machine)
        if not self.machine.is_running:
            self._stop_run()
        self.refresh()

    def refresh(self):
        self.register_view.update_registers()
        self.state_view.update_state()
