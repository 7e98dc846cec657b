# asm_computer/core/machine.py
"""
Core Layer (マシン本体)

このモジュールは、レジスタバンク・ディスパッチャ・マシン状態をまとめたレジスタマシン本体を提供します。
命令の具体的な振る舞いはOperatorに委譲され、本クラスは状態遷移と命令サイクルの駆動を担います。
"""
from typing import Dict, Iterable, List, Mapping, Optional

from asm_computer.common.types import RegisterInfo, RegisterLayoutInfo
from asm_computer.core.dispatcher import Dispatcher
from asm_computer.core.errors import MachineFault, NoSuchLabel, render_reasoning
from asm_computer.core.operator import Operator
from asm_computer.core.registers import Number, RegisterBank, RegisterKind
from asm_computer.core.snapshot import Instruction, Metadata, Snapshot
from asm_computer.core.state import MachineState
from asm_computer.loader.assembler import Program


# @intent:responsibility 型付きレジスタに対して命令列を実行するレジスタマシンを定義します。
class AsmComputer:
    """
    ゲーム内で動作するプログラマブルなレジスタマシン。
    フォールトは例外として呼び出し元へ伝播せず、ERRORED状態とreasoning文字列として観測されます。
    """
    # @intent:responsibility レジスタバンクとホスト所有のオペレータテーブルでマシンを初期化します。
    def __init__(self, registers: RegisterBank, operators: Mapping[str, Operator]):
        self._registers = registers
        self._dispatcher = Dispatcher(operators)
        self._state: MachineState = MachineState.RUNNING
        self._reasoning: str = ""
        self._fault: Optional[MachineFault] = None
        self._program: Program = Program()
        self._pc: int = 0
        self._instruction_count: int = 0
        self._total_cost: float = 0.0
        # @intent:rationale 状態オブジェクトの直接操作を避けるため、protectedな命名規則を採用。
        #                  外部からの状態遷移はset_fault(), halt(), reset()を介して行う。

    @property
    def registers(self) -> RegisterBank:
        return self._registers

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    @property
    def state(self) -> MachineState:
        return self._state

    @property
    def reasoning(self) -> str:
        return self._reasoning

    @property
    def fault(self) -> Optional[MachineFault]:
        return self._fault

    @property
    def is_running(self) -> bool:
        return self._state is MachineState.RUNNING

    @property
    def program(self) -> Program:
        return self._program

    @property
    def pc(self) -> int:
        return self._pc

    @property
    def instruction_count(self) -> int:
        return self._instruction_count

    @property
    def total_cost(self) -> float:
        return self._total_cost

    def get_state(self) -> MachineState:
        return self._state

    # --- 状態遷移 ---

    # @intent:responsibility RUNNINGからERROREDへ遷移し、フォールトとreasoningを同時に設定します。
    # @intent:rationale 既に終端状態の場合は最初のフォールトを保持するため何もしません。
    def set_fault(self, fault: MachineFault) -> None:
        if not self.is_running:
            return
        self._state = MachineState.ERRORED
        self._fault = fault
        self._reasoning = render_reasoning(fault)

    # @intent:responsibility RUNNINGからHALTEDへ遷移します（正常停止）。
    def halt(self) -> None:
        if not self.is_running:
            return
        self._state = MachineState.HALTED

    # @intent:responsibility プログラムカウンタをラベルの位置へ移動します。
    # @intent:post-condition ラベルが存在しない場合はNoSuchLabelを送出し、pcは変更されません。
    def jump(self, label: str) -> None:
        target = self._program.labels.get(label)
        if target is None:
            raise NoSuchLabel(label)
        self._pc = target

    # @intent:responsibility 外部リセット。レジスタ・カウンタ・状態を初期値に戻します。
    def reset(self) -> None:
        self._registers.reset()
        self._state = MachineState.RUNNING
        self._reasoning = ""
        self._fault = None
        self._pc = 0
        self._instruction_count = 0
        self._total_cost = 0.0

    # @intent:responsibility プログラムを読み込み、マシンをリセットします。
    def load_program(self, program: Program) -> None:
        self._program = program
        self.reset()

    # --- 実行 ---

    # @intent:responsibility プログラムを1命令進め、その結果のスナップショットを返します。
    # @intent:rationale 共通の実行フロー（状態判定→フェッチ→PC更新→ディスパッチ→Snapshot生成）を定義します。
    def step(self) -> Optional[Snapshot]:
        """
        マシンが実行中でなければNoneを返します。
        PCがプログラム終端を越えた場合はHALTEDへ遷移し、命令なしのスナップショットを返します。
        """
        if not self.is_running:
            return None

        # 1. 終端判定
        if self._pc >= len(self._program.instructions):
            self.halt()
            return self.create_snapshot(None)

        # 2. フェッチ
        instruction = self._program.instructions[self._pc]

        # 3. PC更新 (ジャンプ命令はdispatch中に上書きする)
        self._pc += 1

        # 4. ディスパッチ（命令数とコストの計上はディスパッチャが行う）
        self._dispatcher.dispatch(instruction, self)

        # 5. Snapshot生成
        return self.create_snapshot(instruction)

    # @intent:responsibility ホストのティックごとの予算内でプログラムを実行します。
    # @intent:post-condition 実行した命令数を返します。
    def run(self, max_instructions: int, cost_budget: Optional[float] = None) -> int:
        """
        マシンが停止するか、命令数の上限に達するか、次の命令のコストで予算を超える場合に停止します。
        1回の呼び出しで少なくとも1命令は実行されます（予算より重い命令で停滞しないため）。
        """
        executed = 0
        spent = 0.0
        while self.is_running and executed < max_instructions:
            if cost_budget is not None and executed > 0:
                if spent + self._peek_cost() > cost_budget:
                    break
            spent += self._peek_cost()
            self.step()
            executed += 1
        return executed

    # @intent:responsibility プログラムとは独立した命令列をディスパッチャ経由で実行します。
    def execute(self, instructions: Iterable[Instruction]) -> int:
        return self._dispatcher.execute_batch(instructions, self)

    def _peek_cost(self) -> float:
        if self._pc >= len(self._program.instructions):
            return 0.0
        operator = self._dispatcher.lookup(self._program.instructions[self._pc].opcode)
        return operator.cost if operator else 0.0

    # @intent:responsibility ディスパッチされた命令を累計命令数と累計コストへ計上します。
    def account(self, instruction: Instruction) -> None:
        self._instruction_count += 1
        operator = self._dispatcher.lookup(instruction.opcode)
        if operator is not None:
            self._total_cost += operator.cost

    # --- スナップショット ---

    # @intent:responsibility 現在の状態からスナップショットを生成します。
    def create_snapshot(self, instruction: Optional[Instruction]) -> Snapshot:
        symbol_info = None
        if instruction is not None:
            symbol_info = f"{instruction.label}: {instruction}" if instruction.label else str(instruction)
        return Snapshot(
            instruction=instruction,
            state=self._state,
            pc=self._pc,
            metadata=Metadata(
                instruction_count=self._instruction_count,
                total_cost=self._total_cost,
                symbol_info=symbol_info,
            ),
            reasoning=self._reasoning,
            fault=self._fault,
            int_registers=self._registers.dump(RegisterKind.INT),
            double_registers=self._registers.dump(RegisterKind.DOUBLE),
        )

    # @intent:responsibility スナップショットの時点へマシンを復元します（デバッガのステップバック用）。
    # @intent:post-condition fault と reasoning はスナップショット時点の組に揃います。
    def restore(self, snapshot: Snapshot) -> None:
        self._registers.load(RegisterKind.INT, snapshot.int_registers)
        self._registers.load(RegisterKind.DOUBLE, snapshot.double_registers)
        self._state = snapshot.state
        self._reasoning = snapshot.reasoning
        self._fault = snapshot.fault
        self._pc = snapshot.pc
        self._instruction_count = snapshot.metadata.instruction_count
        self._total_cost = snapshot.metadata.total_cost

    # --- 検査用API ---

    def get_register(self, kind: RegisterKind, name: str) -> Optional[Number]:
        return self._registers.get(kind, name)

    def get_register_map(self) -> Dict[str, Number]:
        """
        現在のレジスタ値を辞書形式で返す。
        UIがマシンの内部構造を知らなくても値を表示できるようにするために使用される。
        """
        values: Dict[str, Number] = {}
        for kind in RegisterKind:
            values.update(self._registers.dump(kind))
        return values

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをUI上でどのように配置・グループ化すべきかの定義を返す。
        """
        return [
            RegisterLayoutInfo("Integer", [RegisterInfo(name, RegisterKind.INT) for name in self._registers.names(RegisterKind.INT)]),
            RegisterLayoutInfo("Double", [RegisterInfo(name, RegisterKind.DOUBLE) for name in self._registers.names(RegisterKind.DOUBLE)]),
        ]
