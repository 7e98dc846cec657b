# asm_computer/core/state.py
"""
Core Layer (マシン状態)

インタプリタの実行ライフサイクルを表す有限状態を定義します。
"""
from enum import Enum


# @intent:responsibility マシンの実行状態を定義します。
# @intent:rationale RUNNINGが初期状態です。HALTEDとERROREDはいずれも終端状態で、
#                  外部からのreset()によってのみRUNNINGへ戻ります。
class MachineState(Enum):
    RUNNING = "RUNNING"   # 命令を受け付ける
    HALTED = "HALTED"     # hlt命令またはプログラム終端による正常停止
    ERRORED = "ERRORED"   # フォールトによる停止（reasoningに理由を保持）

    @property
    def is_terminal(self) -> bool:
        return self is not MachineState.RUNNING
