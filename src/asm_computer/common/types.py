"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される汎用的な型エイリアスなどを定義します。
"""
from typing import Dict, List, NamedTuple

from asm_computer.core.registers import RegisterKind

# @intent:data_structure ラベル名と命令インデックスをマッピングする辞書の型エイリアス。
# Loader, Machine, Debuggerなど複数のレイヤーで共通して使用されます。
LabelMap = Dict[str, int]

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    kind: RegisterKind

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "Integer", "Double"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
