# asm_computer/loader/assembler.py
"""
プログラムテキストのアセンブラ。

テキスト形式の命令列を解析し、マシンが実行できるProgram（命令列とラベル表）に変換します。
構文:
    ; コメント（# も可）
    loop:               ; ラベル定義（単独行）
    end: hlt            ; ラベル付き命令
    subi a 1            ; オペコードとオペランド（空白またはカンマ区切り）
"""
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from asm_computer.common.types import LabelMap
from asm_computer.core.snapshot import Instruction

_LABEL = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")
_SEPARATOR = re.compile(r"[\s,]+")


# @intent:responsibility アセンブル済みのプログラム（命令列とラベル表）を保持します。
@dataclass(frozen=True)
class Program:
    instructions: Tuple[Instruction, ...] = ()
    labels: LabelMap = field(default_factory=dict)
    source_lines: Tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.instructions)

    # @intent:responsibility 命令インデックスに対応するラベル名を逆引きします。
    def label_at(self, index: int) -> Optional[str]:
        for name, target in self.labels.items():
            if target == index:
                return name
        return None


# @intent:responsibility プログラムテキストを行単位で解析し、Programを組み立てます。
class ProgramAssembler:
    # @intent:responsibility 1行をラベル・オペコード・オペランドに分解します。
    def _parse_line(self, line: str) -> Tuple[Optional[str], Optional[str], List[str]]:
        line = re.split(r"[;#]", line, maxsplit=1)[0].strip()
        if not line:
            return None, None, []

        label = None
        if ':' in line:
            label, rest = line.split(':', 1)
            label = label.strip()
            line = rest.strip()

        if not line:
            return label, None, []

        parts = [part for part in _SEPARATOR.split(line) if part]
        return label, parts[0], parts[1:]

    # @intent:responsibility ソース行のリストからProgramを生成します。
    # @intent:post-condition 不正なラベルや重複ラベルはValueErrorとして報告されます。
    def assemble(self, lines: List[str]) -> Program:
        instructions: List[Instruction] = []
        labels: Dict[str, int] = {}
        pending_labels: List[str] = []

        for line_num, raw_line in enumerate(lines, 1):
            label, opcode, operands = self._parse_line(raw_line)

            if label is not None:
                if not _LABEL.fullmatch(label):
                    raise ValueError(f"Invalid label on line {line_num}: {label!r}")
                if label in labels:
                    raise ValueError(f"Duplicate label on line {line_num}: {label}")
                # ラベルは次に現れる命令の位置を指す
                labels[label] = len(instructions)
                pending_labels.append(label)

            if opcode is None:
                continue

            instructions.append(Instruction(
                opcode=opcode,
                args=tuple(operands),
                line=line_num,
                label=pending_labels[0] if pending_labels else None,
            ))
            pending_labels = []

        return Program(
            instructions=tuple(instructions),
            labels=labels,
            source_lines=tuple(line.rstrip("\n") for line in lines),
        )

    def assemble_text(self, text: str) -> Program:
        return self.assemble(text.splitlines())


# @intent:responsibility ファイルからプログラムを読み込んでアセンブルします。
def load_program_file(path: Union[str, Path]) -> Program:
    with open(path, 'r', encoding='utf-8') as f:
        lines = f.read().splitlines()
    return ProgramAssembler().assemble(lines)


def parse_program(text: str) -> Program:
    return ProgramAssembler().assemble_text(text)
