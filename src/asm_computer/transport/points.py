# asm_computer/transport/points.py
"""
Transport Layer (レジスタ入出力ポイント)

このモジュールは、マシンのレジスタを名前付きの読み書きポイントとして外部へ公開します。
外部の回路ソルバなどは、電圧や電流の意味を知らないまま、ポイント経由でレジスタ値を
ポーリング（read）したり、プッシュ（write）したりできます。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List

from asm_computer.core.errors import NoSuchRegister
from asm_computer.core.registers import Number, RegisterBank, RegisterKind


# @intent:responsibility ポイントのアクセス方向を定義します。
# @intent:rationale 方向はマシンから見た向きです。INは外部から書き込まれ、OUTは外部から読み出されます。
class PointDirection(Enum):
    IN = "in"
    OUT = "out"
    INOUT = "inout"


# @intent:responsibility ポイントアクセスを記録するためのタイプを定義します。
class PointAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 個々のポイントアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class PointAccess:
    """
    ポイント上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    name: str
    value: Number
    access_type: PointAccessType


# @intent:responsibility 外部へ公開する1つのレジスタの束縛を定義します。
@dataclass(frozen=True)
class RegisterPoint:
    name: str
    kind: RegisterKind
    register: str
    direction: PointDirection = PointDirection.INOUT

    @property
    def readable(self) -> bool:
        return self.direction in (PointDirection.OUT, PointDirection.INOUT)

    @property
    def writable(self) -> bool:
        return self.direction in (PointDirection.IN, PointDirection.INOUT)


# @intent:responsibility ポイント名を管理し、レジスタバンクへのアクセスを仲介します。
# @intent:rationale 全てのアクセスを記録し、外部ソルバとのやり取りを観測可能にします。
class PointMap:
    """
    ポイント名からレジスタへの束縛を管理するクラス。
    """
    def __init__(self, bank: RegisterBank):
        self._bank = bank
        self._points: Dict[str, RegisterPoint] = {}
        self._activity_log: List[PointAccess] = []

    # @intent:responsibility ポイントを登録します。
    # @intent:pre-condition 束縛先のレジスタが指定種別で存在し、ポイント名が未登録である必要があります。
    def register_point(self, point: RegisterPoint) -> None:
        if point.name in self._points:
            raise ValueError(f"Point {point.name} is already registered.")
        if not self._bank.contains(point.kind, point.register):
            raise NoSuchRegister(point.register, point.kind)
        self._points[point.name] = point

    def points(self) -> List[RegisterPoint]:
        return list(self._points.values())

    def _find_point(self, name: str) -> RegisterPoint:
        point = self._points.get(name)
        if point is None:
            raise KeyError(f"Point {name} is not registered.")
        return point

    # @intent:responsibility ポイントの現在値を読み出します（外部ソルバのポーリング）。
    def read(self, name: str) -> Number:
        point = self._find_point(name)
        if not point.readable:
            raise PermissionError(f"Point {name} is input-only.")
        value = self._bank.require(point.kind, point.register)
        self._log_access(name, value, PointAccessType.READ)
        return value

    # @intent:responsibility ポイントへ値を書き込みます（外部ソルバからのプッシュ）。
    def write(self, name: str, value: Number) -> None:
        point = self._find_point(name)
        if not point.writable:
            raise PermissionError(f"Point {name} is output-only.")
        self._bank.set(point.kind, point.register, value)
        self._log_access(name, self._bank.require(point.kind, point.register), PointAccessType.WRITE)

    def _log_access(self, name: str, value: Number, access_type: PointAccessType) -> None:
        self._activity_log.append(PointAccess(name=name, value=value, access_type=access_type))

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[PointAccess]:
        log = self._activity_log
        self._activity_log = [] # ログをクリア
        return log
