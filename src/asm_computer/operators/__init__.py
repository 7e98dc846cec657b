"""
組み込みオペレータ実装パッケージ。
"""
from .maps import OPERATORS, build_operator_table
