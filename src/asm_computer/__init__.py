# asm_computer/__init__.py
"""
asm-computer: ゲーム内で動作するプログラマブルなレジスタマシン。
"""
__version__ = "0.1.0"
