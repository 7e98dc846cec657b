# src/asm_computer/ui/app.py
"""
Qtアプリケーションのエントリポイント。
アプリケーションを初期化し、メインウィンドウを起動します。
"""
import sys
from PySide6.QtWidgets import QApplication

from asm_computer.config.loader import ConfigLoader
from .main_window import MainWindow

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main():
    """
    アプリケーションのメイン関数。
    引数にマシン構成ファイル（YAML）を指定できます。
    """
    app = QApplication(sys.argv)
    config = None
    if len(sys.argv) > 1:
        config = ConfigLoader().load_from_file(sys.argv[1])
    main_win = MainWindow(config=config)
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
