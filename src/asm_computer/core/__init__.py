"""
Core Layer パッケージ（レジスタバンク、オペランド解決、オペレータ、ディスパッチャ、マシン状態）。
"""
