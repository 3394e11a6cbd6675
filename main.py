"""
どこで: リポジトリ直下 `main.py`。
何を: 既定の config で viewer とコントロールパネルを起動する。
なぜ: インストール前の動作確認用の最小エントリポイントとして利用するため。
"""

import sys

sys.path.append("src")

from tonelab import run

if __name__ == "__main__":
    run()
