# どこで: `src/tonelab/core/__init__.py`。
# 何を: GUI/GL に依存しないコア層（宣言解析・引き継ぎ・再コンパイル）のパッケージ。
# なぜ: interactive 層と依存境界を分け、ヘッドレスにテストできるようにするため。
