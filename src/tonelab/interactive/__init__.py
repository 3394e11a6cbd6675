# どこで: `src/tonelab/interactive/__init__.py`。
# 何を: pyglet / ModernGL / pyimgui に依存する対話層のパッケージ。
# なぜ: 重い依存をこの層に閉じ込め、core をヘッドレスに保つため。
