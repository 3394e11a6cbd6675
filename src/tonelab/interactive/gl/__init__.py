# どこで: `src/tonelab/interactive/gl/__init__.py`。
# 何を: ModernGL を使う描画/コンパイル実装の公開名をまとめる。
# なぜ: GL 依存をこのパッケージに閉じ込め、core をヘッドレスに保つため。

from .image_renderer import ImageRenderer
from .program_compiler import ModernGLShaderCompiler, classify_backend_error

__all__ = ["ImageRenderer", "ModernGLShaderCompiler", "classify_backend_error"]
