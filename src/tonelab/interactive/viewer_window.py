# どこで: `src/tonelab/interactive/viewer_window.py`。
# 何を: トーンマップ結果を表示する pyglet ウィンドウの生成を行う。
# なぜ: interactive 依存をこの層に閉じ込め、core をヘッドレスに保つため。

from __future__ import annotations

import pyglet
from pyglet.gl import Config
from pyglet.window import Window


def create_viewer_window(width: int, height: int, *, caption: str = "Tonelab") -> Window:
    """viewer 用のウィンドウを生成する（GL 3.3 core を要求）。"""

    config = Config(  # type: ignore[abstract]
        double_buffer=True,
        major_version=3,
        minor_version=3,
        forward_compatible=True,
    )
    window = pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        resizable=True,
        caption=str(caption),
        config=config,
    )
    return window
