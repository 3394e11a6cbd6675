# どこで: `src/tonelab/api/__init__.py`。
# 何を: 公開 API（run）を提供する。
# なぜ: GUI 依存（pyglet/moderngl/imgui）の import を run 呼び出し時まで遅らせるため。

from __future__ import annotations

__all__ = ["run"]


def run(*args, **kwargs):
    """公開 run API へのラッパ（遅延インポートで GUI 依存を後回しにする）。"""

    from .runner import run as _run

    return _run(*args, **kwargs)
