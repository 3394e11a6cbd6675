# どこで: `src/tonelab/interactive/runtime/action_queue.py`。
# 何を: コントロールパネルからの操作（コンパイル/プリセット/シナリオ/画像）を viewer へ渡すキューを提供する。
# なぜ: GL のコンパイルは viewer ウィンドウのコンテキストで行う必要があり、GUI の描画中には実行できないため。

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class CompileRequested:
    """エディタのテキストで再コンパイルする。"""

    user_code: str


@dataclass(frozen=True, slots=True)
class PresetSelected:
    name: str


@dataclass(frozen=True, slots=True)
class ScenarioSelected:
    """None はシナリオ無し。"""

    name: str | None


@dataclass(frozen=True, slots=True)
class ImageFileRequested:
    path: str


Action: TypeAlias = CompileRequested | PresetSelected | ScenarioSelected | ImageFileRequested


class ActionQueue:
    """投入順に取り出す単純なキュー（同一スレッドの pyglet ループ内で使う）。"""

    def __init__(self) -> None:
        self._items: deque[Action] = deque()

    def post(self, action: Action) -> None:
        self._items.append(action)

    def drain(self) -> list[Action]:
        """溜まっている操作をすべて取り出して返す。"""

        out = list(self._items)
        self._items.clear()
        return out

    def __len__(self) -> int:
        return len(self._items)


__all__ = [
    "Action",
    "ActionQueue",
    "CompileRequested",
    "ImageFileRequested",
    "PresetSelected",
    "ScenarioSelected",
]
