# どこで: `src/tonelab/interactive/runtime/window_loop.py`。
# 何を: viewer とコントロールパネルの 2 ウィンドウを 1 つの `pyglet.app.run()` で回すランナーを提供する。
# なぜ: イベント配送を pyglet に任せつつ、各ウィンドウの描画順（viewer が先）を固定するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import pyglet


@dataclass(frozen=True, slots=True)
class WindowTask:
    """pyglet window と「flip しない描画関数」の組。"""

    window: Any
    draw_frame: Callable[[], None]


class MultiWindowLoop:
    """登録順にウィンドウを描画するループ。

    viewer を先に登録すると、GUI が積んだ操作は次フレームの viewer 描画冒頭で処理される。
    `flip()` は `Window.draw()`（pyglet）が行う。
    """

    def __init__(self, tasks: list[WindowTask], *, fps: float) -> None:
        """Parameters
        ----------
        tasks : list[WindowTask]
            描画順に並べたウィンドウと描画処理。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._tasks = list(tasks)
        self._fps = float(fps)
        self._frames = 0

    @property
    def frames(self) -> int:
        """これまでに回したフレーム数。"""
        return self._frames

    def _tick(self, dt: float) -> None:
        for task in self._tasks:
            # 閉じたウィンドウへの draw は例外になり得る。
            if task.window not in pyglet.app.windows:
                continue
            task.window.draw(dt)
        self._frames += 1

    def run(self) -> None:
        """いずれかのウィンドウが閉じられるまでループを実行する。"""

        def request_exit(*_: object) -> None:
            pyglet.app.exit()

        for task in self._tasks:
            task.window.push_handlers(on_close=request_exit, on_draw=task.draw_frame)

        if self._fps <= 0:
            pyglet.clock.schedule(self._tick)
        else:
            pyglet.clock.schedule_interval(self._tick, 1.0 / self._fps)

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(self._tick)


__all__ = ["MultiWindowLoop", "WindowTask"]
