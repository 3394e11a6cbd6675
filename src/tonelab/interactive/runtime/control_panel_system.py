# どこで: `src/tonelab/interactive/runtime/control_panel_system.py`。
# 何を: コントロールパネルを「1フレーム描画できるサブシステム」として提供する。
# なぜ: `src/tonelab/api/runner.py` の `run()` から GUI 初期化/描画/後始末を分離するため。

from __future__ import annotations

from collections.abc import Callable

from tonelab.core.display import DisplayControls
from tonelab.core.runtime_config import runtime_config
from tonelab.core.session import ShaderSession
from tonelab.interactive.control_panel import ControlPanelGUI, create_control_panel_window
from tonelab.interactive.runtime.action_queue import ActionQueue


class ControlPanelWindowSystem:
    """コントロールパネル（別ウィンドウ）のサブシステム。"""

    def __init__(
        self,
        *,
        session: ShaderSession,
        display: DisplayControls,
        actions: ActionQueue,
        image_source: Callable[[], str] | None = None,
        initial_preset: str | None = None,
    ) -> None:
        cfg = runtime_config()
        w, h = cfg.control_panel_window_size
        self.window = create_control_panel_window(width=w, height=h, vsync=False)
        self._gui = ControlPanelGUI(
            self.window,
            session=session,
            display=display,
            actions=actions,
            image_source=image_source,
            initial_preset=initial_preset or cfg.initial_preset,
        )

    def draw_frame(self) -> None:
        """1 フレーム分の GUI を描画する（`flip()` は呼ばない）。"""

        self._gui.draw_frame()

    def close(self) -> None:
        self._gui.close()


__all__ = ["ControlPanelWindowSystem"]
