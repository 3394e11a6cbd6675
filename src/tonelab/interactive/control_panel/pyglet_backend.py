# どこで: `src/tonelab/interactive/control_panel/pyglet_backend.py`。
# 何を: コントロールパネル用の pyglet ウィンドウと、それに紐づく ImGui コンテキスト/renderer のライフサイクルを扱う。
# なぜ: ControlPanelGUI をセクションの描画だけに保ち、フレームの開始/終了と後始末をここへ集めるため。

from __future__ import annotations

import time
from typing import Any

_CLEAR_RGBA = (0.12, 0.12, 0.12, 1.0)


def create_control_panel_window(
    *,
    width: int = 640,
    height: int = 1000,
    caption: str = "Tonelab Controls",
    vsync: bool = False,
) -> Any:
    """コントロールパネル用のリサイズ可能な pyglet ウィンドウを作る。"""

    import pyglet

    return pyglet.window.Window(  # type: ignore[abstract]
        width=int(width),
        height=int(height),
        caption=str(caption),
        resizable=True,
        vsync=bool(vsync),
        config=pyglet.gl.Config(double_buffer=True),  # type: ignore[abstract]
    )


class ImGuiPygletBackend:
    """1 ウィンドウぶんの ImGui コンテキストと pyglet renderer。

    ImGui の current context はグローバルなので、フレームごとに自分のものへ切り替える。
    `imgui.integrations.pyglet` の `process_inputs()` は `pyglet.clock.tick()` を呼ぶため使わず、
    Δt と表示サイズはここで IO へ書き込む。
    """

    def __init__(self, window: Any) -> None:
        import imgui  # type: ignore[import-untyped]
        from imgui.integrations.pyglet import create_renderer  # type: ignore[import-untyped]

        self.imgui = imgui
        self.window = window
        self._context = imgui.create_context()
        imgui.set_current_context(self._context)
        imgui.style_colors_dark()
        self._renderer = create_renderer(window)
        self._last = time.monotonic()

    def begin_frame(self) -> Any:
        """コンテキストを切り替えて `new_frame()` し、imgui モジュールを返す。"""

        imgui = self.imgui
        imgui.set_current_context(self._context)

        now = time.monotonic()
        io = imgui.get_io()
        io.delta_time = max(now - self._last, 1e-4)
        self._last = now

        w, h = self.window.width, self.window.height
        fb_w, fb_h = self.window.get_framebuffer_size()
        io.display_size = (float(w), float(h))
        # Retina では framebuffer がウィンドウより大きい。
        io.display_fb_scale = (fb_w / max(1, w), fb_h / max(1, h))

        imgui.new_frame()
        return imgui

    def end_frame(self) -> None:
        """描画データを確定し、ウィンドウをクリアしてから描く（flip はしない）。"""

        import pyglet

        self.imgui.render()
        pyglet.gl.glClearColor(*_CLEAR_RGBA)
        self.window.clear()
        self._renderer.render(self.imgui.get_draw_data())

    def shutdown(self) -> None:
        self._renderer.shutdown()
        self.imgui.destroy_context(self._context)


__all__ = ["ImGuiPygletBackend", "create_control_panel_window"]
