# どこで: `src/tonelab/interactive/runtime/viewer_system.py`。
# 何を: 画像とトーンマップ結果を viewer ウィンドウへ描画し、GUI からの操作（再コンパイル等）を処理する。
# なぜ: コンパイルと描画を viewer の GL コンテキストに寄せ、`run()` を配線だけにするため。

from __future__ import annotations

import logging
from pathlib import Path

from tonelab.core.controls.factory import ControlFactory
from tonelab.core.display import DisplayControls
from tonelab.core.frame_uniforms import frame_uniforms
from tonelab.core.image import ImageData, synthetic_test_image
from tonelab.core.scenarios import get_scenario
from tonelab.core.session import RecompileResult, ShaderSession
from tonelab.core.shader.fragments import DEFAULT_GLSL_VERSION
from tonelab.core.shader.presets import load_preset
from tonelab.interactive.gl.image_renderer import ImageRenderer
from tonelab.interactive.gl.program_compiler import ModernGLShaderCompiler
from tonelab.interactive.image_loader import load_image, load_image_or_fallback
from tonelab.interactive.runtime.action_queue import (
    Action,
    ActionQueue,
    CompileRequested,
    ImageFileRequested,
    PresetSelected,
    ScenarioSelected,
)
from tonelab.interactive.viewer_window import create_viewer_window

_logger = logging.getLogger(__name__)

_SYNTHETIC_SOURCE = "(synthetic test image)"


class ViewerWindowSystem:
    """viewer（メインウィンドウ）のサブシステム。ShaderSession を所有する。"""

    def __init__(
        self,
        *,
        actions: ActionQueue,
        display: DisplayControls,
        control_factory: ControlFactory,
        image_dir: Path,
        window_size: tuple[int, int],
        glsl_version: str = DEFAULT_GLSL_VERSION,
    ) -> None:
        self._actions = actions
        self._display = display
        self._image_dir = Path(image_dir)

        w, h = window_size
        self.window = create_viewer_window(int(w), int(h))
        self._renderer = ImageRenderer(self.window)
        self.session = ShaderSession(
            compiler=ModernGLShaderCompiler(self._renderer.ctx, glsl_version=glsl_version),
            control_factory=control_factory,
            glsl_version=glsl_version,
        )
        self._image_source = _SYNTHETIC_SOURCE
        self._set_image(synthetic_test_image(), _SYNTHETIC_SOURCE)

    @property
    def image_source(self) -> str:
        """表示中の画像の出どころ（パス、または合成画像）。"""
        return self._image_source

    def _set_image(self, image: ImageData, source: str) -> None:
        self._renderer.upload_image(image)
        self._image_source = str(source)
        _logger.info("Image: %s (%dx%d)", source, image.width, image.height)

    # ---------- 操作 ----------
    def compile(self) -> RecompileResult:
        """現在のユーザーコード/シナリオで再コンパイルする（viewer のコンテキストが current である前提）。"""
        return self.session.recompile()

    def apply_user_code(self, text: str) -> RecompileResult:
        self.session.set_user_code(text)
        return self.compile()

    def apply_preset(self, name: str) -> RecompileResult:
        """プリセットのテキストをユーザーコードにして再コンパイルする。"""
        return self.apply_user_code(load_preset(name))

    def apply_scenario(self, name: str | None) -> RecompileResult:
        """シナリオを切り替え、その基準画像を読み込んで再コンパイルする。

        画像が読めない場合は合成テスト画像にフォールバックする。
        """

        scenario = get_scenario(name)
        self.session.set_scenario(scenario)
        if scenario is not None:
            path = self._image_dir / scenario.image_reference
            image = load_image_or_fallback(path)
            source = str(path) if path.is_file() else _SYNTHETIC_SOURCE
            self._set_image(image, source)
        return self.compile()

    def load_image_file(self, path: str | Path) -> bool:
        """任意の画像を読み込む。シナリオは外して再コンパイルする。

        Returns
        -------
        bool
            読み込めた場合 True（失敗時は表示中の画像を保つ）。
        """

        try:
            image = load_image(path)
        except (OSError, ValueError):
            _logger.exception("画像を読み込めませんでした: %s", path)
            return False
        self._set_image(image, str(path))
        if self.session.scenario is not None:
            self.session.set_scenario(None)
            self.compile()
        return True

    def _dispatch(self, action: Action) -> None:
        if isinstance(action, CompileRequested):
            self.apply_user_code(action.user_code)
        elif isinstance(action, PresetSelected):
            self.apply_preset(action.name)
        elif isinstance(action, ScenarioSelected):
            self.apply_scenario(action.name)
        elif isinstance(action, ImageFileRequested):
            self.load_image_file(action.path)
        else:
            raise TypeError(f"unknown action: {action!r}")

    def process_actions(self) -> None:
        """GUI が積んだ操作を投入順に処理する。"""

        for action in self._actions.drain():
            try:
                self._dispatch(action)
            except Exception:
                # 1 つの操作の失敗で描画ループを止めない。
                _logger.exception("操作の処理に失敗しました: %r", action)

    # ---------- 描画 ----------
    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # 注: 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        self.process_actions()

        self._renderer.ctx.screen.use()
        fb_w, fb_h = self._framebuffer_size()
        self._renderer.viewport(fb_w, fb_h)
        self._renderer.clear()

        program = self.session.program
        if program is None:
            return
        uploads = frame_uniforms(
            self.session,
            self._display,
            view_aspect_ratio=float(fb_w) / float(max(1, fb_h)),
            image_aspect_ratio=self._renderer.image_aspect_ratio,
        )
        self._renderer.render(program, uploads)

    def close(self) -> None:
        """プログラム/GPU リソースを解放し、ウィンドウを閉じる。"""

        self.window.switch_to()
        self.session.release()
        self._renderer.release()
        self.window.close()


__all__ = ["ViewerWindowSystem"]
