# どこで: `src/tonelab/interactive/control_panel/gui.py`。
# 何を: シェーダ編集/プリセット/シナリオ/表示設定と、宣言から合成したコントロールを pyimgui で描画する。
# なぜ: 操作は ActionQueue へ積むだけにし、コンパイルと GL 資源を viewer 側に残すため。

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from tonelab.core.display import DisplayControls
from tonelab.core.scenarios import scenario_names
from tonelab.core.session import ShaderSession, UniformBinding
from tonelab.core.shader.presets import load_preset, preset_names
from tonelab.interactive.runtime.action_queue import (
    ActionQueue,
    CompileRequested,
    ImageFileRequested,
    PresetSelected,
    ScenarioSelected,
)

from .pyglet_backend import ImGuiPygletBackend
from .widgets import draw_display_controls

_NO_SCENARIO_LABEL = "(none)"
_EDITOR_VISIBLE_LINES = 28
_DIAGNOSTIC_RGBA = (1.0, 0.35, 0.35, 1.0)


def _draw_bindings(imgui: Any, bindings: tuple[UniformBinding, ...], *, id_prefix: str) -> bool:
    changed = False
    for i, binding in enumerate(bindings):
        draw = getattr(binding.control, "draw", None)
        if not callable(draw):
            continue
        # 同じラベルのコントロールが並んでも ID が衝突しないようにする。
        imgui.push_id(f"{id_prefix}{i}:{binding.descriptor.name}")
        try:
            changed |= bool(draw())
        finally:
            imgui.pop_id()
    return changed


class ControlPanelGUI:
    """コントロールパネル 1 枚分の GUI。

    描画中に起きた操作は ActionQueue へ積むだけにし、コンパイルは viewer 側が行う。
    """

    def __init__(
        self,
        gui_window: Any,
        *,
        session: ShaderSession,
        display: DisplayControls,
        actions: ActionQueue,
        image_source: Callable[[], str] | None = None,
        initial_preset: str | None = None,
        title: str = "Controls",
    ) -> None:
        self._window = gui_window
        self._backend = ImGuiPygletBackend(gui_window)
        self._session = session
        self._display = display
        self._actions = actions
        self._image_source = image_source
        self._title = str(title)

        # エディタは session.user_code を起点にし、以降は GUI 側のバッファを編集する。
        self._editor_text = session.user_code
        self._image_path_text = ""
        names = preset_names()
        self._preset_index = names.index(initial_preset) if initial_preset in names else 0

        self._closed = False

    @property
    def editor_text(self) -> str:
        return self._editor_text

    # ---------- セクション ----------
    def _draw_scenario_section(self, imgui: Any) -> None:
        current = self._session.scenario
        preview = _NO_SCENARIO_LABEL if current is None else current.name
        imgui.set_next_item_width(-1)
        if imgui.begin_combo("##scenario", preview):
            try:
                options: list[str | None] = [None, *scenario_names()]
                for option in options:
                    label = _NO_SCENARIO_LABEL if option is None else option
                    selected = (current is None and option is None) or (
                        current is not None and current.name == option
                    )
                    clicked, _ = imgui.selectable(label, selected)
                    if clicked and not selected:
                        self._actions.post(ScenarioSelected(option))
                    if selected:
                        imgui.set_item_default_focus()
            finally:
                imgui.end_combo()

        source = self._image_source
        if source is not None:
            imgui.text_wrapped(f"Image: {source()}")

        imgui.set_next_item_width(-80)
        _changed, self._image_path_text = imgui.input_text(
            "##image_path", self._image_path_text, -1
        )
        imgui.same_line()
        if imgui.button("Load") and self._image_path_text.strip():
            self._actions.post(ImageFileRequested(self._image_path_text.strip()))

    def _draw_editor_section(self, imgui: Any) -> None:
        names = preset_names()
        imgui.set_next_item_width(200)
        if imgui.begin_combo("Preset", names[self._preset_index]):
            try:
                for i, name in enumerate(names):
                    clicked, _ = imgui.selectable(name, i == self._preset_index)
                    if clicked:
                        self._preset_index = i
                        # エディタは即座に差し替え、コンパイルは viewer で行う。
                        self._editor_text = load_preset(name)
                        self._actions.post(PresetSelected(name))
            finally:
                imgui.end_combo()
        imgui.same_line()
        if imgui.button("Compile"):
            self._actions.post(CompileRequested(self._editor_text))

        height = float(imgui.get_text_line_height()) * float(_EDITOR_VISIBLE_LINES) + 8.0
        _changed, self._editor_text = imgui.input_text_multiline(
            "##glsl", self._editor_text, -1, -1.0, height
        )

        diagnostic = self._session.last_diagnostic
        if diagnostic:
            imgui.push_style_color(imgui.COLOR_TEXT, *_DIAGNOSTIC_RGBA)
            try:
                imgui.text_wrapped(diagnostic)
            finally:
                imgui.pop_style_color()

    # ---------- フレーム ----------
    def draw_frame(self) -> bool:
        """1 フレーム分の GUI を描画し、コントロールに変更があれば True を返す。

        `flip()` は呼ばない。呼び出し側が `window.flip()` を担当する。
        """

        if self._closed:
            return False

        imgui = self._backend.begin_frame()

        imgui.set_next_window_position(0, 0)
        imgui.set_next_window_size(self._window.width, self._window.height)
        imgui.begin(
            self._title,
            flags=imgui.WINDOW_NO_RESIZE
            | imgui.WINDOW_NO_COLLAPSE
            | imgui.WINDOW_NO_TITLE_BAR,
        )
        changed = False
        try:
            if imgui.collapsing_header("Scenario", flags=imgui.TREE_NODE_DEFAULT_OPEN)[0]:
                self._draw_scenario_section(imgui)

            if imgui.collapsing_header("Display", flags=imgui.TREE_NODE_DEFAULT_OPEN)[0]:
                changed |= draw_display_controls(self._display)

            scenario_bindings = self._session.scenario_bindings
            if scenario_bindings and imgui.collapsing_header(
                "Scenario parameters", flags=imgui.TREE_NODE_DEFAULT_OPEN
            )[0]:
                changed |= _draw_bindings(imgui, scenario_bindings, id_prefix="s")

            user_bindings = self._session.user_bindings
            if user_bindings and imgui.collapsing_header(
                "Parameters", flags=imgui.TREE_NODE_DEFAULT_OPEN
            )[0]:
                changed |= _draw_bindings(imgui, user_bindings, id_prefix="u")

            if imgui.collapsing_header("Shader", flags=imgui.TREE_NODE_DEFAULT_OPEN)[0]:
                self._draw_editor_section(imgui)
        finally:
            imgui.end()

        self._backend.end_frame()
        return changed

    def close(self) -> None:
        """GUI を終了し、コンテキストとウィンドウを破棄する。"""

        if self._closed:
            return
        self._closed = True

        self._backend.shutdown()
        self._window.close()
