# どこで: `src/tonelab/interactive/control_panel/widgets.py`。
# 何を: core の値モデルを pyimgui ウィジェットとして描画し、ImGuiControlFactory として提供する。
# なぜ: 値の保持はモデル、描画は imgui 呼び出し、という分担で kind ごとの UI 実装を閉じ込めるため。

from __future__ import annotations

from collections.abc import Sequence

from tonelab.core.controls.models import (
    CheckboxModel,
    ChoiceModel,
    ColorModel,
    NumberModel,
    RangeModel,
)
from tonelab.core.display import EXPOSURE_STEP, DisplayControls

# 数値エコー欄の幅（px）。
_ECHO_WIDTH_PX = 80.0


def draw_checkbox(label: str, model: CheckboxModel) -> bool:
    """チェックボックスを描画し、変更があれば True を返す。"""

    import imgui  # type: ignore[import-untyped]

    clicked, state = imgui.checkbox(str(label), bool(model.checked))
    if clicked:
        model.set_checked(bool(state))
    return bool(clicked)


def draw_number(label: str, model: NumberModel) -> bool:
    import imgui  # type: ignore[import-untyped]

    changed, value = imgui.input_float(str(label), float(model.value), format="%.6g")
    if changed:
        model.set_value(float(value))
    return bool(changed)


def draw_range(label: str, model: RangeModel, *, step: float = 0.0) -> bool:
    """スライダーと数値エコーを 1 行に描画する。

    スライダーは位置空間（log の場合は ln 空間）を操作し、表示テキストだけ実値にする。
    エコー側の入力は `RangeModel.set_value()` で範囲内に寄せる。
    """

    import imgui  # type: ignore[import-untyped]

    value = model.get_value()
    # format に `%` 指定子が無い場合、ImGui はその文字列をそのまま表示する。
    display = f"{value:.4g}" if model.logarithmic else "%.4g"

    avail_w = float(imgui.get_content_region_available_width())
    imgui.push_item_width(max(40.0, avail_w * 0.6 - _ECHO_WIDTH_PX))
    slid, position = imgui.slider_float(
        "##slider",
        float(model.position),
        float(model.position_min),
        float(model.position_max),
        format=display,
    )
    imgui.pop_item_width()
    if slid:
        model.set_position(float(position))

    imgui.same_line()
    imgui.push_item_width(_ECHO_WIDTH_PX)
    echoed, typed = imgui.input_float(
        f"{label}##echo",
        float(model.get_value()),
        step=float(step),
        format="%.6g",
        flags=imgui.INPUT_TEXT_ENTER_RETURNS_TRUE,
    )
    imgui.pop_item_width()
    if echoed:
        model.set_value(float(typed))
    return bool(slid or echoed)


def draw_choice(label: str, model: ChoiceModel) -> bool:
    """選択肢をラジオボタンで横並びに描画する。"""

    import imgui  # type: ignore[import-untyped]

    imgui.text(str(label))
    changed = False
    for i, option in enumerate(model.options):
        imgui.same_line(0.0, 6.0)
        if imgui.radio_button(f"{option}##{i}", i == model.index):
            if i != model.index:
                model.select(i)
                changed = True
    return changed


def draw_color(label: str, model: ColorModel) -> bool:
    """sRGB エンコード済みの値でカラーピッカーを描画する。"""

    import imgui  # type: ignore[import-untyped]

    r, g, b = model.rgb01()
    flags = imgui.COLOR_EDIT_DISPLAY_HEX | imgui.COLOR_EDIT_INPUT_RGB
    changed, out = imgui.color_edit3(str(label), float(r), float(g), float(b), flags=flags)
    if changed:
        model.set_rgb01(out)
    return bool(changed)


class CheckboxWidget(CheckboxModel):
    def __init__(self, label: str, checked: bool) -> None:
        super().__init__(checked)
        self.label = str(label)

    def draw(self) -> bool:
        return draw_checkbox(self.label, self)


class NumberWidget(NumberModel):
    def __init__(self, label: str, value: float) -> None:
        super().__init__(value)
        self.label = str(label)

    def draw(self) -> bool:
        return draw_number(self.label, self)


class RangeWidget(RangeModel):
    def __init__(
        self,
        label: str,
        min_value: float,
        max_value: float,
        value: float | None,
        *,
        logarithmic: bool,
    ) -> None:
        super().__init__(min_value, max_value, value, logarithmic=logarithmic)
        self.label = str(label)

    def draw(self) -> bool:
        return draw_range(self.label, self)


class ChoiceWidget(ChoiceModel):
    def __init__(self, label: str, options: Sequence[str], index: int) -> None:
        super().__init__(options, index)
        self.label = str(label)

    def draw(self) -> bool:
        return draw_choice(self.label, self)


class ColorWidget(ColorModel):
    def __init__(self, label: str, hex_text: str | None) -> None:
        super().__init__(hex_text)
        self.label = str(label)

    def draw(self) -> bool:
        return draw_color(self.label, self)


class ImGuiControlFactory:
    """ControlFactory の pyimgui 実装。生成物は `draw()` を持つ値モデル。"""

    def make_checkbox(self, label: str, initial: bool) -> CheckboxWidget:
        return CheckboxWidget(label, initial)

    def make_number(self, label: str, initial: float) -> NumberWidget:
        return NumberWidget(label, initial)

    def make_range(
        self,
        label: str,
        min_value: float,
        max_value: float,
        initial: float | None,
        logarithmic: bool,
    ) -> RangeWidget:
        return RangeWidget(label, min_value, max_value, initial, logarithmic=logarithmic)

    def make_choice(self, label: str, options: Sequence[str], initial: int) -> ChoiceWidget:
        return ChoiceWidget(label, options, initial)

    def make_color(self, label: str, initial: str | None) -> ColorWidget:
        return ColorWidget(label, initial)


def draw_display_controls(display: DisplayControls) -> bool:
    """露出・クランプ表示・ガンマエンコードの固定コントロールを描画する。"""

    import imgui  # type: ignore[import-untyped]

    changed = False
    imgui.push_id("display")
    try:
        imgui.push_id("exposure")
        changed |= draw_range("Exposure (EV)", display.exposure, step=EXPOSURE_STEP)
        imgui.pop_id()
        changed |= draw_checkbox("Mark clamped regions", display.show_clamp)
        imgui.same_line()
        changed |= draw_checkbox("Encode in gamma 2.2", display.pure_gamma_encode)
    finally:
        imgui.pop_id()
    return changed


__all__ = [
    "CheckboxWidget",
    "ChoiceWidget",
    "ColorWidget",
    "ImGuiControlFactory",
    "NumberWidget",
    "RangeWidget",
    "draw_checkbox",
    "draw_choice",
    "draw_color",
    "draw_display_controls",
    "draw_number",
    "draw_range",
]
