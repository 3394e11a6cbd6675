# どこで: `src/tonelab/core/controls/factory.py`。
# 何を: ControlSpec からコントロールを生成する（ControlKind ごとの閉じたディスパッチ）。
# なぜ: UI 実装（pyimgui / ヘッドレス）を Control Factory の差し替えだけで切り替えられるようにするため。

from __future__ import annotations

import logging
import math
from typing import Any, Protocol, Sequence

from tonelab.core.uniforms.descriptor import ControlKind, ControlSpec
from tonelab.core.uniforms.parser import parse_number_literal

from .models import (
    CheckboxModel,
    ChoiceModel,
    ColorModel,
    NumberModel,
    RangeModel,
    hex_to_rgb255,
)

_logger = logging.getLogger(__name__)


class ControlInstance(Protocol):
    """現在値アクセサを持つ対話コントロール。"""

    def get_value(self) -> Any: ...


class ControlFactory(Protocol):
    """UI 側が提供するコントロール生成の能力セット。"""

    def make_checkbox(self, label: str, initial: bool) -> ControlInstance: ...

    def make_number(self, label: str, initial: float) -> ControlInstance: ...

    def make_range(
        self,
        label: str,
        min_value: float,
        max_value: float,
        initial: float | None,
        logarithmic: bool,
    ) -> ControlInstance: ...

    def make_choice(self, label: str, options: Sequence[str], initial: int) -> ControlInstance: ...

    def make_color(self, label: str, initial: str | None) -> ControlInstance: ...


class HeadlessControlFactory:
    """値モデルそのものをコントロールとして返す（描画なし）。"""

    def make_checkbox(self, label: str, initial: bool) -> CheckboxModel:
        return CheckboxModel(initial)

    def make_number(self, label: str, initial: float) -> NumberModel:
        return NumberModel(initial)

    def make_range(
        self,
        label: str,
        min_value: float,
        max_value: float,
        initial: float | None,
        logarithmic: bool,
    ) -> RangeModel:
        return RangeModel(min_value, max_value, initial, logarithmic=logarithmic)

    def make_choice(self, label: str, options: Sequence[str], initial: int) -> ChoiceModel:
        return ChoiceModel(options, initial)

    def make_color(self, label: str, initial: str | None) -> ColorModel:
        return ColorModel(initial)


def _as_float_or_none(value: Any, *, label: str) -> float | None:
    """初期値（float か文字列リテラル）を float にする。解釈できなければ None。"""

    if value is None:
        return None
    try:
        out = parse_number_literal(value) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        out = math.nan
    if not math.isfinite(out):
        _logger.warning("数値として解釈できない初期値を無視します: %s=%r", label, value)
        return None
    return out


def _as_index(value: Any, *, label: str) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        _logger.warning("選択肢インデックスとして解釈できない初期値を無視します: %s=%r", label, value)
        return 0


def _as_hex_or_none(value: Any, *, label: str) -> str | None:
    if value is None:
        return None
    try:
        hex_to_rgb255(str(value))
    except ValueError:
        _logger.warning("色として解釈できない初期値を無視します: %s=%r", label, value)
        return None
    return str(value)


def synthesize_control(spec: ControlSpec, factory: ControlFactory) -> ControlInstance:
    """ControlSpec.kind に応じたコントロールを factory で生成して返す。

    Raises
    ------
    ValueError
        未知の kind、または RANGE/CHOICE の必須情報が欠けている場合。
    """

    kind = spec.kind
    label = str(spec.label)

    if kind is ControlKind.CHECKBOX:
        initial = True if spec.value is None else bool(spec.value)
        return factory.make_checkbox(label, initial)

    if kind is ControlKind.NUMBER:
        number = _as_float_or_none(spec.value, label=label)
        return factory.make_number(label, 0.0 if number is None else number)

    if kind is ControlKind.RANGE:
        if spec.min is None or spec.max is None:
            raise ValueError(f"range control requires min/max: label={label}")
        return factory.make_range(
            label,
            float(spec.min),
            float(spec.max),
            _as_float_or_none(spec.value, label=label),
            bool(spec.logarithmic),
        )

    if kind is ControlKind.CHOICE:
        if not spec.choices:
            raise ValueError(f"choice control requires choices: label={label}")
        index = _as_index(spec.value, label=label)
        if not 0 <= index < len(spec.choices):
            index = 0
        return factory.make_choice(label, tuple(spec.choices), index)

    if kind is ControlKind.COLOR:
        return factory.make_color(label, _as_hex_or_none(spec.value, label=label))

    raise ValueError(f"unknown control kind: {kind!r}")


__all__ = [
    "ControlFactory",
    "ControlInstance",
    "HeadlessControlFactory",
    "synthesize_control",
]
