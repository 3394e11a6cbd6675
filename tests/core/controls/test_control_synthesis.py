"""ControlSpec → コントロール生成（ControlKind ごとのディスパッチ）のテスト。"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from tonelab.core.controls.factory import HeadlessControlFactory, synthesize_control
from tonelab.core.controls.models import (
    CheckboxModel,
    ChoiceModel,
    ColorModel,
    NumberModel,
    RangeModel,
)
from tonelab.core.uniforms.descriptor import ControlKind, ControlSpec


class _RecordingFactory(HeadlessControlFactory):
    """どの make_* が呼ばれたかを記録する。"""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def make_range(self, label, min_value, max_value, initial, logarithmic):  # type: ignore[override]
        self.calls.append(("range", (label, min_value, max_value, initial, logarithmic)))
        return super().make_range(label, min_value, max_value, initial, logarithmic)

    def make_color(self, label, initial):  # type: ignore[override]
        self.calls.append(("color", (label, initial)))
        return super().make_color(label, initial)


def _make(spec: ControlSpec) -> Any:
    return synthesize_control(spec, HeadlessControlFactory())


def test_checkbox_defaults_to_checked() -> None:
    control = _make(ControlSpec(label="Flag", kind=ControlKind.CHECKBOX))

    assert isinstance(control, CheckboxModel)
    assert control.get_value() == 1


def test_checkbox_uses_given_state() -> None:
    control = _make(ControlSpec(label="Flag", kind=ControlKind.CHECKBOX, value=False))

    assert control.get_value() == 0


def test_number_parses_literal_default() -> None:
    control = _make(ControlSpec(label="K", kind=ControlKind.NUMBER, value="2.5"))

    assert isinstance(control, NumberModel)
    assert control.get_value() == 2.5


def test_number_with_malformed_literal_is_zero(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        control = _make(ControlSpec(label="K", kind=ControlKind.NUMBER, value="oops"))

    assert control.get_value() == 0.0
    assert "K" in caplog.text


def test_range_receives_bounds_and_log_flag() -> None:
    factory = _RecordingFactory()
    spec = ControlSpec(
        label="Gain", kind=ControlKind.RANGE, min=0.01, max=100.0, logarithmic=True, value="10"
    )

    control = synthesize_control(spec, factory)

    assert isinstance(control, RangeModel)
    assert factory.calls == [("range", ("Gain", 0.01, 100.0, 10.0, True))]
    assert control.get_value() == pytest.approx(10.0)


def test_range_with_unusable_initial_uses_midpoint() -> None:
    control = _make(ControlSpec(label="X", kind=ControlKind.RANGE, min=0.0, max=2.0, value="nan"))

    assert control.get_value() == pytest.approx(1.0)


def test_range_without_bounds_raises() -> None:
    with pytest.raises(ValueError):
        _make(ControlSpec(label="X", kind=ControlKind.RANGE, min=0.0))


def test_choice_returns_index() -> None:
    control = _make(
        ControlSpec(label="Curve", kind=ControlKind.CHOICE, choices=("A", "B"), value=1)
    )

    assert isinstance(control, ChoiceModel)
    assert control.get_value() == 1
    assert control.options == ("A", "B")


def test_choice_out_of_range_initial_selects_first() -> None:
    control = _make(
        ControlSpec(label="Curve", kind=ControlKind.CHOICE, choices=("A", "B"), value=9)
    )

    assert control.get_value() == 0


def test_color_decodes_hex_to_linear() -> None:
    control = _make(ControlSpec(label="Sky", kind=ControlKind.COLOR, value="#ffffff"))

    assert isinstance(control, ColorModel)
    assert control.get_value() == (1.0, 1.0, 1.0)


def test_color_with_invalid_hex_uses_black() -> None:
    factory = _RecordingFactory()

    control = synthesize_control(
        ControlSpec(label="Sky", kind=ControlKind.COLOR, value="blue"), factory
    )

    assert factory.calls == [("color", ("Sky", None))]
    assert control.get_value() == (0.0, 0.0, 0.0)


@pytest.mark.parametrize("literal", ["inf", "1e999", "-Infinity"])
def test_number_with_non_finite_literal_is_zero(literal: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        control = _make(ControlSpec(label="K", kind=ControlKind.NUMBER, value=literal))

    assert control.get_value() == 0.0
    assert "K" in caplog.text


def test_number_literal_uses_leading_numeric_prefix() -> None:
    control = _make(ControlSpec(label="K", kind=ControlKind.NUMBER, value="2.5px"))

    assert control.get_value() == 2.5


def test_choice_with_non_finite_initial_selects_first() -> None:
    control = _make(
        ControlSpec(label="Mode", kind=ControlKind.CHOICE, choices=("A", "B"), value=float("inf"))
    )

    assert control.get_value() == 0
