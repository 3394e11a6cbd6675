"""コントロール値モデル（チェック/数値/レンジ/選択/色）のテスト。"""

from __future__ import annotations

import math

import pytest

from tonelab.core.controls.models import (
    CheckboxModel,
    ChoiceModel,
    ColorModel,
    NumberModel,
    RangeModel,
    hex_to_linear_rgb,
    hex_to_rgb255,
    linear_rgb_to_hex,
)


def test_checkbox_value_is_one_or_zero() -> None:
    m = CheckboxModel(True)
    assert m.get_value() == 1
    m.set_checked(False)
    assert m.get_value() == 0


def test_number_is_unbounded_float() -> None:
    m = NumberModel(1)
    m.set_value("-1e6")  # type: ignore[arg-type]
    assert m.get_value() == -1e6


def test_range_initial_value_inside_bounds_is_used() -> None:
    assert RangeModel(0.0, 10.0, 2.5).get_value() == pytest.approx(2.5)


@pytest.mark.parametrize("initial", [None, -1.0, 11.0])
def test_range_falls_back_to_arithmetic_mean(initial: float | None) -> None:
    assert RangeModel(0.0, 10.0, initial).get_value() == pytest.approx(5.0)


def test_log_range_falls_back_to_geometric_mean() -> None:
    m = RangeModel(0.01, 100.0, None, logarithmic=True)

    assert m.get_value() == pytest.approx(1.0)
    assert m.position == pytest.approx(0.0)
    assert (m.position_min, m.position_max) == pytest.approx((math.log(0.01), math.log(100.0)))


def test_log_range_slider_domain_is_natural_log() -> None:
    m = RangeModel(0.1, 10.0, 2.0, logarithmic=True)

    assert m.position == pytest.approx(math.log(2.0))
    m.set_position(math.log(5.0))
    assert m.get_value() == pytest.approx(5.0)


def test_range_echo_and_slider_share_one_value() -> None:
    m = RangeModel(0.0, 1.0, 0.5)

    m.set_value(0.2)
    assert m.position == pytest.approx(0.2)
    m.set_position(0.9)
    assert m.get_value() == pytest.approx(0.9)


def test_range_echo_is_clamped() -> None:
    m = RangeModel(0.1, 10.0, 1.0, logarithmic=True)

    m.set_value(1000.0)
    assert m.get_value() == pytest.approx(10.0)
    m.set_position(-100.0)
    assert m.get_value() == pytest.approx(0.1)


@pytest.mark.parametrize(
    ("lo", "hi", "log"),
    [(1.0, 0.0, False), (0.0, 1.0, True), (-1.0, 1.0, True)],
)
def test_range_rejects_invalid_bounds(lo: float, hi: float, log: bool) -> None:
    with pytest.raises(ValueError):
        RangeModel(lo, hi, logarithmic=log)


def test_choice_returns_index_and_resets_out_of_range() -> None:
    m = ChoiceModel(["A", "B", "C"], 2)
    assert m.get_value() == 2
    m.select(5)
    assert m.get_value() == 0


def test_choice_requires_options() -> None:
    with pytest.raises(ValueError):
        ChoiceModel([])


def test_color_decodes_with_gamma_2_2() -> None:
    m = ColorModel("#808080")
    r, g, b = m.get_value()

    assert r == pytest.approx((128 / 255) ** 2.2)
    assert r == g == b


def test_color_defaults_to_black() -> None:
    assert ColorModel().get_value() == (0.0, 0.0, 0.0)


def test_color_picker_updates_hex() -> None:
    m = ColorModel("#000000")
    m.set_rgb01((1.0, 0.5, 0.0))

    assert m.hex == "#ff8000"


def test_hex_helpers() -> None:
    assert hex_to_rgb255("#00A2ff") == (0, 162, 255)
    assert hex_to_linear_rgb("#ffffff") == (1.0, 1.0, 1.0)
    assert linear_rgb_to_hex((2.0, -1.0, 1.0)) == "#ff00ff"
    with pytest.raises(ValueError):
        hex_to_rgb255("00a2ff")
    with pytest.raises(ValueError):
        hex_to_rgb255("#zzzzzz")


def test_linear_hex_roundtrip_keeps_8bit_color() -> None:
    assert linear_rgb_to_hex(hex_to_linear_rgb("#fff7cb")) == "#fff7cb"
