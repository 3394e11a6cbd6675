"""シナリオ定義（画像・固定 uniform・断片）のテスト。"""

from __future__ import annotations

import pytest

from tonelab.core.scenarios import SCENARIOS, get_scenario, scenario_names
from tonelab.core.uniforms.descriptor import ControlKind, descriptor_invariant_error


def test_scenario_names_in_table_order() -> None:
    assert scenario_names() == ("Flat Sponza", "Text Light", "Shelf")


def test_get_scenario_none_and_unknown() -> None:
    assert get_scenario(None) is None
    with pytest.raises(KeyError):
        get_scenario("Nope")


@pytest.mark.parametrize("name", list(SCENARIOS))
def test_scenario_descriptors_are_external_and_valid(name: str) -> None:
    scenario = get_scenario(name)
    assert scenario is not None

    for d in scenario.descriptors():
        assert d.external
        assert d.name.startswith("_")
        assert descriptor_invariant_error(d) is None
        # 断片が宣言済み uniform を参照している。
        assert d.name in scenario.shader_fragment
    assert "#define _DYNAMIC_IMAGE" in scenario.shader_fragment
    assert scenario.image_reference.endswith(".exr")


def test_flat_sponza_controls() -> None:
    scenario = get_scenario("Flat Sponza")
    assert scenario is not None

    by_name = {d.name: d for d in scenario.descriptors()}
    assert by_name["_skyColor"].control_kind is ControlKind.COLOR
    assert by_name["_skyColor"].value_type == "vec3"
    assert by_name["_skyColor"].default == "#00a2ff"
    assert by_name["_sunPower"].control_kind is ControlKind.RANGE
    assert by_name["_sunPower"].display_label == "Sun Power"
    assert (by_name["_sunPower"].min, by_name["_sunPower"].max) == (-5.0, 10.0)
