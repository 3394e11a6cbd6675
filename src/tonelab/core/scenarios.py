# どこで: `src/tonelab/core/scenarios.py`。
# 何を: シナリオ（基準画像・固定 uniform・追加シェーダ断片の組）を定義する。
# なぜ: テキスト解析を経ない uniform も、同じ引き継ぎ/描画経路に載せるため。

from __future__ import annotations

from dataclasses import dataclass

from tonelab.core.uniforms.descriptor import (
    ControlKind,
    ControlSpec,
    UniformDescriptor,
    ValueType,
)


@dataclass(frozen=True, slots=True)
class ScenarioUniform:
    """シナリオが宣言する uniform と、そのコントロール仕様。"""

    name: str
    value_type: ValueType
    control: ControlSpec

    def to_descriptor(self) -> UniformDescriptor:
        """引き継ぎ/合成で扱える descriptor に変換する（ControlSpec.value が既定値）。"""

        spec = self.control
        return UniformDescriptor(
            name=self.name,
            value_type=self.value_type,
            control_kind=spec.kind,
            min=spec.min,
            max=spec.max,
            logarithmic=spec.logarithmic,
            choices=spec.choices,
            default=spec.value,
            label=spec.label,
            external=True,
        )


@dataclass(frozen=True, slots=True)
class Scenario:
    """名前付きシナリオ。"""

    name: str
    image_reference: str
    uniforms: tuple[ScenarioUniform, ...]
    shader_fragment: str

    def descriptors(self) -> list[UniformDescriptor]:
        return [u.to_descriptor() for u in self.uniforms]


def _color(name: str, label: str, hex_text: str) -> ScenarioUniform:
    return ScenarioUniform(
        name=name,
        value_type="vec3",
        control=ControlSpec(label=label, kind=ControlKind.COLOR, value=hex_text),
    )


def _power(name: str, label: str, *, lo: float, hi: float, value: float) -> ScenarioUniform:
    return ScenarioUniform(
        name=name,
        value_type="float",
        control=ControlSpec(label=label, kind=ControlKind.RANGE, min=lo, max=hi, value=value),
    )


_FLAT_SPONZA_FRAGMENT = """#define _DYNAMIC_IMAGE 1

vec3 _dynamic_image() {
    vec3 x = texture(_tex, _uv).rgb;
    return mat3(
        _lightColor * exp2(_lightPower),
        _sunColor * exp2(_sunPower),
        _skyColor
    ) * x;
}"""

_TEXT_LIGHT_FRAGMENT = """#define _DYNAMIC_IMAGE 1

vec3 _dynamic_image() {
    vec3 x = texture(_tex, _uv).rgb;
    return x * _color;
}"""

_SHELF_FRAGMENT = """#define _DYNAMIC_IMAGE 1

vec3 _dynamic_image() {
    vec3 x = texture(_tex, _uv).rgb;
    return mix(x, x.brg, _rotateMix);
}"""

# 画像の各チャンネルを別光源の寄与として扱い、光源色/強度で再合成する。
SCENARIOS: dict[str, Scenario] = {
    "Flat Sponza": Scenario(
        name="Flat Sponza",
        image_reference="Sponza.exr",
        uniforms=(
            _color("_skyColor", "Sky Color", "#00a2ff"),
            _color("_sunColor", "Sun Color", "#fff7cb"),
            _power("_sunPower", "Sun Power", lo=-5.0, hi=10.0, value=0.0),
            _color("_lightColor", "Light Color", "#ff3300"),
            _power("_lightPower", "Light Power", lo=-5.0, hi=10.0, value=0.0),
        ),
        shader_fragment=_FLAT_SPONZA_FRAGMENT,
    ),
    "Text Light": Scenario(
        name="Text Light",
        image_reference="Text.exr",
        uniforms=(_color("_color", "Light Color", "#0033ff"),),
        shader_fragment=_TEXT_LIGHT_FRAGMENT,
    ),
    "Shelf": Scenario(
        name="Shelf",
        image_reference="Shelf.exr",
        uniforms=(_power("_rotateMix", "Rotated Hue Mix", lo=0.0, hi=1.0, value=0.0),),
        shader_fragment=_SHELF_FRAGMENT,
    ),
}


def scenario_names() -> tuple[str, ...]:
    return tuple(SCENARIOS)


def get_scenario(name: str | None) -> Scenario | None:
    """名前からシナリオを返す。None は「シナリオなし」。

    Raises
    ------
    KeyError
        未知のシナリオ名の場合。
    """

    if name is None:
        return None
    try:
        return SCENARIOS[str(name)]
    except KeyError:
        raise KeyError(f"unknown scenario: {name!r}") from None


__all__ = [
    "SCENARIOS",
    "Scenario",
    "ScenarioUniform",
    "get_scenario",
    "scenario_names",
]
