# どこで: `src/tonelab/core/frame_uniforms.py`。
# 何を: 1 フレームぶんの uniform 転送リスト（固定 uniform + バインディング）を作る純粋関数を提供する。
# なぜ: 型ごとの値変換を GL 呼び出しから切り離し、ヘッドレスで検証できるようにするため。

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from tonelab.core.display import DisplayControls
from tonelab.core.session import ShaderSession
from tonelab.core.uniforms.descriptor import ValueType

TEXTURE_UNIT = 0


@dataclass(frozen=True, slots=True)
class UniformUpload:
    """GL へ書き込む uniform 1 つ。"""

    name: str
    value_type: ValueType
    value: Any


def coerce_uniform_value(value_type: ValueType, value: Any) -> Any:
    """value_type に合わせて GL へ渡す表現に変換する。

    Raises
    ------
    ValueError
        未知の型、または vec3 が長さ 3 でない場合。

    Notes
    -----
    整数型に非有限の float（inf / NaN）が来た場合は 0 を返す。
    """

    if value_type in ("bool", "int", "uint"):
        if isinstance(value, float) and not math.isfinite(value):
            return 0
        return int(value)
    if value_type == "float":
        return float(value)
    if value_type == "vec3":
        try:
            x, y, z = value
        except (TypeError, ValueError) as exc:
            raise ValueError(f"vec3 value must be a length-3 sequence: {value!r}") from exc
        return float(x), float(y), float(z)
    raise ValueError(f"unknown value type: {value_type!r}")


def fixed_uniforms(
    display: DisplayControls,
    *,
    view_aspect_ratio: float,
    image_aspect_ratio: float,
) -> list[UniformUpload]:
    """ヘッダ/フッタ/頂点シェーダが宣言している固定 uniform を返す。"""

    return [
        UniformUpload("_viewAspectRatio", "float", float(view_aspect_ratio)),
        UniformUpload("_imageAspectRatio", "float", float(image_aspect_ratio)),
        UniformUpload("_tex", "int", TEXTURE_UNIT),
        UniformUpload("_exposure", "float", display.exposure_scale()),
        UniformUpload("_showClamp", "bool", display.show_clamp.get_value()),
        UniformUpload("_pureGammaEncode", "bool", display.pure_gamma_encode.get_value()),
    ]


def frame_uniforms(
    session: ShaderSession,
    display: DisplayControls,
    *,
    view_aspect_ratio: float,
    image_aspect_ratio: float,
) -> list[UniformUpload]:
    """稼働中プログラムへ書き込む uniform を返す。

    コンパイル失敗後はコントロールが新しい宣言、プログラムが古い宣言のままになり得る。
    その場合、稼働中プログラムが同じ型で宣言していないバインディングは飛ばす。
    """

    out = fixed_uniforms(
        display,
        view_aspect_ratio=view_aspect_ratio,
        image_aspect_ratio=image_aspect_ratio,
    )
    program_types = session.program_value_types
    for binding in session.bindings:
        descriptor = binding.descriptor
        if program_types.get(descriptor.name) != descriptor.value_type:
            continue
        value = coerce_uniform_value(descriptor.value_type, binding.get_value())
        out.append(UniformUpload(descriptor.name, descriptor.value_type, value))
    return out


__all__ = ["TEXTURE_UNIT", "UniformUpload", "coerce_uniform_value", "fixed_uniforms", "frame_uniforms"]
