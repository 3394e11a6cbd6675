"""1 フレームぶんの uniform 転送リストのテスト。"""

from __future__ import annotations

from typing import Any

import pytest

from tonelab.core.controls.factory import HeadlessControlFactory
from tonelab.core.display import DisplayControls
from tonelab.core.frame_uniforms import (
    TEXTURE_UNIT,
    coerce_uniform_value,
    fixed_uniforms,
    frame_uniforms,
)
from tonelab.core.session import ShaderSession
from tonelab.core.shader.compiler import ShaderCompileError


class _Compiler:
    def __init__(self) -> None:
        self.fail = False

    def compile(self, fragment_source: str) -> Any:
        if self.fail:
            raise ShaderCompileError("compile", "bad")
        return object()

    def release(self, program: Any) -> None:
        pass


def _by_name(uploads) -> dict[str, Any]:
    return {u.name: u.value for u in uploads}


def test_fixed_uniforms_reflect_display_controls() -> None:
    display = DisplayControls()
    display.exposure.set_value(2.0)
    display.show_clamp.set_checked(True)

    got = _by_name(fixed_uniforms(display, view_aspect_ratio=1.5, image_aspect_ratio=2.0))

    assert got == {
        "_viewAspectRatio": 1.5,
        "_imageAspectRatio": 2.0,
        "_tex": TEXTURE_UNIT,
        "_exposure": pytest.approx(4.0),
        "_showClamp": 1,
        "_pureGammaEncode": 1,
    }


def test_bindings_are_coerced_by_value_type() -> None:
    session = ShaderSession(
        compiler=_Compiler(),
        control_factory=HeadlessControlFactory(),
        user_code="uniform bool B;\nuniform int Mode; // choices A B\nuniform float K; // default=2",
    )
    session.recompile()

    got = _by_name(frame_uniforms(session, DisplayControls(), view_aspect_ratio=1.0, image_aspect_ratio=1.0))

    assert got["B"] == 1 and isinstance(got["B"], int)
    assert got["Mode"] == 0
    assert got["K"] == 2.0 and isinstance(got["K"], float)


def test_bindings_not_in_installed_program_are_skipped() -> None:
    compiler = _Compiler()
    session = ShaderSession(
        compiler=compiler,
        control_factory=HeadlessControlFactory(),
        user_code="uniform float K;",
    )
    session.recompile()
    compiler.fail = True
    session.set_user_code("uniform bool K;\nuniform float New;")
    session.recompile()

    got = _by_name(frame_uniforms(session, DisplayControls(), view_aspect_ratio=1.0, image_aspect_ratio=1.0))

    # 稼働中プログラムは float K だけを宣言している。
    assert "K" not in got
    assert "New" not in got


def test_no_program_means_only_fixed_uniforms() -> None:
    session = ShaderSession(
        compiler=_Compiler(),
        control_factory=HeadlessControlFactory(),
        user_code="uniform float K;",
    )

    got = frame_uniforms(session, DisplayControls(), view_aspect_ratio=1.0, image_aspect_ratio=1.0)

    assert len(got) == 6


def test_coerce_uniform_value() -> None:
    assert coerce_uniform_value("uint", 3.0) == 3
    assert coerce_uniform_value("vec3", [0, 1, 2]) == (0.0, 1.0, 2.0)
    with pytest.raises(ValueError):
        coerce_uniform_value("vec3", (1.0, 2.0))
    with pytest.raises(ValueError):
        coerce_uniform_value("mat4", 1.0)  # type: ignore[arg-type]


@pytest.mark.parametrize("literal", ["inf", "1e999", "-Infinity"])
def test_int_number_with_non_finite_literal_uploads_zero(literal: str) -> None:
    session = ShaderSession(
        compiler=_Compiler(),
        control_factory=HeadlessControlFactory(),
        user_code=f"uniform int Steps; // default={literal}",
    )
    assert session.recompile().ok

    got = _by_name(frame_uniforms(session, DisplayControls(), view_aspect_ratio=1.0, image_aspect_ratio=1.0))

    assert got["Steps"] == 0


def test_int_number_holding_infinity_uploads_zero() -> None:
    session = ShaderSession(
        compiler=_Compiler(),
        control_factory=HeadlessControlFactory(),
        user_code="uniform int Steps;\nuniform uint Count;",
    )
    session.recompile()
    # imgui の入力欄に桁あふれする値を打ち込んだ状態。
    session.bindings[0].control.set_value(float("inf"))
    session.bindings[1].control.set_value(float("nan"))

    got = _by_name(frame_uniforms(session, DisplayControls(), view_aspect_ratio=1.0, image_aspect_ratio=1.0))

    assert got["Steps"] == 0
    assert got["Count"] == 0


def test_coerce_uniform_value_maps_non_finite_integers_to_zero() -> None:
    assert coerce_uniform_value("int", float("inf")) == 0
    assert coerce_uniform_value("uint", float("-inf")) == 0
    assert coerce_uniform_value("bool", float("nan")) == 0
    assert coerce_uniform_value("float", float("inf")) == float("inf")
