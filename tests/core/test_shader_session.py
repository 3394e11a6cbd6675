"""ShaderSession（再コンパイルの一連の流れと fail-soft）のテスト。"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from tonelab.core.controls.factory import HeadlessControlFactory
from tonelab.core.scenarios import get_scenario
from tonelab.core.session import ShaderSession
from tonelab.core.shader.compiler import ShaderCompileError


class _FakeCompiler:
    """`fail` が立っている間は失敗し、成功時は連番のハンドルを返す。"""

    def __init__(self) -> None:
        self.sources: list[str] = []
        self.released: list[Any] = []
        self.fail: ShaderCompileError | None = None
        self.on_compile: Any = None

    def compile(self, fragment_source: str) -> Any:
        self.sources.append(fragment_source)
        if self.on_compile is not None:
            self.on_compile()
        if self.fail is not None:
            raise self.fail
        return f"program-{len(self.sources)}"

    def release(self, program: Any) -> None:
        self.released.append(program)


def _session(user_code: str = "", **kwargs: Any) -> tuple[ShaderSession, _FakeCompiler]:
    compiler = _FakeCompiler()
    session = ShaderSession(
        compiler=compiler,
        control_factory=HeadlessControlFactory(),
        user_code=user_code,
        **kwargs,
    )
    return session, compiler


def _values(session: ShaderSession) -> dict[str, Any]:
    return {b.descriptor.name: b.get_value() for b in session.bindings}


def test_first_successful_compile_installs_program() -> None:
    session, compiler = _session("uniform float Gain; // range min=0 max=2\nvec3 tonemap(vec3 x) { return x; }")

    result = session.recompile()

    assert result.ok
    assert session.program == "program-1"
    assert session.program_value_types == {"Gain": "float"}
    assert session.state == "live"
    assert session.last_diagnostic is None
    assert _values(session) == {"Gain": pytest.approx(1.0)}
    assert compiler.released == []


def test_assembled_source_contains_macros_before_user_code() -> None:
    session, compiler = _session("uniform int Curve; // choices Clamp Exp\n// user")

    result = session.recompile()

    text = compiler.sources[-1]
    assert text.index("#define CURVE_CLAMP 0") < text.index("#define CURVE_EXP 1") < text.index("// user")
    assert text.splitlines()[result.source.user_code_line - 1] == "uniform int Curve; // choices Clamp Exp"


def test_values_carry_over_when_name_and_type_match() -> None:
    session, _ = _session("uniform float Gain; // range min=0 max=2\nuniform int Mode; // choices A B C")
    session.recompile()
    gain, mode = session.bindings
    gain.control.set_value(1.75)
    mode.control.select(2)

    session.set_user_code(
        "uniform int Mode; // choices A B C\nuniform float Gain; // range min=0 max=4\nuniform bool New;"
    )
    session.recompile()

    assert _values(session) == {"Mode": 2, "Gain": pytest.approx(1.75), "New": 1}


def test_type_change_drops_the_previous_value() -> None:
    session, _ = _session("uniform float K;")
    session.recompile()
    session.bindings[0].control.set_value(3.0)

    session.set_user_code("uniform int K; // default=5")
    session.recompile()

    assert _values(session) == {"K": 5.0}


def test_out_of_range_value_falls_back_to_default() -> None:
    session, _ = _session("uniform float Gain; // range min=0 max=10")
    session.recompile()
    session.bindings[0].control.set_value(8.0)

    session.set_user_code("uniform float Gain; // range min=0 max=4 default=1")
    session.recompile()

    assert _values(session) == {"Gain": pytest.approx(1.0)}


def test_failure_keeps_previous_program(caplog: pytest.LogCaptureFixture) -> None:
    session, compiler = _session("uniform float A;")
    session.recompile()
    session.bindings[0].control.set_value(2.0)

    compiler.fail = ShaderCompileError("compile", "0:4: error")
    session.set_user_code("uniform float A;\nuniform bool B;\nsyntax error")
    with caplog.at_level(logging.WARNING):
        result = session.recompile()

    assert not result.ok
    assert session.program == "program-1"
    assert session.program_value_types == {"A": "float"}
    assert result.diagnostic == session.last_diagnostic
    assert "your code starting at line" in (result.diagnostic or "")
    assert "0:4: error" in caplog.text
    # コントロールは失敗したパスのものに置き換わる。
    assert _values(session) == {"A": 2.0, "B": 1}
    assert session.state == "live"
    assert compiler.released == []


def test_link_failure_reports_link_diagnostic() -> None:
    session, compiler = _session("")
    compiler.fail = ShaderCompileError("link", "missing tonemap")

    result = session.recompile()

    assert session.program is None
    assert result.diagnostic == "Shader program failed to link:\nmissing tonemap"


def test_success_after_failure_clears_diagnostic_and_releases_old_program() -> None:
    session, compiler = _session("")
    session.recompile()
    compiler.fail = ShaderCompileError("compile", "bad")
    session.recompile()

    compiler.fail = None
    result = session.recompile()

    assert result.ok
    assert session.program == "program-3"
    assert session.last_diagnostic is None
    assert compiler.released == ["program-1"]


def test_recompile_is_not_reentrant() -> None:
    session, compiler = _session("")
    errors: list[Exception] = []

    def reenter() -> None:
        try:
            session.recompile()
        except RuntimeError as exc:
            errors.append(exc)

    compiler.on_compile = reenter
    session.recompile()

    assert len(errors) == 1
    assert session.state == "live"


def test_scenario_uniforms_are_merged_and_declared() -> None:
    scenario = get_scenario("Text Light")
    session, compiler = _session("uniform float Gain;", scenario=scenario)

    session.recompile()

    assert [b.descriptor.name for b in session.user_bindings] == ["Gain"]
    assert [b.descriptor.name for b in session.scenario_bindings] == ["_color"]
    text = compiler.sources[-1]
    assert text.index("uniform vec3 _color;") < text.index("uniform float Gain;")
    assert text.index("uniform float Gain;") < text.index("vec3 _dynamic_image()")
    assert session.program_value_types == {"Gain": "float", "_color": "vec3"}


def test_scenario_values_carry_over_and_reset_when_removed() -> None:
    session, compiler = _session("", scenario=get_scenario("Shelf"))
    session.recompile()
    session.scenario_bindings[0].control.set_value(0.3)

    session.recompile()
    assert _values(session) == {"_rotateMix": pytest.approx(0.3)}

    session.set_scenario(None)
    session.recompile()
    assert session.bindings == ()
    assert "#define _DYNAMIC_IMAGE" not in compiler.sources[-1]


def test_release_returns_program_to_compiler() -> None:
    session, compiler = _session("")
    session.recompile()

    session.release()

    assert session.program is None
    assert compiler.released == ["program-1"]
