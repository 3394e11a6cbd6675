# どこで: `src/tonelab/core/session.py`。
# 何を: 再コンパイルの一連の流れ（snapshot → parse → 引き継ぎ → 合成 → 組み立て → compile）を持つ ShaderSession を提供する。
# なぜ: 「現在の uniform/コントロール/プログラム」をグローバルでなく 1 つのオブジェクトが所有し、
#       失敗時に稼働中のプログラムを壊さないことをここで保証するため。

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from tonelab.core.controls.factory import (
    ControlFactory,
    ControlInstance,
    synthesize_control,
)
from tonelab.core.scenarios import Scenario
from tonelab.core.shader.assembler import (
    AssembledSource,
    assemble_fragment_source,
    external_declarations,
)
from tonelab.core.shader.compiler import (
    ShaderCompileError,
    ShaderCompiler,
    format_diagnostic,
)
from tonelab.core.shader.fragments import (
    DEFAULT_GLSL_VERSION,
    FRAGMENT_SHADER_FOOTER,
    fragment_shader_header,
)
from tonelab.core.uniforms.carryover import (
    ValueSnapshot,
    capture_snapshot,
    control_spec_for,
)
from tonelab.core.uniforms.descriptor import UniformDescriptor, ValueType
from tonelab.core.uniforms.macros import choice_macros, render_macro_text
from tonelab.core.uniforms.parser import parse_uniform_declarations

_logger = logging.getLogger(__name__)

SessionState: TypeAlias = Literal["live", "recompiling"]


@dataclass(frozen=True, slots=True)
class UniformBinding:
    """1 パスぶんの descriptor と、それから作ったコントロールの組。"""

    descriptor: UniformDescriptor
    control: ControlInstance

    def get_value(self) -> Any:
        return self.control.get_value()


@dataclass(frozen=True, slots=True)
class RecompileResult:
    """1 回の再コンパイルの結果。"""

    ok: bool
    source: AssembledSource
    diagnostic: str | None = None


class ShaderSession:
    """ユーザーの宣言/シェーダコードと、稼働中のプログラムを所有する。

    Notes
    -----
    - 変更は `recompile()` の中でだけ同期的に行う。描画側は読むだけ。
    - コンパイル/リンク失敗時は直前のプログラムを保持する。
      コントロールは失敗したパスのもので置き換わったままになる（宣言の編集を即座に反映するため）。
    """

    def __init__(
        self,
        *,
        compiler: ShaderCompiler,
        control_factory: ControlFactory,
        user_code: str = "",
        scenario: Scenario | None = None,
        glsl_version: str = DEFAULT_GLSL_VERSION,
    ) -> None:
        self._compiler = compiler
        self._factory = control_factory
        self._user_code = str(user_code)
        self._scenario = scenario
        self._header = fragment_shader_header(glsl_version)
        self._footer = FRAGMENT_SHADER_FOOTER

        self._state: SessionState = "live"
        self._bindings: tuple[UniformBinding, ...] = ()
        self._program: Any | None = None
        # 稼働中プログラムをコンパイルしたときの name -> 型。
        self._program_value_types: dict[str, ValueType] = {}
        self._last_diagnostic: str | None = None

    # ---------- 読み取り ----------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user_code(self) -> str:
        return self._user_code

    @property
    def scenario(self) -> Scenario | None:
        return self._scenario

    @property
    def program(self) -> Any | None:
        """稼働中のプログラムハンドル（一度も成功していなければ None）。"""
        return self._program

    @property
    def program_value_types(self) -> dict[str, ValueType]:
        return dict(self._program_value_types)

    @property
    def bindings(self) -> tuple[UniformBinding, ...]:
        return self._bindings

    @property
    def user_bindings(self) -> tuple[UniformBinding, ...]:
        return tuple(b for b in self._bindings if not b.descriptor.external)

    @property
    def scenario_bindings(self) -> tuple[UniformBinding, ...]:
        return tuple(b for b in self._bindings if b.descriptor.external)

    @property
    def last_diagnostic(self) -> str | None:
        """直近のパスが失敗した場合の診断テキスト。成功したら None に戻る。"""
        return self._last_diagnostic

    # ---------- 入力 ----------
    def set_user_code(self, text: str) -> None:
        """宣言/シェーダコードを差し替える（反映は次の recompile()）。"""
        self._user_code = str(text)

    def set_scenario(self, scenario: Scenario | None) -> None:
        """シナリオを差し替える（反映は次の recompile()）。"""
        self._scenario = scenario

    # ---------- 再コンパイル ----------
    def snapshot(self) -> ValueSnapshot:
        """現在のコントロール値のスナップショットを返す。"""
        return capture_snapshot(self._bindings)

    def _merged_descriptors(self) -> list[UniformDescriptor]:
        descriptors = parse_uniform_declarations(self._user_code)
        if self._scenario is not None:
            descriptors.extend(self._scenario.descriptors())
        return descriptors

    def _synthesize(
        self, descriptors: Sequence[UniformDescriptor], snapshot: ValueSnapshot
    ) -> tuple[UniformBinding, ...]:
        out: list[UniformBinding] = []
        for descriptor in descriptors:
            spec = control_spec_for(descriptor, snapshot)
            control = synthesize_control(spec, self._factory)
            out.append(UniformBinding(descriptor=descriptor, control=control))
        return tuple(out)

    def _assemble(self, descriptors: Sequence[UniformDescriptor]) -> AssembledSource:
        scenario = self._scenario
        return assemble_fragment_source(
            header=self._header,
            macros=render_macro_text(choice_macros(descriptors)),
            user_code=self._user_code,
            footer=self._footer,
            scenario_declarations=(
                None if scenario is None else external_declarations(descriptors)
            ),
            scenario_fragment=None if scenario is None else scenario.shader_fragment,
        )

    def recompile(self) -> RecompileResult:
        """1 パス分の再コンパイルを行う。

        Returns
        -------
        RecompileResult
            失敗時も例外にはせず、`ok=False` と診断テキストを返す。

        Raises
        ------
        RuntimeError
            再コンパイル中に再入した場合。
        """

        if self._state == "recompiling":
            raise RuntimeError("recompile() は再入できない")
        self._state = "recompiling"
        try:
            # 直前のコントロールを捨てる前に値を読み切る。
            snapshot = self.snapshot()
            descriptors = self._merged_descriptors()
            self._bindings = self._synthesize(descriptors, snapshot)
            source = self._assemble(descriptors)

            _logger.info("Updating shader...")
            try:
                program = self._compiler.compile(source.text)
            except ShaderCompileError as exc:
                diagnostic = format_diagnostic(exc, user_code_line=source.user_code_line)
                self._last_diagnostic = diagnostic
                _logger.warning("%s", diagnostic)
                return RecompileResult(ok=False, source=source, diagnostic=diagnostic)

            previous = self._program
            self._program = program
            self._program_value_types = {d.name: d.value_type for d in descriptors}
            self._last_diagnostic = None
            if previous is not None:
                self._compiler.release(previous)
            _logger.info("Shader program compiled and linked successfully.")
            return RecompileResult(ok=True, source=source)
        finally:
            self._state = "live"

    def release(self) -> None:
        """稼働中のプログラムを解放する。"""

        program = self._program
        self._program = None
        self._program_value_types = {}
        if program is not None:
            self._compiler.release(program)


__all__ = ["RecompileResult", "SessionState", "ShaderSession", "UniformBinding"]
