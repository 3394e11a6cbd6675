# どこで: `src/tonelab/interactive/gl/program_compiler.py`。
# 何を: ModernGL でフラグメントソースをコンパイル/リンクし、ShaderCompiler 能力として提供する。
# なぜ: session からは「compile(source) -> handle / ShaderCompileError」だけが見えるようにするため。

from __future__ import annotations

from typing import Any

import moderngl

from tonelab.core.shader.compiler import CompileStage, ShaderCompileError
from tonelab.core.shader.fragments import DEFAULT_GLSL_VERSION, vertex_shader_source


def classify_backend_error(message: str) -> CompileStage:
    """ModernGL の例外メッセージから失敗段階を判定する。"""

    return "link" if "linker" in str(message).lower() else "compile"


class ModernGLShaderCompiler:
    """固定の頂点シェーダと組み合わせて Program を作る。"""

    def __init__(self, ctx: Any, *, glsl_version: str = DEFAULT_GLSL_VERSION) -> None:
        self._ctx = ctx
        self._vertex_source = vertex_shader_source(glsl_version)

    def compile(self, fragment_source: str) -> Any:
        """Program を返す。失敗時は ShaderCompileError を送出する。"""

        try:
            return self._ctx.program(
                vertex_shader=self._vertex_source,
                fragment_shader=str(fragment_source),
            )
        except moderngl.Error as exc:
            message = str(exc)
            raise ShaderCompileError(classify_backend_error(message), message) from exc

    def release(self, program: Any) -> None:
        program.release()


__all__ = ["ModernGLShaderCompiler", "classify_backend_error"]
