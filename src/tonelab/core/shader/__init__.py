# どこで: `src/tonelab/core/shader/__init__.py`。
# 何を: シェーダ組み立て/コンパイラ能力/プリセットの公開名をまとめる。
# なぜ: session と interactive 層の import を短く保つため。

from .assembler import AssembledSource, assemble_fragment_source, external_declarations
from .compiler import ShaderCompileError, ShaderCompiler, format_diagnostic
from .fragments import (
    DEFAULT_GLSL_VERSION,
    FRAGMENT_SHADER_FOOTER,
    fragment_shader_header,
    vertex_shader_source,
)
from .presets import load_preset, preset_names

__all__ = [
    "AssembledSource",
    "assemble_fragment_source",
    "external_declarations",
    "ShaderCompileError",
    "ShaderCompiler",
    "format_diagnostic",
    "DEFAULT_GLSL_VERSION",
    "FRAGMENT_SHADER_FOOTER",
    "fragment_shader_header",
    "vertex_shader_source",
    "load_preset",
    "preset_names",
]
