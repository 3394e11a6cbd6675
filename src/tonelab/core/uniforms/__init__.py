# どこで: `src/tonelab/core/uniforms/__init__.py`。
# 何を: uniform 宣言の解析/引き継ぎ/マクロ生成の公開名をまとめる。
# なぜ: session や GUI から最小インポートで使えるようにするため。

from .descriptor import ControlKind, ControlSpec, UniformDescriptor, ValueType
from .parser import parse_uniform_declarations
from .macros import ChoiceMacro, choice_macros, render_macro_text
from .carryover import (
    SnapshotEntry,
    ValueSnapshot,
    capture_snapshot,
    control_spec_for,
    resolve_initial_value,
)

__all__ = [
    "ControlKind",
    "ControlSpec",
    "UniformDescriptor",
    "ValueType",
    "parse_uniform_declarations",
    "ChoiceMacro",
    "choice_macros",
    "render_macro_text",
    "SnapshotEntry",
    "ValueSnapshot",
    "capture_snapshot",
    "control_spec_for",
    "resolve_initial_value",
]
