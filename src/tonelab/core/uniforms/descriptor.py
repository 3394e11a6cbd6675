# どこで: `src/tonelab/core/uniforms/descriptor.py`。
# 何を: uniform 宣言の解析結果（UniformDescriptor）とコントロール生成用の ControlSpec を定義する。
# なぜ: パーサ/引き継ぎ/コントロール生成が共有するデータ形を、振る舞いなしで 1 箇所に置くため。

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal, TypeAlias

ValueType: TypeAlias = Literal["bool", "float", "int", "uint", "vec3"]

VALUE_TYPES: tuple[ValueType, ...] = ("bool", "float", "int", "uint", "vec3")

# 注釈文法で宣言できるスカラー型（vec3 はシナリオ uniform 専用）。
SCALAR_TYPES: tuple[ValueType, ...] = ("bool", "float", "int", "uint")


class ControlKind(Enum):
    """uniform に割り当てるコントロールの種類（閉じた 5 種）。"""

    CHECKBOX = "checkbox"
    NUMBER = "number"
    RANGE = "range"
    CHOICE = "choice"
    COLOR = "color"


@dataclass(frozen=True, slots=True)
class UniformDescriptor:
    """1 つの uniform 宣言を構造化したもの。

    Notes
    -----
    - `default` はパース由来なら bool（チェックボックス）か文字列リテラル。
      シナリオ由来の場合は型付きの値（float や "#rrggbb"）を直接持つ。
    - `external=True` はシナリオ側で宣言を注入する uniform を表す。
    """

    name: str
    value_type: ValueType
    control_kind: ControlKind
    min: float | None = None
    max: float | None = None
    logarithmic: bool = False
    choices: tuple[str, ...] | None = None
    default: Any | None = None
    label: str | None = None
    external: bool = False

    @property
    def display_label(self) -> str:
        return self.name if self.label is None else str(self.label)


@dataclass(frozen=True, slots=True)
class ControlSpec:
    """コントロール 1 つを作るのに必要な情報（descriptor から名前/型を落とした射影）。

    `value` は Value Carryover が決めた初期値で、コントロールの入力表現
    （チェック状態 / 数値 / インデックス / "#rrggbb"）で持つ。None はコントロール既定。
    """

    label: str
    kind: ControlKind
    min: float | None = None
    max: float | None = None
    logarithmic: bool = False
    choices: tuple[str, ...] | None = None
    value: Any | None = None


def descriptor_invariant_error(descriptor: UniformDescriptor) -> str | None:
    """descriptor の不変条件違反を文字列で返す。問題なければ None。"""

    kind = descriptor.control_kind
    if not descriptor.name:
        return "empty name"
    if kind is ControlKind.CHOICE:
        if descriptor.value_type not in ("int", "uint"):
            return f"choice requires int/uint: got={descriptor.value_type}"
        if not descriptor.choices:
            return "choice requires non-empty choices"
    if kind is ControlKind.RANGE:
        if descriptor.value_type != "float":
            return f"range requires float: got={descriptor.value_type}"
        lo, hi = descriptor.min, descriptor.max
        if lo is None or hi is None:
            return "range requires both min and max"
        if not (math.isfinite(lo) and math.isfinite(hi)):
            return f"range requires finite min/max: min={lo}, max={hi}"
        if not lo <= hi:
            return f"range requires min <= max: min={lo}, max={hi}"
        if descriptor.logarithmic and not lo > 0.0:
            return f"logrange requires min > 0: min={lo}"
    return None


__all__ = [
    "ControlKind",
    "ControlSpec",
    "SCALAR_TYPES",
    "UniformDescriptor",
    "VALUE_TYPES",
    "ValueType",
    "descriptor_invariant_error",
]
