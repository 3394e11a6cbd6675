# どこで: `src/tonelab/core/uniforms/carryover.py`。
# 何を: 再コンパイル前のコントロール値スナップショットを取り、新しい descriptor ごとの初期値を決める。
# なぜ: 名前と型が変わらない uniform の調整値を、宣言の編集をまたいで引き継ぐため。

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, TypeAlias

from tonelab.core.controls.models import linear_rgb_to_hex

from .descriptor import ControlKind, ControlSpec, UniformDescriptor, ValueType


@dataclass(frozen=True, slots=True)
class SnapshotEntry:
    """直前パスのコントロール値 1 つ。"""

    value_type: ValueType
    value: Any


ValueSnapshot: TypeAlias = dict[str, SnapshotEntry]


class _SnapshotSource(Protocol):
    @property
    def descriptor(self) -> UniformDescriptor: ...

    def get_value(self) -> Any: ...


def capture_snapshot(bindings: Iterable[_SnapshotSource]) -> ValueSnapshot:
    """現在のコントロール値を name -> SnapshotEntry に写し取る。

    同名が複数ある場合は後勝ち。
    """

    snapshot: ValueSnapshot = {}
    for binding in bindings:
        descriptor = binding.descriptor
        snapshot[descriptor.name] = SnapshotEntry(
            value_type=descriptor.value_type,
            value=binding.get_value(),
        )
    return snapshot


def _as_float(value: Any) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _restore_candidate(
    descriptor: UniformDescriptor, snapshot: Mapping[str, SnapshotEntry]
) -> tuple[bool, Any]:
    """(候補あり?, 候補値) を返す。名前と型が一致する場合のみ候補になる。"""

    entry = snapshot.get(descriptor.name)
    if entry is None or entry.value_type != descriptor.value_type:
        return False, None
    return True, entry.value


def resolve_initial_value(
    descriptor: UniformDescriptor, snapshot: Mapping[str, SnapshotEntry]
) -> Any | None:
    """descriptor のコントロールに渡す初期値（入力表現）を返す。

    Returns
    -------
    Any | None
        CHECKBOX は bool、NUMBER/RANGE は float か文字列リテラル、CHOICE は int、
        COLOR は "#rrggbb"。None はコントロール側の既定（RANGE の中点など）を意味する。
    """

    kind = descriptor.control_kind
    has_candidate, candidate = _restore_candidate(descriptor, snapshot)
    default = descriptor.default

    if kind is ControlKind.CHECKBOX:
        if has_candidate:
            return bool(candidate)
        return True if default is None else bool(default)

    if kind is ControlKind.NUMBER:
        if has_candidate:
            return candidate
        return 0.0 if default is None else default

    if kind is ControlKind.RANGE:
        if has_candidate:
            value = _as_float(candidate)
            lo, hi = descriptor.min, descriptor.max
            # NaN や範囲外は受け付けない（比較が False になる）。
            if value is not None and lo is not None and hi is not None and lo <= value <= hi:
                return value
        return default

    if kind is ControlKind.CHOICE:
        choices = descriptor.choices or ()
        if has_candidate:
            try:
                index = int(candidate)
            except (TypeError, ValueError, OverflowError):
                index = -1
            if 0 <= index < len(choices):
                return index
        return 0

    if kind is ControlKind.COLOR:
        if has_candidate:
            return linear_rgb_to_hex(candidate)
        return default

    raise ValueError(f"unknown control kind: {kind!r}")


def control_spec_for(
    descriptor: UniformDescriptor, snapshot: Mapping[str, SnapshotEntry]
) -> ControlSpec:
    """descriptor と snapshot から ControlSpec を組み立てる。"""

    return ControlSpec(
        label=descriptor.display_label,
        kind=descriptor.control_kind,
        min=descriptor.min,
        max=descriptor.max,
        logarithmic=descriptor.logarithmic,
        choices=descriptor.choices,
        value=resolve_initial_value(descriptor, snapshot),
    )


__all__ = [
    "SnapshotEntry",
    "ValueSnapshot",
    "capture_snapshot",
    "control_spec_for",
    "resolve_initial_value",
]
