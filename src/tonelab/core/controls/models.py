# どこで: `src/tonelab/core/controls/models.py`。
# 何を: 5 種のコントロールが持つ値モデル（GUI 非依存）と色変換を提供する。
# なぜ: 値の保持/変換を純粋に保ち、pyimgui ウィジェットとテストの双方から同じモデルを使うため。

from __future__ import annotations

import math
from collections.abc import Sequence

DEFAULT_COLOR_HEX = "#000000"

# 色の encode/decode に使う単純ガンマ。
COLOR_GAMMA = 2.2


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def hex_to_rgb255(hex_text: str) -> tuple[int, int, int]:
    """`#rrggbb` を 0..255 の int タプルにする。"""

    text = str(hex_text).strip()
    if not text.startswith("#") or len(text) != 7:
        raise ValueError(f"color must be '#rrggbb': got={hex_text!r}")
    try:
        r, g, b = (int(text[i : i + 2], 16) for i in (1, 3, 5))
    except ValueError as exc:
        raise ValueError(f"color must be '#rrggbb': got={hex_text!r}") from exc
    return r, g, b


def rgb255_to_hex(rgb: Sequence[int]) -> str:
    r, g, b = (int(_clamp(int(v), 0, 255)) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def hex_to_linear_rgb(hex_text: str) -> tuple[float, float, float]:
    """`#rrggbb` を `(c / 255) ** 2.2` で線形 RGB に戻す。"""

    r, g, b = hex_to_rgb255(hex_text)
    return (
        (r / 255.0) ** COLOR_GAMMA,
        (g / 255.0) ** COLOR_GAMMA,
        (b / 255.0) ** COLOR_GAMMA,
    )


def linear_rgb_to_hex(rgb: Sequence[float]) -> str:
    """線形 RGB を 1/2.2 でエンコードして `#rrggbb` にする。"""

    try:
        r, g, b = rgb
    except (TypeError, ValueError) as exc:
        raise ValueError(f"linear rgb must be a length-3 sequence: {rgb!r}") from exc
    out: list[int] = []
    for v in (r, g, b):
        encoded = _clamp(float(v), 0.0, 1.0) ** (1.0 / COLOR_GAMMA)
        out.append(int(round(encoded * 255.0)))
    return rgb255_to_hex(out)


class CheckboxModel:
    """チェックボックスの状態。get_value は 1/0。"""

    def __init__(self, checked: bool = False) -> None:
        self.checked = bool(checked)

    def set_checked(self, checked: bool) -> None:
        self.checked = bool(checked)

    def get_value(self) -> int:
        return 1 if self.checked else 0


class NumberModel:
    """境界なしの数値入力。"""

    def __init__(self, value: float = 0.0) -> None:
        self.value = float(value)

    def set_value(self, value: float) -> None:
        self.value = float(value)

    def get_value(self) -> float:
        return float(self.value)


class RangeModel:
    """スライダーと数値エコーの 2 つのビューを持つ、1 つの値。

    値はスライダー位置（logarithmic の場合は ln 空間）として 1 つだけ保持し、
    どちらのビューからの変更も `_update()` を通す。
    """

    def __init__(
        self,
        min_value: float,
        max_value: float,
        value: float | None = None,
        *,
        logarithmic: bool = False,
    ) -> None:
        lo = float(min_value)
        hi = float(max_value)
        if not lo <= hi:
            raise ValueError(f"range requires min <= max: min={lo}, max={hi}")
        if logarithmic and not lo > 0.0:
            raise ValueError(f"logarithmic range requires min > 0: min={lo}")
        self.min = lo
        self.max = hi
        self.logarithmic = bool(logarithmic)

        if value is not None and lo <= float(value) <= hi:
            position = self._to_position(float(value))
        else:
            # log なら幾何平均、線形なら算術平均（どちらも位置空間の中点）。
            position = 0.5 * (self.position_min + self.position_max)
        self._position = position

    @property
    def position_min(self) -> float:
        return math.log(self.min) if self.logarithmic else self.min

    @property
    def position_max(self) -> float:
        return math.log(self.max) if self.logarithmic else self.max

    @property
    def position(self) -> float:
        """スライダー側の値（log の場合は ln 空間）。"""
        return self._position

    def _to_position(self, value: float) -> float:
        return math.log(value) if self.logarithmic else value

    def _update(self, position: float) -> None:
        self._position = _clamp(float(position), self.position_min, self.position_max)

    def set_position(self, position: float) -> None:
        """スライダービューからの更新。"""
        self._update(position)

    def set_value(self, value: float) -> None:
        """数値エコーからの更新。範囲外は端に寄せる。"""
        value = _clamp(float(value), self.min, self.max)
        self._update(self._to_position(value))

    def get_value(self) -> float:
        if self.logarithmic:
            return math.exp(self._position)
        return float(self._position)


class ChoiceModel:
    """単一選択リスト。get_value は 0 始まりのインデックス。"""

    def __init__(self, options: Sequence[str], index: int = 0) -> None:
        self.options = tuple(str(o) for o in options)
        if not self.options:
            raise ValueError("choice requires non-empty options")
        self.index = 0
        self.select(index)

    def select(self, index: int) -> None:
        index = int(index)
        self.index = index if 0 <= index < len(self.options) else 0

    def get_value(self) -> int:
        return int(self.index)


class ColorModel:
    """sRGB の `#rrggbb` を保持し、get_value で線形 RGB を返す。"""

    def __init__(self, hex_text: str | None = None) -> None:
        self.rgb255 = hex_to_rgb255(DEFAULT_COLOR_HEX if hex_text is None else hex_text)

    @property
    def hex(self) -> str:
        return rgb255_to_hex(self.rgb255)

    def set_hex(self, hex_text: str) -> None:
        self.rgb255 = hex_to_rgb255(hex_text)

    def set_rgb01(self, rgb: Sequence[float]) -> None:
        """ピッカーの 0..1（エンコード済み）値から更新する。"""
        self.rgb255 = tuple(  # type: ignore[assignment]
            int(round(_clamp(float(v), 0.0, 1.0) * 255.0)) for v in rgb
        )

    def rgb01(self) -> tuple[float, float, float]:
        r, g, b = self.rgb255
        return r / 255.0, g / 255.0, b / 255.0

    def get_value(self) -> tuple[float, float, float]:
        return hex_to_linear_rgb(self.hex)


__all__ = [
    "COLOR_GAMMA",
    "CheckboxModel",
    "ChoiceModel",
    "ColorModel",
    "DEFAULT_COLOR_HEX",
    "NumberModel",
    "RangeModel",
    "hex_to_linear_rgb",
    "hex_to_rgb255",
    "linear_rgb_to_hex",
    "rgb255_to_hex",
]
