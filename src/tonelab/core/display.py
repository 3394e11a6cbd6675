# どこで: `src/tonelab/core/display.py`。
# 何を: 宣言に依らない固定の表示コントロール（露出・クランプ表示・ガンマ 2.2 エンコード）を持つ。
# なぜ: ユーザーのシェーダを書き換えずに、表示条件だけを切り替えられるようにするため。

from __future__ import annotations

from dataclasses import dataclass, field

from tonelab.core.controls.models import CheckboxModel, RangeModel

EXPOSURE_MIN = -10.0
EXPOSURE_MAX = 15.0
EXPOSURE_STEP = 0.1


def _exposure_model() -> RangeModel:
    return RangeModel(EXPOSURE_MIN, EXPOSURE_MAX, 0.0)


@dataclass(slots=True)
class DisplayControls:
    """固定表示コントロールの値モデル一式。"""

    exposure: RangeModel = field(default_factory=_exposure_model)
    show_clamp: CheckboxModel = field(default_factory=lambda: CheckboxModel(False))
    pure_gamma_encode: CheckboxModel = field(default_factory=lambda: CheckboxModel(True))

    def exposure_scale(self) -> float:
        """露出（EV）を線形倍率 `2 ** ev` にして返す。"""
        return float(2.0 ** self.exposure.get_value())


__all__ = ["DisplayControls", "EXPOSURE_MAX", "EXPOSURE_MIN", "EXPOSURE_STEP"]
