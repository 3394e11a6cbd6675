# どこで: `src/tonelab/core/controls/__init__.py`。
# 何を: コントロールの値モデルと生成ディスパッチの公開名をまとめる。
# なぜ: UI 実装側が同じモデルを import 1 行で参照できるようにするため。

from .models import (
    CheckboxModel,
    ChoiceModel,
    ColorModel,
    NumberModel,
    RangeModel,
    hex_to_linear_rgb,
    linear_rgb_to_hex,
)
from .factory import (
    ControlFactory,
    ControlInstance,
    HeadlessControlFactory,
    synthesize_control,
)

__all__ = [
    "CheckboxModel",
    "ChoiceModel",
    "ColorModel",
    "NumberModel",
    "RangeModel",
    "hex_to_linear_rgb",
    "linear_rgb_to_hex",
    "ControlFactory",
    "ControlInstance",
    "HeadlessControlFactory",
    "synthesize_control",
]
