# どこで: `src/tonelab/core/shader/presets.py`。
# 何を: 同梱のトーンマップシェーダ（`tonelab/resource/presets/*.glsl`）を列挙/ロードする。
# なぜ: 起動直後から注釈付き uniform の例を編集できるようにするため。

from __future__ import annotations

from importlib import resources

_PRESET_SUFFIX = ".glsl"

# GUI の並び順。ここに無い同梱ファイルは名前順で後ろに並べる。
_PRESET_ORDER = ("Minimal", "Multi")


def _preset_dir():
    return resources.files("tonelab").joinpath("resource", "presets")


def preset_names() -> tuple[str, ...]:
    """同梱プリセット名を GUI 表示順で返す。"""

    found = sorted(
        entry.name[: -len(_PRESET_SUFFIX)]
        for entry in _preset_dir().iterdir()
        if entry.name.endswith(_PRESET_SUFFIX)
    )
    ordered = [name for name in _PRESET_ORDER if name in found]
    ordered.extend(name for name in found if name not in _PRESET_ORDER)
    return tuple(ordered)


def load_preset(name: str) -> str:
    """プリセットの GLSL テキストを返す。

    Raises
    ------
    KeyError
        未知のプリセット名の場合。
    """

    if name not in preset_names():
        raise KeyError(f"unknown shader preset: {name!r}")
    text = _preset_dir().joinpath(f"{name}{_PRESET_SUFFIX}").read_text(encoding="utf-8")
    return text.lstrip()


__all__ = ["load_preset", "preset_names"]
