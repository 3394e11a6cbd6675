# どこで: `src/tonelab/core/uniforms/macros.py`。
# 何を: choice uniform の選択肢ごとに `#define NAME_CHOICE <index>` を生成する。
# なぜ: ユーザーコードが選択肢をインデックス直書きではなく記号で比較できるようにするため。

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

from .descriptor import ControlKind, UniformDescriptor

_ILLEGAL_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]")


@dataclass(frozen=True, slots=True)
class ChoiceMacro:
    """生成される記号定数 1 つ。"""

    constant: str
    index: int

    def __str__(self) -> str:
        return f"{self.constant} {self.index}"


def sanitize_identifier(text: str) -> str:
    """`[0-9A-Za-z_]` 以外の文字をすべて取り除いて返す。"""

    return _ILLEGAL_IDENTIFIER_CHARS.sub("", str(text))


def choice_constant_name(uniform_name: str, choice: str) -> str:
    """`UPPER(name) + "_" + sanitize(UPPER(choice))` を返す。"""

    return f"{str(uniform_name).upper()}_{sanitize_identifier(str(choice).upper())}"


def choice_macros(descriptors: Iterable[UniformDescriptor]) -> list[ChoiceMacro]:
    """CHOICE descriptor の選択肢を宣言順に ChoiceMacro へ展開する。"""

    out: list[ChoiceMacro] = []
    for descriptor in descriptors:
        if descriptor.control_kind is not ControlKind.CHOICE:
            continue
        for index, choice in enumerate(descriptor.choices or ()):
            out.append(
                ChoiceMacro(constant=choice_constant_name(descriptor.name, choice), index=index)
            )
    return out


def render_macro_text(macros: Iterable[ChoiceMacro]) -> str:
    """プリプロセッサ定義行を改行区切りで連結して返す（無ければ空文字）。"""

    return "\n".join(f"#define {macro}" for macro in macros)


__all__ = [
    "ChoiceMacro",
    "choice_constant_name",
    "choice_macros",
    "render_macro_text",
    "sanitize_identifier",
]
