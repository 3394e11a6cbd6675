# どこで: `src/tonelab/core/shader/assembler.py`。
# 何を: 固定ヘッダ/生成マクロ/シナリオ宣言/ユーザーコード/シナリオ断片/固定フッタを 1 本のソースに組み立てる。
# なぜ: 組み立て順を 1 箇所で固定し、診断メッセージ用にユーザーコードの開始行を記録するため。

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from tonelab.core.uniforms.descriptor import UniformDescriptor


@dataclass(frozen=True, slots=True)
class AssembledSource:
    """組み立て済みのフラグメントシェーダ。"""

    text: str
    user_code_line: int  # ユーザーコードの先頭行（1 始まり）


def external_declarations(descriptors: Iterable[UniformDescriptor]) -> str:
    """シナリオ uniform の `uniform <type> <name>;` 宣言を返す。"""

    return "\n".join(f"uniform {d.value_type} {d.name};" for d in descriptors if d.external)


def assemble_fragment_source(
    *,
    header: str,
    macros: str,
    user_code: str,
    footer: str,
    scenario_declarations: str | None = None,
    scenario_fragment: str | None = None,
) -> AssembledSource:
    """各部品を改行で連結する。

    順序: header, macros, (scenario 宣言), user_code, (scenario 断片), footer。
    scenario が無い場合、その 2 部品は含めない。
    """

    before_user = [header, macros]
    if scenario_declarations is not None:
        before_user.append(scenario_declarations)
    after_user = []
    if scenario_fragment is not None:
        after_user.append(scenario_fragment)
    after_user.append(footer)

    prefix = "\n".join(before_user)
    user_code_line = prefix.count("\n") + 2
    text = "\n".join([prefix, user_code, *after_user])
    return AssembledSource(text=text, user_code_line=user_code_line)


__all__ = ["AssembledSource", "assemble_fragment_source", "external_declarations"]
