# どこで: `src/tonelab/core/uniforms/parser.py`。
# 何を: GLSL の uniform 宣言行と行末コメントの注釈を走査し、UniformDescriptor 列を返す。
# なぜ: 宣言からコントロールを自動生成するため。解析できない行は無視して止めない（fail soft）。

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from .descriptor import (
    SCALAR_TYPES,
    ControlKind,
    UniformDescriptor,
    ValueType,
    descriptor_invariant_error,
)

_logger = logging.getLogger(__name__)

_BLOCK_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_NUMBER_PREFIX = re.compile(r"\s*[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

PARAM_KEYWORD = "uniform"

_FALSY_TOKENS = frozenset({"false", "no", "0"})


@dataclass(frozen=True, slots=True)
class DeclarationMatch:
    """宣言 1 行の走査結果。"""

    value_type: ValueType
    name: str
    comment: str | None


def strip_block_comments(text: str) -> str:
    """`/* ... */` を（複数行にまたがっても）全て取り除いた文字列を返す。"""

    return _BLOCK_COMMENT.sub("", text)


def _is_word_char(c: str) -> bool:
    return c.isascii() and (c.isalnum() or c == "_")


class _LineCursor:
    """1 行ぶんの小さな走査カーソル。"""

    def __init__(self, line: str) -> None:
        self.line = line
        self.pos = 0

    def skip_space(self) -> None:
        while self.pos < len(self.line) and self.line[self.pos].isspace():
            self.pos += 1

    def take(self, literal: str) -> bool:
        if self.line.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def take_word(self) -> str:
        start = self.pos
        while self.pos < len(self.line) and _is_word_char(self.line[self.pos]):
            self.pos += 1
        return self.line[start : self.pos]

    def rest(self) -> str:
        return self.line[self.pos :]


def scan_declaration(line: str) -> DeclarationMatch | None:
    """`uniform <type> <name>; // <comment>` 形式の行を走査する。

    `^\\s*uniform\\s*(bool|float|int|uint)\\s*(\\w*)\\s*;\\s*(?://\\s*(.*))?` と同じ行を受理する。
    型名の候補は先頭文字がすべて異なるため、後戻りなしの走査で同じ結果になる。
    """

    cur = _LineCursor(line)
    cur.skip_space()
    if not cur.take(PARAM_KEYWORD):
        return None
    cur.skip_space()

    value_type: ValueType | None = None
    for candidate in SCALAR_TYPES:
        if cur.take(candidate):
            value_type = candidate
            break
    if value_type is None:
        return None

    cur.skip_space()
    name = cur.take_word()
    cur.skip_space()
    if not cur.take(";"):
        return None
    cur.skip_space()

    comment: str | None = None
    if cur.take("//"):
        cur.skip_space()
        comment = cur.rest()
    return DeclarationMatch(value_type=value_type, name=name, comment=comment)


def parse_number_literal(text: str) -> float:
    """数値リテラルの先頭の数値部分を float にする。解釈できなければ NaN。

    `3px` は 3、`Infinity` は inf になる。`inf` / `nan` / `1_0` のような
    Python 固有の表記は数値として扱わない。
    """

    m = _NUMBER_PREFIX.match(text)
    if m is None:
        return math.nan
    literal = m.group(0).strip()
    if literal.lstrip("+-") == "Infinity":
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def parse_truthiness(text: str) -> bool:
    """bool 用 `default=` の値を解釈する（false/no/0 のみ偽、大文字小文字は無視）。"""

    return text.strip().lower() not in _FALSY_TOKENS


def _descriptor_from_match(match: DeclarationMatch) -> UniformDescriptor:
    value_type = match.value_type
    kind = ControlKind.CHECKBOX if value_type == "bool" else ControlKind.NUMBER
    lo: float | None = None
    hi: float | None = None
    logarithmic = False
    choices: tuple[str, ...] | None = None
    default: bool | str | None = None

    tokens = match.comment.split() if match.comment is not None else []
    if (
        len(tokens) > 1
        and tokens[0] == "choices"
        and value_type in ("int", "uint")
    ):
        kind = ControlKind.CHOICE
        choices = tuple(tokens[1:])
    else:
        # choices 以外の引数は順不同。
        for token in tokens:
            if token in ("range", "logrange") and value_type == "float":
                kind = ControlKind.RANGE
                logarithmic = token == "logrange"
            elif token.startswith("min="):
                lo = parse_number_literal(token[len("min=") :])
            elif token.startswith("max="):
                hi = parse_number_literal(token[len("max=") :])
            elif token.startswith("default="):
                raw = token[len("default=") :]
                # bool の kind を変える引数は無いので、この時点の kind で決めてよい。
                if kind is ControlKind.CHECKBOX:
                    default = parse_truthiness(raw)
                else:
                    default = raw

    return UniformDescriptor(
        name=match.name,
        value_type=value_type,
        control_kind=kind,
        min=lo,
        max=hi,
        logarithmic=logarithmic,
        choices=choices,
        default=default,
    )


def _degrade_to_number(descriptor: UniformDescriptor, reason: str) -> UniformDescriptor:
    _logger.warning(
        "range 注釈を無視して数値入力にします: name=%s (%s)", descriptor.name, reason
    )
    return UniformDescriptor(
        name=descriptor.name,
        value_type=descriptor.value_type,
        control_kind=ControlKind.NUMBER,
        min=descriptor.min,
        max=descriptor.max,
        default=descriptor.default,
    )


def parse_uniform_declarations(text: str) -> list[UniformDescriptor]:
    """宣言テキストから UniformDescriptor を出現順に返す。

    Notes
    -----
    - 同名の宣言は重複排除しない（一致した行ごとに 1 つ）。
    - 名前が空の行（`uniform float ;`）は GLSL として不正なので捨てる。
    - レンジが不正な range/logrange（min/max 欠落・NaN・min>max・log で min<=0）は
      NUMBER に落とす。±Infinity や 1e999 の境界も不正として扱う。
    """

    out: list[UniformDescriptor] = []
    for line in strip_block_comments(str(text)).split("\n"):
        match = scan_declaration(line)
        if match is None or not match.name:
            continue
        descriptor = _descriptor_from_match(match)
        if descriptor.control_kind is ControlKind.RANGE:
            err = descriptor_invariant_error(descriptor)
            if err is not None:
                descriptor = _degrade_to_number(descriptor, err)
        out.append(descriptor)
    return out


__all__ = [
    "DeclarationMatch",
    "PARAM_KEYWORD",
    "parse_number_literal",
    "parse_truthiness",
    "parse_uniform_declarations",
    "scan_declaration",
    "strip_block_comments",
]
