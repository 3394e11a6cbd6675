# どこで: `src/tonelab/core/shader/compiler.py`。
# 何を: 外部のコンパイラ/リンカ能力（ShaderCompiler）と、その失敗を表す例外を定義する。
# なぜ: session を GL 実装から切り離し、ヘッドレスにテストできるようにするため。

from __future__ import annotations

from typing import Any, Literal, Protocol, TypeAlias

CompileStage: TypeAlias = Literal["compile", "link"]


class ShaderCompileError(Exception):
    """フラグメントシェーダのコンパイル/リンク失敗。

    Attributes
    ----------
    stage : {"compile", "link"}
        失敗した段階。
    log : str
        バックエンドが返した診断テキスト（そのまま表示する）。
    """

    def __init__(self, stage: CompileStage, log: str) -> None:
        super().__init__(f"shader {stage} failed: {log}")
        self.stage: CompileStage = stage
        self.log = str(log)


class ShaderCompiler(Protocol):
    """フラグメントソースからプログラムハンドルを作る能力。"""

    def compile(self, fragment_source: str) -> Any:
        """成功時はハンドルを返し、失敗時は ShaderCompileError を送出する。"""
        ...

    def release(self, program: Any) -> None: ...


def format_diagnostic(error: ShaderCompileError, *, user_code_line: int) -> str:
    """ユーザーへ表示する診断メッセージを返す。"""

    if error.stage == "link":
        return f"Shader program failed to link:\n{error.log}"
    return (
        f"Fragment shader (your code starting at line {int(user_code_line)}) failed to compile:\n"
        f"{error.log}"
    )


__all__ = ["CompileStage", "ShaderCompileError", "ShaderCompiler", "format_diagnostic"]
