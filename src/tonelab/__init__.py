# どこで: `src/tonelab/__init__.py`。
# 何を: ルート `tonelab` パッケージを定義する。
# なぜ: import 起点を `tonelab` に統一するため。

from __future__ import annotations

from tonelab.api import run

__all__ = ["run"]
