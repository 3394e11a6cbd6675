# どこで: `src/tonelab/interactive/gl/image_renderer.py`。
# 何を: 画像テクスチャと全面四角形を持ち、稼働中プログラムで 1 フレーム描画する ModernGL レンダラー。
# なぜ: コンテキスト生成・テクスチャ転送・uniform 書き込みを viewer の配線から分離するため。

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import moderngl
import numpy as np
from pyglet.window import Window

from tonelab.core.frame_uniforms import TEXTURE_UNIT, UniformUpload
from tonelab.core.image import ImageData

# (0,0)-(1,1) の四角形を TRIANGLE_STRIP で描く。
_QUAD = np.array(
    [
        0.0, 0.0,
        1.0, 0.0,
        0.0, 1.0,
        1.0, 1.0,
    ],
    dtype="f4",
)


class ImageRenderer:
    """HDR 画像を 1 枚だけ表示するシンプルなレンダラー。"""

    def __init__(self, window: Window) -> None:
        window.switch_to()
        self.ctx = moderngl.create_context(require=330)
        # 頂点は 1 度だけ転送する。
        self._quad = self.ctx.buffer(_QUAD.tobytes())
        self._texture: Any | None = None
        self._image_aspect_ratio = 1.0
        # VAO はプログラムに紐づくため、プログラムが差し替わったときだけ張り直す。
        self._vao: Any | None = None
        self._vao_program: Any | None = None

    @property
    def image_aspect_ratio(self) -> float:
        return self._image_aspect_ratio

    def viewport(self, width: int, height: int) -> None:
        """ビューポートをウィンドウサイズに合わせて更新する。"""
        self.ctx.viewport = (0, 0, int(width), int(height))

    def clear(self, color: tuple[float, float, float] = (0.0, 0.0, 0.0)) -> None:
        self.ctx.clear(*color, 1.0)

    def upload_image(self, image: ImageData) -> None:
        """画像を float テクスチャとして転送する（前のテクスチャは解放）。"""

        pixels = np.ascontiguousarray(image.pixels, dtype=np.float32)
        texture = self.ctx.texture(
            (int(image.width), int(image.height)), 4, data=pixels.tobytes(), dtype="f4"
        )
        texture.filter = (moderngl.LINEAR, moderngl.LINEAR)
        texture.repeat_x = False
        texture.repeat_y = False
        if self._texture is not None:
            self._texture.release()
        self._texture = texture
        self._image_aspect_ratio = image.aspect_ratio

    def _vao_for(self, program: Any) -> Any:
        if self._vao is not None and self._vao_program is program:
            return self._vao
        if self._vao is not None:
            self._vao.release()
        self._vao = self.ctx.vertex_array(program, [(self._quad, "2f", "_pos")])
        self._vao_program = program
        return self._vao

    def render(self, program: Any, uniforms: Iterable[UniformUpload]) -> None:
        """uniform を書き込み、画像を描画する。

        プログラムが宣言していない（または最適化で消えた）uniform は飛ばす。
        """

        if self._texture is None:
            return
        for upload in uniforms:
            member = program.get(upload.name, None)
            if member is None:
                continue
            member.value = upload.value
        self._texture.use(location=TEXTURE_UNIT)
        self._vao_for(program).render(mode=moderngl.TRIANGLE_STRIP)

    def release(self) -> None:
        """GPU リソースを解放する（プログラムは session が所有する）。"""
        if self._vao is not None:
            self._vao.release()
            self._vao = None
            self._vao_program = None
        if self._texture is not None:
            self._texture.release()
            self._texture = None
        self._quad.release()
        self.ctx.release()


__all__ = ["ImageRenderer"]
