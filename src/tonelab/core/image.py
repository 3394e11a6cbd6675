# どこで: `src/tonelab/core/image.py`。
# 何を: テクスチャへ渡す線形 HDR 画像（ImageData）と、その正規化/合成テスト画像を提供する。
# なぜ: デコード手段（numpy / pyglet）に依らず、描画側が常に同じ形の配列を受け取れるようにするため。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class ImageData:
    """線形 RGBA float32 画像。

    pixels は shape=(height, width, 4)。行 0 が画像の下端（GL のテクスチャ座標と同じ向き）。
    """

    width: int
    height: int
    pixels: np.ndarray

    @property
    def aspect_ratio(self) -> float:
        return float(self.width) / float(max(1, self.height))


def image_from_array(array: np.ndarray, *, top_down: bool = True) -> ImageData:
    """(H, W) / (H, W, 3) / (H, W, 4) の配列を ImageData に正規化する。

    Parameters
    ----------
    array : np.ndarray
        画素値（線形）。整数型でもそのまま float32 にする。
    top_down : bool
        True の場合、行 0 を画像の上端とみなして上下反転する。

    Raises
    ------
    ValueError
        対応しない shape の場合。
    """

    arr = np.asarray(array, dtype=np.float32)
    if arr.ndim == 2:
        arr = np.repeat(arr[:, :, None], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"image array must be (H, W), (H, W, 3) or (H, W, 4): got={arr.shape}")
    if arr.shape[0] == 0 or arr.shape[1] == 0:
        raise ValueError(f"image array must not be empty: got={arr.shape}")
    if arr.shape[2] == 3:
        alpha = np.ones(arr.shape[:2] + (1,), dtype=np.float32)
        arr = np.concatenate([arr, alpha], axis=2)
    if top_down:
        arr = arr[::-1]
    height, width = arr.shape[:2]
    return ImageData(width=int(width), height=int(height), pixels=np.ascontiguousarray(arr))


def synthetic_test_image(width: int = 512, height: int = 256) -> ImageData:
    """画像が無いときの代替: 横方向に 2^-8..2^8 の露出ランプ、縦方向に色相帯。"""

    xs = np.linspace(-8.0, 8.0, int(width), dtype=np.float32)
    luminance = np.exp2(xs)[None, :]
    bands = np.array(
        [
            [1.0, 1.0, 1.0],
            [1.0, 0.1, 0.1],
            [0.1, 1.0, 0.1],
            [0.1, 0.1, 1.0],
        ],
        dtype=np.float32,
    )
    band_index = (np.arange(int(height)) * len(bands)) // int(height)
    rgb = bands[band_index][:, None, :] * luminance[:, :, None]
    return image_from_array(rgb, top_down=True)


__all__ = ["ImageData", "image_from_array", "synthetic_test_image"]
