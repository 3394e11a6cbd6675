# どこで: `src/tonelab/interactive/image_loader.py`。
# 何を: 画像ファイルを読み込み、線形 RGBA の ImageData にする。
# なぜ: HDR は OpenCV（.exr / .hdr）か numpy 配列（.npy）、LDR は pyglet のデコーダで読み、描画側の入力形式を揃えるため。

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import numpy as np

from tonelab.core.controls.models import COLOR_GAMMA
from tonelab.core.image import ImageData, image_from_array, synthetic_test_image

_logger = logging.getLogger(__name__)

OPENCV_SUFFIXES = frozenset({".exr", ".hdr"})
HDR_SUFFIXES = frozenset({".npy"}) | OPENCV_SUFFIXES


def _import_cv2() -> Any:
    """OpenEXR コーデックを有効にして cv2 を import する。

    OpenCV はこの環境変数を import 時にしか読まないため、import より前に設定する。
    """

    os.environ.setdefault("OPENCV_IO_ENABLE_OPENEXR", "1")
    import cv2  # type: ignore[import-untyped]

    return cv2


def _load_opencv(path: Path) -> ImageData:
    cv2 = _import_cv2()
    try:
        array = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    except cv2.error as exc:
        raise ValueError(f"OpenCV で画像をデコードできません: {path}: {exc}") from exc
    if array is None:
        raise ValueError(f"OpenCV で画像をデコードできません: {path}")
    if array.ndim == 3 and array.shape[2] == 3:
        array = cv2.cvtColor(array, cv2.COLOR_BGR2RGB)
    elif array.ndim == 3 and array.shape[2] == 4:
        array = cv2.cvtColor(array, cv2.COLOR_BGRA2RGBA)
    if not np.issubdtype(array.dtype, np.floating):
        # 整数の EXR/HDR は想定しないが、来たら 0..1 に正規化する。
        array = array.astype(np.float32) / float(np.iinfo(array.dtype).max)
    return image_from_array(array, top_down=True)


def _load_npy(path: Path) -> ImageData:
    array = np.load(path, allow_pickle=False)
    if not np.issubdtype(array.dtype, np.number):
        raise ValueError(f"image array must be numeric: dtype={array.dtype}, path={path}")
    return image_from_array(array, top_down=True)


def _load_ldr(path: Path) -> ImageData:
    """pyglet でデコードし、ガンマ 2.2 を外して線形にする。"""

    import pyglet

    image = pyglet.image.load(str(path)).get_image_data()
    width, height = int(image.width), int(image.height)
    raw = image.get_data("RGBA", width * 4)
    rgba = np.frombuffer(raw, dtype=np.uint8).reshape(height, width, 4).astype(np.float32)
    rgba /= 255.0
    rgba[:, :, :3] = rgba[:, :, :3] ** COLOR_GAMMA
    # pyglet の画素は下の行から並ぶ（GL と同じ向き）。
    return image_from_array(rgba, top_down=False)


def load_image(path: str | Path) -> ImageData:
    """拡張子に応じて画像を読み込む。

    Raises
    ------
    FileNotFoundError
        ファイルが存在しない場合。
    ValueError
        デコードできない、または配列の形式が画像として解釈できない場合。
    """

    p = Path(path).expanduser()
    if not p.is_file():
        raise FileNotFoundError(f"画像ファイルが見つかりません: {p}")
    suffix = p.suffix.lower()
    if suffix in OPENCV_SUFFIXES:
        return _load_opencv(p)
    if suffix == ".npy":
        return _load_npy(p)
    return _load_ldr(p)


def load_image_or_fallback(path: str | Path) -> ImageData:
    """読み込めない場合は警告を出して合成テスト画像を返す。"""

    try:
        return load_image(path)
    except FileNotFoundError:
        _logger.warning("画像が見つからないため合成テスト画像を表示します: %s", path)
    except Exception:
        _logger.exception("画像の読み込みに失敗したため合成テスト画像を表示します: %s", path)
    return synthetic_test_image()


__all__ = ["HDR_SUFFIXES", "OPENCV_SUFFIXES", "load_image", "load_image_or_fallback"]
