# どこで: `src/tonelab/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 画像ディレクトリ/初期プリセット/ウィンドウ配置などをユーザーが上書きできるようにするため。

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from tonelab.core.scenarios import SCENARIOS
from tonelab.core.shader.presets import preset_names


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """tonelab の実行時設定。"""

    config_path: Path | None
    image_dir: Path
    glsl_version: str
    initial_preset: str
    initial_scenario: str | None
    window_pos_viewer: tuple[int, int]
    window_pos_control_panel: tuple[int, int]
    viewer_window_size: tuple[int, int]
    control_panel_window_size: tuple[int, int]
    fps: float
    log_level: int


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".tonelab" / "config.yaml",
        home / ".config" / "tonelab" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的にマージする（後勝ち）。"""

    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int]:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        x = int(seq[0])
        y = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc
    return (x, y)


def _as_positive_int_pair(value: Any, *, key: str) -> tuple[int, int]:
    w, h = _as_int_pair(value, key=key)
    if w <= 0 or h <= 0:
        raise ValueError(f"{key} は正の値である必要があります: got={value!r}")
    return (w, h)


def _as_float(value: Any, *, key: str) -> float:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_log_level(value: Any, *, key: str) -> int:
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return int(value)
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise RuntimeError(f"{key} は logging のレベル名である必要があります: got={value!r}")
    return level


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("tonelab")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="tonelab/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.tonelab/config.yaml` / `~/.config/tonelab/config.yaml`
    3) `set_config_path()`（`run(..., config_path=...)`）で指定したファイル
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    image_dir = _as_optional_path(paths.get("image_dir"))
    if image_dir is None:
        raise RuntimeError(
            "paths.image_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    shader = _as_mapping(payload.get("shader"), key="shader")
    glsl_version = str(shader.get("glsl_version") or "").strip()
    if not glsl_version:
        raise RuntimeError("shader.glsl_version が未設定です")
    initial_preset = str(shader.get("initial_preset") or "").strip()
    if initial_preset not in preset_names():
        raise ValueError(
            f"shader.initial_preset は {list(preset_names())} のいずれかである必要があります"
            f": got={initial_preset!r}"
        )

    scenario = _as_mapping(payload.get("scenario"), key="scenario")
    initial_scenario_raw = scenario.get("initial")
    initial_scenario = None if initial_scenario_raw is None else str(initial_scenario_raw)
    if initial_scenario is not None and initial_scenario not in SCENARIOS:
        raise ValueError(
            f"scenario.initial は {list(SCENARIOS)} のいずれか（または null）である必要があります"
            f": got={initial_scenario!r}"
        )

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_positions = _as_mapping(ui.get("window_positions"), key="ui.window_positions")
    window_pos_viewer = _as_int_pair(
        window_positions.get("viewer"), key="ui.window_positions.viewer"
    )
    window_pos_control_panel = _as_int_pair(
        window_positions.get("control_panel"), key="ui.window_positions.control_panel"
    )
    viewer = _as_mapping(ui.get("viewer"), key="ui.viewer")
    viewer_window_size = _as_positive_int_pair(
        viewer.get("window_size"), key="ui.viewer.window_size"
    )
    control_panel = _as_mapping(ui.get("control_panel"), key="ui.control_panel")
    control_panel_window_size = _as_positive_int_pair(
        control_panel.get("window_size"), key="ui.control_panel.window_size"
    )
    fps = _as_float(ui.get("fps"), key="ui.fps")

    log = _as_mapping(payload.get("logging"), key="logging")
    log_level = _as_log_level(log.get("level"), key="logging.level")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        image_dir=image_dir,
        glsl_version=glsl_version,
        initial_preset=initial_preset,
        initial_scenario=initial_scenario,
        window_pos_viewer=window_pos_viewer,
        window_pos_control_panel=window_pos_control_panel,
        viewer_window_size=viewer_window_size,
        control_panel_window_size=control_panel_window_size,
        fps=float(fps),
        log_level=int(log_level),
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
