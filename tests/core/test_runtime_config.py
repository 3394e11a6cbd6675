import logging
from pathlib import Path

import pytest

from tonelab.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.image_dir == Path("data") / "images"
    assert cfg.glsl_version == "330 core"
    assert cfg.initial_preset == "Multi"
    assert cfg.initial_scenario == "Flat Sponza"
    assert cfg.window_pos_viewer == (25, 25)
    assert cfg.window_pos_control_panel == (950, 25)
    assert cfg.viewer_window_size == (900, 600)
    assert cfg.control_panel_window_size == (640, 1000)
    assert cfg.fps == 60.0
    assert cfg.log_level == logging.INFO


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".tonelab" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text(
        'paths:\n  image_dir: "./images_discovered"\nscenario:\n  initial: null\n',
        encoding="utf-8",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.image_dir == Path("images_discovered")
    assert cfg.initial_scenario is None
    # 部分的な上書きでは他のキーは既定のまま。
    assert cfg.initial_preset == "Multi"
    assert cfg.viewer_window_size == (900, 600)


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".tonelab" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text('shader:\n  initial_preset: "Minimal"\n', encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text(
        'ui:\n  viewer:\n    window_size: [320, 240]\nlogging:\n  level: debug\n',
        encoding="utf-8",
    )
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.initial_preset == "Minimal"
    assert cfg.viewer_window_size == (320, 240)
    assert cfg.control_panel_window_size == (640, 1000)
    assert cfg.log_level == logging.DEBUG


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "tonelab" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text("ui:\n  fps: 30\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.fps == 30.0


def test_config_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    first = runtime_config()
    assert runtime_config() is first

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("ui:\n  fps: 0\n", encoding="utf-8")
    set_config_path(explicit)
    assert runtime_config().fps == 0.0


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        'shader:\n  initial_preset: "Nope"\n',
        'scenario:\n  initial: "Nope"\n',
        "ui:\n  viewer:\n    window_size: [0, 10]\n",
    ],
)
def test_invalid_values_raise_value_error(
    text: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(ValueError):
        runtime_config()


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "- not\n- a mapping\n",
        "ui:\n  window_positions:\n    viewer: [1, 2, 3]\n",
        "logging:\n  level: LOUD\n",
    ],
)
def test_malformed_config_raises_runtime_error(
    text: str, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(RuntimeError):
        runtime_config()
