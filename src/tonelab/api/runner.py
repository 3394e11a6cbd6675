"""
どこで: `src/tonelab/api/runner.py`。公開 API のランナー実装。
何を: viewer（pyglet + ModernGL）とコントロールパネル（pyimgui）を組み立て、同じループで回す。
なぜ: `python -m tonelab` からトーンマップの試行錯誤ができる経路を用意するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pyglet

from tonelab.core.display import DisplayControls
from tonelab.core.runtime_config import runtime_config, set_config_path
from tonelab.core.shader.presets import load_preset
from tonelab.interactive.control_panel import ImGuiControlFactory
from tonelab.interactive.runtime.action_queue import ActionQueue
from tonelab.interactive.runtime.viewer_system import ViewerWindowSystem
from tonelab.interactive.runtime.window_loop import MultiWindowLoop, WindowTask

_logger = logging.getLogger(__name__)


def run(
    *,
    config_path: str | Path | None = None,
    preset: str | None = None,
    scenario: str | None = None,
    control_panel: bool = True,
) -> None:
    """viewer とコントロールパネルを開き、どちらかが閉じられるまで回す。

    Parameters
    ----------
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    preset : str | None
        起動時に読み込むプリセット名。None の場合は config の `shader.initial_preset`。
    scenario : str | None
        起動時のシナリオ名。None の場合は config の `scenario.initial`。
    control_panel : bool
        False の場合、viewer だけを開く（コントロールは既定値のまま）。

    Returns
    -------
    None
        どちらかのウィンドウを閉じると制御を返す。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    logging.basicConfig(level=cfg.log_level)

    # vsync はウィンドウ作成時に参照されるため、ここで固定しておく。
    # True にすると GUI のクリックやドラッグが抜ける事がある。
    pyglet.options["vsync"] = False

    actions = ActionQueue()
    display = DisplayControls()

    viewer = ViewerWindowSystem(
        actions=actions,
        display=display,
        control_factory=ImGuiControlFactory(),
        image_dir=cfg.image_dir,
        window_size=cfg.viewer_window_size,
        glsl_version=cfg.glsl_version,
    )
    viewer.window.set_location(*cfg.window_pos_viewer)

    # `closers` は teardown 用（close 順もここで管理する）。
    closers: list[Callable[[], None]] = [viewer.close]
    tasks = [WindowTask(window=viewer.window, draw_frame=viewer.draw_frame)]

    try:
        # 初回コンパイルは viewer のコンテキストで行う。
        viewer.window.switch_to()
        initial_preset = preset or cfg.initial_preset
        viewer.session.set_user_code(load_preset(initial_preset))
        initial_scenario = cfg.initial_scenario if scenario is None else scenario
        result = viewer.apply_scenario(initial_scenario)
        if not result.ok:
            _logger.warning("初期シェーダのコンパイルに失敗しました")

        if control_panel:
            # GUI は依存が重い（pyimgui）ので、使うときだけ import する。
            from tonelab.interactive.runtime.control_panel_system import (
                ControlPanelWindowSystem,
            )

            panel = ControlPanelWindowSystem(
                session=viewer.session,
                display=display,
                actions=actions,
                image_source=lambda: viewer.image_source,
                initial_preset=initial_preset,
            )
            panel.window.set_location(*cfg.window_pos_control_panel)
            closers.append(panel.close)
            tasks.append(WindowTask(window=panel.window, draw_frame=panel.draw_frame))

        loop = MultiWindowLoop(tasks, fps=cfg.fps)
        loop.run()
    finally:
        # 作成順の逆で閉じることで、後に作ったサブシステム（GUI）から先に破棄できる。
        for close in reversed(closers):
            close()


__all__ = ["run"]
