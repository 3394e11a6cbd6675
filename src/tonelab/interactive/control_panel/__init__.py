# どこで: `src/tonelab/interactive/control_panel/__init__.py`。
# 何を: コントロールパネル（pyimgui）関連の公開 API をまとめる。
# なぜ: runtime 側からの import を短く保つため。

from .gui import ControlPanelGUI
from .pyglet_backend import create_control_panel_window
from .widgets import ImGuiControlFactory

__all__ = ["ControlPanelGUI", "ImGuiControlFactory", "create_control_panel_window"]
