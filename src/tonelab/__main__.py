"""
どこで: `src/tonelab/__main__.py`。
何を: `python -m tonelab` のコマンドライン入口。
なぜ: config/プリセット/シナリオを指定して起動できるようにするため。
"""

from __future__ import annotations

import argparse

from tonelab.core.scenarios import scenario_names
from tonelab.core.shader.presets import preset_names


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="tonelab")
    p.add_argument("--config", default=None, help="config.yaml のパス（探索より優先）")
    p.add_argument(
        "--preset",
        default=None,
        choices=preset_names(),
        help="起動時のプリセット（省略時は config の shader.initial_preset）",
    )
    p.add_argument(
        "--scenario",
        default=None,
        choices=scenario_names(),
        help="起動時のシナリオ（省略時は config の scenario.initial）",
    )
    p.add_argument(
        "--no-control-panel",
        action="store_true",
        help="コントロールパネルを開かない",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from tonelab.api import run

    run(
        config_path=args.config,
        preset=args.preset,
        scenario=args.scenario,
        control_panel=not bool(args.no_control_panel),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
