"""コントロールパネル → viewer の操作キューのテスト。"""

from __future__ import annotations

from tonelab.interactive.runtime.action_queue import (
    ActionQueue,
    CompileRequested,
    ImageFileRequested,
    PresetSelected,
    ScenarioSelected,
)


def test_drain_returns_actions_in_post_order_and_empties() -> None:
    q = ActionQueue()
    q.post(PresetSelected("Multi"))
    q.post(ScenarioSelected(None))
    q.post(CompileRequested("vec3 tonemap(vec3 x) { return x; }"))
    q.post(ImageFileRequested("a.npy"))

    assert len(q) == 4
    assert q.drain() == [
        PresetSelected("Multi"),
        ScenarioSelected(None),
        CompileRequested("vec3 tonemap(vec3 x) { return x; }"),
        ImageFileRequested("a.npy"),
    ]
    assert len(q) == 0
    assert q.drain() == []
