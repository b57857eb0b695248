"""Tests for regions and components."""

import pytest

from daily_viewer.view.component import Component
from daily_viewer.view.container import Region


class TestRegion:
    def test_create_and_walk(self):
        root = Region(cls="root")
        first = root.create_region("a b")
        first.create_text("hello")
        root.create_region(tag="h2", text="title")
        assert [r.tag for r in root.walk()] == ["div", "div", None, "h2"]
        assert first.classes == ["a", "b"]
        assert root.get_text() == "hellotitle"

    def test_ids_are_unique_and_findable(self):
        root = Region()
        child = root.create_region()
        assert root.id != child.id
        assert root.find(child.id) is child
        assert root.find(-1) is None

    def test_replace_children_moves_regions(self):
        target = Region()
        target.create_region("old")
        staging = Region()
        new = staging.create_region("new")
        target.replace_children(staging.children)
        assert [c.classes for c in target.children] == [["new"]]
        assert new.parent is target
        assert staging.children == []

    def test_remove_detaches(self):
        root = Region()
        child = root.create_region()
        child.remove()
        assert root.children == []
        assert child.parent is None

    @pytest.mark.asyncio
    async def test_click_runs_sync_and_async_handlers(self):
        calls = []

        async def async_handler():
            calls.append("async")

        region = Region(tag="button")
        region.on_click(lambda: calls.append("sync"))
        off = region.on_click(async_handler)
        await region.click()
        assert calls == ["sync", "async"]

        off()
        await region.click()
        assert calls == ["sync", "async", "sync"]


class TestComponent:
    def test_unload_runs_cleanups_and_children(self):
        calls = []
        parent = Component()
        parent.load()
        parent.register(lambda: calls.append("parent"))
        child = parent.add_child(Component())
        child.register(lambda: calls.append("child"))
        assert child.loaded

        parent.unload()
        assert calls == ["child", "parent"]
        assert not parent.loaded
        assert not child.loaded

    def test_failing_cleanup_does_not_stop_others(self):
        calls = []
        component = Component()
        component.register(lambda: calls.append("first"))
        component.register(lambda: 1 / 0)
        component.unload()
        assert calls == ["first"]

    def test_remove_child_unloads_it(self):
        calls = []
        parent = Component()
        parent.load()
        child = parent.add_child(Component())
        child.register(lambda: calls.append("child"))
        parent.remove_child(child)
        assert calls == ["child"]
        parent.unload()
        assert calls == ["child"]
