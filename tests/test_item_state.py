"""Tests for user-driven item state changes."""

import pytest

from feedkeep.events import FeedEvent
from feedkeep.models.feed import FeedSource
from feedkeep.models.item import PersistedStore
from feedkeep.notifiers.log import LogNotifier
from feedkeep.services.fetcher import FeedFetcher
from feedkeep.services.item_state import ItemStateService
from feedkeep.services.orchestrator import UpdateOrchestrator

pytestmark = pytest.mark.anyio


@pytest.fixture
async def orchestrator(anyio_backend, fake_transport, memory_storage, make_item, make_snapshot):
    memory_storage.stored = PersistedStore(
        feeds=[
            make_snapshot([make_item("a1"), make_item("a2", read=True)], name="Alpha", folder="Tech"),
            make_snapshot([make_item("b1", read=None)], name="Beta", folder="tech "),
            make_snapshot([make_item("c1")], name="Gamma", folder="Science"),
        ]
    )
    orchestrator = UpdateOrchestrator(
        FeedFetcher(fake_transport), memory_storage, notifier=LogNotifier()
    )
    await orchestrator.start()
    return orchestrator


@pytest.fixture
def service(orchestrator):
    return ItemStateService(orchestrator)


def record(orchestrator, event):
    received = []
    orchestrator.events.subscribe(event, lambda **payload: received.append(payload))
    return received


class TestReadState:
    async def test_toggle_read(self, orchestrator, service, memory_storage):
        events = record(orchestrator, FeedEvent.ITEM_READ_CHANGED)

        assert await service.toggle_read("a1") is True
        assert orchestrator.index.get_item_by_link("a1").read is True
        assert orchestrator.index.get_unread_count_for_feed("Alpha") == 0
        assert memory_storage.stored.find_item("a1").read is True
        assert events == [{"link": "a1", "read": True}]

        assert await service.toggle_read("a1") is False
        assert orchestrator.index.get_unread_count_for_feed("Alpha") == 1

    async def test_toggle_never_marked_item(self, service):
        assert await service.toggle_read("b1") is True

    async def test_unknown_link(self, service):
        with pytest.raises(KeyError):
            await service.toggle_read("missing")
        with pytest.raises(KeyError):
            await service.set_read("missing", True)

    async def test_mark_folder_read_is_case_insensitive(self, orchestrator, service):
        events = record(orchestrator, FeedEvent.BULK_MARK_COMPLETED)

        links = await service.mark_all_read("folder", "TECH")

        assert links == ["a1", "b1"]
        assert orchestrator.index.get_unread_count_for_folder("tech") == 0
        assert orchestrator.index.get_unread_count_for_folder("Science") == 1
        assert events == [{"scope": "folder", "name": "TECH", "links": ["a1", "b1"]}]

    async def test_mark_feed_read(self, orchestrator, service):
        assert await service.mark_all_read("feed", "Gamma") == ["c1"]
        assert orchestrator.index.unread_total == 2

    async def test_mark_all_read(self, orchestrator, service):
        await service.mark_all_read("global")

        assert orchestrator.index.unread_total == 0

    async def test_bulk_mark_with_nothing_to_change(self, orchestrator, service, memory_storage):
        events = record(orchestrator, FeedEvent.BULK_MARK_COMPLETED)
        saves = memory_storage.saves

        assert await service.mark_all_read("feed", "Nobody") == []
        assert memory_storage.saves == saves
        assert len(events) == 1

    async def test_scope_requires_name(self, service):
        with pytest.raises(ValueError):
            await service.mark_all_read("folder")


class TestFavorites:
    async def test_toggle_favorite(self, orchestrator, service):
        events = record(orchestrator, FeedEvent.ITEM_FAVORITE_CHANGED)

        assert await service.toggle_favorite("c1") is True
        assert orchestrator.index.favorite_count == 1
        assert await service.toggle_favorite("c1") is False

        assert events == [
            {"link": "c1", "favorite": True},
            {"link": "c1", "favorite": False},
        ]
        assert ("info", "Added to favorites") in orchestrator.notifier.messages
        assert ("info", "Removed from favorites") in orchestrator.notifier.messages


class TestTagsAndHighlights:
    async def test_add_and_remove_tag(self, orchestrator, service):
        assert await service.add_tag("a1", " #python ") == ["python"]
        assert await service.add_tag("a1", "web") == ["python", "web"]
        assert orchestrator.index.tags == ("python", "web")

        assert await service.remove_tag("a1", "python") == ["web"]
        assert orchestrator.index.tags == ("web",)

    async def test_empty_tag_rejected(self, service):
        with pytest.raises(ValueError):
            await service.add_tag("a1", " # ")

    async def test_highlights(self, orchestrator, service, memory_storage):
        await service.add_highlight("a1", "first")
        await service.add_highlight("a1", "second")
        assert await service.remove_highlight("a1", "first") == ["second"]
        assert memory_storage.stored.find_item("a1").highlights == ["second"]

    async def test_state_survives_refresh(self, orchestrator, service, fake_transport, make_rss):
        feed = FeedSource(name="Alpha", url="https://a.example/feed", folder="Tech")
        fake_transport.documents[feed.url] = make_rss("Alpha", [("New", "a1")])
        orchestrator.set_feeds([feed])
        await service.add_tag("a1", "keep")
        await service.toggle_favorite("a1")

        await orchestrator.refresh()

        item = orchestrator.index.get_item_by_link("a1")
        assert item.title == "New"
        assert item.tags == ["keep"]
        assert item.favorite is True


class TestListenerFailures:
    async def test_failing_listener_after_commit(self, orchestrator, service, memory_storage):
        def broken(**payload):
            raise RuntimeError("listener exploded")

        for event in FeedEvent:
            orchestrator.events.subscribe(event, broken)

        assert await service.toggle_read("a1") is True
        assert await service.toggle_favorite("a1") is True
        assert await service.mark_all_read("global") == ["b1", "c1"]
        assert memory_storage.stored.find_item("a1").favorite is True
        assert orchestrator.index.unread_total == 0
