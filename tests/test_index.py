"""Tests for the derived lookup index and unread counters."""

import pytest

from feedkeep.models.item import PersistedStore
from feedkeep.services.index import build_index, folder_key


@pytest.fixture
def store(make_item, make_snapshot):
    return PersistedStore(
        feeds=[
            make_snapshot(
                [
                    make_item("a1", hash="ha1", read=True, tags=["py"]),
                    make_item("a2", hash="ha2", favorite=True),
                    make_item("a3", read=None),
                ],
                name="Alpha",
                folder="Tech",
            ),
            make_snapshot(
                [make_item("b1", read=False, tags=["py", "web"])],
                name="Beta",
                folder=" tech ",
            ),
            make_snapshot(
                [make_item("c1", read=True, favorite=True)],
                name="Gamma",
                folder="Science",
            ),
        ]
    )


class TestCounters:
    def test_unread_by_feed(self, store):
        index = build_index(store)

        assert index.get_unread_count_for_feed("Alpha") == 2
        assert index.get_unread_count_for_feed("Beta") == 1
        assert index.get_unread_count_for_feed("Gamma") == 0
        assert index.get_unread_count_for_feed("Missing") == 0

    def test_folder_counts_are_case_insensitive(self, store):
        index = build_index(store)

        assert index.get_unread_count_for_folder("TECH") == 3
        assert index.get_unread_count_for_folder("tech") == 3
        assert index.get_unread_count_for_folder("Science") == 0

    def test_totals(self, store):
        index = build_index(store)

        assert index.unread_total == 3
        assert index.favorite_count == 2

    def test_missing_read_counts_as_unread(self, make_item, make_snapshot):
        store = PersistedStore(feeds=[make_snapshot([make_item("x", read=None)])])

        assert build_index(store).unread_total == 1

    def test_same_feed_name_in_two_folders_is_summed(self, make_item, make_snapshot):
        store = PersistedStore(
            feeds=[
                make_snapshot([make_item("x")], name="Dup", folder="One"),
                make_snapshot([make_item("y")], name="Dup", folder="Two"),
            ]
        )

        assert build_index(store).get_unread_count_for_feed("Dup") == 2


class TestLookups:
    def test_by_link_and_hash(self, store):
        index = build_index(store)

        assert index.get_item_by_link("a2").hash == "ha2"
        assert index.get_item_by_hash("ha1").link == "a1"
        assert index.get_item_by_link("nope") is None

    def test_last_write_wins_on_link_collision(self, make_item, make_snapshot):
        store = PersistedStore(
            feeds=[
                make_snapshot([make_item("dup", title="first")], name="One"),
                make_snapshot([make_item("dup", title="second")], name="Two"),
            ]
        )

        assert build_index(store).get_item_by_link("dup").title == "second"

    def test_items_by_folder(self, store):
        index = build_index(store)

        links = [item.link for item in index.get_items_by_folder("Tech")]
        assert links == ["a1", "a2", "a3", "b1"]
        assert index.get_items_by_folder("unknown") == []

    def test_folder_display_names(self, store):
        assert build_index(store).get_folders() == ["Tech", "Science"]

    def test_tags_and_favorites(self, make_item, make_snapshot):
        store = PersistedStore(
            feeds=[
                make_snapshot(
                    [
                        make_item("old", favorite=True, pub_date="Mon, 02 Jun 2025 00:00:00 GMT"),
                        make_item("new", favorite=True, pub_date="2025-06-09T00:00:00Z"),
                        make_item("plain", tags=["b", "a"]),
                    ]
                )
            ]
        )
        index = build_index(store)

        assert index.tags == ("a", "b")
        assert [item.link for item in index.favorites()] == ["new", "old"]

    def test_empty_store(self):
        index = build_index(PersistedStore())

        assert index.items() == []
        assert index.unread_total == 0
        assert index.get_folders() == []

    def test_index_is_read_only(self, store):
        index = build_index(store)

        with pytest.raises(TypeError):
            index.by_link["x"] = None


def test_folder_key():
    assert folder_key("  News ") == "news"
    assert folder_key(None) == ""
