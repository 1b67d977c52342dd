"""Tests for the SQLModel-backed document store and its change notifications."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from studyhabits.domain.repositories.documents import WriteMode
from studyhabits.errors import StoreUnavailable
from studyhabits.infra.repositories import SQLModelDocumentStore
from studyhabits.models.document import DocumentRecord


def test_missing_document_is_none(store):
    assert store.get_document("users", "nobody") is None


def test_replace_then_merge(store):
    first = store.set_document("users", "Ana", {"points": 0, "habits": []})
    assert first.version == 1

    merged = store.set_document("users", "Ana", {"points": 10}, WriteMode.MERGE)
    assert merged.version == 2
    assert merged.data == {"points": 10, "habits": []}

    replaced = store.set_document("users", "Ana", {"xp": 5}, WriteMode.REPLACE)
    assert replaced.version == 3
    assert replaced.data == {"xp": 5}
    assert store.get_document("users", "Ana").data == {"xp": 5}


def test_merge_on_missing_document_creates_it(store):
    snapshot = store.set_document("meta", "roster", {"names": ["Ana"]}, WriteMode.MERGE)
    assert snapshot.version == 1
    assert store.get_document("meta", "roster").data == {"names": ["Ana"]}


def test_merge_replaces_nested_values_wholesale(store):
    store.set_document("users", "Ana", {"habits": [{"id": "a"}, {"id": "b"}]})
    store.set_document("users", "Ana", {"habits": [{"id": "b"}]}, WriteMode.MERGE)
    assert store.get_document("users", "Ana").data["habits"] == [{"id": "b"}]


def test_collections_are_separate(store):
    store.set_document("users", "global", {"a": 1})
    store.set_document("leaderboard", "global", {"players": []})
    assert store.get_document("users", "global").data == {"a": 1}


def test_caller_payload_is_copied(store):
    payload = {"names": ["Ana"]}
    store.set_document("meta", "roster", payload)
    payload["names"].append("Ben")
    assert store.get_document("meta", "roster").data == {"names": ["Ana"]}


class TestSubscriptions:
    def test_subscribe_delivers_current_snapshot(self, store):
        store.set_document("meta", "roster", {"names": ["Ana"]})
        seen = []

        store.subscribe("meta", "roster", seen.append)

        assert [s.data for s in seen] == [{"names": ["Ana"]}]

    def test_subscribe_to_missing_document_waits(self, store):
        seen = []
        store.subscribe("meta", "roster", seen.append)
        assert seen == []

        store.set_document("meta", "roster", {"names": ["Ana"]})
        assert [s.version for s in seen] == [1]

    def test_local_writes_pushed_to_every_listener(self, store):
        first, second = [], []
        store.subscribe("users", "Ana", first.append)
        store.subscribe("users", "Ana", second.append)

        store.set_document("users", "Ana", {"points": 10})

        assert len(first) == len(second) == 1
        assert store.listener_count("users", "Ana") == 2

    def test_other_documents_not_pushed(self, store):
        seen = []
        store.subscribe("users", "Ana", seen.append)
        store.set_document("users", "Ben", {"points": 10})
        assert seen == []

    def test_unsubscribe_stops_delivery(self, store):
        seen = []
        unsubscribe = store.subscribe("users", "Ana", seen.append)
        unsubscribe()
        unsubscribe()

        store.set_document("users", "Ana", {"points": 10})

        assert seen == []
        assert store.listener_count("users", "Ana") == 0

    def test_failing_listener_does_not_break_write(self, store, caplog):
        seen = []

        def broken(_snapshot):
            raise RuntimeError("render failed")

        store.subscribe("users", "Ana", broken)
        store.subscribe("users", "Ana", seen.append)

        snapshot = store.set_document("users", "Ana", {"points": 10})

        assert snapshot.version == 1
        assert len(seen) == 1
        assert "Document listener failed" in caplog.text


class TestPoll:
    def test_poll_picks_up_writes_from_another_client(self, store, other_store):
        seen = []
        store.subscribe("leaderboard", "global", seen.append)

        other_store.set_document("leaderboard", "global", {"players": [{"name": "Ben"}]})
        assert seen == []

        assert store.poll() == 1
        assert seen[-1].data == {"players": [{"name": "Ben"}]}

    def test_poll_without_changes_pushes_nothing(self, store):
        store.set_document("users", "Ana", {"points": 0})
        seen = []
        store.subscribe("users", "Ana", seen.append)

        assert store.poll() == 0
        assert len(seen) == 1

    def test_local_write_not_pushed_twice(self, store):
        seen = []
        store.subscribe("users", "Ana", seen.append)
        store.set_document("users", "Ana", {"points": 10})

        assert store.poll() == 0
        assert len(seen) == 1

    def test_poll_reports_deletion_as_none(self, store, session_factory):
        store.set_document("users", "Ana", {"points": 10})
        seen = []
        store.subscribe("users", "Ana", seen.append)

        with session_factory() as session:
            record = session.exec(
                select(DocumentRecord).where(DocumentRecord.key == "Ana")
            ).one()
            session.delete(record)

        assert store.poll() == 1
        assert seen[-1] is None


def test_database_errors_become_store_unavailable():
    def broken_factory():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    store = SQLModelDocumentStore(broken_factory)

    with pytest.raises(StoreUnavailable):
        store.get_document("users", "Ana")
    with pytest.raises(StoreUnavailable):
        store.set_document("users", "Ana", {"points": 1})


def test_failed_initial_read_leaves_no_listener(store, monkeypatch):
    def unavailable(collection, key):
        raise StoreUnavailable(f"Could not read {collection}/{key}")

    monkeypatch.setattr(store, "get_document", unavailable)
    seen = []

    with pytest.raises(StoreUnavailable):
        store.subscribe("users", "Ana", seen.append)

    assert store.listener_count("users", "Ana") == 0
    monkeypatch.undo()
    store.set_document("users", "Ana", {"points": 10})
    assert seen == []
