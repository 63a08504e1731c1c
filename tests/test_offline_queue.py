from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from moloja.db import db
from moloja.models import VoiceExpense, VoiceSale
from moloja.services.offline_queue import OfflineStore, sync_offline_records


@pytest.fixture
def store(tmp_path):
    return OfflineStore(tmp_path / "queue" / "offline.db")


class TestOfflineStore:
    def test_saved_record_is_retrievable(self, store):
        record = store.save_record({"type": "sale", "description": "2 pães", "amount": 300})
        assert record["id"]
        assert record["synced"] is False

        loaded = store.get_record(record["id"])
        assert loaded["description"] == "2 pães"
        assert loaded["amount"] == 300
        assert loaded["synced"] is False

    def test_unsynced_until_marked(self, store):
        record = store.save_record({"type": "expense", "description": "luz", "amount": 15000})
        assert [r["id"] for r in store.get_unsynced_records()] == [record["id"]]

        assert store.mark_as_synced(record["id"]) is True

        assert store.get_unsynced_records() == []
        assert [r["id"] for r in store.get_all_records()] == [record["id"]]
        assert store.get_record(record["id"])["synced"] is True

    def test_mark_unknown_record(self, store):
        assert store.mark_as_synced("nao-existe") is False

    @pytest.mark.parametrize("record", [
        {"type": "gift", "description": "x", "amount": 1},
        {"type": "sale", "description": "  ", "amount": 1},
        {"type": "sale", "description": "x", "amount": -5},
    ])
    def test_invalid_records(self, store, record):
        with pytest.raises(ValueError):
            store.save_record(record)

    def test_todays_stats(self, store):
        store.save_record({"type": "sale", "description": "a", "amount": 100})
        store.save_record({"type": "sale", "description": "b", "amount": 250})
        store.save_record({"type": "expense", "description": "c", "amount": 50})
        store.save_record({"type": "sale", "description": "ontem", "amount": 999, "date": "2020-01-01"})

        stats = store.get_todays_stats()
        assert stats["today_sales"] == 2
        assert stats["today_expenses"] == 1
        assert stats["total_revenue"] == 350
        assert stats["total_expenses"] == 50

    def test_records_are_scoped_by_user(self, store):
        store.save_record({"type": "sale", "description": "a", "amount": 1, "user_id": 1})
        store.save_record({"type": "sale", "description": "b", "amount": 1, "user_id": 2})
        assert [r["description"] for r in store.get_all_records(user_id=2)] == ["b"]

    def test_clear_synced_records(self, store):
        kept = store.save_record({"type": "sale", "description": "a", "amount": 1})
        synced = store.save_record({"type": "sale", "description": "b", "amount": 1})
        store.mark_as_synced(synced["id"])

        assert store.clear_synced_records() == 1
        assert [r["id"] for r in store.get_all_records()] == [kept["id"]]


def test_sync_creates_voice_entries(app, user, store):
    sale = store.save_record({"type": "sale", "description": "arroz", "amount": 500, "user_id": user.id})
    expense = store.save_record({"type": "expense", "description": "transporte", "amount": 200, "user_id": user.id})

    result = sync_offline_records(store, user)

    assert sorted(result["synced"]) == sorted([sale["id"], expense["id"]])
    assert result["failed"] == []
    assert store.get_unsynced_records(user_id=user.id) == []

    voice_sale = VoiceSale.query.filter_by(user_id=user.id).one()
    assert voice_sale.product_name == "arroz"
    assert voice_sale.total_amount == 500
    assert VoiceExpense.query.filter_by(user_id=user.id).one().amount == 200


def test_failed_record_stays_queued(app, user, store):
    first = store.save_record({"type": "sale", "description": "arroz", "amount": 500, "user_id": user.id})
    second = store.save_record({"type": "sale", "description": "leite", "amount": 1200, "user_id": user.id})
    real_commit = db.session.commit
    calls = []

    def commit_failing_once():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("base de dados indisponível")
        real_commit()

    with patch.object(db.session, "commit", side_effect=commit_failing_once):
        result = sync_offline_records(store, user)

    assert len(result["failed"]) == 1
    assert len(result["synced"]) == 1
    assert sorted(result["failed"] + result["synced"]) == sorted([first["id"], second["id"]])
    assert [r["id"] for r in store.get_unsynced_records(user_id=user.id)] == result["failed"]
    assert VoiceSale.query.filter_by(user_id=user.id).count() == 1

    retry = sync_offline_records(store, user)
    assert retry == {"synced": result["failed"], "failed": []}
    assert store.get_unsynced_records(user_id=user.id) == []


def test_utc_timestamp_becomes_local_time(app, user, store):
    store.save_record({
        "type": "expense", "description": "luz", "amount": 15000,
        "user_id": user.id, "timestamp": "2024-05-15T12:00:00Z",
    })

    sync_offline_records(store, user)

    expected = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)
    assert VoiceExpense.query.filter_by(user_id=user.id).one().expense_date == expected


def test_naive_timestamp_is_kept(app, user, store):
    store.save_record({
        "type": "sale", "description": "pão", "amount": 150,
        "user_id": user.id, "timestamp": "2024-05-15T08:30:00",
    })

    sync_offline_records(store, user)

    assert VoiceSale.query.filter_by(user_id=user.id).one().sale_date == datetime(2024, 5, 15, 8, 30)
