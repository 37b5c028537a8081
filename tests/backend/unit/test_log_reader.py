"""
Unit tests for services.log_reader bucketing and the one-hour window.
"""
import datetime as dt
from types import SimpleNamespace

import pytest
from tortoise import timezone

from imagia.models.log_entry import LOG_CATEGORIES, LOG_LEVELS, LogEntry
from imagia.services.log_reader import bucket_entries, recent_entries


def _entry(i, level, category, message="m"):
    return SimpleNamespace(
        id=i,
        level=level,
        category=category,
        message=message,
        created_at=dt.datetime(2024, 1, 1, 12, 0, i, tzinfo=dt.timezone.utc),
    )


class TestBucketEntries:

    def test_every_known_bucket_is_present_even_when_empty(self):
        result = bucket_entries([])
        assert result["total"] == 0
        assert result["logs"] == []
        assert set(result["byType"]) == set(LOG_LEVELS)
        assert set(result["byCategory"]) == set(LOG_CATEGORIES)
        assert all(b["count"] == 0 for b in result["byType"].values())

    def test_entries_are_bucketed_by_level_and_category(self):
        entries = [
            _entry(1, "INFO", "PROMPT"),
            _entry(2, "ERROR", "PROMPT"),
            _entry(3, "INFO", "QUOTE"),
        ]
        result = bucket_entries(entries)

        assert result["total"] == 3
        assert [e["id"] for e in result["logs"]] == [1, 2, 3]
        assert result["byType"]["INFO"]["count"] == 2
        assert result["byType"]["ERROR"]["count"] == 1
        assert result["byCategory"]["PROMPT"]["count"] == 2
        assert [e["id"] for e in result["byCategory"]["QUOTE"]["logs"]] == [3]

    def test_unknown_level_or_category_only_in_flat_list(self):
        entries = [
            _entry(1, "TRACE", "PROMPT"),
            _entry(2, "INFO", "BILLING"),
        ]
        result = bucket_entries(entries)

        assert result["total"] == 2
        assert "TRACE" not in result["byType"]
        assert "BILLING" not in result["byCategory"]
        assert sum(b["count"] for b in result["byType"].values()) == 1
        assert sum(b["count"] for b in result["byCategory"].values()) == 1

    def test_entry_serialization(self):
        item = bucket_entries([_entry(5, "WARN", "AUTH", "bad code")])["logs"][0]
        assert item == {
            "id": 5,
            "type": "WARN",
            "category": "AUTH",
            "message": "bad code",
            "createdAt": "2024-01-01T12:00:05+00:00",
        }


class TestRecentEntries:

    @pytest.mark.asyncio
    async def test_only_last_hour_oldest_first(self, db):
        old = await LogEntry.create(level="INFO", category="USER", message="old")
        first = await LogEntry.create(level="INFO", category="USER", message="first")
        second = await LogEntry.create(level="ERROR", category="PROMPT", message="second")
        # Age one row past the window
        await LogEntry.filter(id=old.id).update(created_at=timezone.now() - dt.timedelta(minutes=61))

        rows = await recent_entries()

        assert [r.id for r in rows] == [first.id, second.id]
