"""
Shared fixtures for the scheduler tests.

Provides an in-memory stand-in for vocab_scheduler.db.database with the same
function signatures, installed into the service modules with monkeypatch.
"""

import copy
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from vocab_scheduler.api import auth
from vocab_scheduler.services import picker, reviewer, stats


NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeVocabularyDB:
    """In-memory user_vocabulary / user_vocabulary_reviews tables."""

    def __init__(self):
        self.users = set()
        self.items: Dict[str, Dict[str, Any]] = {}
        self.events: List[Dict[str, Any]] = []
        self.lock = threading.Lock()
        self.read_barrier: Optional[threading.Barrier] = None
        self.reads = 0
        self.apply_calls = 0

    def add_word(self, user_id: str, item_id: str, word: str = "word", **state) -> Dict[str, Any]:
        self.users.add(user_id)
        row = {
            "id": item_id,
            "user_id": user_id,
            "word": word,
            "definition": None,
            "example_sentence": None,
            "source_context": None,
            "mastery_level": None,
            "retention_score": None,
            "review_count": 0,
            "last_reviewed_at": None,
            "next_review_at": None,
        }
        row.update(state)
        self.items[item_id] = row
        return row

    # Same contract as vocab_scheduler.db.database

    def learner_exists(self, learner_id: str) -> bool:
        return learner_id in self.users

    def fetch_due_items(self, learner_id: str, now: datetime, limit: int) -> List[Dict[str, Any]]:
        with self.lock:
            due = [
                copy.deepcopy(row) for row in self.items.values()
                if row["user_id"] == learner_id
                and (row["next_review_at"] is None or row["next_review_at"] <= now)
            ]
        due.sort(key=lambda r: (r["next_review_at"] is not None, r["next_review_at"] or now))
        return due[:limit]

    def fetch_item(self, learner_id: str, vocabulary_id: str) -> Optional[Dict[str, Any]]:
        with self.lock:
            row = self.items.get(vocabulary_id)
            snapshot = copy.deepcopy(row) if row and row["user_id"] == learner_id else None
            self.reads += 1
            first_reads = self.reads <= 2
        # Both racing submissions read before either one writes
        if self.read_barrier is not None and first_reads:
            self.read_barrier.wait(timeout=5)
        return snapshot

    def apply_review(self, learner_id, vocabulary_id, expected_review_count, item_update, event):
        with self.lock:
            self.apply_calls += 1
            row = self.items.get(vocabulary_id)
            if row is None or row["user_id"] != learner_id or row["review_count"] != expected_review_count:
                return None
            row.update(item_update)
            saved = dict(event)
            saved.update({
                "id": str(uuid.uuid4()),
                "user_id": learner_id,
                "vocabulary_id": vocabulary_id,
                "created_at": item_update["last_reviewed_at"] + timedelta(microseconds=len(self.events)),
            })
            self.events.append(saved)
            return copy.deepcopy(saved)

    def fetch_schedule_rows(self, learner_id: str) -> List[Dict[str, Any]]:
        with self.lock:
            return [
                {"mastery_level": row["mastery_level"] or 0, "next_review_at": row["next_review_at"]}
                for row in self.items.values() if row["user_id"] == learner_id
            ]

    def fetch_review_events(self, learner_id: str, vocabulary_id: str) -> List[Dict[str, Any]]:
        with self.lock:
            events = [
                copy.deepcopy(e) for e in self.events
                if e["user_id"] == learner_id and e["vocabulary_id"] == vocabulary_id
            ]
        return sorted(events, key=lambda e: e["created_at"])


@pytest.fixture
def fake_db(monkeypatch) -> FakeVocabularyDB:
    """Route every db call made by the services into a FakeVocabularyDB."""
    db = FakeVocabularyDB()
    monkeypatch.setattr(picker, "learner_exists", db.learner_exists)
    monkeypatch.setattr(picker, "fetch_due_items", db.fetch_due_items)
    monkeypatch.setattr(reviewer, "fetch_item", db.fetch_item)
    monkeypatch.setattr(reviewer, "apply_review", db.apply_review)
    monkeypatch.setattr(stats, "fetch_item", db.fetch_item)
    monkeypatch.setattr(stats, "fetch_schedule_rows", db.fetch_schedule_rows)
    monkeypatch.setattr(stats, "fetch_review_events", db.fetch_review_events)
    monkeypatch.setattr(auth, "learner_exists", db.learner_exists)
    return db


def make_outcome(vocabulary_id: str, is_correct: bool = True, **extra) -> Dict[str, Any]:
    outcome = {
        "vocabulary_id": vocabulary_id,
        "review_type": "flashcard",
        "is_correct": is_correct,
        "response_time_seconds": 3,
    }
    outcome.update(extra)
    return outcome
