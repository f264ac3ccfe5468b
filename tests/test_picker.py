from datetime import timedelta

import pytest

from vocab_scheduler.models.errors import NotAuthenticated, InvalidOutcome
from vocab_scheduler.services.picker import select_due

from conftest import NOW


def test_never_reviewed_word_comes_first(fake_db):
    fake_db.add_word("alice", "old", next_review_at=NOW - timedelta(days=1), last_reviewed_at=NOW - timedelta(days=8))
    fake_db.add_word("alice", "new")

    words = select_due("alice", 10, now=NOW)

    assert [w.id for w in words] == ["new", "old"]


def test_most_overdue_before_recently_due(fake_db):
    fake_db.add_word("alice", "a", next_review_at=NOW - timedelta(hours=1))
    fake_db.add_word("alice", "b", next_review_at=NOW - timedelta(days=20))
    fake_db.add_word("alice", "c", next_review_at=NOW)

    assert [w.id for w in select_due("alice", 10, now=NOW)] == ["b", "a", "c"]


def test_future_words_are_not_returned(fake_db):
    fake_db.add_word("alice", "later", next_review_at=NOW + timedelta(minutes=1))
    fake_db.add_word("alice", "due", next_review_at=NOW - timedelta(minutes=1))

    words = select_due("alice", 10, now=NOW)

    assert [w.id for w in words] == ["due"]
    assert all(w.next_review_at is None or w.next_review_at <= NOW for w in words)


def test_limit_is_respected(fake_db):
    for i in range(15):
        fake_db.add_word("alice", f"w{i}")

    assert len(select_due("alice", 10, now=NOW)) == 10
    assert len(select_due("alice", 3, now=NOW)) == 3


def test_only_own_words(fake_db):
    fake_db.add_word("alice", "mine")
    fake_db.add_word("bob", "theirs")

    assert [w.id for w in select_due("alice", 10, now=NOW)] == ["mine"]


def test_nothing_due_is_not_an_error(fake_db):
    fake_db.add_word("alice", "later", next_review_at=NOW + timedelta(days=3))

    assert select_due("alice", 10, now=NOW) == []


def test_selection_has_no_side_effects(fake_db):
    fake_db.add_word("alice", "w1", next_review_at=NOW - timedelta(days=1), mastery_level=2)
    before = dict(fake_db.items["w1"])

    select_due("alice", 10, now=NOW)
    select_due("alice", 10, now=NOW)

    assert fake_db.items["w1"] == before
    assert fake_db.events == []


def test_unknown_learner(fake_db):
    with pytest.raises(NotAuthenticated):
        select_due("ghost", 10, now=NOW)
    with pytest.raises(NotAuthenticated):
        select_due("", 10, now=NOW)


@pytest.mark.parametrize("limit", [0, -1, 101, True, "10", 2.5])
def test_invalid_limit(fake_db, limit):
    fake_db.add_word("alice", "w1")

    with pytest.raises(InvalidOutcome):
        select_due("alice", limit, now=NOW)


def test_legacy_null_review_count(fake_db):
    fake_db.add_word("alice", "w1", review_count=None)

    words = select_due("alice", 10, now=NOW)

    assert [w.id for w in words] == ["w1"]
    assert words[0].review_count == 0
    assert fake_db.items["w1"]["review_count"] is None
