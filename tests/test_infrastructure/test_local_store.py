"""
Unit tests for the SQLite local store.
"""

from devpulse.infrastructure.persistence import LocalStore
from devpulse.infrastructure.persistence.local_store import REVIEWS_KEY


def test_identity_roundtrip(store):
    assert store.get_identity() is None

    store.set_identity("dev@sooft.com")
    assert store.get_identity() == "dev@sooft.com"

    store.set_identity("other@sooft.com")
    assert store.get_identity() == "other@sooft.com"

    store.clear_identity()
    assert store.get_identity() is None


def test_append_keeps_insertion_order(store, make_review):
    first = make_review(identity="a@sooft.com")
    second = make_review(identity="b@sooft.com")

    assert store.list_reviews() == []
    assert store.append_review(first) == [first]
    updated = store.append_review(second)

    assert [r.id for r in updated] == [first.id, second.id]
    assert store.list_reviews() == updated


def test_writes_are_durable_across_instances(tmp_path, make_review):
    path = tmp_path / "durable.db"
    store = LocalStore(path)
    store.init()
    review = make_review()
    store.append_review(review)
    store.set_identity("dev@sooft.com")

    reopened = LocalStore(path)
    reopened.init()
    assert reopened.list_reviews() == [review]
    assert reopened.get_identity() == "dev@sooft.com"


def test_has_review_matches_identity_and_period(store, make_review):
    store.append_review(make_review(identity="dev@sooft.com", period="2026-10"))

    assert store.has_review("dev@sooft.com", "2026-10")
    assert not store.has_review("dev@sooft.com", "2026-09")
    assert not store.has_review("other@sooft.com", "2026-10")


def test_corrupt_review_list_reads_as_empty(store):
    store._set(REVIEWS_KEY, "{not json")
    assert store.list_reviews() == []
