import copy

import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from conftest import make_fountain
from pulpuluck.core.config import settings
from pulpuluck.models.feedback_model import FountainFeedback, VoteType
from pulpuluck.repos.feedback_repo import MongoFeedbackRepository, get_feedback_repository
from pulpuluck.repos.snapshot_repo import MongoSnapshotStore, get_snapshot_store


class FakeCursor:
    def __init__(self, docs):
        self.docs = docs

    def __aiter__(self):
        self._iter = iter(self.docs)
        return self

    async def __anext__(self):
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration


class FakeCollection:
    """In-memory stand-in for a Motor collection, covering the upserts the stores use."""

    def __init__(self):
        self.docs = []
        self.calls = []

    def _match(self, query):
        for doc in self.docs:
            if all(doc.get(k) == v for k, v in query.items()):
                return doc
        return None

    def _apply(self, query, update, upsert):
        doc = self._match(query)
        inserted = doc is None
        if inserted:
            if not upsert:
                return None
            doc = {"_id": len(self.docs) + 1, **query}
            self.docs.append(doc)
            doc.update(update.get("$setOnInsert", {}))
        doc.update(update.get("$set", {}))
        for key, amount in update.get("$inc", {}).items():
            doc[key] = doc.get(key, 0) + amount
        return doc

    async def find_one(self, query):
        self.calls.append(("find_one", query))
        doc = self._match(query)
        return copy.deepcopy(doc) if doc else None

    async def update_one(self, query, update, upsert=False):
        self.calls.append(("update_one", query, update, upsert))
        self._apply(query, update, upsert)

    async def find_one_and_update(self, query, update, upsert=False, return_document=False):
        self.calls.append(("find_one_and_update", query, update, upsert))
        doc = self._apply(query, update, upsert)
        return copy.deepcopy(doc)

    def find(self, query):
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs])


@pytest.fixture
def fake_db():
    return {"fountain_cache": FakeCollection(), "fountain_feedback": FakeCollection()}


async def test_snapshot_round_trip(fake_db) -> None:
    store = MongoSnapshotStore(fake_db, cache_key="fountains_test")
    fountains = [make_fountain("1", 40.18, 44.51, name="Cascade"), make_fountain("2", 40.19, 44.52)]

    assert await store.write(fountains) is True
    assert await store.read() == fountains

    _, query, update, upsert = fake_db["fountain_cache"].calls[0]
    assert query == {"key": "fountains_test"}
    assert upsert is True
    assert update["$set"]["fountains"][0]["id"] == "1"


async def test_snapshot_write_replaces_previous_document(fake_db) -> None:
    store = MongoSnapshotStore(fake_db)
    await store.write([make_fountain("old", 40.0, 44.0)])
    await store.write([make_fountain("new", 40.1, 44.1)])

    assert len(fake_db["fountain_cache"].docs) == 1
    assert [f.id for f in await store.read()] == ["new"]


async def test_missing_snapshot_reads_as_none(fake_db) -> None:
    assert await MongoSnapshotStore(fake_db).read() is None


async def test_malformed_snapshot_reads_as_none(fake_db) -> None:
    fake_db["fountain_cache"].docs.append({"key": settings.FOUNTAIN_CACHE_KEY, "fountains": [{"id": "x"}]})

    assert await MongoSnapshotStore(fake_db).read() is None


async def test_snapshot_database_errors_are_not_raised(fake_db, mocker) -> None:
    collection = fake_db["fountain_cache"]
    mocker.patch.object(collection, "update_one", side_effect=ServerSelectionTimeoutError("no servers"))
    mocker.patch.object(collection, "find_one", side_effect=PyMongoError("connection reset"))
    store = MongoSnapshotStore(fake_db)

    assert await store.write([make_fountain("1", 40.18, 44.51)]) is False
    assert await store.read() is None


async def test_unseen_fountain_is_inserted_with_zero_counts(fake_db) -> None:
    repo = MongoFeedbackRepository(fake_db)

    feedback = await repo.get_feedback("f1")

    assert feedback == FountainFeedback(fountain_id="f1")
    _, query, update, upsert = fake_db["fountain_feedback"].calls[0]
    assert query == {"fountainId": "f1"}
    assert update == {"$setOnInsert": {"fountainId": "f1", "running": 0, "outOfService": 0, "abandoned": 0}}
    assert upsert is True


async def test_get_feedback_leaves_existing_counts_alone(fake_db) -> None:
    repo = MongoFeedbackRepository(fake_db)
    await repo.add_vote("f1", VoteType.RUNNING)

    feedback = await repo.get_feedback("f1")

    assert feedback.running == 1
    assert len(fake_db["fountain_feedback"].docs) == 1


async def test_votes_increment_the_matching_counter(fake_db) -> None:
    repo = MongoFeedbackRepository(fake_db)

    await repo.add_vote("f2", VoteType.OUT_OF_SERVICE)
    feedback = await repo.add_vote("f2", VoteType.OUT_OF_SERVICE)

    assert feedback.to_json() == {"fountainId": "f2", "running": 0, "outOfService": 2, "abandoned": 0}
    _, _, update, upsert = fake_db["fountain_feedback"].calls[-1]
    assert update == {"$inc": {"outOfService": 1}}
    assert upsert is True


async def test_list_feedback_drops_mongo_ids(fake_db) -> None:
    repo = MongoFeedbackRepository(fake_db)
    await repo.add_vote("a", VoteType.RUNNING)
    await repo.get_feedback("b")

    feedback = await repo.get_all_feedback()

    assert [f.fountain_id for f in feedback] == ["a", "b"]
    assert feedback[0].running == 1


def test_mongodb_mode_uses_mongo_stores(fake_db, monkeypatch, mocker) -> None:
    monkeypatch.setattr(settings, "STORAGE_MODE", "mongodb")
    mocker.patch("pulpuluck.repos.feedback_repo.db_connection.get_database", return_value=fake_db)

    assert isinstance(get_snapshot_store(fake_db), MongoSnapshotStore)
    assert isinstance(get_feedback_repository(), MongoFeedbackRepository)
