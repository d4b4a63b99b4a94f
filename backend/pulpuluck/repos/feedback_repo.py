import json
import logging
from pathlib import Path
from typing import Dict, List

from motor.motor_asyncio import AsyncIOMotorDatabase

from pulpuluck.core.config import settings
from pulpuluck.core.db_connection import db_connection
from pulpuluck.core.logger import logs
from pulpuluck.models.feedback_model import FountainFeedback, VoteType


class LocalFeedbackRepository:
    """
    Vote counters kept in memory and mirrored to one JSON array file.
    The file is loaded on first use and rewritten wholesale on every change.
    """

    def __init__(self, file_path: Path | str | None = None):
        self.feedback_file = Path(file_path or Path(settings.DATA_DIR) / settings.FEEDBACK_FILE)
        self._cache: Dict[str, FountainFeedback] = {}
        self._initialized = False

    def _ensure_initialized(self):
        if self._initialized:
            return

        try:
            with open(self.feedback_file, "r", encoding="utf-8") as f:
                for item in json.load(f):
                    feedback = FountainFeedback.model_validate(item)
                    self._cache[feedback.fountain_id] = feedback
        except FileNotFoundError:
            logs.log(logging.INFO, "Starting with empty feedback data")
        except (OSError, ValueError, TypeError) as e:
            # Corrupted file, start over
            logs.log(logging.WARNING, f"Ignoring unreadable feedback file {self.feedback_file}: {str(e)}")
            self._cache.clear()

        self._initialized = True

    def _save_to_file(self):
        self.feedback_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.feedback_file, "w", encoding="utf-8") as f:
            json.dump([fb.to_json() for fb in self._cache.values()], f, indent=2)

    async def get_feedback(self, fountain_id: str) -> FountainFeedback:
        self._ensure_initialized()

        existing = self._cache.get(fountain_id)
        if existing:
            return existing.model_copy()

        # New fountains start at zero and are registered right away
        feedback = FountainFeedback(fountain_id=fountain_id)
        self._cache[fountain_id] = feedback
        self._save_to_file()
        return feedback.model_copy()

    async def add_vote(self, fountain_id: str, vote_type: VoteType) -> FountainFeedback:
        self._ensure_initialized()

        feedback = self._cache.get(fountain_id) or FountainFeedback(fountain_id=fountain_id)
        feedback.add_vote(vote_type)
        self._cache[fountain_id] = feedback
        self._save_to_file()
        return feedback.model_copy()

    async def get_all_feedback(self) -> List[FountainFeedback]:
        self._ensure_initialized()
        return [fb.model_copy() for fb in self._cache.values()]


class MongoFeedbackRepository:
    """Vote counters stored one document per fountain."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection = db["fountain_feedback"]

    @staticmethod
    def _from_doc(doc: dict) -> FountainFeedback:
        doc.pop("_id", None)
        return FountainFeedback.model_validate(doc)

    async def get_feedback(self, fountain_id: str) -> FountainFeedback:
        doc = await self.collection.find_one_and_update(
            {"fountainId": fountain_id},
            {"$setOnInsert": FountainFeedback(fountain_id=fountain_id).to_json()},
            upsert=True,
            return_document=True
        )
        return self._from_doc(doc)

    async def add_vote(self, fountain_id: str, vote_type: VoteType) -> FountainFeedback:
        doc = await self.collection.find_one_and_update(
            {"fountainId": fountain_id},
            {"$inc": {vote_type.value: 1}},
            upsert=True,
            return_document=True
        )
        return self._from_doc(doc)

    async def get_all_feedback(self) -> List[FountainFeedback]:
        cursor = self.collection.find({})
        return [self._from_doc(doc) async for doc in cursor]


def get_feedback_repository():
    """Pick the feedback store for the configured storage mode."""
    if settings.STORAGE_MODE == "mongodb":
        return MongoFeedbackRepository(db_connection.get_database())
    return LocalFeedbackRepository()
