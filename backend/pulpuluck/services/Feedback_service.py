import logging
from typing import List

from pulpuluck.core.logger import logs
from pulpuluck.models.feedback_model import FountainFeedback, VoteType

class InvalidVoteType(ValueError):
    pass

class FeedbackService:
    def __init__(self, repo):
        self.repo = repo

    async def get_feedback(self, fountain_id: str) -> FountainFeedback:
        return await self.repo.get_feedback(fountain_id)

    async def vote(self, fountain_id: str, vote_type: str) -> FountainFeedback:
        try:
            vote = VoteType(vote_type)
        except ValueError as e:
            raise InvalidVoteType(f"Invalid vote type: {vote_type!r}") from e

        feedback = await self.repo.add_vote(fountain_id, vote)
        logs.log(logging.INFO, f"Vote '{vote.value}' recorded for fountain {fountain_id}")
        return feedback

    async def list_feedback(self) -> List[FountainFeedback]:
        return await self.repo.get_all_feedback()
