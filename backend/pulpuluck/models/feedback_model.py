from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

class VoteType(str, Enum):
    RUNNING = "running"
    OUT_OF_SERVICE = "outOfService"
    ABANDONED = "abandoned"

class FountainFeedback(BaseModel):
    """Vote counts for one fountain. Serialized with camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    fountain_id: str = Field(..., alias="fountainId")
    running: int = 0
    out_of_service: int = Field(0, alias="outOfService")
    abandoned: int = 0

    def add_vote(self, vote_type: VoteType) -> None:
        if vote_type == VoteType.RUNNING:
            self.running += 1
        elif vote_type == VoteType.OUT_OF_SERVICE:
            self.out_of_service += 1
        else:
            self.abandoned += 1

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)

class VoteRequest(BaseModel):
    # Plain string so an unknown value reaches the route and gets a 400
    voteType: str
