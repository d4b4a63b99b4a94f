import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from pulpuluck.core.logger import logs
from pulpuluck.models.feedback_model import FountainFeedback, VoteRequest
from pulpuluck.repos.feedback_repo import get_feedback_repository
from pulpuluck.services.Feedback_service import FeedbackService, InvalidVoteType

router = APIRouter(prefix="/feedback", tags=["feedback"])

# --- Dependency Injection ---
def get_feedback_service(repo=Depends(get_feedback_repository)) -> FeedbackService:
    return FeedbackService(repo)

@router.get("", response_model=List[FountainFeedback])
async def list_feedback_endpoint(service: FeedbackService = Depends(get_feedback_service)):
    try:
        return await service.list_feedback()
    except Exception as e:
        logs.log(logging.ERROR, f"Error getting all feedback: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to get feedback data")

@router.get("/{fountain_id}", response_model=FountainFeedback)
async def get_feedback_endpoint(fountain_id: str, service: FeedbackService = Depends(get_feedback_service)):
    try:
        return await service.get_feedback(fountain_id)
    except Exception as e:
        logs.log(logging.ERROR, f"Error getting feedback: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to get feedback")

@router.post("/{fountain_id}/vote", response_model=FountainFeedback)
async def vote_endpoint(
    fountain_id: str,
    request: VoteRequest,
    service: FeedbackService = Depends(get_feedback_service)
):
    try:
        return await service.vote(fountain_id, request.voteType)
    except InvalidVoteType:
        raise HTTPException(status_code=400, detail="Invalid vote type")
    except Exception as e:
        logs.log(logging.ERROR, f"Error submitting vote: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to submit vote")
