"""User endpoints"""
from fastapi import APIRouter, Depends, Query

from ...core.schemas import SetIsActiveRequest, UserResponse, UserReviews
from ...core.service import ReviewerService
from ..dependencies import get_service
from ..errors import error_responses

router = APIRouter()


@router.post("/users/setIsActive", response_model=UserResponse, responses=error_responses(400, 404))
async def set_is_active(
    payload: SetIsActiveRequest,
    service: ReviewerService = Depends(get_service),
):
    """Set a single user's activity flag."""
    user = await service.set_user_active(payload.user_id, payload.is_active)
    return UserResponse(user=user)


@router.get("/users/getReview", response_model=UserReviews, responses=error_responses(400, 404))
async def get_reviews(
    user_id: str = Query(..., min_length=1, description="Reviewer user_id"),
    service: ReviewerService = Depends(get_service),
):
    """List pull requests the user is currently assigned to review."""
    return await service.user_reviews(user_id)
