"""Statistics endpoints"""
from fastapi import APIRouter, Depends

from ...core.schemas import AssignmentStats
from ...core.service import ReviewerService
from ..dependencies import get_service

router = APIRouter()


@router.get("/stats", response_model=AssignmentStats)
async def get_statistics(
    service: ReviewerService = Depends(get_service),
):
    """Get assignment counts per user and open/merged pull request totals."""
    return await service.stats()
