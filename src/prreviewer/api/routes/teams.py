"""Team endpoints"""
import logging

from fastapi import APIRouter, Depends, Query

from ...core.schemas import Team, TeamDeactivateRequest, TeamDeactivation, TeamResponse
from ...core.service import ReviewerService
from ..dependencies import get_service
from ..errors import error_responses

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/team/add",
    response_model=TeamResponse,
    status_code=201,
    responses=error_responses(400, 503),
)
async def add_team(
    payload: Team,
    service: ReviewerService = Depends(get_service),
):
    """Register a team and create or update its members.

    Members that already exist are moved into this team with the given
    username and activity flag.
    """
    team = await service.add_team(payload.team_name, payload.members)
    return TeamResponse(team=team)


@router.get("/team/get", response_model=Team, responses=error_responses(400, 404))
async def get_team(
    team_name: str = Query(..., min_length=1, description="Team name"),
    service: ReviewerService = Depends(get_service),
):
    """Get a team with its members ordered by user_id."""
    return await service.get_team(team_name)


@router.post(
    "/team/deactivate",
    response_model=TeamDeactivation,
    responses=error_responses(400, 404, 503),
)
async def deactivate_team(
    payload: TeamDeactivateRequest,
    service: ReviewerService = Depends(get_service),
):
    """Deactivate every member of a team and rebalance open pull requests."""
    result = await service.deactivate_team(payload.team_name)
    if result.under_reviewed_prs:
        logger.info(
            f"Team {payload.team_name} deactivated; PRs left with fewer reviewers: "
            f"{', '.join(result.under_reviewed_prs)}"
        )
    return result
