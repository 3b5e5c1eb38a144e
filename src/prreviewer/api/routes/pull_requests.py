"""Pull request endpoints"""
from fastapi import APIRouter, Depends

from ...core.schemas import (
    CreatePullRequestRequest,
    MergePullRequestRequest,
    PullRequestResponse,
    ReassignRequest,
    ReassignResponse,
)
from ...core.service import ReviewerService
from ..dependencies import get_service
from ..errors import error_responses

router = APIRouter()


@router.post(
    "/pullRequest/create",
    response_model=PullRequestResponse,
    status_code=201,
    responses=error_responses(400, 404, 409, 503),
)
async def create_pull_request(
    payload: CreatePullRequestRequest,
    service: ReviewerService = Depends(get_service),
):
    """Create a pull request and assign up to two reviewers from the author's team."""
    pr = await service.create_pull_request(
        payload.pull_request_id, payload.pull_request_name, payload.author_id
    )
    return PullRequestResponse(pr=pr)


@router.post(
    "/pullRequest/merge", response_model=PullRequestResponse, responses=error_responses(400, 404)
)
async def merge_pull_request(
    payload: MergePullRequestRequest,
    service: ReviewerService = Depends(get_service),
):
    """Merge a pull request. Merging twice returns the same merged state."""
    pr = await service.merge_pull_request(payload.pull_request_id)
    return PullRequestResponse(pr=pr)


@router.post(
    "/pullRequest/reassign",
    response_model=ReassignResponse,
    responses=error_responses(400, 404, 409, 503),
)
async def reassign_reviewer(
    payload: ReassignRequest,
    service: ReviewerService = Depends(get_service),
):
    """Replace one reviewer with another active member of the same team."""
    pr, replaced_by = await service.reassign_reviewer(payload.pull_request_id, payload.old_user_id)
    return ReassignResponse(pr=pr, replaced_by=replaced_by)
