"""Shared FastAPI dependencies."""
from fastapi import Request

from ..core.service import ReviewerService


def get_service(request: Request) -> ReviewerService:
    """Reviewer service created during application startup."""
    return request.app.state.service
