"""Reviewer assignment: candidate selection, transactional engine, retries."""
from .engine import MAX_REVIEWERS_ON_CREATE, AssignmentEngine
from .retry import RetryCoordinator, translate_store_error
from .selector import CandidateSelector

__all__ = [
    "AssignmentEngine",
    "CandidateSelector",
    "MAX_REVIEWERS_ON_CREATE",
    "RetryCoordinator",
    "translate_store_error",
]
