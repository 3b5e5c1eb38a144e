"""Tests that the package surface stays importable from the top level."""
import prreviewer
from prreviewer import (
    AssignmentEngine,
    Database,
    NoCandidateError,
    PRReviewerConfig,
    PRReviewerError,
    PullRequestStatus,
    ReviewerService,
    ReviewQueries,
    core,
)


def test_top_level_exports():
    """Every name in __all__ resolves."""
    for name in prreviewer.__all__:
        assert hasattr(prreviewer, name), name


def test_core_structure():
    from prreviewer.core import assignment, config, errors, models, schemas, storage

    assert core.assignment is assignment
    assert storage.Database is Database
    assert assignment.AssignmentEngine is AssignmentEngine
    assert issubclass(errors.NoCandidateError, PRReviewerError)
    assert models.PullRequestStatus is PullRequestStatus
    assert config.PRReviewerConfig is PRReviewerConfig
    assert schemas.PullRequest.model_fields["created_at"].alias == "createdAt"


def test_domain_errors_carry_codes():
    assert NoCandidateError().code == "NO_CANDIDATE"
    assert NoCandidateError("custom").message == "custom"
    assert ReviewerService and ReviewQueries
