"""Tests for the HTTP API."""
import random

import pytest
from httpx import ASGITransport, AsyncClient

from prreviewer.api import create_app
from prreviewer.api.errors import STATUS_BY_KIND, status_for
from prreviewer.core.errors import (
    ErrorKind,
    InternalStoreError,
    OperationCanceledError,
    TeamExistsError,
    TransientStoreError,
)
from prreviewer.core.schemas import ErrorResponse
from prreviewer.core.service import ReviewerService

BACKEND = {
    "team_name": "backend",
    "members": [
        {"user_id": "u1", "username": "Alice", "is_active": True},
        {"user_id": "u2", "username": "Bob", "is_active": True},
        {"user_id": "u3", "username": "Carol", "is_active": True},
    ],
}


def make_client(service):
    app = create_app()
    # Lifespan does not run under ASGITransport
    app.state.service = service
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def client(db):
    async with make_client(ReviewerService(db, rng=random.Random(7))) as ac:
        yield ac


@pytest.fixture
async def seeded(client):
    response = await client.post("/team/add", json=BACKEND)
    assert response.status_code == 201
    response = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-1", "pull_request_name": "Add search", "author_id": "u1"},
    )
    assert response.status_code == 201
    return client


@pytest.mark.asyncio
async def test_health(client):
    """Test health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_add_and_get_team(client):
    """Test team registration and lookup."""
    response = await client.post("/team/add", json=BACKEND)
    assert response.status_code == 201
    assert [m["user_id"] for m in response.json()["team"]["members"]] == ["u1", "u2", "u3"]

    response = await client.get("/team/get", params={"team_name": "backend"})
    assert response.status_code == 200
    assert response.json()["team_name"] == "backend"

    response = await client.post("/team/add", json=BACKEND)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "TEAM_EXISTS"


@pytest.mark.asyncio
async def test_get_unknown_team(client):
    response = await client.get("/team/get", params={"team_name": "ghosts"})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_validation_errors_are_bad_request(client):
    response = await client.get("/team/get")
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BAD_REQUEST"

    response = await client.post("/pullRequest/create", json={"pull_request_id": "pr-1"})
    assert response.status_code == 400
    assert "author_id" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_create_pull_request(seeded):
    """Test pull request creation and duplicate ids."""
    response = await seeded.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-2", "pull_request_name": "Fix cache", "author_id": "u2"},
    )
    assert response.status_code == 201
    pr = response.json()["pr"]
    assert pr["status"] == "OPEN"
    assert pr["assigned_reviewers"] == ["u1", "u3"]
    assert pr["createdAt"] is not None
    assert pr["mergedAt"] is None

    response = await seeded.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-1", "pull_request_name": "Again", "author_id": "u2"},
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "PR_EXISTS"


@pytest.mark.asyncio
async def test_merge_twice_returns_same_state(seeded):
    first = await seeded.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})
    second = await seeded.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})

    assert first.status_code == second.status_code == 200
    assert first.json()["pr"]["status"] == "MERGED"
    assert first.json()["pr"]["mergedAt"] == second.json()["pr"]["mergedAt"]

    response = await seeded.post("/pullRequest/merge", json={"pull_request_id": "missing"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reassign_conflicts(seeded):
    """Test reassignment error codes."""
    response = await seeded.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_user_id": "u2"}
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "NO_CANDIDATE"

    response = await seeded.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_user_id": "u1"}
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "NOT_ASSIGNED"

    await seeded.post("/pullRequest/merge", json={"pull_request_id": "pr-1"})
    response = await seeded.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_user_id": "u2"}
    )
    assert response.status_code == 409
    assert response.json()["error"]["code"] == "PR_MERGED"


@pytest.mark.asyncio
async def test_reassign_success(seeded):
    await seeded.post(
        "/team/add",
        json={"team_name": "frontend", "members": [
            {"user_id": "u3", "username": "Carol"},
            {"user_id": "f1", "username": "Finn"},
        ]},
    )

    response = await seeded.post(
        "/pullRequest/reassign", json={"pull_request_id": "pr-1", "old_user_id": "u3"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["replaced_by"] == "f1"
    assert body["pr"]["assigned_reviewers"] == ["f1", "u2"]


@pytest.mark.asyncio
async def test_users_endpoints(seeded):
    """Test activity flag and review listing."""
    response = await seeded.post("/users/setIsActive", json={"user_id": "u2", "is_active": False})
    assert response.status_code == 200
    assert response.json()["user"] == {
        "user_id": "u2",
        "username": "Bob",
        "team_name": "backend",
        "is_active": False,
    }

    response = await seeded.get("/users/getReview", params={"user_id": "u2"})
    assert response.status_code == 200
    assert [p["pull_request_id"] for p in response.json()["pull_requests"]] == ["pr-1"]

    response = await seeded.post("/users/setIsActive", json={"user_id": "ghost", "is_active": True})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_deactivate_team(seeded):
    response = await seeded.post("/team/deactivate", json={"team_name": "backend"})

    assert response.status_code == 200
    body = response.json()
    assert body["deactivated_users"] == 3
    assert body["under_reviewed_prs"] == ["pr-1"]

    response = await seeded.get("/users/getReview", params={"user_id": "u2"})
    assert response.json()["pull_requests"] == []


@pytest.mark.asyncio
async def test_stats(seeded):
    response = await seeded.get("/stats")

    assert response.status_code == 200
    assert response.json() == {
        "assignments_per_user": {"u1": 0, "u2": 1, "u3": 1},
        "open_prs": 1,
        "merged_prs": 0,
    }


class FailingService:
    def __init__(self, error):
        self.error = error

    async def stats(self):
        raise self.error


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,status,code",
    [
        (TransientStoreError(), 503, "RETRY_EXHAUSTED"),
        (OperationCanceledError(), 499, "CLIENT_CLOSED"),
        (InternalStoreError("connection refused by 10.0.0.5"), 500, "INTERNAL"),
    ],
)
async def test_infrastructure_errors(error, status, code):
    async with make_client(FailingService(error)) as client:
        response = await client.get("/stats")

    assert response.status_code == status
    assert response.json()["error"]["code"] == code
    assert "10.0.0.5" not in response.text


def test_every_error_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)
    assert status_for(TeamExistsError()) == 400


@pytest.mark.asyncio
async def test_created_at_is_stable_across_responses(client):
    """createdAt serializes the same way from create, merge and review reads."""
    await client.post("/team/add", json=BACKEND)
    created = await client.post(
        "/pullRequest/create",
        json={"pull_request_id": "pr-9", "pull_request_name": "Tune pool", "author_id": "u1"},
    )
    merged = await client.post("/pullRequest/merge", json={"pull_request_id": "pr-9"})

    created_at = created.json()["pr"]["createdAt"]
    assert merged.json()["pr"]["createdAt"] == created_at
    assert created_at.endswith("Z")
    assert merged.json()["pr"]["mergedAt"].endswith("Z")


@pytest.mark.asyncio
async def test_error_envelope_is_documented(client):
    """Error responses follow ErrorResponse and are declared in the OpenAPI schema."""
    response = await client.get("/team/get", params={"team_name": "ghosts"})
    envelope = ErrorResponse.model_validate(response.json())
    assert envelope.error.code == "NOT_FOUND"

    schema = (await client.get("/openapi.json")).json()
    reassign = schema["paths"]["/pullRequest/reassign"]["post"]["responses"]
    assert reassign["409"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert "404" in schema["paths"]["/team/get"]["get"]["responses"]
