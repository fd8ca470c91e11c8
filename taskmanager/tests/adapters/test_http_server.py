"""Tests for the aiohttp task API server.

Requests go through the full middleware stack using aiohttp's test client,
with FakeTaskManagementPort standing in for the core.
"""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
from aiohttp import test_utils

from taskmanager.adapters.http.receiver import TaskRequestHandler
from taskmanager.adapters.http.server import TaskHTTPServer
from taskmanager.tests.fakes import FakeTaskManagementPort

ClientFactory = Callable[..., Awaitable[test_utils.TestClient]]


@pytest.fixture
def management() -> FakeTaskManagementPort:
    return FakeTaskManagementPort()


@pytest.fixture
async def make_client(
    management: FakeTaskManagementPort,
) -> AsyncIterator[ClientFactory]:
    """Build test clients for servers configured per test."""
    clients: list[test_utils.TestClient] = []

    async def _make(**server_kwargs) -> test_utils.TestClient:
        server = TaskHTTPServer(TaskRequestHandler(management), **server_kwargs)
        client = test_utils.TestClient(test_utils.TestServer(server.build_app()))
        await client.start_server()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()


@pytest.fixture
async def client(make_client: ClientFactory) -> test_utils.TestClient:
    """Client for a server without authentication."""
    return await make_client()


class TestServerConfiguration:
    """Tests for TaskHTTPServer construction."""

    def test_defaults(self, management: FakeTaskManagementPort) -> None:
        server = TaskHTTPServer(TaskRequestHandler(management))

        assert server.host == "0.0.0.0"
        assert server.port == 8080
        assert server.api_key is None
        assert server.require_auth is False

    def test_require_auth_without_key_rejected(
        self, management: FakeTaskManagementPort
    ) -> None:
        with pytest.raises(ValueError, match="no API key provided"):
            TaskHTTPServer(TaskRequestHandler(management), require_auth=True)


class TestCreateEndpoint:
    """Tests for POST /api/v1/tasks."""

    @pytest.mark.asyncio
    async def test_create_returns_201(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/v1/tasks", json={"title": "Buy milk", "description": "2%"}
        )

        assert resp.status == 201
        body = await resp.json()
        assert uuid.UUID(body["id"])
        assert body["title"] == "Buy milk"
        assert body["description"] == "2%"
        assert body["completed"] is False
        assert body["createdAt"]

    @pytest.mark.asyncio
    async def test_blank_title_returns_400(
        self, client: test_utils.TestClient, management: FakeTaskManagementPort
    ) -> None:
        resp = await client.post("/api/v1/tasks", json={"title": "  "})

        assert resp.status == 400
        assert await resp.json() == {"errors": {"title": "Title cannot be empty"}}
        assert management.create_calls == []

    @pytest.mark.asyncio
    async def test_long_fields_return_400(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/v1/tasks", json={"title": "a" * 256, "description": "d" * 1001}
        )

        assert resp.status == 400
        body = await resp.json()
        assert body["errors"]["title"] == "Title cannot exceed 255 characters"
        assert (
            body["errors"]["description"]
            == "Description cannot exceed 1000 characters"
        )

    @pytest.mark.asyncio
    async def test_empty_body_returns_400(self, client: test_utils.TestClient) -> None:
        resp = await client.post("/api/v1/tasks")

        assert resp.status == 400
        assert (await resp.json())["errors"]["title"] == "Title cannot be empty"

    @pytest.mark.asyncio
    async def test_invalid_json_returns_400(self, client: test_utils.TestClient) -> None:
        resp = await client.post(
            "/api/v1/tasks",
            data=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status == 400
        assert await resp.json() == {"error": "Invalid JSON body"}

    @pytest.mark.asyncio
    async def test_oversized_body_returns_413(self, make_client: ClientFactory) -> None:
        client = await make_client(max_body_bytes=64)

        resp = await client.post("/api/v1/tasks", json={"title": "x" * 500})

        assert resp.status == 413


class TestReadEndpoints:
    """Tests for GET /api/v1/tasks and GET /api/v1/tasks/{id}."""

    @pytest.mark.asyncio
    async def test_list_tasks(self, client: test_utils.TestClient) -> None:
        await client.post("/api/v1/tasks", json={"title": "One"})
        await client.post("/api/v1/tasks", json={"title": "Two"})

        resp = await client.get("/api/v1/tasks")

        assert resp.status == 200
        body = await resp.json()
        assert sorted(item["title"] for item in body) == ["One", "Two"]

    @pytest.mark.asyncio
    async def test_list_empty(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/api/v1/tasks")

        assert resp.status == 200
        assert await resp.json() == []

    @pytest.mark.asyncio
    async def test_get_task(self, client: test_utils.TestClient) -> None:
        created = await (
            await client.post("/api/v1/tasks", json={"title": "Find me"})
        ).json()

        resp = await client.get(f"/api/v1/tasks/{created['id']}")

        assert resp.status == 200
        assert await resp.json() == created

    @pytest.mark.asyncio
    async def test_get_missing_task_returns_404(self, client: test_utils.TestClient) -> None:
        missing_id = str(uuid.uuid4())

        resp = await client.get(f"/api/v1/tasks/{missing_id}")

        assert resp.status == 404
        assert await resp.json() == {
            "error": f"Task with id {missing_id} not found",
            "task_id": missing_id,
        }

    @pytest.mark.asyncio
    async def test_get_malformed_id_returns_400(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/api/v1/tasks/abc")

        assert resp.status == 400
        assert "Invalid task id" in (await resp.json())["error"]


class TestCompleteEndpoint:
    """Tests for PATCH /api/v1/tasks/{id}/complete."""

    @pytest.mark.asyncio
    async def test_complete_task(self, client: test_utils.TestClient) -> None:
        created = await (
            await client.post("/api/v1/tasks", json={"title": "Finish me"})
        ).json()

        resp = await client.patch(f"/api/v1/tasks/{created['id']}/complete")

        assert resp.status == 200
        body = await resp.json()
        assert body["completed"] is True
        assert body["id"] == created["id"]
        assert body["createdAt"] == created["createdAt"]

    @pytest.mark.asyncio
    async def test_complete_twice_succeeds(self, client: test_utils.TestClient) -> None:
        created = await (
            await client.post("/api/v1/tasks", json={"title": "Twice"})
        ).json()
        url = f"/api/v1/tasks/{created['id']}/complete"

        first = await client.patch(url)
        second = await client.patch(url)

        assert first.status == 200
        assert second.status == 200
        assert (await second.json())["completed"] is True

    @pytest.mark.asyncio
    async def test_complete_missing_task_returns_404(self, client: test_utils.TestClient) -> None:
        missing_id = str(uuid.uuid4())

        resp = await client.patch(f"/api/v1/tasks/{missing_id}/complete")

        assert resp.status == 404
        assert (await resp.json())["task_id"] == missing_id

    @pytest.mark.asyncio
    async def test_wrong_method_returns_405(self, client: test_utils.TestClient) -> None:
        resp = await client.post(f"/api/v1/tasks/{uuid.uuid4()}/complete")

        assert resp.status == 405


class TestErrorHandling:
    """Tests for unexpected failures."""

    @pytest.mark.asyncio
    async def test_core_failure_returns_generic_500(
        self, client: test_utils.TestClient, management: FakeTaskManagementPort
    ) -> None:
        management.should_fail = True

        resp = await client.get("/api/v1/tasks")

        assert resp.status == 500
        body = await resp.json()
        assert body == {"error": "Internal server error"}
        assert management.fail_message not in str(body)

    @pytest.mark.asyncio
    async def test_unknown_route_returns_404(self, client: test_utils.TestClient) -> None:
        resp = await client.get("/api/v2/tasks")

        assert resp.status == 404


class TestAuthentication:
    """Tests for API key authentication."""

    @pytest.fixture
    async def auth_client(self, make_client: ClientFactory) -> test_utils.TestClient:
        return await make_client(api_key="secret-key", require_auth=True)

    @pytest.mark.asyncio
    async def test_missing_key_returns_401(self, auth_client: test_utils.TestClient) -> None:
        resp = await auth_client.get("/api/v1/tasks")

        assert resp.status == 401
        assert await resp.json() == {
            "error": "Unauthorized: invalid or missing API key"
        }

    @pytest.mark.asyncio
    async def test_wrong_key_returns_401(self, auth_client: test_utils.TestClient) -> None:
        resp = await auth_client.get(
            "/api/v1/tasks", headers={"Authorization": "Bearer wrong"}
        )

        assert resp.status == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "headers",
        [{"X-API-Key": "clé"}, {"Authorization": "Bearer clé-secrète"}],
    )
    async def test_non_ascii_key_returns_401(
        self, auth_client: test_utils.TestClient, headers: dict[str, str]
    ) -> None:
        resp = await auth_client.get("/api/v1/tasks", headers=headers)

        assert resp.status == 401
        assert await resp.json() == {
            "error": "Unauthorized: invalid or missing API key"
        }

    @pytest.mark.asyncio
    async def test_bearer_token_accepted(self, auth_client: test_utils.TestClient) -> None:
        resp = await auth_client.get(
            "/api/v1/tasks", headers={"Authorization": "Bearer secret-key"}
        )

        assert resp.status == 200

    @pytest.mark.asyncio
    async def test_api_key_header_accepted(self, auth_client: test_utils.TestClient) -> None:
        resp = await auth_client.post(
            "/api/v1/tasks",
            json={"title": "Authorized"},
            headers={"X-API-Key": "secret-key"},
        )

        assert resp.status == 201

    @pytest.mark.asyncio
    async def test_unauthenticated_request_never_reaches_core(
        self, auth_client: test_utils.TestClient, management: FakeTaskManagementPort
    ) -> None:
        await auth_client.post("/api/v1/tasks", json={"title": "Blocked"})

        assert management.create_calls == []

    @pytest.mark.asyncio
    async def test_health_is_public(self, auth_client: test_utils.TestClient) -> None:
        resp = await auth_client.get("/health")

        assert resp.status == 200
        assert await resp.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_key_ignored_when_auth_not_required(
        self, make_client: ClientFactory
    ) -> None:
        client = await make_client(api_key="secret-key", require_auth=False)

        resp = await client.get("/api/v1/tasks")

        assert resp.status == 200
