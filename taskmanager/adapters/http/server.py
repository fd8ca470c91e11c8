"""HTTP server adapter for the task API.

Serves the task endpoints with an aiohttp web application:

    POST  /api/v1/tasks                  create a task (201)
    GET   /api/v1/tasks                  list tasks
    GET   /api/v1/tasks/{task_id}        fetch one task
    PATCH /api/v1/tasks/{task_id}/complete
                                         mark a task completed
    GET   /health                        liveness check (never authenticated)

Supports optional API key authentication via the Authorization header
(Bearer token) or X-API-Key.
"""

import hmac
import json
import logging
from collections.abc import Awaitable, Callable

from aiohttp import web
from pydantic import ValidationError

from taskmanager.adapters.http.receiver import InvalidTaskIdError, TaskRequestHandler
from taskmanager.adapters.schemas import validation_errors
from taskmanager.core.errors import TaskNotFoundError

logger = logging.getLogger(__name__)

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

PUBLIC_PATHS = frozenset({"/health"})
DEFAULT_MAX_BODY_BYTES = 1024 * 1024


def make_auth_middleware(
    api_key: str | None, require_auth: bool
) -> Callable[[web.Request, Handler], Awaitable[web.StreamResponse]]:
    """Build a middleware that enforces API key authentication.

    Args:
        api_key: Expected API key.
        require_auth: Whether authentication is required at all.

    Returns:
        aiohttp middleware rejecting unauthenticated requests with 401.
    """

    def keys_match(provided: str) -> bool:
        # compare_digest rejects non-ASCII str, so compare raw bytes
        return hmac.compare_digest(
            provided.encode("utf-8", "surrogateescape"), api_key.encode("utf-8")
        )

    def is_authenticated(request: web.Request) -> bool:
        if not require_auth:
            return True
        if not api_key:
            return False

        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return keys_match(auth_header[7:])

        api_key_header = request.headers.get("X-API-Key", "")
        if api_key_header:
            return keys_match(api_key_header)

        return False

    @web.middleware
    async def auth_middleware(
        request: web.Request, handler: Handler
    ) -> web.StreamResponse:
        if request.path not in PUBLIC_PATHS and not is_authenticated(request):
            return web.json_response(
                {"error": "Unauthorized: invalid or missing API key"}, status=401
            )
        return await handler(request)

    return auth_middleware


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Map domain and validation errors onto HTTP responses."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except ValidationError as e:
        return web.json_response({"errors": validation_errors(e)}, status=400)
    except InvalidTaskIdError as e:
        return web.json_response({"error": str(e)}, status=400)
    except TaskNotFoundError as e:
        return web.json_response(
            {"error": str(e), "task_id": e.task_id}, status=404
        )
    except Exception as e:
        # Log full exception server-side, return generic error to client
        logger.error(
            f"Error handling {request.method} {request.path}: {e}", exc_info=True
        )
        return web.json_response({"error": "Internal server error"}, status=500)


class TaskHTTPServer:
    """Task API HTTP server adapter.

    Optionally requires API key authentication for task endpoints.
    """

    def __init__(
        self,
        request_handler: TaskRequestHandler,
        host: str = "0.0.0.0",
        port: int = 8080,
        api_key: str | None = None,
        require_auth: bool = False,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ):
        """Initialize the HTTP server.

        Args:
            request_handler: TaskRequestHandler instance to handle requests.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 8080).
            api_key: Optional API key for authentication.
            require_auth: Whether to require authentication (default False).
                If True, api_key must be provided.
            max_body_bytes: Largest accepted request body; larger bodies get 413.

        Raises:
            ValueError: If require_auth is True but no api_key is given.
        """
        if require_auth and not api_key:
            raise ValueError(
                "require_auth=True but no API key provided; "
                "set HTTP_API_KEY or disable HTTP_REQUIRE_AUTH"
            )

        self.request_handler = request_handler
        self.host = host
        self.port = port
        self.api_key = api_key
        self.require_auth = require_auth
        self.max_body_bytes = max_body_bytes
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        """Create the aiohttp application with routes and middlewares."""
        app = web.Application(
            middlewares=[
                make_auth_middleware(self.api_key, self.require_auth),
                error_middleware,
            ],
            client_max_size=self.max_body_bytes,
        )
        app.router.add_get("/health", self._handle_health)
        app.router.add_post("/api/v1/tasks", self._handle_create)
        app.router.add_get("/api/v1/tasks", self._handle_list)
        app.router.add_get("/api/v1/tasks/{task_id}", self._handle_get)
        app.router.add_patch(
            "/api/v1/tasks/{task_id}/complete", self._handle_complete
        )
        return app

    async def start(self) -> None:
        """Start serving on the configured host and port."""
        if self.require_auth:
            logger.info(
                f"Starting task HTTP server on {self.host}:{self.port} "
                "(with API key authentication)"
            )
        else:
            logger.info(f"Starting task HTTP server on {self.host}:{self.port}")

        self._runner = web.AppRunner(self.build_app(), access_log=logger)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info("Task HTTP server started")

    async def stop(self) -> None:
        """Stop the HTTP server."""
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Task HTTP server stopped")

    async def _handle_health(self, request: web.Request) -> web.Response:
        return web.json_response({"status": "healthy"})

    async def _handle_create(self, request: web.Request) -> web.Response:
        body = await request.read()
        try:
            payload = json.loads(body) if body else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            return web.json_response({"error": "Invalid JSON body"}, status=400)

        result = await self.request_handler.handle_create_request(payload)
        return web.json_response(result, status=201)

    async def _handle_list(self, request: web.Request) -> web.Response:
        result = await self.request_handler.handle_list_request()
        return web.json_response(result)

    async def _handle_get(self, request: web.Request) -> web.Response:
        result = await self.request_handler.handle_get_request(
            request.match_info["task_id"]
        )
        return web.json_response(result)

    async def _handle_complete(self, request: web.Request) -> web.Response:
        result = await self.request_handler.handle_complete_request(
            request.match_info["task_id"]
        )
        return web.json_response(result)
