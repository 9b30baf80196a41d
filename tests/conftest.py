"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - backend: Scriptable fake of the report backend (httpx.MockTransport)
    - report_client: ReportClient wired to the fake backend
    - resources: Fresh resource registry
    - release_calls: Per-handle count of release calls on the registry
    - store: Session store bound to the registry
    - controller: Conversation controller over all of the above
"""

import asyncio
import inspect
from collections import Counter
from collections.abc import AsyncGenerator, Awaitable, Callable

import httpx
import pytest

from reportchat.client.config import ClientConfig
from reportchat.client.report_client import ReportClient
from reportchat.rendering.resolver import ArtifactResolver
from reportchat.rendering.resources import ResourceRegistry
from reportchat.session.controller import ConversationController
from reportchat.session.store import SessionStore

BASE_URL = "http://backend.test"

Reply = (
    httpx.Response
    | Exception
    | Callable[[httpx.Request], httpx.Response | Awaitable[httpx.Response]]
)


class FakeBackend:
    """Async MockTransport handler with per-route replies and an optional gate.

    Routes are keyed by ``(method, path)``. A reply may be a response, an
    exception to raise, or a (sync or async) callable building a response
    from the request.
    When ``gate`` is set, report requests wait on it before replying.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.gate: asyncio.Event | None = None
        self._routes: dict[tuple[str, str], Reply] = {
            ("POST", "/reports/generate"): httpx.Response(200, json={"report": "ok"}),
        }

    def on(self, method: str, path: str, reply: Reply) -> None:
        self._routes[(method, path)] = reply

    def reply_report(
        self,
        content: bytes = b"",
        content_type: str = "application/json",
        status_code: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        all_headers = {"content-type": content_type, **(headers or {})}
        self.on(
            "POST",
            "/reports/generate",
            lambda request: httpx.Response(status_code, content=content, headers=all_headers),
        )

    def fail_report(self, error: Exception) -> None:
        self.on("POST", "/reports/generate", error)

    @property
    def report_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/reports/generate"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None and request.url.path == "/reports/generate":
            await self.gate.wait()

        reply = self._routes.get((request.method, request.url.path))
        if reply is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, httpx.Response):
            return httpx.Response(
                reply.status_code, content=reply.content, headers=reply.headers
            )
        response = reply(request)
        if inspect.isawaitable(response):
            response = await response
        return response


@pytest.fixture
def client_config() -> ClientConfig:
    """Explicit configuration independent of the environment."""
    return ClientConfig(
        api_base_url=BASE_URL,
        request_timeout=5.0,
        default_format="PDF",
        user_id="user-1",
        project_id="project-1",
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def report_client(
    backend: FakeBackend, client_config: ClientConfig
) -> AsyncGenerator[ReportClient]:
    """Create a ReportClient whose HTTP traffic goes to the fake backend.

    Yields:
        ReportClient closed after the test.
    """
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(backend), base_url=BASE_URL)
    async with ReportClient(client_config, http_client=http_client) as client:
        yield client


@pytest.fixture
def resources() -> ResourceRegistry:
    return ResourceRegistry()


@pytest.fixture
def release_calls(resources: ResourceRegistry) -> Counter[str]:
    """Count every release call made on the registry, per handle."""
    calls: Counter[str] = Counter()
    release = resources.release

    def counting_release(handle: str) -> bool:
        calls[handle] += 1
        return release(handle)

    resources.release = counting_release  # type: ignore[method-assign]
    return calls


@pytest.fixture
def store(resources: ResourceRegistry) -> SessionStore:
    return SessionStore(resources)


@pytest.fixture
def controller(
    store: SessionStore,
    report_client: ReportClient,
    resources: ResourceRegistry,
    client_config: ClientConfig,
) -> ConversationController:
    return ConversationController(
        store=store,
        client=report_client,
        resolver=ArtifactResolver(resources),
        resources=resources,
        user_id=client_config.user_id,
        project_id=client_config.project_id,
        default_format=client_config.default_format,
    )
