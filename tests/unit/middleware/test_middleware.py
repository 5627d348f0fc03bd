"""Unit tests for middleware."""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from api.middleware.logging import RequestLoggingMiddleware
from api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from api.middleware.security import SECURITY_HEADERS, SecurityHeadersMiddleware


def _create_app_with_middleware() -> FastAPI:
    """Create a minimal FastAPI app wired with the same middleware stack as main."""
    app = FastAPI()
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def _():
        return {"ok": True}

    @app.get("/framed")
    async def _framed():
        return JSONResponse({"ok": True}, headers={"X-Frame-Options": "SAMEORIGIN"})

    return app


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=_create_app_with_middleware())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


class TestSecurityHeadersMiddleware:
    """Tests for SecurityHeadersMiddleware."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("header, value", list(SECURITY_HEADERS.items()))
    async def test_adds_header(self, client: AsyncClient, header: str, value: str):
        response = await client.get("/test")

        assert response.headers[header] == value

    @pytest.mark.asyncio
    async def test_keeps_header_set_by_route(self, client: AsyncClient):
        response = await client.get("/framed")

        assert response.headers["x-frame-options"] == "SAMEORIGIN"


class TestRequestIDMiddleware:
    """Tests for RequestIDMiddleware."""

    @pytest.mark.asyncio
    async def test_generates_distinct_ids(self, client: AsyncClient):
        r1 = await client.get("/test")
        r2 = await client.get("/test")

        assert r1.headers[REQUEST_ID_HEADER]
        assert r1.headers[REQUEST_ID_HEADER] != r2.headers[REQUEST_ID_HEADER]

    @pytest.mark.asyncio
    async def test_propagates_well_formed_id(self, client: AsyncClient):
        response = await client.get("/test", headers={REQUEST_ID_HEADER: "custom-req-123"})

        assert response.headers[REQUEST_ID_HEADER] == "custom-req-123"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("incoming", ["has spaces", "x" * 129, "new\\nline"])
    async def test_replaces_malformed_id(self, client: AsyncClient, incoming: str):
        response = await client.get("/test", headers={REQUEST_ID_HEADER: incoming})

        assert response.headers[REQUEST_ID_HEADER] != incoming
        assert len(response.headers[REQUEST_ID_HEADER]) == 36
