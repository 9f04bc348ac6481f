from __future__ import annotations

from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from engine.models import ApiResponse


class BackendClient:
    """JSON client for the trading backend; every call resolves to an ApiResponse."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def get(self, path: str, params: dict[str, Any] | None = None) -> ApiResponse:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: dict[str, Any] | None = None) -> ApiResponse:
        return await self.request("POST", path, json=payload)

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> ApiResponse:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.request(method, path, params=params, json=json)
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            logger.warning("API error [{} {}]: {}", method, path, exc)
            return ApiResponse(success=False, error=str(exc) or exc.__class__.__name__)
        try:
            body = resp.json()
        except ValueError as exc:
            if not resp.is_success:
                logger.warning("API error [{} {}]: HTTP {}", method, path, resp.status_code)
                return ApiResponse(success=False, error=f"HTTP {resp.status_code}")
            logger.warning("API error [{} {}]: invalid JSON ({})", method, path, exc)
            return ApiResponse(success=False, error=f"Invalid JSON response (HTTP {resp.status_code})")

        if not resp.is_success:
            error = body.get("error") if isinstance(body, dict) else None
            logger.warning("API error [{} {}]: HTTP {}", method, path, resp.status_code)
            return ApiResponse(success=False, error=error or f"HTTP {resp.status_code}")
        if not isinstance(body, dict):
            return ApiResponse(success=False, error="Malformed response envelope")
        try:
            return ApiResponse.model_validate(body)
        except ValidationError as exc:
            logger.warning("API error [{} {}]: malformed envelope", method, path)
            return ApiResponse(success=False, error=f"Malformed response envelope: {exc.error_count()} errors")
