# Shared async JSON transport for the open-data providers.
# ecolefinder/providers/http.py
from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Dict, Optional

import httpx

from .base import MalformedResponse, UpstreamUnavailable

logger = logging.getLogger(__name__)

_TRANSIENT_STATUSES = (429, 500, 502, 503, 504)


class JsonHttpProvider:
    """
    Base for providers talking to a public JSON API over one httpx.AsyncClient.

    The client is either injected (tests, shared pools) or opened by `async with`.
    Subclasses set `timeout_s`, `max_retries` and `base_backoff_s` through their config.
    """

    provider_name = "http"

    def __init__(
        self,
        *,
        timeout_s: float,
        max_retries: int,
        base_backoff_s: float,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout_s = timeout_s
        self.max_retries = max_retries
        self.base_backoff_s = base_backoff_s
        self._client = client
        self._owns_client = False

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(f"{type(self).__name__} must be used with 'async with' or provide a client.")
        return self._client

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Any:
        """
        GET with retries on transient failures (timeouts, network errors, 429/5xx)
        using exponential backoff + jitter. Other 4xx are not retried.

        Raises UpstreamUnavailable when the service keeps failing, and
        MalformedResponse when a successful answer is not JSON.
        """
        last_err: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            try:
                resp = await self.client.get(url, params=params)
                if resp.status_code in _TRANSIENT_STATUSES:
                    raise httpx.HTTPStatusError(
                        f"transient status {resp.status_code}",
                        request=resp.request,
                        response=resp,
                    )
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                last_err = e
                if e.response.status_code not in _TRANSIENT_STATUSES:
                    break
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                last_err = e
            else:
                try:
                    return resp.json()
                except ValueError as e:
                    raise MalformedResponse(f"{self.provider_name}: invalid JSON from {url}") from e

            if attempt >= self.max_retries:
                break
            backoff = self.base_backoff_s * (2 ** attempt)
            jitter = random.random() * 0.25
            logger.debug(
                "%s: attempt %d failed (%s), retrying in %.2fs",
                self.provider_name, attempt + 1, last_err, backoff + jitter,
            )
            await asyncio.sleep(backoff + jitter)
        raise UpstreamUnavailable(f"{self.provider_name} request failed: {last_err}") from last_err
