import logging
from abc import ABC
from contextlib import contextmanager
from typing import Any

import httpx

from automate.config import Settings

logger = logging.getLogger(__name__)

# Raised while reading a payload whose shape is not what the upstream documents.
# pydantic ValidationError and JSONDecodeError are ValueErrors.
PAYLOAD_ERRORS = (AttributeError, KeyError, IndexError, TypeError, ValueError)


class ProviderError(Exception):
    """An upstream data provider could not be reached or answered badly."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class BaseProvider(ABC):
    PROVIDER_NAME: str = ""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.PROVIDER_TIMEOUT_SECONDS,
            transport=self._transport,
            follow_redirects=True,
        )

    async def _get_json(
        self,
        url: str,
        params: dict | None = None,
        not_found_ok: bool = False,
        expect: type = dict,
    ) -> Any:
        """GET a JSON document, raising ProviderError on any upstream failure.

        With not_found_ok a 404 answer yields None instead of an error. A body
        that decodes to something other than `expect` is an upstream failure.
        """
        async with self._client() as client:
            try:
                resp = await client.get(url, params=params)
            except httpx.HTTPError as e:
                logger.error(f"[{self.PROVIDER_NAME}] Request to {url} failed: {e!r}")
                raise ProviderError(self.PROVIDER_NAME, f"request failed: {e!r}") from e

        if resp.status_code == 404 and not_found_ok:
            return None
        if resp.status_code != 200:
            logger.warning(
                f"[{self.PROVIDER_NAME}] {url} returned {resp.status_code}: {resp.text[:200]}"
            )
            raise ProviderError(self.PROVIDER_NAME, f"HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(self.PROVIDER_NAME, "invalid JSON response") from e
        if not isinstance(data, expect):
            logger.warning(
                f"[{self.PROVIDER_NAME}] {url} returned {type(data).__name__}, expected {expect.__name__}"
            )
            raise ProviderError(self.PROVIDER_NAME, f"unexpected {type(data).__name__} response body")
        return data

    @contextmanager
    def _parsing(self, what: str):
        """Turn payload shape errors raised inside the block into ProviderError."""
        try:
            yield
        except PAYLOAD_ERRORS as e:
            logger.warning(f"[{self.PROVIDER_NAME}] Malformed {what} payload: {e!r}")
            raise ProviderError(self.PROVIDER_NAME, f"malformed {what} payload") from e
