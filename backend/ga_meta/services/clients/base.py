"""
Shared request/response cycle for upstream API clients.

Clients never raise for upstream conditions. Each fetch returns one of:

- Found(value): 2xx with a non-null "data" payload
- EMPTY: 2xx with a missing or null "data" payload
- NOT_FOUND: HTTP 404, never retried
- FetchError(kind): everything else, after retries where applicable

Pacing: a fixed delay follows every response that is not retried. Server
errors, timeouts and transport failures are retried up to max_retries times,
doubling the wait before each new attempt.
"""
import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ga_meta.core.config import ClientConfig

logger = structlog.get_logger()

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why a fetch failed."""
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    DESERIALIZATION = "deserialization"
    REQUEST_FAILED = "request_failed"

    @property
    def retryable(self) -> bool:
        """Whether the same request may succeed later."""
        return self in (ErrorKind.SERVER_ERROR, ErrorKind.TIMEOUT)


@dataclass(frozen=True)
class Found(Generic[T]):
    value: T


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class NotFound:
    pass


@dataclass(frozen=True)
class FetchError:
    kind: ErrorKind
    message: str = ""


EMPTY = Empty()
NOT_FOUND = NotFound()

FetchOutcome = Union[Found[T], Empty, NotFound, FetchError]


class BaseApiClient:
    """
    Base class for rate-limited, retrying JSON API clients.

    Subclasses describe endpoints; this class owns pacing, retries and the
    mapping from HTTP results to fetch outcomes.
    """

    name = "upstream"

    def __init__(self, config: ClientConfig, base_url: str):
        """
        Args:
            config: Shared client configuration (pacing, retries, HTTP client)
            base_url: API root, without trailing slash
        """
        self.config = config
        self.base_url = base_url.rstrip("/")

    async def _pace(self) -> None:
        """Fixed delay after a completed request."""
        if self.config.request_delay > 0:
            await asyncio.sleep(self.config.request_delay)

    async def _backoff(self, attempt: int) -> None:
        """Wait before retry number `attempt`; doubles each time."""
        await asyncio.sleep(self.config.request_delay * (2 ** attempt))

    async def _fetch(
        self,
        path: str,
        envelope: type[BaseModel],
        *,
        ident: Any,
        params: Optional[dict[str, Any]] = None,
    ) -> FetchOutcome[Any]:
        """
        GET a resource and parse its envelope.

        Args:
            path: Endpoint path relative to base_url
            envelope: Pydantic envelope model with a `data` field
            ident: Identifier logged with every message for this request
            params: Optional query parameters

        Returns:
            Fetch outcome; Found carries the parsed `data` model
        """
        url = f"{self.base_url}{path}"
        max_attempts = self.config.max_retries + 1
        attempt = 0

        while True:
            attempt += 1
            logger.debug(
                "Fetching",
                client=self.name,
                ident=ident,
                attempt=attempt,
                max_attempts=max_attempts,
            )

            try:
                response = await self.config.http_client().get(url, params=params)
            except httpx.TimeoutException as e:
                if attempt < max_attempts:
                    logger.warning("Timeout, retrying", client=self.name, ident=ident, attempt=attempt)
                    await self._backoff(attempt)
                    continue
                logger.warning("Timeout, giving up", client=self.name, ident=ident, attempts=attempt)
                return FetchError(ErrorKind.TIMEOUT, str(e) or "timeout")
            except httpx.HTTPError as e:
                if attempt < max_attempts:
                    logger.warning(
                        "Request error, retrying",
                        client=self.name,
                        ident=ident,
                        attempt=attempt,
                        error=str(e),
                    )
                    await self._backoff(attempt)
                    continue
                return FetchError(ErrorKind.REQUEST_FAILED, str(e))

            status = response.status_code

            if response.is_success:
                try:
                    parsed = envelope.model_validate_json(response.content)
                except ValidationError as e:
                    logger.error(
                        "Failed to deserialize response",
                        client=self.name,
                        ident=ident,
                        error=str(e)[:200],
                    )
                    return FetchError(ErrorKind.DESERIALIZATION, str(e))

                await self._pace()
                if parsed.data is None:
                    return EMPTY
                return Found(parsed.data)

            if status == 404:
                await self._pace()
                return NOT_FOUND

            if response.is_server_error:
                if attempt < max_attempts:
                    logger.warning(
                        "Server error, retrying",
                        client=self.name,
                        ident=ident,
                        status_code=status,
                        attempt=attempt,
                    )
                    await self._backoff(attempt)
                    continue
                return FetchError(ErrorKind.SERVER_ERROR, f"Status: {status}")

            logger.warning(
                "Request failed",
                client=self.name,
                ident=ident,
                status_code=status,
                error=response.text[:200],
            )
            return FetchError(ErrorKind.REQUEST_FAILED, f"Status: {status}")
