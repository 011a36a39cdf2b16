"""
Client for resolving authors through the author service's HTTP API.
"""

import asyncio
from typing import Optional, Protocol
from uuid import UUID

import httpx
import structlog

from .models import ResolvedAuthor
from utilities.config import BffConfig

logger = structlog.get_logger(__name__)

AUTHORS_PATH = "/api/v1/authors/"


class AuthorResolver(Protocol):
    """Anything that can look up an author by identifier."""

    async def resolve(self, author_id: UUID) -> Optional[ResolvedAuthor]:
        ...


class AuthorServiceClient:
    """
    Resolves authors with ``GET {base_url}/api/v1/authors/{id}``.

    Every failure (connection error, timeout, non-2xx status, undecodable
    body) is reported as "not found" by returning None.
    """

    def __init__(self, base_url: str, http_client: httpx.AsyncClient, timeout: float = 5.0):
        """
        Initialize the client.

        Args:
            base_url: Author service base address, without trailing slash
            http_client: Shared HTTP client
            timeout: Seconds a whole lookup may take before it counts as failed
        """
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: BffConfig) -> "AuthorServiceClient":
        """Build a client with its own connection pool and timeout."""
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.author_service_timeout),
            headers=config.get_headers(),
            follow_redirects=True,
            limits=httpx.Limits(max_keepalive_connections=20, max_connections=100),
        )
        return cls(config.author_service_url, http_client, timeout=config.author_service_timeout)

    def author_url(self, author_id: UUID) -> str:
        return f"{self.base_url}{AUTHORS_PATH}{author_id}"

    async def resolve(self, author_id: UUID) -> Optional[ResolvedAuthor]:
        """
        Fetch an author from the author service.

        Args:
            author_id: Identifier to look up

        Returns:
            ResolvedAuthor, or None if the author is absent or the service
            could not be reached
        """
        url = self.author_url(author_id)
        try:
            response = await asyncio.wait_for(self.http_client.get(url), timeout=self.timeout)
            response.raise_for_status()
            author = ResolvedAuthor.model_validate(response.json())
        except Exception as e:
            logger.warning(
                "Author lookup failed",
                author_id=str(author_id),
                url=url,
                error_type=type(e).__name__,
                error=str(e)
            )
            return None

        logger.debug("Author resolved", author_id=str(author.id))
        return author

    async def aclose(self) -> None:
        await self.http_client.aclose()
