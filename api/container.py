"""
Composition root: builds every long-lived component once per process.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from catalog.author_client import AuthorResolver, AuthorServiceClient
from catalog.models import Author, Book
from catalog.notifications import MessageBroker, NotificationPublisher, RedisBroker
from catalog.services import AuthorService, BookService
from catalog.store import ResourceStore
from utilities.config import BffConfig
from utilities.logger import log_span
from utilities.metrics import MetricsRecorder

logger = structlog.get_logger(__name__)


@dataclass
class ServiceContainer:
    """Long-lived components shared by all requests."""
    config: BffConfig
    metrics: MetricsRecorder
    broker: MessageBroker
    publisher: NotificationPublisher
    author_store: ResourceStore[Author]
    book_store: ResourceStore[Book]
    author_resolver: AuthorResolver
    author_service: AuthorService
    book_service: BookService

    @classmethod
    def build(
        cls,
        config: BffConfig,
        broker: Optional[MessageBroker] = None,
        author_resolver: Optional[AuthorResolver] = None,
    ) -> "ServiceContainer":
        """
        Wire stores, clients and services together.

        Args:
            config: Application configuration
            broker: Notification transport; Redis from config when omitted
            author_resolver: Author lookup; HTTP client from config when omitted
        """
        metrics = MetricsRecorder()
        broker = broker or RedisBroker.from_config(config)
        author_resolver = author_resolver or AuthorServiceClient.from_config(config)
        publisher = NotificationPublisher(
            broker, metrics, timeout=config.notification_timeout, span_hook=log_span
        )
        author_store: ResourceStore[Author] = ResourceStore("authors")
        book_store: ResourceStore[Book] = ResourceStore("books")

        logger.info(
            "Service container built",
            author_service_url=config.author_service_url,
            topic=config.redis_topic
        )
        return cls(
            config=config,
            metrics=metrics,
            broker=broker,
            publisher=publisher,
            author_store=author_store,
            book_store=book_store,
            author_resolver=author_resolver,
            author_service=AuthorService(author_store, metrics, publisher, config.redis_topic),
            book_service=BookService(
                book_store, metrics, publisher, config.redis_topic, author_resolver
            ),
        )

    async def close(self) -> None:
        """Release network resources."""
        aclose = getattr(self.author_resolver, "aclose", None)
        if aclose is not None:
            await aclose()
        try:
            await self.broker.close()
        except Exception as e:
            logger.warning("Failed to close notification broker", error=str(e))
