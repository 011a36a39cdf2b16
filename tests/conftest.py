"""
Pytest configuration and shared fixtures.
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from catalog.models import Author, Book, ResolvedAuthor
from catalog.notifications import NotificationPublisher
from catalog.services import AuthorService, BookService
from catalog.store import ResourceStore
from utilities.config import BffConfig
from utilities.metrics import MetricsRecorder

TOPIC = "test-notifications"


@pytest.fixture
def bff_config():
    """Configuration that never reads a developer's .env file."""
    return BffConfig(
        _env_file=None,
        author_service_url="http://authors.test",
        redis_topic=TOPIC,
        notification_timeout=0.5,
    )


@pytest.fixture
def metrics():
    return MetricsRecorder()


@pytest.fixture
def mock_broker():
    """Broker that accepts every message."""
    broker = AsyncMock()
    broker.publish.return_value = 1
    broker.ping.return_value = True
    return broker


@pytest.fixture
def publisher(mock_broker, metrics):
    return NotificationPublisher(mock_broker, metrics, timeout=0.5)


@pytest.fixture
def known_authors():
    """Authors the stub resolver can find, keyed by id."""
    authors = {}
    for first, last in [("Matt", "Butcher"), ("Matt", "Farina")]:
        author_id = uuid4()
        authors[author_id] = ResolvedAuthor(
            id=author_id,
            first_name=first,
            last_name=last,
            address="Boulder, CO",
            language="English",
        )
    return authors


@pytest.fixture
def mock_author_resolver(known_authors):
    """Resolver that finds ``known_authors`` and nothing else."""
    resolver = AsyncMock()
    resolver.resolve.side_effect = lambda author_id: known_authors.get(author_id)
    return resolver


@pytest.fixture
def author_store():
    return ResourceStore[Author]("authors")


@pytest.fixture
def book_store():
    return ResourceStore[Book]("books")


@pytest.fixture
def author_service(author_store, metrics, publisher):
    return AuthorService(author_store, metrics, publisher, TOPIC)


@pytest.fixture
def book_service(book_store, metrics, publisher, mock_author_resolver):
    return BookService(book_store, metrics, publisher, TOPIC, mock_author_resolver)
