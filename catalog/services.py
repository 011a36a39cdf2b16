"""
Author and book services.

Each service owns the request telemetry for its resource, maps stored
entities to public views, and announces newly created resources on the
notification channel. Book creation additionally checks the referenced
author with the author service before anything is stored.
"""

from typing import Generic, List, TypeVar
from uuid import UUID

import structlog

from .author_client import AuthorResolver
from .models import (
    Author, AuthorView, Book, BookView,
    CreateAuthorCommand, CreateBookCommand, ServiceResult
)
from .notifications import NotificationPublisher
from .store import ResourceStore
from utilities.metrics import MetricsRecorder

logger = structlog.get_logger(__name__)

EntityT = TypeVar("EntityT")
ViewT = TypeVar("ViewT")


class ResourceService(Generic[EntityT, ViewT]):
    """
    Shared list, lookup and notification behaviour for one resource kind.

    Subclasses set ``resource_name`` and implement ``to_view``.
    """

    resource_name = "resource"

    def __init__(
        self,
        store: ResourceStore[EntityT],
        metrics: MetricsRecorder,
        publisher: NotificationPublisher,
        topic: str,
    ):
        self.store = store
        self.metrics = metrics
        self.publisher = publisher
        self.topic = topic
        self.logger = logger.bind(service=self.operation_name)

    @property
    def operation_name(self) -> str:
        """Tag used for this service's request/error/duration metrics."""
        return type(self).__name__

    def to_view(self, entity: EntityT) -> ViewT:
        raise NotImplementedError

    async def list(self) -> List[ViewT]:
        """Return views of all stored entities in insertion order."""
        self.logger.info("Get resource list", resource=self.resource_name)
        self.metrics.record_request(self.operation_name)
        with self.metrics.start_duration_sample(self.operation_name):
            return [self.to_view(entity) for entity in self.store.list_all()]

    async def get_by_id(self, entity_id: UUID) -> ServiceResult[ViewT]:
        """
        Look up one entity by identifier.

        Returns:
            ok with the view, or not_found if nothing has that identifier
        """
        self.logger.info("Find resource by id", resource=self.resource_name, entity_id=str(entity_id))
        self.metrics.record_request(self.operation_name)
        with self.metrics.start_duration_sample(self.operation_name):
            entity = self.store.find_by_id(entity_id)
            if entity is None:
                self.metrics.record_error(self.operation_name)
                return ServiceResult.not_found(
                    f"{self.resource_name.capitalize()} '{entity_id}' isn't found"
                )
            return ServiceResult.ok(self.to_view(entity))

    async def _notify(self, view: ViewT) -> None:
        await self.publisher.publish(self.topic, view, operation=self.operation_name)


class AuthorService(ResourceService[Author, AuthorView]):
    """Authors have no cross-service checks; creation always succeeds."""

    resource_name = "author"

    def to_view(self, entity: Author) -> AuthorView:
        return AuthorView.from_entity(entity)

    async def create(self, command: CreateAuthorCommand) -> ServiceResult[AuthorView]:
        """
        Store a new author and announce it.

        Args:
            command: Author fields supplied by the client

        Returns:
            ok with the created author's view
        """
        self.logger.info("Create author")
        self.metrics.record_request(self.operation_name)
        with self.metrics.start_duration_sample(self.operation_name):
            author = self.store.add(Author(
                first_name=command.first_name,
                last_name=command.last_name,
                address=command.address,
                language=command.language,
            ))
            view = self.to_view(author)
            await self._notify(view)

        self.logger.info("Author created", author_id=str(author.id))
        return ServiceResult.ok(view)


class BookService(ResourceService[Book, BookView]):
    """Books must reference an author the author service can resolve."""

    resource_name = "book"

    def __init__(
        self,
        store: ResourceStore[Book],
        metrics: MetricsRecorder,
        publisher: NotificationPublisher,
        topic: str,
        author_resolver: AuthorResolver,
    ):
        super().__init__(store, metrics, publisher, topic)
        self.author_resolver = author_resolver

    def to_view(self, entity: Book) -> BookView:
        return BookView.from_entity(entity)

    async def create(self, command: CreateBookCommand) -> ServiceResult[BookView]:
        """
        Create a book after resolving its author.

        The store is only touched, and a notification only sent, once the
        author has been resolved. An unresolvable author, whether absent
        or because the author service failed, yields not_found.

        Args:
            command: Book fields including the referenced author id

        Returns:
            ok with the created book's view, or not_found
        """
        self.logger.info("Create book", author_id=str(command.author_id))
        self.metrics.record_request(self.operation_name)
        with self.metrics.start_duration_sample(self.operation_name):
            author = await self.author_resolver.resolve(command.author_id)
            if author is None:
                self.metrics.record_error(self.operation_name)
                self.logger.warning("Book author isn't found", author_id=str(command.author_id))
                return ServiceResult.not_found(f"Author '{command.author_id}' isn't found")

            book = self.store.add(Book(
                title=command.title,
                pages=command.pages,
                author_id=author.id,
            ))
            view = self.to_view(book)
            await self._notify(view)

        self.logger.info("Book created", book_id=str(book.id), author_id=str(book.author_id))
        return ServiceResult.ok(view)
