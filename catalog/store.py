"""
In-memory entity store shared by concurrent requests.
"""

import threading
from typing import Dict, Generic, List, Optional, Protocol, TypeVar
from uuid import UUID

import structlog

logger = structlog.get_logger(__name__)


class Identified(Protocol):
    id: UUID


EntityT = TypeVar("EntityT", bound=Identified)


class DuplicateIdentifierError(ValueError):
    """Raised when an entity with the same identifier is already stored."""


class ResourceStore(Generic[EntityT]):
    """
    Insertion-ordered collection of immutable entities keyed by identifier.

    Appends are serialized by a lock, and readers take snapshots under the
    same lock so they only ever see fully stored entities. Entities are never
    removed or replaced.
    """

    def __init__(self, name: str):
        """
        Initialize an empty store.

        Args:
            name: Resource name used in log output (e.g. "books")
        """
        self.name = name
        self._lock = threading.Lock()
        self._entities: Dict[UUID, EntityT] = {}

    def list_all(self) -> List[EntityT]:
        """Return a snapshot of every stored entity in insertion order."""
        with self._lock:
            return list(self._entities.values())

    def find_by_id(self, entity_id: UUID) -> Optional[EntityT]:
        """
        Look up the entity whose identifier equals ``entity_id``.

        Returns:
            The matching entity, or None if nothing matches
        """
        with self._lock:
            return self._entities.get(entity_id)

    def add(self, entity: EntityT) -> EntityT:
        """
        Append an entity.

        Args:
            entity: Entity with a store-unique ``id``

        Returns:
            The stored entity

        Raises:
            DuplicateIdentifierError: If the identifier is already present
        """
        with self._lock:
            if entity.id in self._entities:
                raise DuplicateIdentifierError(
                    f"{self.name} already contains an entity with id '{entity.id}'"
                )
            self._entities[entity.id] = entity
            size = len(self._entities)

        logger.debug("Entity stored", store=self.name, entity_id=str(entity.id), size=size)
        return entity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entities)
