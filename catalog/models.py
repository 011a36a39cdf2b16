"""
Pydantic models for authors and books.

Stored entities are frozen so a record handed out by a store can never be
mutated in place. Views are the public, camelCase JSON shapes returned by
the API and published on the notification channel.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Accepts and emits camelCase field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Stored entities

class Author(BaseModel):
    """Author record held by the author store."""
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Server-generated identifier")
    first_name: str
    last_name: str
    address: str
    language: str


class Book(BaseModel):
    """
    Book record held by the book store.

    ``author_id`` is captured when the book is created and is not
    re-validated afterwards.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Server-generated identifier")
    title: str
    pages: int
    author_id: UUID


# Commands

class CreateAuthorCommand(_CamelModel):
    """Request body for author creation."""
    first_name: str = Field(..., min_length=1, description="Author first name")
    last_name: str = Field(..., min_length=1, description="Author last name")
    address: str = Field("", description="Postal address")
    language: str = Field("", description="Language the author writes in")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "firstName": "Matt",
                "lastName": "Butcher",
                "address": "Boulder, CO",
                "language": "English",
            }
        },
    )


class CreateBookCommand(_CamelModel):
    """Request body for book creation."""
    title: str = Field(..., min_length=1, description="Book title")
    author_id: UUID = Field(..., description="Identifier of an existing author")
    pages: int = Field(..., gt=0, description="Page count")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Go in Practice",
                "authorId": "3fa85f64-5717-4562-b3fc-2c963f66afa6",
                "pages": 350,
            }
        },
    )


# Views

class AuthorView(_CamelModel):
    """Public projection of an author."""
    id: UUID
    first_name: str
    last_name: str
    address: str
    language: str

    @classmethod
    def from_entity(cls, author: Author) -> "AuthorView":
        return cls(
            id=author.id,
            first_name=author.first_name,
            last_name=author.last_name,
            address=author.address,
            language=author.language,
        )


class ResolvedAuthor(_CamelModel):
    """
    Author as returned by the author service.

    Only ``id`` is required; the remote service may send null for any other
    field.
    """
    id: UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address: Optional[str] = None
    language: Optional[str] = None


class BookView(_CamelModel):
    """Public projection of a book."""
    id: UUID
    author_id: UUID
    title: str
    pages: int

    @classmethod
    def from_entity(cls, book: Book) -> "BookView":
        return cls(
            id=book.id,
            author_id=book.author_id,
            title=book.title,
            pages=book.pages,
        )


# Operation outcomes

class ResultStatus(str, Enum):
    """Outcome kinds a service operation can report."""
    OK = "ok"
    NOT_FOUND = "not_found"


ViewT = TypeVar("ViewT")


class ServiceResult(BaseModel, Generic[ViewT]):
    """
    Explicit outcome of a service lookup or creation.

    Callers match on ``status`` instead of catching exceptions.
    """
    status: ResultStatus = Field(..., description="Outcome kind")
    value: Optional[ViewT] = Field(None, description="Resulting view when status is ok")
    error: Optional[str] = Field(None, description="Human-readable failure reason")

    @classmethod
    def ok(cls, value: ViewT) -> "ServiceResult[ViewT]":
        return cls(status=ResultStatus.OK, value=value)

    @classmethod
    def not_found(cls, message: str) -> "ServiceResult[ViewT]":
        return cls(status=ResultStatus.NOT_FOUND, error=message)

    @property
    def is_ok(self) -> bool:
        return self.status == ResultStatus.OK
