"""
Author and book endpoints.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status

from api.container import ServiceContainer
from catalog.models import (
    AuthorView, BookView, CreateAuthorCommand, CreateBookCommand,
    ResultStatus, ServiceResult
)
from catalog.services import AuthorService, BookService

authors_router = APIRouter(prefix="/api/v1/authors", tags=["Authors"])
books_router = APIRouter(prefix="/api/v1/books", tags=["Books"])


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_author_service(container: ServiceContainer = Depends(get_container)) -> AuthorService:
    return container.author_service


def get_book_service(container: ServiceContainer = Depends(get_container)) -> BookService:
    return container.book_service


def unwrap(result: ServiceResult):
    """Return the view of a successful result or raise the matching HTTP error."""
    if result.status == ResultStatus.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return result.value


# Authors endpoints
@authors_router.get("", response_model=List[AuthorView])
async def get_authors(service: AuthorService = Depends(get_author_service)):
    """Get all authors in creation order."""
    return await service.list()


@authors_router.get("/{author_id}", response_model=AuthorView)
async def get_author(author_id: UUID, service: AuthorService = Depends(get_author_service)):
    """
    Get a single author by ID.

    - **author_id**: Author UUID
    """
    return unwrap(await service.get_by_id(author_id))


@authors_router.post("", response_model=AuthorView)
async def create_author(
    command: CreateAuthorCommand,
    service: AuthorService = Depends(get_author_service)
):
    """Create an author and publish it on the notification channel."""
    return unwrap(await service.create(command))


# Books endpoints
@books_router.get("", response_model=List[BookView])
async def get_books(service: BookService = Depends(get_book_service)):
    """Get all books in creation order."""
    return await service.list()


@books_router.get("/{book_id}", response_model=BookView)
async def get_book(book_id: UUID, service: BookService = Depends(get_book_service)):
    """
    Get a single book by ID.

    - **book_id**: Book UUID
    """
    return unwrap(await service.get_by_id(book_id))


@books_router.post("", response_model=BookView)
async def create_book(
    command: CreateBookCommand,
    service: BookService = Depends(get_book_service)
):
    """
    Create a book.

    The referenced author is looked up on the author service first; if it
    cannot be resolved the request fails with 404 and nothing is stored.
    """
    return unwrap(await service.create(command))
