"""
Books API routes.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.models import Book
from repositories import BooksRepository

logger = logging.getLogger(__name__)

BOOK_EXAMPLE = {
    "id": "d5fEa",
    "title": "The New Turing Omnibus",
    "author": "Alexander K. Dewdney",
}

NOT_FOUND = {404: {"description": "The book was not found"}}
SERVER_ERROR = {500: {"description": "Some server error"}}


class BookCreate(BaseModel):
    """Body of a create request. Fields beyond title and author are stored as sent."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={"example": {k: v for k, v in BOOK_EXAMPLE.items() if k != "id"}},
    )

    title: str = Field(description="The book title")
    author: str = Field(description="The book author")


class BookUpdate(BaseModel):
    """Partial book; only the fields present are changed."""

    model_config = ConfigDict(extra="allow", json_schema_extra={"example": {"title": "Dune Messiah"}})

    title: Optional[str] = Field(default=None, description="The book title")
    author: Optional[str] = Field(default=None, description="The book author")

    @field_validator("title", "author")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    def changes(self) -> Dict[str, Any]:
        data = dict(self.model_extra or {})
        for name in ("title", "author"):
            if name in self.model_fields_set:
                data[name] = getattr(self, name)
        return data


class BookResponse(BaseModel):
    model_config = ConfigDict(extra="allow", json_schema_extra={"example": BOOK_EXAMPLE})

    id: str = Field(description="The auto-generated ID of the book")
    title: Optional[str] = Field(default=None, description="The book title")
    author: Optional[str] = Field(default=None, description="The book author")


def build_router(books_repo: BooksRepository) -> APIRouter:
    """
    Create the /books routes bound to ``books_repo``.

    Handlers return stored records as-is through JSONResponse; the response
    models only describe them in the OpenAPI schema.
    """
    router = APIRouter()

    @router.get(
        "",
        response_model=List[BookResponse],
        summary="Get a list of all books",
        response_description="A list of books",
    )
    async def list_books():
        return JSONResponse([book.to_dict() for book in books_repo.list_books()])

    @router.get(
        "/{book_id}",
        response_model=BookResponse,
        summary="Get a book by ID",
        response_description="The book description by ID",
        responses=NOT_FOUND,
    )
    async def get_book(book_id: str):
        book = books_repo.get_book(book_id)
        if not book:
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse(book.to_dict())

    @router.post(
        "",
        response_model=BookResponse,
        status_code=status.HTTP_201_CREATED,
        summary="Create a new book",
        response_description="The book was successfully created.",
        responses=SERVER_ERROR,
    )
    async def create_book(data: BookCreate):
        try:
            # A client-sent id is overridden by the generated one.
            book = Book.from_dict({**data.model_dump(), "id": Book.generate_id()})
            saved = books_repo.create_book(book)
        except Exception as e:
            logger.exception("Failed to create book")
            raise HTTPException(status_code=500, detail=str(e)) from e
        return JSONResponse(saved.to_dict(), status_code=status.HTTP_201_CREATED)

    @router.put(
        "/{book_id}",
        response_model=BookResponse,
        summary="Update a book by ID",
        response_description="The book was updated",
        responses={**NOT_FOUND, **SERVER_ERROR},
    )
    async def update_book(book_id: str, data: BookUpdate):
        try:
            updated = books_repo.update_book(book_id, data.changes())
        except Exception as e:
            logger.exception("Failed to update book %s", book_id)
            raise HTTPException(status_code=500, detail=str(e)) from e
        if updated is None:
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse(updated.to_dict())

    @router.delete(
        "/{book_id}",
        response_class=Response,
        summary="Remove a book by ID",
        responses={200: {"description": "The book was deleted"}, **NOT_FOUND, **SERVER_ERROR},
    )
    async def delete_book(book_id: str):
        try:
            removed = books_repo.delete_book(book_id)
        except Exception as e:
            logger.exception("Failed to delete book %s", book_id)
            raise HTTPException(status_code=500, detail=str(e)) from e
        if removed == 0:
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return Response(status_code=status.HTTP_200_OK)

    return router
