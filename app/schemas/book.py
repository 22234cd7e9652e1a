"""Pydantic schemas for the read-only book catalog."""

from typing import Literal

from pydantic import Field

from app.schemas.envelope import CamelModel

BookSortField = Literal["bookName", "author", "price", "stock", "category", "isbn"]


class LocalizedText(CamelModel):
    """Text in the three catalog locales: Myanmar, English, Chinese."""

    my: str
    en: str
    zh: str


class Book(CamelModel):
    """One catalog entry."""

    id: str
    book_name: LocalizedText
    author_description: LocalizedText
    book_description: LocalizedText
    isbn: str
    author: str
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    category: str
