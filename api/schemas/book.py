# api/schemas/book.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from bookshelf.sa.models.enums import BookCondition, BookStatus
from .profile import OwnerSummary

class BookBase(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    genre: Optional[str] = None
    description: Optional[str] = None
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None
    pages: Optional[int] = Field(default=None, ge=0)
    publication_year: Optional[int] = Field(default=None, ge=0)
    condition: BookCondition = BookCondition.GOOD
    status: BookStatus = BookStatus.AVAILABLE

class BookCreate(BookBase):
    pass

class BookUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    author: Optional[str] = Field(default=None, min_length=1)
    genre: Optional[str] = None
    description: Optional[str] = None
    isbn: Optional[str] = None
    cover_image_url: Optional[str] = None
    pages: Optional[int] = Field(default=None, ge=0)
    publication_year: Optional[int] = Field(default=None, ge=0)
    condition: Optional[BookCondition] = None
    status: Optional[BookStatus] = None

class Book(BookBase):
    id: str
    owner_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

class BrowseBook(Book):
    owner: Optional[OwnerSummary] = None

class BookList(BaseModel):
    items: List[Book]
    total: int

class BrowseList(BaseModel):
    items: List[BrowseBook]
    total: int
    query: Optional[str] = None

class IsbnLookup(BaseModel):
    isbn: str
    title: str
    authors: List[str] = []
    pages: Optional[int] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
