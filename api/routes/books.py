# api/routes/books.py

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from bookshelf import views
from bookshelf.isbn import lookup_isbn
from bookshelf.lending import LendingService
from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import BookRepository
from api.deps import get_actor_id, raise_for_rejection
from api.schemas.book import Book, BookCreate, BookList, BookUpdate, BrowseList, IsbnLookup

router = APIRouter(tags=["books"])

@router.get("/books", response_model=BookList)
def get_my_books(
    query: Optional[str] = Query(None, description="Filter by title, author or genre"),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """
    Get the signed-in user's library, newest first.

    Args:
        query: Optional case-insensitive search over title, author and genre
        actor_id: The signed-in user
        db: Database session

    Returns:
        BookList with the matching books
    """
    books = views.search_books(BookRepository(db).list_by_owner(actor_id), query)
    return BookList(items=books, total=len(books))

@router.post("/books", response_model=Book, status_code=status.HTTP_201_CREATED)
def add_book(book: BookCreate, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    repo = BookRepository(db)
    try:
        return repo.create_book(owner_id=actor_id, **book.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/books/{book_id}", response_model=Book)
def get_book(book_id: str, db: Session = Depends(get_db)):
    book = BookRepository(db).get_by_id(book_id)
    if book is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Book not found")
    return book

@router.patch("/books/{book_id}", response_model=Book)
def edit_book(
    book_id: str,
    changes: BookUpdate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """
    Edit one of the signed-in user's books.

    Status can only change while no borrow request is active, and never to
    borrowed.
    """
    service = LendingService(db)
    try:
        outcome = service.edit_book(book_id, actor_id, **changes.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not outcome.ok:
        raise_for_rejection(outcome)
    return outcome.book

@router.delete("/books/{book_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(book_id: str, actor_id: str = Depends(get_actor_id), db: Session = Depends(get_db)):
    outcome = LendingService(db).delete_book(book_id, actor_id)
    if not outcome.ok:
        raise_for_rejection(outcome)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/browse", response_model=BrowseList)
def browse_books(
    query: Optional[str] = Query(None, description="Filter by title, author or genre"),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """Books other users have made available, with their owner's name and location."""
    candidates = BookRepository(db).list_available(exclude_owner_id=actor_id)
    books = views.browse_books(candidates, actor_id, query)
    return BrowseList(items=books, total=len(books), query=query)

@router.get("/isbn/{isbn}", response_model=IsbnLookup)
def lookup_book_by_isbn(isbn: str):
    """Pre-fill data for a new book. A miss is a 404; the client falls back to manual entry."""
    metadata = lookup_isbn(isbn)
    if metadata is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No book found for this ISBN")
    return metadata
