# tests/test_sa/test_repositories/test_book_repository.py
import pytest
from bookshelf.sa.models import Book
from bookshelf.sa.repositories import BookRepository, validate_book_fields

@pytest.fixture
def book_repo(db_session):
    """Fixture to create a BookRepository instance"""
    return BookRepository(db_session)

def test_create_book(book_repo, alice):
    book = book_repo.create_book(
        owner_id="alice",
        title=" Dune ",
        author="Frank Herbert",
        genre="",
        pages=412,
        condition="excellent"
    )
    assert book.id is not None
    assert book.title == "Dune"
    assert book.genre is None
    assert book.status == "available"
    assert book.condition == "excellent"

def test_create_book_defaults(book_repo, alice):
    book = book_repo.create_book(owner_id="alice", title="Emma", author="Jane Austen")
    assert book.condition == "good"
    assert book.status == "available"

def test_create_book_cannot_start_borrowed(book_repo, alice):
    with pytest.raises(ValueError, match="borrowed"):
        book_repo.create_book(owner_id="alice", title="Emma", author="Jane Austen", status="borrowed")

def test_create_book_requires_profile(book_repo):
    with pytest.raises(ValueError, match="No profile"):
        book_repo.create_book(owner_id="ghost", title="Emma", author="Jane Austen")

@pytest.mark.parametrize("fields", [
    {"title": "  "},
    {"author": None},
    {"pages": -1},
    {"pages": "many"},
    {"publication_year": True},
    {"condition": "mint"},
    {"status": "lost"},
    {"colour": "red"},
])
def test_validate_book_fields_rejects(fields):
    with pytest.raises(ValueError):
        validate_book_fields(fields)

def test_validate_book_fields_normalises():
    cleaned = validate_book_fields({"title": " Emma ", "description": "  ", "pages": 0})
    assert cleaned == {"title": "Emma", "description": None, "pages": 0}

def test_get_by_id(book_repo, alice_book):
    assert book_repo.get_by_id(alice_book.id).title == "The Hobbit"
    assert book_repo.get_by_id("missing") is None

def test_get_with_owner(book_repo, alice_book):
    book = book_repo.get_with_owner(alice_book.id)
    assert book.owner.location == "Leeds"

def test_list_by_owner_newest_first(book_repo, library):
    books = book_repo.list_by_owner("alice")
    assert [b.title for b in books] == ["Emma", "Dune", "The Hobbit"]

def test_list_available_excludes_owner(book_repo, library):
    books = book_repo.list_available(exclude_owner_id="bob")
    assert [b.title for b in books] == ["Dune", "The Hobbit"]
    assert all(b.owner.full_name == "Alice Lender" for b in books)

def test_list_available_everyone(book_repo, library):
    titles = {b.title for b in book_repo.list_available()}
    assert titles == {"The Hobbit", "Dune", "Neuromancer"}

def test_compare_and_set(book_repo, db_session, alice_book):
    assert book_repo.compare_and_set(alice_book.id, "available", {"status": "borrowed"})
    db_session.commit()
    assert book_repo.get_by_id(alice_book.id).status == "borrowed"

def test_compare_and_set_stale_status(book_repo, db_session, alice_book):
    assert not book_repo.compare_and_set(alice_book.id, "borrowed", {"status": "available"})
    db_session.rollback()
    assert book_repo.get_by_id(alice_book.id).status == "available"

def test_delete_book(book_repo, db_session, alice_book):
    book_id = alice_book.id
    assert book_repo.delete_book(book_id)
    db_session.commit()
    assert db_session.query(Book).filter_by(id=book_id).first() is None

def test_delete_missing_book(book_repo):
    assert not book_repo.delete_book("missing")

def test_compare_and_set_guard_only(book_repo, db_session, alice_book):
    assert book_repo.compare_and_set(alice_book.id, "available", {})
    assert not book_repo.compare_and_set(alice_book.id, "borrowed", {})
    db_session.rollback()
    assert book_repo.get_by_id(alice_book.id).status == "available"
