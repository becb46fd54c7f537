# tests/conftest.py
import os
import sys
import pytest
from pathlib import Path
from datetime import datetime, timedelta, UTC
from sqlalchemy.sql import text

# Add project root to Python path
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from sqlalchemy.orm import Session
from bookshelf.sa.models import Profile, Book, BorrowRequest
from bookshelf.sa.database import Database
from bookshelf.lending import LendingService

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory):
    """Create a temporary directory for the test database."""
    test_dir = tmp_path_factory.mktemp("test_db")
    return str(test_dir / "test_bookshelf.db")

@pytest.fixture(scope="session")
def database(test_db_path):
    """Create a test database instance"""
    db = Database(f"sqlite:///{test_db_path}")

    # Drop all tables and recreate schema
    db.drop_db()
    db.init_db()

    yield db

    db.engine.dispose()
    try:
        os.remove(test_db_path)
    except OSError:
        pass  # Ignore errors if file doesn't exist

@pytest.fixture(scope="function")
def db_session(database):
    """Create a new database session for a test"""
    session: Session = database.get_session()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture(autouse=True)
def cleanup_db(db_session):
    """Clean up database tables before each test"""
    # Delete all data from tables in reverse order of dependencies
    db_session.execute(text("DELETE FROM notification"))
    db_session.execute(text("DELETE FROM reading_progress"))
    db_session.execute(text("DELETE FROM borrow_request"))
    db_session.execute(text("DELETE FROM book"))
    db_session.execute(text("DELETE FROM profile"))
    db_session.commit()
    yield
    # Clean up after test as well
    db_session.rollback()

@pytest.fixture
def sleeps():
    """Delays the service asked to sleep for, instead of sleeping."""
    return []

@pytest.fixture
def service(db_session, sleeps):
    """A lending service with a fixed clock and no real sleeping."""
    return LendingService(
        db_session,
        clock=lambda: NOW,
        loan_period_days=14,
        retry_attempts=2,
        retry_backoff=0.2,
        sleep=sleeps.append
    )

@pytest.fixture
def alice(db_session):
    """A lender."""
    profile = Profile(user_id="alice", full_name="Alice Lender", email="alice@example.com", location="Leeds")
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def bob(db_session):
    """A borrower."""
    profile = Profile(user_id="bob", full_name="Bob Borrower", email="bob@example.com")
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def carol(db_session):
    """A second borrower."""
    profile = Profile(user_id="carol", full_name="Carol Reader", email="carol@example.com")
    db_session.add(profile)
    db_session.commit()
    return profile

@pytest.fixture
def alice_book(db_session, alice):
    """An available book owned by alice."""
    book = Book(
        owner_id=alice.user_id,
        title="The Hobbit",
        author="J.R.R. Tolkien",
        genre="Fantasy",
        pages=310,
        condition="good",
        status="available"
    )
    db_session.add(book)
    db_session.commit()
    return book

@pytest.fixture
def library(db_session, alice, bob):
    """A few books for both users with increasing creation times."""
    base = datetime(2025, 1, 1, tzinfo=UTC)
    rows = [
        ("alice", "The Hobbit", "J.R.R. Tolkien", "Fantasy", "available"),
        ("alice", "Dune", "Frank Herbert", "Science Fiction", "available"),
        ("alice", "Emma", "Jane Austen", "Classic", "not_available"),
        ("bob", "Neuromancer", "William Gibson", "Science Fiction", "available"),
        ("bob", "Persuasion", "Jane Austen", "Classic", "for_sale"),
    ]
    books = []
    for i, (owner, title, author, genre, status) in enumerate(rows):
        book = Book(
            owner_id=owner,
            title=title,
            author=author,
            genre=genre,
            status=status,
            created_at=base + timedelta(days=i)
        )
        db_session.add(book)
        books.append(book)
    db_session.commit()
    return books

@pytest.fixture
def pending_request(db_session, alice_book, bob):
    """A pending request from bob for alice's book."""
    request = BorrowRequest(
        book_id=alice_book.id,
        borrower_id=bob.user_id,
        lender_id=alice_book.owner_id,
        status="pending",
        requested_date=NOW,
        notes="Can I borrow this?"
    )
    db_session.add(request)
    db_session.commit()
    return request

@pytest.fixture
def now():
    """The time the service fixture's clock returns."""
    return NOW
