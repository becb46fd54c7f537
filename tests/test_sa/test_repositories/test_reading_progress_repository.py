# tests/test_sa/test_repositories/test_reading_progress_repository.py
import pytest
from bookshelf.sa.repositories import ReadingProgressRepository

@pytest.fixture
def progress_repo(db_session):
    """Fixture to create a ReadingProgressRepository instance"""
    return ReadingProgressRepository(db_session)

def test_upsert_creates_entry(progress_repo, alice_book, bob):
    progress = progress_repo.upsert("bob", alice_book.id)
    assert progress.status == "want_to_read"
    assert progress.total_pages == 310
    assert progress.started_date is None

def test_start_reading_stamps_started_date(progress_repo, alice_book, bob, now):
    progress = progress_repo.upsert("bob", alice_book.id, status="reading", pages_read=20, now=now)
    assert progress.status == "reading"
    assert progress.pages_read == 20
    assert progress.started_date is not None
    assert progress.finished_date is None

def test_complete_fills_pages(progress_repo, alice_book, bob, now):
    progress_repo.upsert("bob", alice_book.id, status="reading", pages_read=20, now=now)
    progress = progress_repo.upsert("bob", alice_book.id, status="completed", now=now)
    assert progress.pages_read == 310
    assert progress.finished_date is not None
    assert len(progress_repo.list_for_user("bob")) == 1

def test_pages_read_cannot_exceed_total(progress_repo, alice_book, bob):
    with pytest.raises(ValueError, match="exceed"):
        progress_repo.upsert("bob", alice_book.id, pages_read=400)
    assert progress_repo.get("bob", alice_book.id) is None

def test_invalid_status(progress_repo, alice_book, bob):
    with pytest.raises(ValueError, match="Invalid reading status"):
        progress_repo.upsert("bob", alice_book.id, status="skimming")

def test_missing_book(progress_repo, bob):
    with pytest.raises(ValueError, match="not found"):
        progress_repo.upsert("bob", "missing")

def test_list_for_user_by_status(progress_repo, library, bob):
    hobbit, dune = library[0], library[1]
    progress_repo.upsert("bob", hobbit.id, status="reading")
    progress_repo.upsert("bob", dune.id)
    reading = progress_repo.list_for_user("bob", status="reading")
    assert [p.book.title for p in reading] == ["The Hobbit"]
    assert len(progress_repo.list_for_user("bob")) == 2

def test_reader_must_have_profile(progress_repo, db_session, alice_book):
    with pytest.raises(ValueError, match="No profile"):
        progress_repo.upsert("ghost", alice_book.id, status="reading")
    assert progress_repo.get("ghost", alice_book.id) is None
