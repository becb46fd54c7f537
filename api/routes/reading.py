# api/routes/reading.py

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from bookshelf.sa.database import get_db
from bookshelf.sa.repositories import ReadingProgressRepository
from api.deps import get_actor_id
from api.schemas.reading import ReadingProgress, ReadingProgressList, ReadingProgressUpdate

router = APIRouter(prefix="/reading", tags=["reading"])

@router.get("", response_model=ReadingProgressList)
def get_my_reading(
    status_filter: Optional[str] = Query(None, alias="status"),
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    items = ReadingProgressRepository(db).list_for_user(actor_id, status=status_filter)
    return ReadingProgressList(items=items, total=len(items))

@router.put("/{book_id}", response_model=ReadingProgress)
def update_reading(
    book_id: str,
    update: ReadingProgressUpdate,
    actor_id: str = Depends(get_actor_id),
    db: Session = Depends(get_db)
):
    """Start, update or finish tracking a book."""
    fields = update.model_dump(exclude_unset=True)
    if fields.get('status') is not None:
        fields['status'] = fields['status'].value
    try:
        return ReadingProgressRepository(db).upsert(actor_id, book_id, **fields)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
