# api/schemas/reading.py
from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from bookshelf.sa.models.enums import ReadingStatus

class ReadingProgressUpdate(BaseModel):
    status: Optional[ReadingStatus] = None
    pages_read: Optional[int] = Field(default=None, ge=0)
    total_pages: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

class ReadingProgress(BaseModel):
    id: str
    user_id: str
    book_id: str
    status: str
    pages_read: Optional[int] = None
    total_pages: Optional[int] = None
    started_date: Optional[datetime] = None
    finished_date: Optional[datetime] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class ReadingProgressList(BaseModel):
    items: List[ReadingProgress]
    total: int
