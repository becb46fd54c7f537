# api/main.py
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookshelf.config import settings
from bookshelf.sa.database import db
from api.routes import books, borrow_requests, dashboard, notifications, profiles, reading

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logging.basicConfig(level=settings.log_level, format=settings.log_format)
    db.init_db()
    logger.info("Database schema ready at %s", db.engine.url)
    yield

app = FastAPI(title="Bookshelf API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(profiles.router)
app.include_router(books.router)
app.include_router(borrow_requests.router)
app.include_router(notifications.router)
app.include_router(reading.router)
app.include_router(dashboard.router)

@app.get("/")
async def root():
    return {"message": "Bookshelf API"}
