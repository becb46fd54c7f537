"""Best-effort book metadata lookup by ISBN, used to pre-fill new books."""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from bookshelf.config import settings

logger = logging.getLogger(__name__)

_YEAR_PATTERN = re.compile(r'(\d{4})')


@dataclass
class IsbnMetadata:
    isbn: str
    title: str
    authors: List[str] = field(default_factory=list)
    pages: Optional[int] = None
    publication_year: Optional[int] = None
    description: Optional[str] = None
    cover_image_url: Optional[str] = None


def normalize_isbn(isbn: str) -> Optional[str]:
    """Strip hyphens and spaces; return None unless 10 or 13 characters remain."""
    if not isbn:
        return None
    cleaned = re.sub(r'[\s-]', '', isbn).upper()
    if re.fullmatch(r'\d{9}[\dX]', cleaned) or re.fullmatch(r'\d{13}', cleaned):
        return cleaned
    return None


def _parse_year(publish_date: Optional[str]) -> Optional[int]:
    if not publish_date:
        return None
    match = _YEAR_PATTERN.search(publish_date)
    return int(match.group(1)) if match else None


def _parse_description(data: dict) -> Optional[str]:
    # Open Library returns either a string or {"type": ..., "value": ...}
    description = data.get('description') or data.get('notes')
    if isinstance(description, dict):
        description = description.get('value')
    return description or None


def parse_open_library(isbn: str, data: dict) -> Optional[IsbnMetadata]:
    """Turn an Open Library ``jscmd=data`` record into IsbnMetadata."""
    title = data.get('title')
    if not title:
        return None
    cover = data.get('cover') or {}
    return IsbnMetadata(
        isbn=isbn,
        title=title,
        authors=[a.get('name') for a in data.get('authors', []) if a.get('name')],
        pages=data.get('number_of_pages'),
        publication_year=_parse_year(data.get('publish_date')),
        description=_parse_description(data),
        cover_image_url=cover.get('large') or cover.get('medium'),
    )


def lookup_isbn(isbn: str, timeout: Optional[float] = None) -> Optional[IsbnMetadata]:
    """
    Look up a book on Open Library.

    Any failure (bad ISBN, network error, unexpected payload) is logged and
    reported as None so manual entry is never blocked.

    Args:
        isbn: ISBN-10 or ISBN-13, hyphens allowed
        timeout: Request timeout in seconds (defaults to settings)

    Returns:
        IsbnMetadata if the book was found, None otherwise
    """
    normalized = normalize_isbn(isbn)
    if not normalized:
        logger.info("Not a valid ISBN: %r", isbn)
        return None

    key = f"ISBN:{normalized}"
    try:
        response = requests.get(
            settings.isbn_lookup_url,
            params={'bibkeys': key, 'format': 'json', 'jscmd': 'data'},
            timeout=timeout or settings.isbn_lookup_timeout
        )
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        logger.warning("ISBN lookup for %s failed: %s", normalized, e)
        return None
    except ValueError as e:
        logger.warning("ISBN lookup for %s returned invalid JSON: %s", normalized, e)
        return None

    data = payload.get(key) if isinstance(payload, dict) else None
    if not data:
        logger.info("ISBN %s not found", normalized)
        return None
    return parse_open_library(normalized, data)
