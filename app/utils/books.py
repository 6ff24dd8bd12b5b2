
import logging
from typing import Callable, Optional
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.book import Book
from app.utils.slug import SLUG_PATTERN, compute_slug

logger = logging.getLogger(__name__)


class SlugConflictError(Exception):
    """The book could not be stored because its slug (or source URL) is already taken."""

    def __init__(self, slug: Optional[str]):
        self.slug = slug
        super().__init__(f"Slug '{slug}' is already in use")


def book_slug_exists(db: Session, candidate: str, excluding_id: Optional[UUID] = None) -> bool:
    """True when another book already owns `candidate`."""
    query = db.query(Book.id).filter(Book.slug == candidate)
    if excluding_id is not None:
        query = query.filter(Book.id != excluding_id)
    return query.first() is not None


def assign_book_slugs(db: Session, books) -> None:
    """
    Fill in slugs for the given pending/dirty books.

    Slugs handed out earlier in the same batch count as taken, since those
    rows are not in the database yet.
    """
    claimed = set()
    with db.no_autoflush:
        for book in books:
            def exists(candidate: str, _id=book.id) -> bool:
                return candidate in claimed or book_slug_exists(db, candidate, excluding_id=_id)

            slug = compute_slug(book.slug, book.title, exists)
            if slug != book.slug:
                logger.debug("Assigned slug '%s' to book '%s'.", slug, book.title)
                book.slug = slug
            elif not SLUG_PATTERN.match(slug):
                raise ValueError(f"Invalid slug '{slug}': only a-z, 0-9 and hyphens are allowed")
            claimed.add(book.slug)


@event.listens_for(Session, "before_flush")
def _compute_slugs_before_flush(session: Session, flush_context, instances) -> None:
    books = [obj for obj in session.new if isinstance(obj, Book)]
    books += [obj for obj in session.dirty if isinstance(obj, Book) and session.is_modified(obj)]
    if books:
        assign_book_slugs(session, books)


def save_book(db: Session, apply: Callable[[], Book]) -> Book:
    """
    Stage a create/update with `apply` and commit it.

    The slug pre-check can race with a concurrent writer; the unique index is
    the real guard. On a constraint violation the transaction is rolled back
    and `apply` runs once more against the fresh set of existing slugs.
    """
    for attempt in (1, 2):
        book = apply()
        try:
            db.commit()
        except IntegrityError as exc:
            # Read before rollback expires the book and reloads the stored slug
            slug = book.slug
            db.rollback()
            if attempt == 1:
                logger.warning("Constraint violation saving book '%s', retrying: %s", slug, exc.orig)
                continue
            logger.error("Constraint violation saving book '%s' after retry.", slug)
            raise SlugConflictError(slug) from exc
        db.refresh(book)
        return book


def filter_books(
    db: Session,
    title: Optional[str] = None,
    author: Optional[str] = None,
    condition=None,
    order_title: Optional[str] = None,
):
    """Book query with the list filters shared by the public and admin collections."""
    query = db.query(Book)
    if title:
        query = query.filter(Book.title.ilike(f"%{title}%"))
    if author:
        query = query.filter(Book.author.ilike(f"%{author}%"))
    if condition:
        query = query.filter(Book.condition == condition)
    if order_title == "desc":
        query = query.order_by(Book.title.desc(), Book.id)
    else:
        query = query.order_by(Book.title.asc(), Book.id)
    return query
