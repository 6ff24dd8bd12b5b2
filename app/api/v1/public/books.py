from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload, selectinload

from app.db.session import get_db
from app.models.book import Book, BookCondition
from app.models.review import Review
from app.schemas.book import Book as BookSchema
from app.schemas.review import Review as ReviewSchema
from app.schemas.common import PaginatedResponse
from app.utils.books import filter_books
from app.utils.reviews import average_rating, average_ratings

router = APIRouter(prefix="/books", tags=["Books"])


def _get_by_slug(db: Session, slug: str) -> Book:
    book = db.query(Book).filter(Book.slug == slug).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.get("/", response_model=PaginatedResponse[BookSchema])
def list_books(
    title: Optional[str] = None,
    author: Optional[str] = None,
    condition: Optional[BookCondition] = None,
    order_title: Optional[str] = Query(None, alias="order[title]", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(30, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = filter_books(db, title=title, author=author, condition=condition, order_title=order_title)

    total = query.count()
    books = (
        query.options(selectinload(Book.categories))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    ratings = average_ratings(db, [b.id for b in books])
    results = []
    for b in books:
        item = BookSchema.model_validate(b)
        item.rating = ratings.get(b.id)
        results.append(item)

    return PaginatedResponse(
        data=results,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.get("/{slug}", response_model=BookSchema)
def get_book(slug: str, db: Session = Depends(get_db)):
    book = _get_by_slug(db, slug)
    item = BookSchema.model_validate(book)
    item.rating = average_rating(db, book.id)
    return item


@router.get("/{slug}/reviews", response_model=PaginatedResponse[ReviewSchema])
def list_reviews(
    slug: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db),
):
    """Return paginated reviews for a book, newest first."""
    book = _get_by_slug(db, slug)

    query = db.query(Review).filter(Review.book_id == book.id)
    total = query.count()
    reviews = (
        query.options(joinedload(Review.user))
        .order_by(Review.published_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return PaginatedResponse(
        data=reviews,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )
