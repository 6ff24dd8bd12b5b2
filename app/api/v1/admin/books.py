from uuid import UUID
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, selectinload

from app.db.session import get_db
from app.api.deps import require_admin
from app.models.book import Book, BookCondition
from app.models.category import Category
from app.schemas.book import AdminBook, BookCreate, BookUpdate
from app.schemas.common import PaginatedResponse
from app.utils.books import SlugConflictError, filter_books, save_book
from app.utils.reviews import average_rating, average_ratings
from app.utils.slug import SlugSpaceExhausted

router = APIRouter(
    prefix="/admin/books",
    tags=["Admin - Books"],
    dependencies=[Depends(require_admin)],
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_book_or_404(db: Session, id: UUID) -> Book:
    book = db.query(Book).filter(Book.id == id).first()
    if not book:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


def _load_categories(db: Session, category_ids: List[UUID]) -> List[Category]:
    if not category_ids:
        return []
    categories = db.query(Category).filter(Category.id.in_(category_ids)).all()
    missing = set(category_ids) - {c.id for c in categories}
    if missing:
        raise HTTPException(
            status_code=404,
            detail=f"Category {sorted(str(m) for m in missing)[0]} not found",
        )
    return categories


def _check_source_free(db: Session, source: str, excluding_id: Optional[UUID] = None):
    """The source URL is a dedup key: one Book per external record."""
    query = db.query(Book.id).filter(Book.book == source)
    if excluding_id is not None:
        query = query.filter(Book.id != excluding_id)
    if query.first():
        raise HTTPException(status_code=409, detail="A book with this source URL already exists")


def _save_or_409(db: Session, stage) -> Book:
    try:
        return save_book(db, stage)
    except SlugConflictError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": "Book could not be saved: slug already in use", "slug": exc.slug},
        )
    except SlugSpaceExhausted as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(exc), "slug": exc.base_slug},
        )


def _to_admin_schema(db: Session, book: Book) -> AdminBook:
    item = AdminBook.model_validate(book)
    item.rating = average_rating(db, book.id)
    return item


# ---------------------------------------------------------------------------
# Book CRUD
# ---------------------------------------------------------------------------


@router.get("/", response_model=PaginatedResponse[AdminBook])
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
        item = AdminBook.model_validate(b)
        item.rating = ratings.get(b.id)
        results.append(item)

    return PaginatedResponse(
        data=results,
        total=total,
        page=page,
        limit=limit,
        total_pages=-(-total // limit) if total else 0,
    )


@router.get("/{id}", response_model=AdminBook)
def get_book(id: UUID, db: Session = Depends(get_db)):
    return _to_admin_schema(db, _get_book_or_404(db, id))


@router.post("/", response_model=AdminBook, status_code=status.HTTP_201_CREATED)
def create_book(data: BookCreate, db: Session = Depends(get_db)):
    """
    Create a book.

    Leave `slug` out to derive it from the title; a slug starting with
    `book-` is treated as a placeholder and replaced the same way.
    """
    _check_source_free(db, data.book)
    category_ids = data.category_ids
    fields = data.model_dump(exclude={"category_ids"})

    def stage() -> Book:
        book = Book(categories=_load_categories(db, category_ids), **fields)
        db.add(book)
        return book

    return _to_admin_schema(db, _save_or_409(db, stage))


@router.put("/{id}", response_model=AdminBook)
def update_book(id: UUID, data: BookUpdate, db: Session = Depends(get_db)):
    """
    Update a book.

    A hand-authored slug survives title changes. Sending `"slug": null`
    hands the slug back to the title.
    """
    _get_book_or_404(db, id)
    if data.book is not None:
        _check_source_free(db, data.book, excluding_id=id)

    changes = data.model_dump(exclude_unset=True, exclude={"category_ids"})
    category_ids = data.category_ids

    def stage() -> Book:
        book = _get_book_or_404(db, id)
        for field, value in changes.items():
            setattr(book, field, value)
        if category_ids is not None:
            book.categories = _load_categories(db, category_ids)
        return book

    return _to_admin_schema(db, _save_or_409(db, stage))


@router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_book(id: UUID, db: Session = Depends(get_db)):
    book = _get_book_or_404(db, id)
    db.delete(book)
    db.commit()
