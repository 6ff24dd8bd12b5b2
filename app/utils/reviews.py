from datetime import date, datetime
from typing import Dict, NamedTuple, Optional
from uuid import UUID

from sqlalchemy import func, literal_column
from sqlalchemy.orm import Session

from app.models.review import Review


class ReviewPeriod(NamedTuple):
    period: date
    review_count: int


def _day_bucket():
    return func.date(Review.published_at)


def _month_bucket(db: Session):
    """First day of the review's month, in whatever form the backend can group on."""
    if db.get_bind().dialect.name == "postgresql":
        return func.date(func.date_trunc(literal_column("'month'"), Review.published_at))
    return func.strftime("%Y-%m-01", Review.published_at)


def _as_date(value) -> date:
    # SQLite hands back ISO strings, PostgreSQL real dates
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _most_reviewed(db: Session, bucket) -> Optional[ReviewPeriod]:
    period = bucket.label("period")
    review_count = func.count(Review.id).label("review_count")
    row = (
        db.query(period, review_count)
        .group_by(period)
        .order_by(review_count.desc(), period.desc())
        .first()
    )
    if row is None:
        return None
    return ReviewPeriod(period=_as_date(row.period), review_count=row.review_count)


def most_reviewed_day(db: Session) -> Optional[ReviewPeriod]:
    """Day with the most published reviews; the latest day wins a tie."""
    return _most_reviewed(db, _day_bucket())


def most_reviewed_month(db: Session) -> Optional[ReviewPeriod]:
    """Month with the most published reviews, reported as its first day."""
    return _most_reviewed(db, _month_bucket(db))


def average_rating(db: Session, book_id: UUID) -> Optional[int]:
    """Truncated mean rating of a book, None when it has no reviews."""
    rating = db.query(func.avg(Review.rating)).filter(Review.book_id == book_id).scalar()
    return int(rating) if rating else None


def average_ratings(db: Session, book_ids) -> Dict[UUID, int]:
    """average_rating for many books in one grouped query; books without reviews are absent."""
    if not book_ids:
        return {}
    rows = (
        db.query(Review.book_id, func.avg(Review.rating))
        .filter(Review.book_id.in_(book_ids))
        .group_by(Review.book_id)
        .all()
    )
    return {book_id: int(avg) for book_id, avg in rows if avg}
