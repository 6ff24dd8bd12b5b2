from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import require_admin
from app.schemas.review import MostReviewedPeriod
from app.utils.reviews import most_reviewed_day, most_reviewed_month

router = APIRouter(
    prefix="/admin/reviews",
    tags=["Admin - Reviews"],
    dependencies=[Depends(require_admin)],
)


@router.get("/most-reviewed", response_model=MostReviewedPeriod)
def get_most_reviewed(
    by: str = Query("day", pattern="^(day|month)$", description="Grouping granularity"),
    db: Session = Depends(get_db),
):
    """Day (or month) with the highest number of published reviews; the latest period wins a tie."""
    result = most_reviewed_month(db) if by == "month" else most_reviewed_day(db)
    if result is None:
        raise HTTPException(status_code=404, detail="No reviews found")
    return MostReviewedPeriod(granularity=by, period=result.period, review_count=result.review_count)
