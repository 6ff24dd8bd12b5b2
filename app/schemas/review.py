from typing import Optional
from pydantic import BaseModel, UUID4
from datetime import date, datetime

from app.schemas.user import UserSummary


class Review(BaseModel):
    id: UUID4
    book_id: UUID4
    user: UserSummary
    body: str
    rating: int
    letter: Optional[str] = None
    published_at: datetime

    class Config:
        from_attributes = True


# GET /admin/reviews/most-reviewed
class MostReviewedPeriod(BaseModel):
    granularity: str     # "day" | "month"
    period: date         # the day, or the first day of the month
    review_count: int
