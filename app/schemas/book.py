from typing import Optional, List
from pydantic import BaseModel, HttpUrl, TypeAdapter, UUID4, Field, ValidationError, field_validator, model_validator

from app.models.book import BookCondition, PromotionStatus
from app.schemas.category import Category

SLUG_REGEX = r"^[a-z0-9-]+$"


_http_url = TypeAdapter(HttpUrl)


def _check_https_url(value: str) -> str:
    try:
        url = _http_url.validate_python(value)
    except ValidationError as exc:
        raise ValueError(f"book must be a valid URL: {exc.errors()[0]['msg']}") from exc
    if url.scheme != "https":
        raise ValueError("book must be an https URL")
    labels = (url.host or "").split(".")
    tld = labels[-1]
    if len(labels) < 2 or not all(labels) or len(tld) < 2 or not (tld.isalpha() or tld.startswith("xn--")):
        raise ValueError("book must be an https URL with a top-level domain")
    normalized = str(url)
    if len(normalized) > 255:
        raise ValueError("book URL must be at most 255 characters")
    return normalized


class BookBase(BaseModel):
    book: str = Field(..., max_length=255, examples=["https://openlibrary.org/books/OL2055137M.json"])
    title: str = Field(..., min_length=1, examples=["Hyperion"])
    author: Optional[str] = Field(None, max_length=255, examples=["Dan Simmons"])
    condition: BookCondition
    is_promoted: bool = False
    promotion_status: PromotionStatus = PromotionStatus.NONE

    @field_validator("book")
    @classmethod
    def book_is_https_url(cls, v: str) -> str:
        return _check_https_url(v)


# POST /admin/books: leave slug unset to derive it from the title
class BookCreate(BookBase):
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_REGEX)
    category_ids: List[UUID4] = []


# PUT /admin/books/{id}: only the fields sent are applied
class BookUpdate(BaseModel):
    book: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, max_length=255)
    condition: Optional[BookCondition] = None
    is_promoted: Optional[bool] = None
    promotion_status: Optional[PromotionStatus] = None
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_REGEX)
    category_ids: Optional[List[UUID4]] = None

    @field_validator("book")
    @classmethod
    def book_is_https_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_https_url(v)

    @model_validator(mode="after")
    def required_fields_not_null(self):
        # Only slug and author may be cleared; a null slug is recomputed from the title
        for field in ("book", "title", "condition", "is_promoted", "promotion_status"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} may not be null")
        return self


# Public read shape: no promotion workflow details
class Book(BaseModel):
    id: UUID4
    book: str
    title: str
    author: Optional[str] = None
    slug: str
    condition: BookCondition
    is_promoted: bool
    categories: List[Category] = []
    rating: Optional[int] = None

    class Config:
        from_attributes = True


class AdminBook(Book):
    promotion_status: PromotionStatus
