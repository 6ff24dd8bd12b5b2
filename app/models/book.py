
import uuid
import enum
from sqlalchemy import Column, String, Boolean, Text, Table, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import relationship
from app.core.config import settings
from app.db.session import Base


class BookCondition(str, enum.Enum):
    NEW = "https://schema.org/NewCondition"
    REFURBISHED = "https://schema.org/RefurbishedCondition"
    DAMAGED = "https://schema.org/DamagedCondition"
    USED = "https://schema.org/UsedCondition"


class PromotionStatus(str, enum.Enum):
    NONE = "none"
    PROMOTION = "promotion"
    DISCOUNT = "discount"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


book_categories = Table(
    "book_categories",
    Base.metadata,
    Column("book_id", Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Uuid(as_uuid=True), ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Book(Base):
    __tablename__ = "books"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Source URI (e.g. an OpenLibrary record); dedup key, independent of slug
    book = Column(String(255), unique=True, nullable=False)
    title = Column(Text, nullable=False)
    author = Column(String(255), nullable=True)
    # Assigned by the before_flush hook in app.utils.books
    slug = Column(String(settings.SLUG_MAX_LENGTH), unique=True, nullable=False, index=True)
    condition = Column(
        SAEnum(BookCondition, native_enum=False, length=255, values_callable=_enum_values),
        nullable=False,
    )
    is_promoted = Column(Boolean, nullable=False, default=False)
    promotion_status = Column(
        SAEnum(PromotionStatus, native_enum=False, length=32, values_callable=_enum_values),
        nullable=False,
        default=PromotionStatus.NONE,
    )

    # Relationships
    categories = relationship("Category", secondary=book_categories, back_populates="books")
    reviews = relationship("Review", back_populates="book", cascade="all, delete-orphan", passive_deletes=True)
    bookmarks = relationship("Bookmark", back_populates="book", cascade="all, delete-orphan", passive_deletes=True)
