
import uuid
from sqlalchemy import Column, String, DateTime, func, SmallInteger, ForeignKey, Text, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base

class Review(Base):
    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_reviews_user_book"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    rating = Column(SmallInteger, nullable=False) # 1-5
    letter = Column(String(255), nullable=True)
    published_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User")
    book = relationship("Book", back_populates="reviews")
