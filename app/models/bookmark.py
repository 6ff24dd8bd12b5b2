
import uuid
from sqlalchemy import Column, DateTime, func, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base

class Bookmark(Base):
    __tablename__ = "bookmarks"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_bookmarks_user_book"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    book_id = Column(Uuid(as_uuid=True), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True)
    bookmarked_at = Column(DateTime, nullable=False, server_default=func.now())

    user = relationship("User", back_populates="bookmarks")
    book = relationship("Book", back_populates="bookmarks")
