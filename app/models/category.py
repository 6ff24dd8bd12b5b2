
import uuid
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship
from app.db.session import Base
from app.models.book import book_categories


class Category(Base):
    __tablename__ = "categories"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)

    books = relationship("Book", secondary=book_categories, back_populates="categories")
