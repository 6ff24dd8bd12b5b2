
from app.db.session import Base
from app.models.user import User
from app.models.book import Book, book_categories
from app.models.category import Category
from app.models.review import Review
from app.models.bookmark import Bookmark

# Registers the before_flush hook that assigns Book slugs
import app.utils.books  # noqa: E402,F401
