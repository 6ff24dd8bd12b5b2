
from app.models.user import User
from app.models.book import Book, BookCondition, PromotionStatus, book_categories
from app.models.category import Category
from app.models.review import Review
from app.models.bookmark import Bookmark
