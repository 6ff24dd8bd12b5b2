
from app.schemas.common import PaginatedResponse
from app.schemas.user import UserSummary
from app.schemas.category import Category, CategoryCreate
from app.schemas.book import Book, AdminBook, BookCreate, BookUpdate
from app.schemas.review import Review, MostReviewedPeriod
