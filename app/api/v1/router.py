from fastapi import APIRouter

# Public
from app.api.v1.public.books import router as public_books_router
from app.api.v1.public.categories import router as public_categories_router

# Admin
from app.api.v1.admin.books import router as admin_books_router
from app.api.v1.admin.categories import router as admin_categories_router
from app.api.v1.admin.reviews import router as admin_reviews_router

api_router = APIRouter()

# --- Public ---
api_router.include_router(public_books_router)
api_router.include_router(public_categories_router)

# --- Admin ---
api_router.include_router(admin_books_router)
api_router.include_router(admin_categories_router)
api_router.include_router(admin_reviews_router)
