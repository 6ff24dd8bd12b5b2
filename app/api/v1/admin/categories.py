from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.api.deps import require_admin
from app.models.category import Category
from app.schemas.category import Category as CategorySchema, CategoryCreate

router = APIRouter(
    prefix="/admin/categories",
    tags=["Admin - Categories"],
    dependencies=[Depends(require_admin)],
)


@router.get("/", response_model=List[CategorySchema])
def list_categories(db: Session = Depends(get_db)):
    return db.query(Category).order_by(Category.name).all()


@router.post("/", response_model=CategorySchema, status_code=status.HTTP_201_CREATED)
def create_category(data: CategoryCreate, db: Session = Depends(get_db)):
    if db.query(Category.id).filter(Category.name == data.name).first():
        raise HTTPException(status_code=409, detail="Category already exists")
    category = Category(**data.model_dump())
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
