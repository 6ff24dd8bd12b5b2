from pydantic import BaseModel, UUID4, Field


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)


class Category(BaseModel):
    id: UUID4
    name: str

    class Config:
        from_attributes = True
