from pydantic import BaseModel, UUID4


# Compact user for nested responses (review author)
class UserSummary(BaseModel):
    id: UUID4
    first_name: str
    last_name: str

    class Config:
        from_attributes = True
