from pydantic import BaseModel, Field
from typing import Optional
from uuid import UUID


class ReviewCreateRequest(BaseModel):
    appointment_id: UUID
    rating: int = Field(..., description="1-5 stars")
    comment: Optional[str] = Field(None, max_length=2000)
    is_public: bool = True
