from pydantic import BaseModel, Field, field_validator
from typing import Annotated, Optional, Union
from datetime import datetime

BookId = Union[int, str]
NonEmptyStr = Annotated[str, Field(min_length=1)]
Pages = Annotated[int, Field(gt=0)]
Year = Annotated[int, Field(ge=0, le=2100)]


class BookCreate(BaseModel):
    title: NonEmptyStr
    author: NonEmptyStr
    pages: Pages
    year: Year


class BookUpdate(BaseModel):
    """Partial update: absent fields are left alone, present ones must be valid."""

    title: Optional[NonEmptyStr] = None
    author: Optional[NonEmptyStr] = None
    pages: Optional[Pages] = None
    year: Optional[Year] = None

    @field_validator("title", "author", "pages", "year")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("must not be null")
        return value

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class BookOwnership(BaseModel):
    id: BookId
    owner_id: str


class BookResponse(BaseModel):
    id: BookId
    title: str
    author: str
    pages: int
    year: int
    owner_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class BookMutationResponse(BaseModel):
    message: str
    book: BookResponse


class MessageResponse(BaseModel):
    message: str
