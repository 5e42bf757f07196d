"""
Post, comment and like request schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List


class PostCreate(BaseModel):
    """Status message creation payload"""
    body: str = Field("", max_length=65535, description="Message text")
    public: bool = Field(False, description="Visible to everyone when true")
    photos: List[str] = Field(default_factory=list, description="Guids of the author's photos to attach")
    aspect_ids: List[int] = Field(default_factory=list, description="Aspects to share with; empty means all")

    @field_validator("body")
    @classmethod
    def strip_body(cls, v):
        return v.strip()


class CommentCreate(BaseModel):
    """Comment creation payload"""
    body: str = Field(..., min_length=1, max_length=65535)

    @field_validator("body")
    @classmethod
    def validate_body(cls, v):
        """Reject comments that are only whitespace"""
        if v.strip() == "":
            raise ValueError("Comment cannot be empty or just whitespace")
        return v.strip()
