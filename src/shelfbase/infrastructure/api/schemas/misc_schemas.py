"""Pydantic schemas for comment, search, tag and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, Field


class CommentBody(BaseModel):
    text: str = Field(..., min_length=1, max_length=10000)


class CreateCommentBody(CommentBody):
    item_id: str


class CommentResponse(BaseModel):
    id: str
    item_id: str
    author_id: str
    text: str
    created_at: datetime


class SearchResultResponse(BaseModel):
    id: str
    name: str
    created_at: datetime


class UserResponse(BaseModel):
    id: str
    username: str
    fullname: str
    is_admin: bool
    blocked: bool
    created_at: datetime


class SetAdminBody(BaseModel):
    is_admin: bool


class SetBlockedBody(BaseModel):
    blocked: bool
