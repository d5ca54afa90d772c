"""Pydantic schemas for notes."""
from datetime import datetime

from pydantic import field_validator

from app.schemas.base import CamelModel

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000


class NoteInSchema(CamelModel):
    title: str
    content: str

    @field_validator("title")
    @classmethod
    def title_length(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        if len(v) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must not exceed {TITLE_MAX_LENGTH} characters")
        return v

    @field_validator("content")
    @classmethod
    def content_length(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content cannot be empty")
        if len(v) > CONTENT_MAX_LENGTH:
            raise ValueError(f"Content must not exceed {CONTENT_MAX_LENGTH} characters")
        return v


class NoteOutSchema(CamelModel):
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime


class NoteListResponse(CamelModel):
    notes: list[NoteOutSchema]


class NoteResponse(CamelModel):
    note: NoteOutSchema


class NoteMutationResponse(CamelModel):
    message: str
    note: NoteOutSchema
