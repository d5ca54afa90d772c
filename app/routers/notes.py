"""Note routes: CRUD over the current user's notes."""
from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.deps import CurrentUser, get_note_service
from app.schemas.base import MessageResponse
from app.schemas.note import (
    NoteInSchema,
    NoteListResponse,
    NoteMutationResponse,
    NoteOutSchema,
    NoteResponse,
)
from app.services.notes import NoteService

router = APIRouter(prefix="/api/notes", tags=["notes"])

Notes = Annotated[NoteService, Depends(get_note_service)]


@router.get("", response_model=NoteListResponse)
async def list_notes(user: CurrentUser, notes: Notes):
    """Current user's notes, newest first."""
    items = await notes.list_notes(user.id)
    return NoteListResponse(notes=[NoteOutSchema.model_validate(n) for n in items])


@router.post("", response_model=NoteMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_note(body: NoteInSchema, user: CurrentUser, notes: Notes):
    note = await notes.create_note(user.id, body.title, body.content)
    return NoteMutationResponse(message="Note created successfully", note=NoteOutSchema.model_validate(note))


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(note_id: str, user: CurrentUser, notes: Notes):
    note = await notes.get_note(user.id, note_id)
    return NoteResponse(note=NoteOutSchema.model_validate(note))


@router.put("/{note_id}", response_model=NoteMutationResponse)
async def update_note(note_id: str, body: NoteInSchema, user: CurrentUser, notes: Notes):
    note = await notes.update_note(user.id, note_id, body.title, body.content)
    return NoteMutationResponse(message="Note updated successfully", note=NoteOutSchema.model_validate(note))


@router.delete("/{note_id}", response_model=MessageResponse)
async def delete_note(note_id: str, user: CurrentUser, notes: Notes):
    await notes.delete_note(user.id, note_id)
    return MessageResponse(message="Note deleted successfully")
