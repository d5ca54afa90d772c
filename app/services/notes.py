"""Note CRUD scoped to the owning user."""
from app.core.errors import NotFoundError
from app.models.note import Note
from app.repositories.note import NoteRepository


class NoteService:
    """Another user's note is reported exactly like a missing one."""

    def __init__(self, repo: NoteRepository):
        self.repo = repo

    async def list_notes(self, owner_id: str) -> list[Note]:
        return await self.repo.list_for_owner(owner_id)

    async def get_note(self, owner_id: str, note_id: str) -> Note:
        note = await self.repo.get_for_owner(note_id, owner_id)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def create_note(self, owner_id: str, title: str, content: str) -> Note:
        return await self.repo.create(owner_id, title, content)

    async def update_note(self, owner_id: str, note_id: str, title: str, content: str) -> Note:
        note = await self.get_note(owner_id, note_id)
        return await self.repo.update(note, title, content)

    async def delete_note(self, owner_id: str, note_id: str) -> None:
        note = await self.get_note(owner_id, note_id)
        await self.repo.delete(note)
