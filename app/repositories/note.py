from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.note import Note


class NoteRepository:
    """Note persistence. Every query is scoped to one owner."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_for_owner(self, owner_id: str) -> list[Note]:
        stmt = (
            select(Note)
            .where(Note.user_id == owner_id)
            .order_by(Note.created_at.desc(), Note.id.desc())
        )
        return list((await self.session.scalars(stmt)).all())

    async def get_for_owner(self, note_id: str, owner_id: str) -> Note | None:
        stmt = select(Note).where(Note.id == note_id, Note.user_id == owner_id)
        return (await self.session.scalars(stmt)).one_or_none()

    async def create(self, owner_id: str, title: str, content: str) -> Note:
        note = Note(user_id=owner_id, title=title, content=content)
        self.session.add(note)
        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def update(self, note: Note, title: str, content: str) -> Note:
        note.title = title
        note.content = content
        await self.session.commit()
        await self.session.refresh(note)
        return note

    async def delete(self, note: Note) -> None:
        await self.session.delete(note)
        await self.session.commit()
