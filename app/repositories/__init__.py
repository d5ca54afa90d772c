from .note import NoteRepository
from .user import SqlAlchemyUserStore, UserStore, normalize_email

__all__ = ["NoteRepository", "SqlAlchemyUserStore", "UserStore", "normalize_email"]
