from app.schemas.auth import (
    LoginRequest,
    OtpSentResponse,
    ResendOtpRequest,
    SignupRequest,
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from app.schemas.base import MessageResponse
from app.schemas.note import (
    NoteInSchema,
    NoteListResponse,
    NoteMutationResponse,
    NoteOutSchema,
    NoteResponse,
)
from app.schemas.user import ProfileResponse, ProfileSchema, PublicUserSchema

__all__ = [
    "LoginRequest",
    "MessageResponse",
    "NoteInSchema",
    "NoteListResponse",
    "NoteMutationResponse",
    "NoteOutSchema",
    "NoteResponse",
    "OtpSentResponse",
    "ProfileResponse",
    "ProfileSchema",
    "PublicUserSchema",
    "ResendOtpRequest",
    "SignupRequest",
    "VerifyOtpRequest",
    "VerifyOtpResponse",
]
