from app.services.auth import AuthResult, AuthService
from app.services.notes import NoteService
from app.services.otp import OtpService

__all__ = ["AuthResult", "AuthService", "NoteService", "OtpService"]
