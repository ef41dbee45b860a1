"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import JwtVerificationService

# Mail Services
from .mail.mail_service import ConsoleMailer, HttpMailer, Mailer, get_mailer

# Image Host
from .media.image_host import CloudinaryImageHost, ImageHost

# User Services
from .user.user_account import AuthResult, UserAccountService

__all__ = [
    # Database Service
    "DbSessionService",
    # JWT Services
    "JwtGeneratorService",
    "JwtVerificationService",
    # Mail Services
    "ConsoleMailer",
    "HttpMailer",
    "Mailer",
    "get_mailer",
    # Image Host
    "CloudinaryImageHost",
    "ImageHost",
    # User Services
    "AuthResult",
    "UserAccountService",
]
