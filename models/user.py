"""
Provides the User model for the application's database schema.

Users register with email and password or sign in with Google. The Todoist
linkage columns are reserved for per-user task accounts; the checklist flow
currently writes to a single shared Todoist account and leaves them empty.

Attributes
----------
email : sqlalchemy.Column
    Unique, validated email address.
password : sqlalchemy.Column
    bcrypt hash of the password. Plaintext is never stored.
name : sqlalchemy.Column
    Display name.
google_id : sqlalchemy.Column
    Google account subject, set on first Google sign-in.
"""

from sqlalchemy import Column, DateTime, String

from .base import BaseModel


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar password: Hashed password.
    :type password: str
    :ivar name: Display name of the user.
    :type name: str
    :ivar google_id: Google account subject, unique when present.
    :type google_id: str
    """

    __tablename__ = "users"

    email = Column(String(255), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    google_id = Column(String(255), unique=True, nullable=True)

    # Todoist account linkage
    todoist_id = Column(String(255), unique=True, nullable=True)
    todoist_access_token = Column(String(512), nullable=True)
    todoist_refresh_token = Column(String(512), nullable=True)
    todoist_token_expires_at = Column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"
