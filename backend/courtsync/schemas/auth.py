"""
Pydantic schemas for administrator authentication.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr

from courtsync.schemas.shell import AppView


class AdminCredentials(BaseModel):
    email: EmailStr
    password: str


class AdminIdentity(BaseModel):
    uid: str
    email: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class SessionInfo(BaseModel):
    uid: str
    email: str
    initial: str
    active_view: AppView
    expires_at: datetime
