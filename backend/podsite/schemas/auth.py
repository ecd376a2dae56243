"""
Auth Schemas

Pydantic models for admin login and session status.
"""
from datetime import datetime
from typing import Optional

from podsite.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Admin login request (fields are checked by the endpoint, not the schema)"""

    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    """Admin login response"""

    success: bool = True
    token: str


class SessionStatusResponse(CamelModel):
    """Current admin session status"""

    authenticated: bool
    username: Optional[str] = None
    expires_at: Optional[datetime] = None


class UploadResponse(CamelModel):
    """Stored image location"""

    url: str
