"""
Admin Auth API Routes

Login issues a signed session token, returned in the body (for
Authorization: Bearer use) and set as an HTTP-only cookie.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Response
from loguru import logger

from podsite.api.deps import current_session, get_codec
from podsite.config import IS_PRODUCTION, SESSION_COOKIE, SESSION_DURATION
from podsite.exceptions import AuthenticationRequired, ValidationFailed
from podsite.schemas.auth import LoginRequest, LoginResponse, SessionStatusResponse
from podsite.schemas.episode import SuccessResponse
from podsite.services.auth_service import SessionClaims, SessionTokenCodec, verify_credentials


router = APIRouter(prefix="/admin")


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=SESSION_DURATION,
        path="/",
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    response: Response,
    codec: SessionTokenCodec = Depends(get_codec),
):
    """
    Admin login.

    - 400: username or password missing
    - 401: invalid credentials
    """
    if not data.username or not data.password:
        raise ValidationFailed("Username and password are required")

    if not verify_credentials(data.username, data.password):
        raise AuthenticationRequired("Invalid credentials")

    token = codec.encode(data.username)
    set_session_cookie(response, token)
    logger.info(f"Admin session created: username={data.username}")
    return LoginResponse(token=token)


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response):
    """Clear the session cookie. Bearer tokens held by clients expire on their own."""
    response.delete_cookie(key=SESSION_COOKIE, path="/")
    return SuccessResponse()


@router.get("/session", response_model=SessionStatusResponse, response_model_exclude_none=True)
async def session_status(claims: Optional[SessionClaims] = Depends(current_session)):
    """Report whether the caller holds a valid admin session."""
    if claims is None:
        return SessionStatusResponse(authenticated=False)
    return SessionStatusResponse(
        authenticated=True,
        username=claims.username,
        expires_at=claims.expires_at,
    )
