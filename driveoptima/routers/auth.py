from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response

from driveoptima.config import Settings, get_settings
from driveoptima.schemas.session import LoginResponse
from driveoptima.services.session import session_service

router = APIRouter(prefix="/api/auth", tags=["auth"])

# The signed-in identity is the only state that survives a reload
COOKIE_MAX_AGE = 60 * 60 * 24 * 365


def optional_user(request: Request, settings: Settings = Depends(get_settings)) -> Optional[str]:
    return request.cookies.get(settings.cookie_name) or None


def require_user(user: Optional[str] = Depends(optional_user)) -> str:
    """
    Resolve the signed-in user from the identity cookie
    """
    if not user:
        raise HTTPException(status_code=401, detail="Not signed in")
    return user


@router.post("/login", response_model=LoginResponse)
async def login(response: Response, settings: Settings = Depends(get_settings)):
    """
    Demo login: sign in as the configured demo user without credentials
    """
    user = settings.demo_user
    await session_service.sign_in(user)
    response.set_cookie(settings.cookie_name, user, max_age=COOKIE_MAX_AGE, samesite="lax")
    return LoginResponse(user=user)


@router.post("/logout", response_model=LoginResponse)
async def logout(
    response: Response,
    user: Optional[str] = Depends(optional_user),
    settings: Settings = Depends(get_settings),
):
    """
    Sign out and discard the report, selection and completed actions
    """
    if user:
        await session_service.sign_out(user)
    response.delete_cookie(settings.cookie_name)
    return LoginResponse(user=None)


@router.get("/me", response_model=LoginResponse)
async def me(user: Optional[str] = Depends(optional_user)):
    return LoginResponse(user=user)
