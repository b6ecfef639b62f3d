from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from admin_console.database import get_db
from admin_console.dependencies import Permission, require_permission
from admin_console.schemas.auth import LoginRequest, LoginResponse, TokenClaims
from admin_console.schemas.common import ERROR_RESPONSES
from admin_console.services.auth_service import auth_service

router = APIRouter(prefix="/auth", responses={401: ERROR_RESPONSES[401]})


# ─── POST /auth/login ─────────────────────────────────────────────────────────
@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    summary="Login and receive an access token",
    response_model=LoginResponse,
    responses={400: ERROR_RESPONSES[400]},
)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """
    Authenticate by email and password.
    Unknown email, deactivated account and wrong password all return the same 401.
    """
    return auth_service.login(db, data)


# ─── GET /auth/me ─────────────────────────────────────────────────────────────
@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    summary="Claims carried by the current access token",
    response_model=TokenClaims,
)
def get_me(claims: TokenClaims = Depends(require_permission(Permission.AUTH_ME))):
    return claims
