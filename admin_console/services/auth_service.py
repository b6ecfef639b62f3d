import logging

from sqlalchemy.orm import Session

from admin_console.models.user import User
from admin_console.schemas.auth import LoginRequest, TokenClaims
from admin_console.utils.security import (
    verify_password, create_access_token, verify_access_token, access_token_ttl_seconds,
)
from admin_console.utils.exceptions import UnauthorizedException

logger = logging.getLogger(__name__)


class AuthService:

    # ─── Login ────────────────────────────────────────────────────────────────
    def login(self, db: Session, data: LoginRequest) -> dict:
        """
        Exchange email + password for an access token.

        Unknown email, deactivated account and wrong password all raise the
        same UnauthorizedException so callers cannot tell them apart.
        """
        user = db.query(User).filter(User.email == data.email).first()

        if not user or not user.isActive:
            logger.info(f"Login rejected for {data.email}")
            raise UnauthorizedException("Invalid credentials")

        if not verify_password(data.password, user.passwordHash):
            logger.info(f"Login rejected for {data.email}")
            raise UnauthorizedException("Invalid credentials")

        department_id = user.department.id if user.department else None
        access_token = create_access_token(
            user.id, user.email, user.role.value, department_id,
        )
        logger.info(f"{user.email} logged in")

        return {
            "accessToken": access_token,
            "tokenType":   "Bearer",
            "expiresIn":   access_token_ttl_seconds(),
            "user": {
                "id":           user.id,
                "name":         user.name,
                "email":        user.email,
                "role":         user.role.value,
                "departmentId": department_id,
            }
        }

    # ─── Identify ─────────────────────────────────────────────────────────────
    def identify(self, token: str) -> TokenClaims:
        """Return the claims embedded in a valid access token."""
        payload = verify_access_token(token)
        try:
            return TokenClaims.model_validate(payload)
        except ValueError:
            raise UnauthorizedException("Invalid token payload")


auth_service = AuthService()
