from pydantic import BaseModel, Field

from admin_console.models.role import RoleName
from admin_console.schemas.common import EmailAddress


# ─── Request Schemas ──────────────────────────────────────────────────────────
class LoginRequest(BaseModel):
    email:    EmailAddress
    password: str = Field(min_length=6)


# ─── Response Schemas ─────────────────────────────────────────────────────────
class UserSummary(BaseModel):
    id:           int
    name:         str
    email:        str
    role:         RoleName
    departmentId: int | None = None


class LoginResponse(BaseModel):
    accessToken: str
    tokenType:   str = "Bearer"
    expiresIn:   int          # seconds
    user:        UserSummary


class TokenClaims(BaseModel):
    """Identity asserted by a verified access token."""
    sub:          int
    email:        str
    role:         RoleName
    departmentId: int | None = None
