from pydantic import BaseModel, Field, field_validator
from typing import Optional

from admin_console.models.role import RoleName
from admin_console.schemas.common import EmailAddress


# ─── Nested ───────────────────────────────────────────────────────────────────
class UserDepartmentOut(BaseModel):
    id:       int
    name:     str
    code:     str
    limitUsd: str


# ─── Request ──────────────────────────────────────────────────────────────────
class UserCreateRequest(BaseModel):
    name:         str = Field(max_length=100)
    email:        EmailAddress
    password:     str = Field(min_length=1)
    role:         RoleName
    departmentId: Optional[int] = Field(default=None, ge=1)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip()


class UserUpdateRequest(BaseModel):
    """
    Partial update. A field left out of the body is untouched;
    `"departmentId": null` explicitly clears the department.
    """
    name:         Optional[str] = Field(default=None, max_length=100)
    email:        Optional[EmailAddress] = None
    role:         Optional[RoleName] = None
    departmentId: Optional[int] = Field(default=None, ge=1)
    isActive:     Optional[bool] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        if v is not None and not v.strip(): raise ValueError("Name cannot be empty")
        return v.strip() if v else v


class PasswordResetRequest(BaseModel):
    newPassword: str = Field(min_length=1)


# ─── Response ─────────────────────────────────────────────────────────────────
class UserOut(BaseModel):
    id:           int
    name:         str
    email:        str
    role:         RoleName
    isActive:     bool
    departmentId: int | None = None
    department:   UserDepartmentOut | None = None
    createdAt:    str | None = None
    updatedAt:    str | None = None
