from decimal import Decimal
from pydantic import BaseModel, Field, field_validator
from typing import Optional

MAX_LIMIT_USD = Decimal("9999999999.99")


def _not_blank(v: str, label: str) -> str:
    if not v.strip():
        raise ValueError(f"{label} cannot be empty")
    return v.strip()


# ─── Request ──────────────────────────────────────────────────────────────────
class DepartmentCreateRequest(BaseModel):
    name:     str = Field(max_length=100)
    code:     str = Field(max_length=20)
    limitUsd: Decimal = Field(default=Decimal("0"), ge=0, le=MAX_LIMIT_USD)

    @field_validator("name")
    @classmethod
    def check_name(cls, v): return _not_blank(v, "Name")

    @field_validator("code")
    @classmethod
    def check_code(cls, v): return _not_blank(v, "Code").upper()


class DepartmentUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    code: Optional[str] = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return _not_blank(v, "Name") if v is not None else v

    @field_validator("code")
    @classmethod
    def check_code(cls, v):
        return _not_blank(v, "Code").upper() if v is not None else v


class DepartmentLimitRequest(BaseModel):
    limitUsd: Decimal = Field(ge=0, le=MAX_LIMIT_USD)


# ─── Response ─────────────────────────────────────────────────────────────────
class DepartmentOut(BaseModel):
    id:        int
    name:      str
    code:      str
    limitUsd:  str
    createdAt: str | None = None
    updatedAt: str | None = None
