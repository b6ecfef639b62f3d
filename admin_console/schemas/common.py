from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel


# ─── Error Detail (per field) ──────────────────────────────────────────────────
class ErrorDetail(BaseModel):
    field: str
    message: str


# ─── Error Body ───────────────────────────────────────────────────────────────
class ErrorBody(BaseModel):
    code: str
    details: list[ErrorDetail] | None = None
    field: str | None = None


# ─── Error Response ───────────────────────────────────────────────────────────
class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: ErrorBody


# Shared OpenAPI documentation for routers
ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Validation error"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
    403: {"model": ErrorResponse, "description": "Role not allowed"},
    404: {"model": ErrorResponse, "description": "Record not found"},
}


# ─── Helper Functions ─────────────────────────────────────────────────────────
CENTS = Decimal("0.01")


def to_cents(value) -> Decimal:
    """Quantize a money amount to two decimal places."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_usd(value) -> str:
    """Render a stored money amount as a fixed two-decimal string, e.g. "500.00"."""
    return str(to_cents(value if value is not None else 0))


# ─── Email ────────────────────────────────────────────────────────────────────
def _check_email(v: str) -> str:
    # Format check only: the address is stored and matched exactly as given.
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}") from e
    return v


EmailAddress = Annotated[str, AfterValidator(_check_email)]
