import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

import httpx

from admin_console.client.session import SessionHolder

logger = logging.getLogger(__name__)

ROLES = ("ADMIN", "OFFICER", "VIEWER")

# Marks an update field as "leave untouched", as opposed to an explicit None
UNSET: Any = object()


# ═══════════════════════════════════════════════════════════════════════════════
# ERRORS
# ═══════════════════════════════════════════════════════════════════════════════
class ApiError(Exception):
    def __init__(self, status_code: int, message: str, code: str | None = None, field: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.code = code
        self.field = field


class AuthenticationRequired(ApiError):
    """401: no token, bad token, expired token or bad credentials."""


class AccessDenied(ApiError):
    """403: valid token, role not allowed."""


class ValidationFailed(ApiError):
    """400: bad input or business-rule violation."""


class NotFound(ApiError):
    """404: referenced id does not exist."""


class ApiUnreachable(ApiError):
    """No HTTP response: connection refused, DNS failure or timeout."""


_ERRORS_BY_STATUS = {
    400: ValidationFailed,
    401: AuthenticationRequired,
    403: AccessDenied,
    404: NotFound,
}


# ═══════════════════════════════════════════════════════════════════════════════
# RECORDS
# ═══════════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class Department:
    id: int
    name: str
    code: str
    limitUsd: str

    @classmethod
    def from_json(cls, data: dict) -> "Department":
        return cls(id=data["id"], name=data["name"], code=data["code"], limitUsd=data["limitUsd"])


@dataclass(frozen=True)
class UserRecord:
    id: int
    name: str
    email: str
    role: str
    isActive: bool
    department: Department | None = None

    @property
    def departmentId(self) -> int | None:
        return self.department.id if self.department else None

    @classmethod
    def from_json(cls, data: dict) -> "UserRecord":
        dept = data.get("department")
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            role=data["role"],
            isActive=data["isActive"],
            department=Department.from_json(dept) if dept else None,
        )


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: str
    departmentId: int | None

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


@dataclass(frozen=True)
class LoginResult:
    accessToken: str
    user: Identity
    name: str


def total_limit(departments: Iterable[Department]) -> Decimal:
    """Sum of every department's allocated limit."""
    total = sum((Decimal(d.limitUsd or "0") for d in departments), Decimal("0"))
    return total.quantize(Decimal("0.01"))


# ═══════════════════════════════════════════════════════════════════════════════
# CLIENT
# ═══════════════════════════════════════════════════════════════════════════════
class ConsoleClient:
    """
    Thin wrapper over the admin console HTTP API.

    Every call carries the bearer token held by `session`. Any 401 clears the
    session before the error is raised.
    """

    def __init__(
        self,
        base_url: str,
        session: SessionHolder | None = None,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or SessionHolder()
        self._http = http or httpx.Client(timeout=timeout)
        self._owns_http = http is None
        self.user: Identity | None = None

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "ConsoleClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ─── Transport ────────────────────────────────────────────────────────────
    def _request(self, method: str, path: str, json: dict | None = None) -> Any:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"

        url = f"{self.base_url}{path}"
        try:
            response = self._http.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiUnreachable(0, f"Cannot reach the admin console API at {self.base_url}") from e
        if response.is_success:
            return response.json()

        try:
            body = response.json()
        except ValueError:
            body = {}
        error = body.get("error") or {}
        message = body.get("message") or response.reason_phrase or "Request failed"
        cls = _ERRORS_BY_STATUS.get(response.status_code, ApiError)

        if cls is AuthenticationRequired:
            self.session.clear()
            self.user = None
        logger.debug(f"{method} {path} -> {response.status_code}: {message}")
        raise cls(response.status_code, message, error.get("code"), error.get("field"))

    # ─── Auth ─────────────────────────────────────────────────────────────────
    def login(self, email: str, password: str) -> LoginResult:
        data = self._request("POST", "/auth/login", {"email": email, "password": password})
        self.session.set(data["accessToken"])
        user = data["user"]
        self.user = Identity(
            id=user["id"], email=user["email"], role=user["role"], departmentId=user["departmentId"],
        )
        return LoginResult(accessToken=data["accessToken"], user=self.user, name=user["name"])

    def me(self) -> Identity:
        data = self._request("GET", "/auth/me")
        self.user = Identity(
            id=data["sub"], email=data["email"], role=data["role"], departmentId=data["departmentId"],
        )
        return self.user

    def refresh(self) -> Identity | None:
        """Hydrate `user` from the stored token; a rejected token ends the session."""
        if not self.session.token:
            self.user = None
            return None
        try:
            return self.me()
        except AuthenticationRequired:
            return None

    def logout(self) -> None:
        self.session.clear()
        self.user = None

    # ─── Departments ──────────────────────────────────────────────────────────
    def list_departments(self) -> list[Department]:
        return [Department.from_json(d) for d in self._request("GET", "/departments")]

    def get_department(self, department_id: int) -> Department:
        return Department.from_json(self._request("GET", f"/departments/{department_id}"))

    def create_department(self, name: str, code: str, limit_usd: Decimal | float | None = None) -> Department:
        payload: dict[str, Any] = {"name": name, "code": code}
        if limit_usd is not None:
            payload["limitUsd"] = str(limit_usd)
        return Department.from_json(self._request("POST", "/departments", payload))

    def update_department(self, department_id: int, name: str | None = None, code: str | None = None) -> Department:
        payload = {k: v for k, v in {"name": name, "code": code}.items() if v is not None}
        return Department.from_json(self._request("PATCH", f"/departments/{department_id}", payload))

    def update_department_limit(self, department_id: int, limit_usd: Decimal | float) -> Department:
        data = self._request("PUT", f"/departments/{department_id}/limit", {"limitUsd": str(limit_usd)})
        return Department.from_json(data)

    # ─── Users ────────────────────────────────────────────────────────────────
    def list_users(self) -> list[UserRecord]:
        return [UserRecord.from_json(u) for u in self._request("GET", "/users")]

    def get_user(self, user_id: int) -> UserRecord:
        return UserRecord.from_json(self._request("GET", f"/users/{user_id}"))

    def create_user(
        self, name: str, email: str, password: str, role: str, department_id: int | None = None,
    ) -> UserRecord:
        payload: dict[str, Any] = {"name": name, "email": email, "password": password, "role": role}
        if department_id is not None:
            payload["departmentId"] = department_id
        return UserRecord.from_json(self._request("POST", "/users", payload))

    def update_user(
        self,
        user_id: int,
        name: str | None = UNSET,
        email: str | None = UNSET,
        role: str | None = UNSET,
        department_id: int | None = UNSET,
        is_active: bool | None = UNSET,
    ) -> UserRecord:
        fields = {
            "name": name,
            "email": email,
            "role": role,
            "departmentId": department_id,
            "isActive": is_active,
        }
        payload = {k: v for k, v in fields.items() if v is not UNSET}
        return UserRecord.from_json(self._request("PATCH", f"/users/{user_id}", payload))

    def reset_user_password(self, user_id: int, new_password: str) -> UserRecord:
        data = self._request("PATCH", f"/users/{user_id}/password", {"newPassword": new_password})
        return UserRecord.from_json(data)
