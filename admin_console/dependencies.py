import enum

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from admin_console.models.role import RoleName
from admin_console.schemas.auth import TokenClaims
from admin_console.services.auth_service import auth_service
from admin_console.utils.exceptions import UnauthorizedException, ForbiddenException

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


# ─── Route Permissions ────────────────────────────────────────────────────────
class Permission(str, enum.Enum):
    AUTH_ME           = "auth:me"
    DEPARTMENTS_READ  = "departments:read"
    DEPARTMENTS_WRITE = "departments:write"
    DEPARTMENTS_LIMIT = "departments:limit"
    USERS_ADMIN       = "users:admin"


# Allow-list per permission. None admits any authenticated caller.
ROUTE_ROLES: dict[Permission, frozenset[RoleName] | None] = {
    Permission.AUTH_ME:           None,
    Permission.DEPARTMENTS_READ:  None,
    Permission.DEPARTMENTS_WRITE: frozenset({RoleName.ADMIN}),
    Permission.DEPARTMENTS_LIMIT: frozenset({RoleName.ADMIN}),
    Permission.USERS_ADMIN:       frozenset({RoleName.ADMIN}),
}


def is_allowed(permission: Permission, role: RoleName) -> bool:
    allowed = ROUTE_ROLES[permission]
    return allowed is None or role in allowed


# ─── Get Current Identity ─────────────────────────────────────────────────────
def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> TokenClaims:
    """
    Validate the JWT Bearer token and return the identity it asserts.
    Stateless: the database is not consulted.
    Raises 401 if token is missing, invalid, or expired.
    """
    if not credentials:
        raise UnauthorizedException("No authentication token provided")

    return auth_service.identify(credentials.credentials)


# ─── Role Guards ──────────────────────────────────────────────────────────────
def require_permission(permission: Permission):
    """
    Factory that returns a FastAPI dependency admitting only the roles
    listed for `permission` in ROUTE_ROLES.

    Usage:
        @router.post("/departments")
        def create(claims: TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_WRITE))):
            ...
    """
    def dependency(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
        if not is_allowed(permission, claims.role):
            allowed = sorted(r.value for r in ROUTE_ROLES[permission])
            raise ForbiddenException(f"This action requires one of these roles: {allowed}")
        return claims
    return dependency
