import logging

from sqlalchemy.orm import Session

from admin_console.models.user import User
from admin_console.models.role import RoleName
from admin_console.models.department import Department
from admin_console.schemas.common import format_usd
from admin_console.schemas.user import UserCreateRequest, UserUpdateRequest
from admin_console.utils.security import hash_password
from admin_console.utils.exceptions import (
    NotFoundException, DuplicateEntryException, ValidationException
)

logger = logging.getLogger(__name__)


def serialize_user(u: User) -> dict:
    dept = u.department
    return {
        "id":           u.id,
        "name":         u.name,
        "email":        u.email,
        "role":         u.role.value,
        "isActive":     u.isActive,
        "departmentId": dept.id if dept else None,
        "department":   {
            "id":       dept.id,
            "name":     dept.name,
            "code":     dept.code,
            "limitUsd": format_usd(dept.limitUsd),
        } if dept else None,
        "createdAt":    u.createdAt.isoformat() if u.createdAt else None,
        "updatedAt":    u.updatedAt.isoformat() if u.updatedAt else None,
    }


class UserService:

    def _get_or_404(self, db: Session, user_id: int) -> User:
        u = db.query(User).filter(User.id == user_id).first()
        if not u:
            raise NotFoundException("User")
        return u

    def _resolve_department(self, db: Session, department_id: int) -> Department:
        d = db.query(Department).filter(Department.id == department_id).first()
        if not d:
            raise ValidationException("Department not found", field="departmentId")
        return d

    def find_by_email(self, db: Session, email: str) -> User | None:
        return db.query(User).filter(User.email == email).first()

    # ─── List ─────────────────────────────────────────────────────────────────
    def list_users(self, db: Session) -> list[dict]:
        users = db.query(User).order_by(User.id.asc()).all()
        return [serialize_user(u) for u in users]

    # ─── Get by ID ────────────────────────────────────────────────────────────
    def get_user(self, db: Session, user_id: int) -> dict:
        return serialize_user(self._get_or_404(db, user_id))

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_user(self, db: Session, data: UserCreateRequest) -> dict:
        if data.role == RoleName.OFFICER and data.departmentId is None:
            raise ValidationException("OFFICER must have a departmentId", field="departmentId")

        department = None
        if data.departmentId is not None:
            department = self._resolve_department(db, data.departmentId)

        if self.find_by_email(db, data.email):
            raise DuplicateEntryException("Email already exists", field="email")

        u = User(
            name=data.name,
            email=data.email,
            passwordHash=hash_password(data.password),
            role=data.role,
            department=department,
            isActive=True,
        )
        db.add(u)
        db.commit()
        db.refresh(u)
        logger.info(f"User created: {u.email} (id={u.id}, role={u.role.value})")
        return serialize_user(u)

    # ─── Update ───────────────────────────────────────────────────────────────
    def update_user(self, db: Session, user_id: int, data: UserUpdateRequest) -> dict:
        u = self._get_or_404(db, user_id)
        provided = data.model_fields_set

        department = u.department
        if "departmentId" in provided:
            department = (
                self._resolve_department(db, data.departmentId)
                if data.departmentId is not None else None
            )

        role = data.role if data.role is not None else u.role
        if role == RoleName.OFFICER and department is None:
            raise ValidationException("OFFICER must have a department", field="departmentId")

        if data.email is not None and data.email != u.email:
            other = db.query(User).filter(User.email == data.email, User.id != user_id).first()
            if other:
                raise DuplicateEntryException("Email already used by another user", field="email")

        if data.name is not None:     u.name     = data.name
        if data.email is not None:    u.email    = data.email
        if data.isActive is not None: u.isActive = data.isActive
        u.role = role
        u.department = department

        db.commit()
        db.refresh(u)
        logger.info(f"User updated: {u.email} (id={u.id})")
        return serialize_user(u)

    # ─── Reset Password ───────────────────────────────────────────────────────
    def reset_password(self, db: Session, user_id: int, new_password: str) -> dict:
        u = self._get_or_404(db, user_id)
        u.passwordHash = hash_password(new_password)
        db.commit()
        db.refresh(u)
        logger.info(f"Password reset for user id={u.id}")
        return serialize_user(u)


user_service = UserService()
