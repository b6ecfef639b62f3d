import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from admin_console.models.department import Department
from admin_console.schemas.common import format_usd, to_cents
from admin_console.schemas.department import DepartmentCreateRequest, DepartmentUpdateRequest
from admin_console.utils.exceptions import NotFoundException, DuplicateEntryException

logger = logging.getLogger(__name__)


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_department(d: Department) -> dict:
    return {
        "id":        d.id,
        "name":      d.name,
        "code":      d.code,
        "limitUsd":  format_usd(d.limitUsd),
        "createdAt": _iso(d.createdAt),
        "updatedAt": _iso(d.updatedAt),
    }


class DepartmentService:

    def _get_or_404(self, db: Session, department_id: int) -> Department:
        d = db.query(Department).filter(Department.id == department_id).first()
        if not d:
            raise NotFoundException("Department")
        return d

    def _ensure_code_free(self, db: Session, code: str, exclude_id: int | None = None) -> None:
        q = db.query(Department).filter(Department.code == code)
        if exclude_id is not None:
            q = q.filter(Department.id != exclude_id)
        if q.first():
            raise DuplicateEntryException("Department code already exists", field="code")

    # ─── List ─────────────────────────────────────────────────────────────────
    def list_departments(self, db: Session) -> list[dict]:
        deps = db.query(Department).order_by(Department.id.asc()).all()
        return [serialize_department(d) for d in deps]

    # ─── Get by ID ────────────────────────────────────────────────────────────
    def get_department(self, db: Session, department_id: int) -> dict:
        return serialize_department(self._get_or_404(db, department_id))

    # ─── Create ───────────────────────────────────────────────────────────────
    def create_department(self, db: Session, data: DepartmentCreateRequest) -> dict:
        # name and code arrive trimmed, code uppercased
        self._ensure_code_free(db, data.code)

        d = Department(
            name=data.name,
            code=data.code,
            limitUsd=to_cents(data.limitUsd),
        )
        db.add(d)
        db.commit()
        db.refresh(d)
        logger.info(f"Department created: {d.code} (id={d.id})")
        return serialize_department(d)

    # ─── Update ───────────────────────────────────────────────────────────────
    def update_department(self, db: Session, department_id: int, data: DepartmentUpdateRequest) -> dict:
        d = self._get_or_404(db, department_id)

        if data.code is not None and data.code != d.code:
            self._ensure_code_free(db, data.code, exclude_id=d.id)

        if data.name is not None: d.name = data.name
        if data.code is not None: d.code = data.code

        db.commit()
        db.refresh(d)
        logger.info(f"Department updated: {d.code} (id={d.id})")
        return serialize_department(d)

    # ─── Update Limit ─────────────────────────────────────────────────────────
    def update_limit(self, db: Session, department_id: int, limit_usd: Decimal) -> dict:
        d = self._get_or_404(db, department_id)
        d.limitUsd = to_cents(limit_usd)
        db.commit()
        db.refresh(d)
        logger.info(f"Department {d.code} limit set to {format_usd(d.limitUsd)} USD")
        return serialize_department(d)


department_service = DepartmentService()
