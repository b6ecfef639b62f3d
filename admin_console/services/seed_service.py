import logging

from sqlalchemy.orm import Session

from admin_console.config import Settings, settings as default_settings
from admin_console.models.user import User
from admin_console.models.role import RoleName
from admin_console.utils.security import hash_password

logger = logging.getLogger(__name__)


def seed_first_admin(db: Session, settings: Settings = default_settings) -> User | None:
    """
    Create the first ADMIN account from ADMIN_EMAIL / ADMIN_PASSWORD.

    Runs once at startup. Does nothing when the credentials are unset or
    when any ADMIN already exists. Returns the created user, if any.
    """
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set. Skipping admin seed.")
        return None

    if db.query(User).filter(User.role == RoleName.ADMIN).first():
        logger.info("Admin already exists. Seed skipped.")
        return None

    admin = User(
        name=settings.ADMIN_NAME or "Admin",
        email=settings.ADMIN_EMAIL,
        passwordHash=hash_password(settings.ADMIN_PASSWORD),
        role=RoleName.ADMIN,
        department=None,
        isActive=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"Seeded first ADMIN user: {admin.email}")
    return admin
