from sqlalchemy import Column, Integer, String, Boolean, Enum, ForeignKey, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from admin_console.database import Base
from admin_console.models.role import RoleName


class User(Base):
    __tablename__ = "users"

    id           = Column(Integer, primary_key=True, index=True)
    name         = Column(String(100), nullable=False)
    email        = Column(String(150), unique=True, nullable=False, index=True)
    passwordHash = Column("password_hash", String(255), nullable=False)
    role         = Column(Enum(RoleName, name="user_role"), nullable=False)
    departmentId = Column("department_id", Integer, ForeignKey("departments.id"), nullable=True)
    isActive     = Column("is_active", Boolean, default=True, nullable=False)
    createdAt    = Column("created_at", TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt    = Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now(),
                          onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    department = relationship("Department", back_populates="users", lazy="joined")

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"
