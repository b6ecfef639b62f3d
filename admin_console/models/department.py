from sqlalchemy import Column, Integer, String, Numeric, TIMESTAMP
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from admin_console.database import Base


class Department(Base):
    __tablename__ = "departments"

    id        = Column(Integer, primary_key=True, index=True)
    name      = Column(String(100), nullable=False)
    code      = Column(String(20), unique=True, nullable=False, index=True)
    limitUsd  = Column("limit_usd", Numeric(12, 2), default=0, server_default="0", nullable=False)
    createdAt = Column("created_at", TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    updatedAt = Column("updated_at", TIMESTAMP(timezone=True), server_default=func.now(),
                       onupdate=func.now(), nullable=False)

    # ─── Relationships ─────────────────────────────────────────────────────────
    users = relationship("User", back_populates="department")

    def __repr__(self):
        return f"<Department id={self.id} code={self.code}>"
