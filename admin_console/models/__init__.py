"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Order matters: import parent tables before child tables.
"""

from admin_console.models.role import RoleName
from admin_console.models.department import Department
from admin_console.models.user import User

__all__ = [
    "RoleName",
    "Department",
    "User",
]
