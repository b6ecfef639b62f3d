import enum


class RoleName(str, enum.Enum):
    ADMIN   = "ADMIN"
    OFFICER = "OFFICER"
    VIEWER  = "VIEWER"
