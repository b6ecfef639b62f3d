from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from admin_console.database import get_db
from admin_console.dependencies import Permission, require_permission
from admin_console.schemas.common import ERROR_RESPONSES
from admin_console.schemas.user import (
    UserCreateRequest, UserUpdateRequest, PasswordResetRequest, UserOut,
)
from admin_console.services.user_service import user_service

# Every user route is admin only
router = APIRouter(
    prefix="/users",
    responses=ERROR_RESPONSES,
    dependencies=[Depends(require_permission(Permission.USERS_ADMIN))],
)


# GET /users
@router.get("", status_code=status.HTTP_200_OK, summary="List all users",
            response_model=list[UserOut])
def list_users(db: Session = Depends(get_db)):
    return user_service.list_users(db)


# GET /users/{id}
@router.get("/{user_id}", status_code=status.HTTP_200_OK, summary="Get user by ID",
            response_model=UserOut)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_service.get_user(db, user_id)


# POST /users
@router.post("", status_code=status.HTTP_201_CREATED, summary="Create new user",
             response_model=UserOut)
def create_user(body: UserCreateRequest, db: Session = Depends(get_db)):
    """
    - OFFICER accounts must name an existing department.
    - Email must not be registered yet.
    """
    return user_service.create_user(db, body)


# PATCH /users/{id}
@router.patch("/{user_id}", status_code=status.HTTP_200_OK, summary="Update user",
              response_model=UserOut)
def update_user(user_id: int, body: UserUpdateRequest, db: Session = Depends(get_db)):
    return user_service.update_user(db, user_id, body)


# PATCH /users/{id}/password
@router.patch("/{user_id}/password", status_code=status.HTTP_200_OK,
              summary="Reset a user's password", response_model=UserOut)
def reset_password(user_id: int, body: PasswordResetRequest, db: Session = Depends(get_db)):
    return user_service.reset_password(db, user_id, body.newPassword)
