from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from admin_console.database import get_db
from admin_console.dependencies import Permission, require_permission
from admin_console.schemas.auth import TokenClaims
from admin_console.schemas.common import ERROR_RESPONSES
from admin_console.schemas.department import (
    DepartmentCreateRequest, DepartmentUpdateRequest, DepartmentLimitRequest, DepartmentOut,
)
from admin_console.services.department_service import department_service

router = APIRouter(prefix="/departments", responses=ERROR_RESPONSES)


# GET /departments: any authenticated user
@router.get("", status_code=status.HTTP_200_OK, summary="List all departments",
            response_model=list[DepartmentOut])
def list_departments(
    db: Session     = Depends(get_db),
    _:  TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_READ)),
):
    return department_service.list_departments(db)


# GET /departments/{id}: any authenticated user
@router.get("/{department_id}", status_code=status.HTTP_200_OK, summary="Get department by ID",
            response_model=DepartmentOut)
def get_department(
    department_id: int,
    db: Session     = Depends(get_db),
    _:  TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_READ)),
):
    return department_service.get_department(db, department_id)


# POST /departments: admin only
@router.post("", status_code=status.HTTP_201_CREATED, summary="Create department",
             response_model=DepartmentOut)
def create_department(
    body: DepartmentCreateRequest,
    db:   Session     = Depends(get_db),
    _:    TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_WRITE)),
):
    return department_service.create_department(db, body)


# PATCH /departments/{id}: admin only
@router.patch("/{department_id}", status_code=status.HTTP_200_OK,
              summary="Rename department or change its code", response_model=DepartmentOut)
def update_department(
    department_id: int,
    body: DepartmentUpdateRequest,
    db:   Session     = Depends(get_db),
    _:    TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_WRITE)),
):
    return department_service.update_department(db, department_id, body)


# PUT /departments/{id}/limit: admin only
@router.put("/{department_id}/limit", status_code=status.HTTP_200_OK,
            summary="Replace the allocated spending limit", response_model=DepartmentOut)
def update_department_limit(
    department_id: int,
    body: DepartmentLimitRequest,
    db:   Session     = Depends(get_db),
    _:    TokenClaims = Depends(require_permission(Permission.DEPARTMENTS_LIMIT)),
):
    return department_service.update_limit(db, department_id, body.limitUsd)
