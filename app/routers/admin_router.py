import logging
from dataclasses import asdict
from fastapi import APIRouter, Depends

from ..auth import get_current_admin
from ..dependencies import get_admin_service
from ..application.services.admin_service import AdministratorService
from ..schemas import (
    CreateAdministratorRequest, UpdateAdministratorRequest,
    AdministratorSingleResponse, AdministratorListResponse, MessageResponse,
)

logger = logging.getLogger(__name__)

# Every administrator endpoint requires a valid access token
router = APIRouter(prefix="/api/admin", tags=["Admin"], dependencies=[Depends(get_current_admin)])


@router.post("", status_code=201, response_model=AdministratorSingleResponse)
def create_administrator(body: CreateAdministratorRequest, admin_service: AdministratorService = Depends(get_admin_service)):
    admin = admin_service.create(body.email, body.password, body.first_name, body.last_name)
    return {"status_code": 201, "message": "Administrator created successfully", "data": asdict(admin)}


@router.get("", response_model=AdministratorListResponse)
def list_administrators(admin_service: AdministratorService = Depends(get_admin_service)):
    admins = admin_service.find_all()
    return {
        "status_code": 200,
        "message": "Administrators retrieved successfully",
        "data": [asdict(a) for a in admins],
        "count": len(admins),
    }


@router.get("/profile/{admin_id}", response_model=AdministratorSingleResponse)
def get_administrator_profile(admin_id: str, admin_service: AdministratorService = Depends(get_admin_service)):
    admin = admin_service.find_one(admin_id)
    return {"status_code": 200, "message": "Administrator profile retrieved successfully", "data": asdict(admin)}


@router.get("/{admin_id}", response_model=AdministratorSingleResponse)
def get_administrator(admin_id: str, admin_service: AdministratorService = Depends(get_admin_service)):
    admin = admin_service.find_one(admin_id)
    return {"status_code": 200, "message": "Administrator retrieved successfully", "data": asdict(admin)}


@router.patch("/{admin_id}", response_model=AdministratorSingleResponse)
def update_administrator(admin_id: str, body: UpdateAdministratorRequest, admin_service: AdministratorService = Depends(get_admin_service)):
    admin = admin_service.update(admin_id, body.model_dump(exclude_unset=True))
    return {"status_code": 200, "message": "Administrator updated successfully", "data": asdict(admin)}


@router.delete("/{admin_id}", response_model=MessageResponse)
def delete_administrator(admin_id: str, admin_service: AdministratorService = Depends(get_admin_service)):
    result = admin_service.remove(admin_id)
    return {"status_code": 200, "message": result["message"]}
