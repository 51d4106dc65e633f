import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any
from fastapi import HTTPException

from ..ports.admin_repo import AdministratorDto
from ..ports.audit_logger import AuditLogger
from .admin_service import AdministratorService
from ...utils import create_jwt_token, create_refresh_token, verify_refresh_token

logger = logging.getLogger(__name__)


def _token_payload(admin: AdministratorDto) -> Dict[str, Any]:
    return {
        "sub": admin.id,
        "email": admin.email,
        "first_name": admin.first_name,
        "last_name": admin.last_name,
    }


def _public_admin(admin: AdministratorDto) -> Dict[str, Any]:
    return {
        "id": admin.id,
        "email": admin.email,
        "first_name": admin.first_name,
        "last_name": admin.last_name,
    }


@dataclass
class AuthService:
    admin_service: AdministratorService
    audit_logger: Optional[AuditLogger] = None

    def _audit(self, action: str, email: str, admin_id: Optional[str], ip_address: Optional[str], success: bool) -> None:
        if self.audit_logger:
            self.audit_logger.log(action, email, admin_id=admin_id, ip_address=ip_address, success=success)

    def login(self, email: str, password: str, ip_address: Optional[str] = None) -> Dict[str, Any]:
        try:
            admin = self.admin_service.validate_login(email, password)
        except HTTPException:
            self._audit("login", email, None, ip_address, success=False)
            raise

        payload = _token_payload(admin)
        result = {
            "access_token": create_jwt_token(payload),
            "refresh_token": create_refresh_token(payload),
            "administrator": _public_admin(admin),
        }
        self._audit("login", email, admin.id, ip_address, success=True)
        logger.info(f"Tokens issued for administrator {admin.id}")
        return result

    def refresh(self, refresh_token: str) -> Dict[str, Any]:
        payload = verify_refresh_token(refresh_token)
        if not payload or not payload.get("sub"):
            logger.warning("Token refresh rejected: invalid refresh token")
            raise HTTPException(status_code=401, detail="Invalid refresh token")
        try:
            admin = self.admin_service.find_one(payload["sub"])
        except HTTPException:
            logger.warning(f"Token refresh rejected: administrator {payload['sub']} not found")
            raise HTTPException(status_code=401, detail="Invalid refresh token")
        return {"access_token": create_jwt_token(_token_payload(admin))}
