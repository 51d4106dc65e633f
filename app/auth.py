# app/auth.py
import logging
from typing import Optional
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .application.services.admin_service import AdministratorService
from .dependencies import get_admin_service
from .schemas import AuthenticatedAdministrator
from .utils import decode_jwt_token

logger = logging.getLogger(__name__)

oauth2_scheme = HTTPBearer(auto_error=False)


def get_current_admin(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme),
    admin_service: AdministratorService = Depends(get_admin_service),
) -> AuthenticatedAdministrator:
    """Resolve the bearer token to an active administrator or fail with 401."""
    if not credentials or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Authentication required", headers={"WWW-Authenticate": "Bearer"})

    payload = decode_jwt_token(credentials.credentials)
    if not payload:
        logger.warning(f"JWT decode failed for {request.method} {request.url.path}")
        raise HTTPException(status_code=401, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"})

    admin_id = payload.get("sub")
    if not admin_id:
        raise HTTPException(status_code=401, detail="Invalid token: missing administrator ID")

    try:
        admin = admin_service.find_one(admin_id)
    except HTTPException:
        logger.warning(f"Token presented for unknown or inactive administrator {admin_id}")
        raise HTTPException(status_code=401, detail="Invalid token")

    return AuthenticatedAdministrator(
        id=admin.id,
        email=admin.email,
        first_name=admin.first_name,
        last_name=admin.last_name,
    )
