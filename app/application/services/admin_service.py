import logging
from dataclasses import dataclass
from typing import List, Dict, Any
from fastapi import HTTPException

from ..ports.admin_repo import AdministratorRepository, AdministratorDto
from ...utils import hash_password, verify_password

logger = logging.getLogger(__name__)


@dataclass
class AdministratorService:
    admin_repo: AdministratorRepository

    def create(self, email: str, password: str, first_name: str, last_name: str) -> AdministratorDto:
        if self.admin_repo.get_by_email(email, include_inactive=True):
            raise HTTPException(status_code=409, detail="Administrator with this email already exists")
        admin = self.admin_repo.create(email, hash_password(password), first_name.strip(), last_name.strip())
        logger.info(f"Administrator created with ID: {admin.id}")
        return admin

    def find_all(self) -> List[AdministratorDto]:
        return self.admin_repo.list_active()

    def find_one(self, admin_id: str) -> AdministratorDto:
        admin = self.admin_repo.get_by_id(admin_id)
        if not admin:
            raise HTTPException(status_code=404, detail="Administrator not found")
        return admin

    def find_by_email(self, email: str) -> AdministratorDto | None:
        return self.admin_repo.get_by_email(email)

    def update(self, admin_id: str, changes: Dict[str, Any]) -> AdministratorDto:
        admin = self.find_one(admin_id)
        fields = {k: v for k, v in changes.items() if v is not None}

        new_email = fields.get("email")
        if new_email and new_email != admin.email:
            if self.admin_repo.get_by_email(new_email, include_inactive=True):
                raise HTTPException(status_code=409, detail="Administrator with this email already exists")

        password = fields.pop("password", None)
        if password:
            fields["password_hash"] = hash_password(password)

        updated = self.admin_repo.update(admin_id, fields)
        if not updated:
            raise HTTPException(status_code=404, detail="Administrator not found")
        logger.info(f"Administrator updated with ID: {admin_id}")
        return updated

    def remove(self, admin_id: str) -> Dict[str, str]:
        self.find_one(admin_id)
        # Soft delete, authored posts keep their author_id
        self.admin_repo.deactivate(admin_id)
        logger.info(f"Administrator deactivated with ID: {admin_id}")
        return {"message": "Administrator deleted successfully"}

    def validate_login(self, email: str, password: str) -> AdministratorDto:
        admin = self.admin_repo.get_by_email(email)
        if not admin:
            logger.warning("Login rejected: no active administrator for the given email")
            raise HTTPException(status_code=401, detail="Invalid credentials")
        password_hash = self.admin_repo.get_password_hash(admin.id)
        if not password_hash or not verify_password(password, password_hash):
            logger.warning(f"Login rejected: password mismatch for administrator {admin.id}")
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return admin

    def count(self) -> int:
        return self.admin_repo.count_active()
