from typing import Protocol, Optional, List, Dict, Any
from dataclasses import dataclass
from datetime import datetime


@dataclass
class AdministratorDto:
    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class AdministratorRepository(Protocol):
    def get_by_id(self, admin_id: str, include_inactive: bool = False) -> Optional[AdministratorDto]:
        ...

    def get_by_email(self, email: str, include_inactive: bool = False) -> Optional[AdministratorDto]:
        ...

    def get_password_hash(self, admin_id: str) -> Optional[str]:
        ...

    def list_active(self) -> List[AdministratorDto]:
        ...

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> AdministratorDto:
        ...

    def update(self, admin_id: str, fields: Dict[str, Any]) -> Optional[AdministratorDto]:
        ...

    def deactivate(self, admin_id: str) -> None:
        ...

    def count_active(self) -> int:
        ...
