from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
from sqlmodel import Session, select, func

from .....db.models import Administrator
from .....application.ports.admin_repo import AdministratorRepository, AdministratorDto


class SqlAdministratorRepository(AdministratorRepository):
    def __init__(self, session: Session):
        self.session = session

    def _to_dto(self, admin: Administrator) -> AdministratorDto:
        return AdministratorDto(
            id=admin.id,
            email=admin.email,
            first_name=admin.first_name,
            last_name=admin.last_name,
            is_active=admin.is_active,
            created_at=admin.created_at,
            updated_at=admin.updated_at,
        )

    def _get(self, admin_id: str, include_inactive: bool = False) -> Optional[Administrator]:
        statement = select(Administrator).where(Administrator.id == admin_id)
        if not include_inactive:
            statement = statement.where(Administrator.is_active == True)  # noqa: E712
        return self.session.exec(statement).first()

    def get_by_id(self, admin_id: str, include_inactive: bool = False) -> Optional[AdministratorDto]:
        admin = self._get(admin_id, include_inactive)
        return self._to_dto(admin) if admin else None

    def get_by_email(self, email: str, include_inactive: bool = False) -> Optional[AdministratorDto]:
        statement = select(Administrator).where(Administrator.email == email)
        if not include_inactive:
            statement = statement.where(Administrator.is_active == True)  # noqa: E712
        admin = self.session.exec(statement).first()
        return self._to_dto(admin) if admin else None

    def get_password_hash(self, admin_id: str) -> Optional[str]:
        admin = self._get(admin_id, include_inactive=True)
        return admin.password_hash if admin else None

    def list_active(self) -> List[AdministratorDto]:
        admins = self.session.exec(
            select(Administrator)
            .where(Administrator.is_active == True)  # noqa: E712
            .order_by(Administrator.created_at.desc())
        ).all()
        return [self._to_dto(a) for a in admins]

    def create(self, email: str, password_hash: str, first_name: str, last_name: str) -> AdministratorDto:
        admin = Administrator(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
        )
        self.session.add(admin)
        self.session.commit()
        self.session.refresh(admin)
        return self._to_dto(admin)

    def update(self, admin_id: str, fields: Dict[str, Any]) -> Optional[AdministratorDto]:
        admin = self._get(admin_id)
        if not admin:
            return None
        for key, value in fields.items():
            if hasattr(admin, key):
                setattr(admin, key, value)
        admin.updated_at = datetime.now(timezone.utc)
        self.session.add(admin)
        self.session.commit()
        self.session.refresh(admin)
        return self._to_dto(admin)

    def deactivate(self, admin_id: str) -> None:
        admin = self._get(admin_id)
        if not admin:
            return
        admin.is_active = False
        admin.updated_at = datetime.now(timezone.utc)
        self.session.add(admin)
        self.session.commit()

    def count_active(self) -> int:
        return self.session.exec(
            select(func.count(Administrator.id)).where(Administrator.is_active == True)  # noqa: E712
        ).one()
