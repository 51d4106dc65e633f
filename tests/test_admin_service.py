import pytest
from fastapi import HTTPException

from app.application.services.admin_service import AdministratorService
from fakes import FakeAdminRepo


def make_service():
    svc = AdministratorService(admin_repo=FakeAdminRepo())
    admin = svc.create("editor@example.com", "password123", " Ada ", "Lovelace")
    return svc, admin


def test_create_hashes_password_and_trims_names():
    svc, admin = make_service()
    assert admin.first_name == "Ada"
    stored = svc.admin_repo.get_password_hash(admin.id)
    assert stored != "password123"
    assert stored.startswith("$2")


def test_create_rejects_duplicate_email_even_when_inactive():
    svc, admin = make_service()
    svc.remove(admin.id)
    with pytest.raises(HTTPException) as exc:
        svc.create("editor@example.com", "password123", "Other", "Person")
    assert exc.value.status_code == 409


def test_find_one_missing():
    svc, _ = make_service()
    with pytest.raises(HTTPException) as exc:
        svc.find_one("missing")
    assert exc.value.status_code == 404
    assert exc.value.detail == "Administrator not found"


def test_update_rehashes_password_and_checks_email():
    svc, admin = make_service()
    other = svc.create("other@example.com", "password123", "Grace", "Hopper")
    old_hash = svc.admin_repo.get_password_hash(admin.id)

    updated = svc.update(admin.id, {"password": "new-password", "last_name": None})
    assert updated.last_name == "Lovelace"
    assert svc.admin_repo.get_password_hash(admin.id) != old_hash
    assert svc.validate_login("editor@example.com", "new-password").id == admin.id

    with pytest.raises(HTTPException) as exc:
        svc.update(admin.id, {"email": other.email})
    assert exc.value.status_code == 409


def test_remove_is_a_soft_delete():
    svc, admin = make_service()
    assert svc.remove(admin.id) == {"message": "Administrator deleted successfully"}
    assert svc.find_all() == []
    assert svc.count() == 0
    assert svc.admin_repo.get_by_id(admin.id, include_inactive=True) is not None
    with pytest.raises(HTTPException):
        svc.find_one(admin.id)


def test_validate_login():
    svc, admin = make_service()
    assert svc.validate_login("editor@example.com", "password123").id == admin.id

    for email, password in [("editor@example.com", "wrong"), ("nobody@example.com", "password123")]:
        with pytest.raises(HTTPException) as exc:
            svc.validate_login(email, password)
        assert exc.value.status_code == 401
        assert exc.value.detail == "Invalid credentials"


def test_validate_login_rejects_inactive_accounts():
    svc, admin = make_service()
    svc.remove(admin.id)
    with pytest.raises(HTTPException) as exc:
        svc.validate_login("editor@example.com", "password123")
    assert exc.value.status_code == 401
