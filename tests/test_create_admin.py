import uuid

from sqlmodel import Session

from create_admin import main
from app.database import engine
from app.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdministratorRepository


def _args(email, password="password123"):
    return ["--email", email, "--password", password, "--first-name", "Seed", "--last-name", "Admin"]


def test_main_creates_administrator(capsys):
    email = f"seed-{uuid.uuid4().hex[:8]}@example.com"
    assert main(_args(email)) == 0
    assert "Administrator created" in capsys.readouterr().out

    with Session(engine) as session:
        admin = SqlAdministratorRepository(session).get_by_email(email)
    assert admin is not None
    assert admin.first_name == "Seed"


def test_main_rejects_duplicates(capsys):
    email = f"twice-{uuid.uuid4().hex[:8]}@example.com"
    assert main(_args(email)) == 0
    assert main(_args(email)) == 1
    assert "already exists" in capsys.readouterr().err


def test_main_rejects_invalid_input(capsys):
    assert main(_args("not-an-email")) == 1
    assert main(_args("short@example.com", password="short")) == 1
    assert "Invalid input" in capsys.readouterr().err
