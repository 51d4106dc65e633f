#!/usr/bin/env python3
"""
Seed an administrator account.

    python create_admin.py --email admin@example.com --password secret123 \
        --first-name Ada --last-name Lovelace
"""
import argparse
import os
import sys

from fastapi import HTTPException
from sqlmodel import Session

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from app.database import engine, create_db_and_tables
from app.application.services.admin_service import AdministratorService
from app.infrastructure.persistence.sqlalchemy.repositories.admin_repository_sql import SqlAdministratorRepository
from app.schemas import CreateAdministratorRequest


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Create an administrator account")
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", required=True)
    parser.add_argument("--last-name", required=True)
    return parser.parse_args(argv)


def create_admin(email: str, password: str, first_name: str, last_name: str):
    # Reuse the API validation rules for e-mail and password length
    request = CreateAdministratorRequest(
        email=email, password=password, first_name=first_name, last_name=last_name
    )
    create_db_and_tables()
    with Session(engine) as session:
        service = AdministratorService(admin_repo=SqlAdministratorRepository(session))
        return service.create(request.email, request.password, request.first_name, request.last_name)


def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        admin = create_admin(args.email, args.password, args.first_name, args.last_name)
    except HTTPException as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1
    print(f"Administrator created: {admin.email} (id {admin.id})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
