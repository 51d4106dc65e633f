from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy import text
from .config import settings

# Choose engine options based on database scheme
db_url = settings.DATABASE_URL
engine_kwargs = {}

if db_url.startswith("sqlite"):
    # SQLite specific connect args
    engine_kwargs.update({
        "connect_args": {"check_same_thread": False}
    })
else:
    # Better resiliency for managed Postgres
    engine_kwargs.update({
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_size": 5,
        "max_overflow": 10,
    })

engine = create_engine(db_url, echo=settings.DEBUG, **engine_kwargs)

def create_db_and_tables():
    # Import models so their tables are registered on the metadata
    from .db import models  # noqa: F401
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session

def ping_database(session: Session) -> None:
    session.exec(text("SELECT 1"))
