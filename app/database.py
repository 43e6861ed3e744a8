import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Local Postgres database, same as sqlalchemy.url in alembic.ini. Deployments
# and tests point DATABASE_URL elsewhere.
DEFAULT_DATABASE_URL = "postgresql://localhost/timesheets"

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

Base = declarative_base()

DATABASE_URL = ""
engine = None


def _get_database_url() -> str:
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def _engine_kwargs(database_url: str) -> dict:
    # sqlite connections are handed across the threadpool FastAPI runs sync routes in
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def configure_database() -> None:
    """(Re)bind SessionLocal whenever DATABASE_URL has changed."""
    global DATABASE_URL, engine

    database_url = _get_database_url()
    if engine is not None and database_url == DATABASE_URL:
        return

    if engine is not None:
        engine.dispose()

    engine = create_engine(database_url, **_engine_kwargs(database_url))
    SessionLocal.configure(bind=engine)
    DATABASE_URL = database_url


configure_database()


def get_db():
    configure_database()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
