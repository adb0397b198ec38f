from sqlmodel import SQLModel, create_engine, Session
from app.config import settings


def _connect_args(url: str) -> dict:
    if url.startswith("postgresql"):
        # bounded per-call timeout, surfaces as OperationalError
        return {"options": f"-c statement_timeout={settings.db_statement_timeout_ms}"}
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_url,
    echo=False,
    pool_pre_ping=True,      # checks dead connections
    pool_recycle=1800,       # refresh every 30 min
    connect_args=_connect_args(settings.database_url),
)


def create_db_and_tables():
    from app import models  # noqa: F401  registers every table
    SQLModel.metadata.create_all(engine)


def get_session():
    with Session(engine) as session:
        yield session
