from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .config import settings


def create_db_engine(url: str, **kwargs) -> Engine:
    """
    Engine for `url`. SQLite gets foreign keys on every connection and
    check_same_thread=False: sessions are handed to worker threads
    (asyncio.to_thread, the reminder scheduler).
    """
    if not url.startswith("sqlite"):
        return create_engine(url, **kwargs)

    engine = create_engine(url, connect_args={"check_same_thread": False}, **kwargs)

    @event.listens_for(engine, "connect")
    def enable_sqlite_fk(dbapi_connection, _):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


engine = create_db_engine(settings.resolved_database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


def init_db(bind=None) -> None:
    """Create all tables that do not exist yet."""
    from .models import Base

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


# FastAPI dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
