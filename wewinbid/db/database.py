from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from wewinbid.config import settings


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite sessions are shared with background tasks running in other threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 20,
        "max_overflow": 40,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,  # Recycle connections after 1 hour
    }


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create a base class for declarative models
Base = declarative_base()


def create_db_and_tables():
    """
    Creates all tables registered on the Base metadata.

    Production databases are managed by Alembic; this is only used for local
    SQLite setups when AUTO_CREATE_TABLES is enabled.
    """
    from wewinbid.db import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


# FastAPI dependency to get a DB session for a single request
def get_db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
