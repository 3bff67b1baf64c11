from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from energysim.core.config import DATABASE_URL
from energysim.models.base import Base

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db():
    """Create missing tables. Production schemas are managed by alembic."""
    # imported for their side effect of registering tables on Base.metadata
    from energysim.models import feedback, simulation  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """FastAPI dependency yielding a session that is always closed."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
