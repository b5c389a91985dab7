from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from jobly.core.config import settings

# SQLite (local runs) rejects the pool sizing arguments Postgres uses
if settings.DATABASE_URL.startswith("sqlite"):
    engine = create_engine(
        settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,  # Verify connections before using them
        pool_size=10,
        max_overflow=20
    )

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Initialize database.

    Imports the models so they register on Base.metadata, then creates any
    missing tables. Existing tables are left untouched.
    """
    from jobly.models import company, job, user  # noqa: F401  Import models to register them
    Base.metadata.create_all(bind=engine)
