# autoreply/db/database.py
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from autoreply.core.config import settings, logger

DATABASE_URL = settings.DATABASE_URL

# Create the async engine (echo=True logs SQL statements)
engine = create_async_engine(DATABASE_URL, echo=settings.DATABASE_ECHO)

# expire_on_commit=False keeps ORM objects usable after the pipeline's intermediate commits
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Base class for declarative models
Base = declarative_base()

# Dependency to get DB session in API endpoints
async def get_db_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session

# Function to initialize the database (create tables)
async def init_db():
    # Register every mapped table on Base.metadata
    from autoreply.models.db import comments, profiles  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created (if they didn't exist).")
