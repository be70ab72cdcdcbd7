# app/database.py
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.core.config import DATABASE_URL, SQL_ECHO, USING_FALLBACK_DATABASE
from app.core.logging import get_logger

logger = get_logger(__name__)

if USING_FALLBACK_DATABASE:
    logger.warning(
        "DATABASE_URL not set, falling back to local SQLite database: %s", DATABASE_URL
    )

# SQL_ECHO=true prints every generated statement, useful while debugging
engine = create_async_engine(DATABASE_URL, echo=SQL_ECHO)

AsyncSessionFactory = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db_session() -> AsyncSession:
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()  # Commit once the request went through
        except Exception:
            await session.rollback()
            raise


async def create_db_and_tables():
    """
    Tables are managed by Alembic. Only the SQLite fallback database is
    created here so a fresh checkout runs without a migration step.
    """
    if not USING_FALLBACK_DATABASE:
        logger.info("Schema is managed by Alembic, skipping create_all.")
        return
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Fallback SQLite tables ensured.")
