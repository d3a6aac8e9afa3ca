from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from resource_hub.config import settings
import logging

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url

# Environment-based configurations
if settings.environment == "production" and not DATABASE_URL.startswith("sqlite"):
    engine = create_async_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=50,
        pool_timeout=60,
        pool_recycle=1800,
    )
else:
    engine = create_async_engine(
        DATABASE_URL,
        echo=settings.debug,  # Enable query logging in debug mode
    )

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db():
    logger.debug("Opening database session...")
    async with AsyncSessionLocal() as db:
        try:
            yield db
        except Exception as e:
            logger.error(f"Database session error: {e}")
            raise
        finally:
            await db.close()
            logger.debug("Database session closed.")
