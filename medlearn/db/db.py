import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from medlearn.config import settings
from medlearn.db.models import Base

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url, echo=settings.debug, pool_pre_ping=True
)
async_session_maker = async_sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def init_db(engine: AsyncEngine = engine) -> None:
    """Creates the exercise tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(
        f'Database ready: {", ".join(sorted(Base.metadata.tables))}'
    )


async def get_async_session(request: Request) -> AsyncSession:
    """The session opened for this request by DBSessionMiddleware."""
    session = getattr(request.state, 'db', None)
    if session is None:
        raise RuntimeError(
            'No database session on the request, '
            'is DBSessionMiddleware installed?'
        )
    return session
