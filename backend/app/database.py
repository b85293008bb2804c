from typing import Annotated, AsyncGenerator

from fastapi import Depends

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings

Base = declarative_base()


def _engine_options(url: str) -> dict:
    if not url.startswith("postgresql"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 1800,  # reconnect every 30 minutes to dodge idle timeouts
        "connect_args": {"ssl": settings.POSTGRES_SSLMODE == "require"},
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

async_session_factory = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as sess:
        yield sess

# Routes declare `db: SessionDep` to receive a request-scoped session.
SessionDep = Annotated[AsyncSession, Depends(get_db)]
