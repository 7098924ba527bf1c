from collections.abc import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from core.config import settings

DATABASE_URL = settings.database_url


class Base(DeclarativeBase):
    pass


# SQLite connections are not shared between event loops
engine = create_async_engine(
    DATABASE_URL,
    echo=settings.database_echo,
    poolclass=NullPool if DATABASE_URL.startswith("sqlite") else None,
)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db_and_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


# Register every model on Base.metadata
from . import users, ingredient, cocktail_recipe, cocktail_ingredient, favorite  # noqa: E402,F401
