import os
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

# Base declarativa común para todos los modelos
Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./scrumcmd.db"


def resolve_database_url() -> str:
    """URL del almacén: DATABASE_URL o el archivo SQLite local."""
    return os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL


def is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


class DatabaseManager:
    """
    Motor asíncrono y fábrica de sesiones del almacén de ScrumCMD.

    En SQLite cada conexión espera el bloqueo de escritura en vez de fallar
    con 'database is locked'.
    """

    def __init__(self, database_url: str, echo: bool = None):
        self.database_url = database_url
        if echo is None:
            echo = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")

        connect_args = {"timeout": 30} if is_sqlite(database_url) else {}
        self.engine = create_async_engine(
            self.database_url,
            echo=echo,
            connect_args=connect_args,
        )
        self.session_factory = sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False
        )

    async def create_all(self):
        """Crea las tablas registradas en Base (arranque sin alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def dispose(self):
        await self.engine.dispose()

    async def get_db(self):
        async with self.session_factory() as session:
            yield session
