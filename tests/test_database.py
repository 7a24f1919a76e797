from sqlalchemy import text

from scrum_common.database import DEFAULT_DATABASE_URL, DatabaseManager, is_sqlite, resolve_database_url


def test_database_url_from_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://scrum:scrum@db:5432/scrumcmd")
    assert resolve_database_url() == "postgresql+asyncpg://scrum:scrum@db:5432/scrumcmd"

    monkeypatch.setenv("DATABASE_URL", "")
    assert resolve_database_url() == DEFAULT_DATABASE_URL
    assert is_sqlite(DEFAULT_DATABASE_URL)


async def test_manager_creates_and_drops_schema(tmp_path):
    manager = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'schema.db'}", echo=False)
    await manager.create_all()

    async with manager.session_factory() as session:
        tables = (await session.execute(
            text("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
        )).scalars().all()
    assert {"employees", "projects", "tasks", "blockers"} <= set(tables)

    await manager.drop_all()
    async with manager.session_factory() as session:
        tables = (await session.execute(
            text("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
        )).scalars().all()
    assert tables == []
    await manager.dispose()
