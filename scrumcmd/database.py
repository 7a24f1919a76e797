from scrum_common.database import DatabaseManager, Base, resolve_database_url

# URL de conexión (SQLite local por defecto, asyncpg en producción)
DATABASE_URL = resolve_database_url()

db_manager = DatabaseManager(DATABASE_URL)

engine = db_manager.engine
get_db = db_manager.get_db
AsyncSessionLocal = db_manager.session_factory
