from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from . import database, models  # models registra las tablas en Base
from .seed import seed_demo_data
from .routers import auth, employees, projects, tasks, updates, meetings, plans, reports

# Configuración de Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("scrumcmd-service")

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() in ("1", "true", "yes")

@asynccontextmanager
async def lifespan(app: FastAPI):
    await database.db_manager.create_all()
    logger.info("✅ Tablas verificadas")
    if SEED_DEMO_DATA:
        await seed_demo_data()
    yield
    await database.db_manager.dispose()

app = FastAPI(
    title="ScrumCMD Service",
    description="Seguimiento de equipo: empleados, proyectos, tareas, minutas y planes.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
for module in (auth, employees, projects, tasks, updates, meetings, plans, reports):
    app.include_router(module.router, prefix="/api")

# --- ENDPOINTS GENERALES ---

@app.get("/api/health")
def health_check():
    """Health check para Kubernetes/Docker."""
    return {"status": "ok"}
