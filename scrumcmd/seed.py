import asyncio
import logging
from datetime import timedelta
from sqlalchemy import func
from sqlalchemy.future import select
from scrumcmd import models
from scrumcmd.database import AsyncSessionLocal, db_manager
from scrumcmd.services.clock import Clock
from scrumcmd.services.plan_rules import default_items
from scrumcmd.utils.ids import new_id

logger = logging.getLogger("scrumcmd-service.seed")

# ==============================================================================
#  DATOS DE DEMOSTRACIÓN
# ==============================================================================
DEMO_EMPLOYEES = [
    {"key": "ana", "name": "Ana Torres", "role": "Tech Lead", "email": "ana.torres@example.com"},
    {"key": "luis", "name": "Luis Pérez", "role": "Backend Developer", "email": "luis.perez@example.com"},
    {"key": "maria", "name": "María Gómez", "role": "Frontend Developer", "email": "maria.gomez@example.com"},
    {"key": "jose", "name": "José Rivas", "role": "QA Engineer", "email": "jose.rivas@example.com"},
]

DEMO_PROJECTS = [
    {"key": "portal", "name": "Portal de Clientes", "description": "Autogestión de clientes", "priority": "High", "owner": "ana"},
    {"key": "api", "name": "API Pública", "description": "API REST para integradores", "priority": "Critical", "owner": "luis"},
]

# (título, proyectos, asignados, estado, prioridad, días hasta la entrega)
DEMO_TASKS = [
    ("Diseñar pantalla de login", ["portal"], ["maria"], "Done", "Medium", -5),
    ("Deploy API", ["api"], ["luis", "ana"], "In Progress", "High", 3),
    ("Documentar endpoints", ["api"], ["luis"], "Todo", "Low", 10),
    ("Pruebas de regresión", ["portal", "api"], ["jose"], "Todo", "Medium", -1),
    ("Configurar CI", [], [], "Todo", "Medium", None),
]


async def seed_demo_data(session_factory=AsyncSessionLocal, clock: Clock = None) -> bool:
    """
    Carga datos de ejemplo solo si el almacén está vacío.
    Devuelve True si se insertó algo.
    """
    clock = clock or Clock()
    db = session_factory()
    try:
        count = (await db.execute(select(func.count(models.Employee.id)))).scalar() or 0
        if count > 0:
            logger.info("ℹ️ [SEED] El almacén ya tiene datos, se omite la carga")
            return False

        logger.info("🚀 [SEED] Cargando datos de demostración")
        today = clock.today()
        now = clock.timestamp()

        employee_ids = {}
        for item in DEMO_EMPLOYEES:
            employee_ids[item["key"]] = new_id()
            db.add(models.Employee(
                id=employee_ids[item["key"]],
                name=item["name"],
                role=item["role"],
                email=item["email"],
                status="Active",
                joined_date=today - timedelta(days=180),
            ))

        project_ids = {}
        for item in DEMO_PROJECTS:
            project_ids[item["key"]] = new_id()
            db.add(models.Project(
                id=project_ids[item["key"]],
                name=item["name"],
                description=item["description"],
                start_date=today - timedelta(days=30),
                deadline=today + timedelta(days=60),
                priority=item["priority"],
                owner_id=employee_ids[item["owner"]],
                status="Active",
            ))

        for title, projects, assignees, status, priority, due_in in DEMO_TASKS:
            task = models.Task(
                id=new_id(),
                title=title,
                description="",
                status=status,
                priority=priority,
                due_date=today + timedelta(days=due_in) if due_in is not None else None,
                created_at=now,
                updated_at=now,
            )
            task.project_ids = [project_ids[p] for p in projects]
            task.assigned_to_ids = [employee_ids[e] for e in assignees]
            db.add(task)

        db.add(models.ProjectPlan(
            id=new_id(),
            title="Plan Portal de Clientes",
            project_id=project_ids["portal"],
            items=[item.model_dump(mode="json") for item in default_items()],
            created_at=now,
        ))

        await db.commit()
        logger.info(
            f"✅ [SEED] {len(DEMO_EMPLOYEES)} empleados, {len(DEMO_PROJECTS)} proyectos, "
            f"{len(DEMO_TASKS)} tareas"
        )
        return True
    except Exception as e:
        logger.error(f"❌ [SEED] Error crítico: {e}")
        await db.rollback()
        raise
    finally:
        await db.close()


async def main():
    await db_manager.create_all()
    await seed_demo_data()


if __name__ == "__main__":
    # Soporte para ejecutar: python -m scrumcmd.seed
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
