"""
Efectos en cascada de las mutaciones estructurales.

Cada operación hace todas sus escrituras en la misma sesión y confirma
una sola vez: quien observa el borrado también observa la cascada.
Ninguna de estas funciones lanza excepciones por referencias faltantes.
"""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from .. import models, schemas
from ..utils.ids import new_id
from . import codec
from .clock import Clock

logger = logging.getLogger("scrumcmd-service.cascade")


async def delete_employee(db: AsyncSession, employee_id: str, clock: Clock) -> bool:
    """
    Elimina al empleado y lo quita del conjunto de asignados de cada tarea.
    Las tareas nunca se eliminan; sin asignados quedan como "Unassigned".
    """
    employee = await db.get(models.Employee, employee_id)
    if not employee:
        return False

    query = select(models.Task).filter(
        models.Task.assignee_links.any(models.TaskAssignee.employee_id == employee_id)
    )
    tasks = (await db.execute(query)).scalars().all()

    now = clock.timestamp()
    for task in tasks:
        task.assigned_to_ids = codec.decode(codec.remove(task.assigned_to_id, employee_id))
        task.updated_at = now

    await db.delete(employee)
    await db.commit()

    logger.info(f"🗑️ Empleado {employee_id} eliminado, desasignado de {len(tasks)} tarea(s)")
    return True


async def delete_project(db: AsyncSession, project_id: str, clock: Clock) -> bool:
    """Elimina el proyecto y lo desvincula de sus tareas (no las borra)."""
    project = await db.get(models.Project, project_id)
    if not project:
        return False

    query = select(models.Task).filter(
        models.Task.project_links.any(models.TaskProject.project_id == project_id)
    )
    tasks = (await db.execute(query)).scalars().all()

    now = clock.timestamp()
    for task in tasks:
        task.project_ids = codec.decode(codec.remove(task.project_id, project_id))
        task.updated_at = now

    await db.delete(project)
    await db.commit()

    logger.info(f"🗑️ Proyecto {project_id} eliminado, {len(tasks)} tarea(s) desvinculada(s)")
    return True


async def find_task_by_title(
    db: AsyncSession, project_id: str, task_title: str
) -> Optional[models.Task]:
    """Primera tarea del proyecto cuyo título coincide sin distinguir mayúsculas."""
    query = (
        select(models.Task)
        .filter(models.Task.project_links.any(models.TaskProject.project_id == project_id))
        .order_by(models.Task.created_at, models.Task.id)
    )
    wanted = task_title.strip().casefold()
    for task in (await db.execute(query)).scalars().all():
        if task.title.strip().casefold() == wanted:
            return task
    return None


async def submit_progress_update(
    db: AsyncSession, update: schemas.DailyUpdateCreate, clock: Clock
) -> schemas.ProgressReportResult:
    """
    Registra un reporte de avance y deriva el estado de la tarea:
    - con texto de bloqueo -> Blocked + un Blocker abierto
    - progreso 100 -> Done
    - cualquier otro -> In Progress
    Si no hay tarea que coincida solo se guarda el registro.
    """
    today = clock.today()
    now = clock.timestamp()
    blocker_text = update.blockers or ""

    record = models.DailyUpdate(
        id=new_id(),
        employee_id=update.employee_id,
        project_id=update.project_id,
        task_title=update.task_title,
        date=update.date or today,
        yesterday=update.yesterday,
        today=update.today,
        blockers=blocker_text or None,
        progress=update.progress,
        created_at=now,
    )
    db.add(record)

    task = await find_task_by_title(db, update.project_id, update.task_title)

    blocker = None
    if blocker_text:
        blocker = models.Blocker(
            id=new_id(),
            employee_id=update.employee_id,
            project_id=update.project_id,
            task_title=update.task_title,
            description=blocker_text,
            reported_date=today,
            status="Open",
        )
        db.add(blocker)
        new_status = "Blocked"
    elif update.progress == 100:
        new_status = "Done"
    else:
        new_status = "In Progress"

    if task:
        task.status = new_status
        task.updated_at = now
    else:
        logger.info(
            f"ℹ️ Reporte sin tarea coincidente: '{update.task_title}' en proyecto {update.project_id}"
        )

    await db.commit()

    if blocker:
        logger.info(f"⛔ Bloqueo {blocker.id} registrado para '{update.task_title}'")

    return schemas.ProgressReportResult(
        update=schemas.DailyUpdateResponse.model_validate(record),
        matched_task_id=task.id if task else None,
        task_status=task.status if task else None,
        blocker=schemas.BlockerResponse.model_validate(blocker) if blocker else None,
    )


async def resolve_blocker(db: AsyncSession, blocker_id: str, clock: Clock):
    """Marca el bloqueo como resuelto. No desbloquea la tarea."""
    blocker = await db.get(models.Blocker, blocker_id)
    if not blocker:
        return None

    blocker.status = "Resolved"
    blocker.resolved_date = clock.timestamp()
    await db.commit()
    await db.refresh(blocker)
    return blocker
