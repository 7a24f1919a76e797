from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, delete
from typing import Optional, Dict, Any, List
from datetime import date
from . import models, schemas
from .services.clock import Clock
from .services.plan_rules import default_items, reconcile_items
from .utils.ids import new_id

def _page(data, total: int, page: int, limit: int) -> Dict[str, Any]:
    return {
        "data": data,
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit if limit > 0 else 0
        }
    }

async def _paginate(db: AsyncSession, model, conditions: list, order_by, page: int, limit: int):
    offset = (page - 1) * limit

    # 1. Conteo Rápido
    count_query = select(func.count(model.id)).filter(*conditions)
    total = (await db.execute(count_query)).scalar() or 0

    # 2. Obtener Datos
    query = (
        select(model)
        .filter(*conditions)
        .order_by(*order_by)
        .offset(offset)
        .limit(limit)
    )
    result = await db.execute(query)
    return _page(result.scalars().all(), total, page, limit)

# --- EMPLEADOS ---

async def get_employees(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    search: Optional[str] = None,
    status: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if search:
        conditions.append(models.Employee.name.ilike(f"%{search}%"))
    if status:
        conditions.append(models.Employee.status == status)
    return await _paginate(db, models.Employee, conditions, [models.Employee.name], page, limit)

async def get_employee(db: AsyncSession, employee_id: str):
    return await db.get(models.Employee, employee_id)

async def create_employee(db: AsyncSession, employee: schemas.EmployeeCreate, clock: Clock):
    """Registra un empleado. La fecha de ingreso por defecto es hoy."""
    data = employee.model_dump()
    data["joined_date"] = data["joined_date"] or clock.today()
    db_employee = models.Employee(id=new_id(), **data)
    db.add(db_employee)
    await db.commit()
    await db.refresh(db_employee)
    return db_employee

async def update_employee(db: AsyncSession, employee_id: str, employee: schemas.EmployeeCreate):
    """Reemplaza la fila completa."""
    db_employee = await get_employee(db, employee_id)
    if not db_employee:
        return None

    for key, value in employee.model_dump().items():
        if key == "joined_date" and value is None:
            continue
        setattr(db_employee, key, value)

    await db.commit()
    await db.refresh(db_employee)
    return db_employee

async def update_employee_status(db: AsyncSession, employee_id: str, status: str):
    db_employee = await get_employee(db, employee_id)
    if not db_employee:
        return None
    db_employee.status = status
    await db.commit()
    await db.refresh(db_employee)
    return db_employee

async def toggle_employee_status(db: AsyncSession, employee_id: str):
    """Active <-> Inactive."""
    db_employee = await get_employee(db, employee_id)
    if not db_employee:
        return None
    new_status = "Inactive" if db_employee.status == "Active" else "Active"
    return await update_employee_status(db, employee_id, new_status)

# --- PROYECTOS ---

async def get_projects(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    search: Optional[str] = None,
    status: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if search:
        conditions.append(models.Project.name.ilike(f"%{search}%"))
    if status:
        conditions.append(models.Project.status == status)
    order = [models.Project.start_date.desc(), models.Project.name]
    return await _paginate(db, models.Project, conditions, order, page, limit)

async def get_project(db: AsyncSession, project_id: str):
    return await db.get(models.Project, project_id)

async def create_project(db: AsyncSession, project: schemas.ProjectCreate):
    db_project = models.Project(id=new_id(), **project.model_dump())
    db.add(db_project)
    await db.commit()
    await db.refresh(db_project)
    return db_project

async def update_project(db: AsyncSession, project_id: str, project: schemas.ProjectCreate):
    db_project = await get_project(db, project_id)
    if not db_project:
        return None
    for key, value in project.model_dump().items():
        setattr(db_project, key, value)
    await db.commit()
    await db.refresh(db_project)
    return db_project

async def update_project_status(db: AsyncSession, project_id: str, status: str):
    db_project = await get_project(db, project_id)
    if not db_project:
        return None
    db_project.status = status
    await db.commit()
    await db.refresh(db_project)
    return db_project

# --- TAREAS ---

_TASK_REFERENCE_FIELDS = {"project_id", "assigned_to_id", "project_ids", "assigned_to_ids"}

def _clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise ValueError("El título de la tarea es obligatorio")
    return title

async def get_tasks(
    db: AsyncSession,
    page: int = 1,
    limit: int = 100,
    project_id: Optional[str] = None,
    employee_id: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    due_date: Optional[date] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None
) -> Dict[str, Any]:
    """
    Lista de tareas, más recientes primero.
    Los filtros por proyecto/empleado buscan dentro del conjunto de vínculos.
    Los rangos aplican sobre la fecha de entrega.
    """
    conditions = []
    if project_id:
        conditions.append(models.Task.project_links.any(models.TaskProject.project_id == project_id))
    if employee_id:
        conditions.append(models.Task.assignee_links.any(models.TaskAssignee.employee_id == employee_id))
    if status:
        conditions.append(models.Task.status == status)
    if search:
        conditions.append(models.Task.title.ilike(f"%{search}%"))
    if due_date:
        conditions.append(models.Task.due_date == due_date)
    if date_from:
        conditions.append(models.Task.due_date >= date_from)
    if date_to:
        conditions.append(models.Task.due_date <= date_to)
    order = [models.Task.created_at.desc(), models.Task.id]
    return await _paginate(db, models.Task, conditions, order, page, limit)

async def get_task(db: AsyncSession, task_id: str):
    result = await db.execute(select(models.Task).filter(models.Task.id == task_id))
    return result.scalars().first()

async def create_task(db: AsyncSession, task: schemas.TaskCreate, clock: Clock):
    """Crea la tarea con created_at == updated_at == ahora."""
    now = clock.timestamp()
    data = task.model_dump(exclude=_TASK_REFERENCE_FIELDS)
    data["title"] = _clean_title(data["title"])

    db_task = models.Task(id=new_id(), created_at=now, updated_at=now, **data)
    db_task.project_ids = task.project_ids
    db_task.assigned_to_ids = task.assigned_to_ids

    db.add(db_task)
    await db.commit()
    return await get_task(db, db_task.id)

async def update_task(db: AsyncSession, task_id: str, task: schemas.TaskCreate, clock: Clock):
    """Reemplazo de fila completa (incluye vínculos). Refresca updated_at."""
    db_task = await get_task(db, task_id)
    if not db_task:
        return None

    data = task.model_dump(exclude=_TASK_REFERENCE_FIELDS)
    data["title"] = _clean_title(data["title"])
    for key, value in data.items():
        setattr(db_task, key, value)

    db_task.project_ids = task.project_ids
    db_task.assigned_to_ids = task.assigned_to_ids
    db_task.updated_at = clock.timestamp()

    await db.commit()
    return await get_task(db, task_id)

async def update_task_status(db: AsyncSession, task_id: str, status: str, clock: Clock):
    db_task = await get_task(db, task_id)
    if not db_task:
        return None
    db_task.status = status
    db_task.updated_at = clock.timestamp()
    await db.commit()
    return db_task

async def delete_task(db: AsyncSession, task_id: str) -> bool:
    """Elimina la tarea junto con sus notas."""
    db_task = await get_task(db, task_id)
    if not db_task:
        return False
    await db.execute(delete(models.TaskNote).where(models.TaskNote.task_id == task_id))
    await db.delete(db_task)
    await db.commit()
    return True

async def get_task_notes(db: AsyncSession, task_id: str) -> List[models.TaskNote]:
    query = (
        select(models.TaskNote)
        .filter(models.TaskNote.task_id == task_id)
        .order_by(models.TaskNote.created_at, models.TaskNote.id)
    )
    result = await db.execute(query)
    return result.scalars().all()

async def create_task_note(db: AsyncSession, task_id: str, note: schemas.TaskNoteCreate, clock: Clock):
    """Agrega una nota (solo anexar). None si la tarea no existe."""
    if not await get_task(db, task_id):
        return None
    db_note = models.TaskNote(
        id=new_id(),
        task_id=task_id,
        content=note.content,
        created_at=clock.timestamp()
    )
    db.add(db_note)
    await db.commit()
    await db.refresh(db_note)
    return db_note

# --- REPORTES DE AVANCE Y BLOQUEOS ---

async def get_daily_updates(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    employee_id: Optional[str] = None,
    project_id: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if employee_id:
        conditions.append(models.DailyUpdate.employee_id == employee_id)
    if project_id:
        conditions.append(models.DailyUpdate.project_id == project_id)
    order = [models.DailyUpdate.created_at.desc(), models.DailyUpdate.id]
    return await _paginate(db, models.DailyUpdate, conditions, order, page, limit)

async def get_blockers(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    status: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if status:
        conditions.append(models.Blocker.status == status)
    order = [models.Blocker.reported_date.desc(), models.Blocker.id]
    return await _paginate(db, models.Blocker, conditions, order, page, limit)

# --- MINUTAS ---

async def get_meetings(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    project_id: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if project_id:
        conditions.append(models.MeetingMinutes.project_id == project_id)
    order = [models.MeetingMinutes.date.desc(), models.MeetingMinutes.created_at.desc()]
    return await _paginate(db, models.MeetingMinutes, conditions, order, page, limit)

async def get_meeting(db: AsyncSession, meeting_id: str):
    result = await db.execute(
        select(models.MeetingMinutes).filter(models.MeetingMinutes.id == meeting_id)
    )
    return result.scalars().first()

async def create_meeting(db: AsyncSession, meeting: schemas.MeetingCreate, clock: Clock):
    data = meeting.model_dump(exclude={"attendee_ids", "attendee_id_list"})
    db_meeting = models.MeetingMinutes(id=new_id(), created_at=clock.timestamp(), **data)
    db_meeting.attendee_id_list = meeting.attendee_id_list
    db.add(db_meeting)
    await db.commit()
    return await get_meeting(db, db_meeting.id)

async def update_meeting(db: AsyncSession, meeting_id: str, meeting: schemas.MeetingCreate):
    db_meeting = await get_meeting(db, meeting_id)
    if not db_meeting:
        return None
    for key, value in meeting.model_dump(exclude={"attendee_ids", "attendee_id_list"}).items():
        setattr(db_meeting, key, value)
    db_meeting.attendee_id_list = meeting.attendee_id_list
    await db.commit()
    return await get_meeting(db, meeting_id)

async def delete_meeting(db: AsyncSession, meeting_id: str) -> bool:
    db_meeting = await get_meeting(db, meeting_id)
    if not db_meeting:
        return False
    await db.delete(db_meeting)
    await db.commit()
    return True

# --- PLANES DE PROYECTO ---

def _dump_items(items: List[schemas.PlanItem]) -> List[dict]:
    return [item.model_dump(mode="json") for item in items]

def _load_items(raw) -> List[schemas.PlanItem]:
    return [schemas.PlanItem.model_validate(item) for item in (raw or [])]

async def get_plans(
    db: AsyncSession,
    page: int = 1,
    limit: int = 50,
    project_id: Optional[str] = None
) -> Dict[str, Any]:
    conditions = []
    if project_id:
        conditions.append(models.ProjectPlan.project_id == project_id)
    order = [models.ProjectPlan.created_at.desc(), models.ProjectPlan.id]
    return await _paginate(db, models.ProjectPlan, conditions, order, page, limit)

async def get_plan(db: AsyncSession, plan_id: str):
    return await db.get(models.ProjectPlan, plan_id)

async def create_plan(db: AsyncSession, plan: schemas.ProjectPlanCreate, clock: Clock):
    """Sin ítems explícitos se arranca con las fases por defecto."""
    items = plan.items if plan.items is not None else default_items()
    db_plan = models.ProjectPlan(
        id=new_id(),
        title=plan.title,
        project_id=plan.project_id,
        items=_dump_items(reconcile_items([], items)),
        created_at=clock.timestamp()
    )
    db.add(db_plan)
    await db.commit()
    await db.refresh(db_plan)
    return db_plan

async def update_plan(db: AsyncSession, plan_id: str, plan: schemas.ProjectPlanUpdate):
    """Actualización parcial; los ítems pasan por la máquina de estados."""
    db_plan = await get_plan(db, plan_id)
    if not db_plan:
        return None

    update_data = plan.model_dump(exclude_unset=True, exclude={"items"})
    for key, value in update_data.items():
        if value is not None:
            setattr(db_plan, key, value)

    if plan.items is not None:
        previous = _load_items(db_plan.items)
        db_plan.items = _dump_items(reconcile_items(previous, plan.items))

    await db.commit()
    await db.refresh(db_plan)
    return db_plan

async def delete_plan(db: AsyncSession, plan_id: str) -> bool:
    db_plan = await get_plan(db, plan_id)
    if not db_plan:
        return False
    await db.delete(db_plan)
    await db.commit()
    return True

# --- INSTANTÁNEA ---

async def load_snapshot(db: AsyncSession) -> schemas.Snapshot:
    """Lee todas las entidades en la misma sesión para las vistas derivadas."""
    employees = (await db.execute(select(models.Employee))).scalars().all()
    projects = (await db.execute(select(models.Project))).scalars().all()
    tasks = (await db.execute(select(models.Task))).scalars().all()
    blockers = (await db.execute(select(models.Blocker))).scalars().all()

    return schemas.Snapshot(
        employees=[schemas.EmployeeResponse.model_validate(e) for e in employees],
        projects=[schemas.ProjectResponse.model_validate(p) for p in projects],
        tasks=[schemas.TaskResponse.model_validate(t) for t in tasks],
        blockers=[schemas.BlockerResponse.model_validate(b) for b in blockers],
    )
