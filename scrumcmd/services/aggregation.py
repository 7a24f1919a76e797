"""
Vistas derivadas (dashboard, perfil, reportes).

Todas las funciones son puras: reciben una instantánea completa y
devuelven valores nuevos. Los IDs colgantes (entidades borradas) se
ignoran; una tarea sin referencias vivas cae en el grupo "Unassigned".
"""
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from ..schemas import (
    BlockerView, Dashboard, DashboardStats, EmployeeProfile, EmployeeStats,
    EmployeeTaskCount, EmployeeWorkload, PhaseGroup, PlanItem, PlanSummary,
    ProjectHealth, ProjectProgress, Snapshot, StatusCount, TaskResponse,
    TaskView, TeamSummary, WeeklyGroup,
    PLAN_ITEM_STATUSES,
)

UNASSIGNED = "Unassigned"
UNCATEGORIZED = "Uncategorized"
RECENT_TASKS_LIMIT = 8
WEEKLY_GROUPS_LIMIT = 4

STATUS_STYLES = {
    "Todo": "neutral",
    "Not Started": "neutral",
    "In Progress": "info",
    "Done": "success",
    "Blocked": "danger",
    "Open": "danger",
    "Resolved": "success",
    "Active": "success",
    "Inactive": "neutral",
    "On Hold": "warning",
    "Completed": "success",
}

# Orden de las series en el reporte de distribución
DISTRIBUTION_ORDER = ("Done", "In Progress", "Blocked", "Todo")


# --- UTILIDADES ---

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(part: int, total: int) -> int:
    """Porcentaje entero; 0 cuando no hay total."""
    if total <= 0:
        return 0
    return round_half_up(100 * part / total)


def status_style(status: Optional[str]) -> str:
    """Clave de estilo para un estado; los desconocidos quedan en "default"."""
    return STATUS_STYLES.get(status or "", "default")


def created_date(task: TaskResponse) -> date:
    """Fecha calendario local de created_at (mismo criterio que "hoy" del reloj)."""
    raw = task.created_at.replace("Z", "+00:00")
    return datetime.fromisoformat(raw).astimezone().date()


def days_since(reference: date, today: date) -> int:
    """Días completos entre dos fechas calendario."""
    return (today - reference).days


def is_overdue(task: TaskResponse, today: date) -> bool:
    if task.due_date is None:
        return False
    return task.due_date < today and task.status != "Done"


def first_name(name: str) -> str:
    parts = name.split()
    return parts[0] if parts else name


def _names(snapshot: Snapshot, kind: str) -> Dict[str, str]:
    rows = snapshot.employees if kind == "employees" else snapshot.projects
    return {row.id: row.name for row in rows}


def assignee_label(task: TaskResponse, employee_names: Dict[str, str]) -> str:
    names = [employee_names[i] for i in task.assigned_to_ids if i in employee_names]
    return ", ".join(names) if names else UNASSIGNED


def project_label(task: TaskResponse, project_names: Dict[str, str]) -> str:
    names = [project_names[i] for i in task.project_ids if i in project_names]
    return ", ".join(names) if names else UNASSIGNED


def task_view(
    task: TaskResponse,
    employee_names: Dict[str, str],
    project_names: Dict[str, str],
    today: date,
) -> TaskView:
    overdue = is_overdue(task, today)
    return TaskView(
        id=task.id,
        title=task.title,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        project_label=project_label(task, project_names),
        assignee_label=assignee_label(task, employee_names),
        is_overdue=overdue,
        days_overdue=days_since(task.due_date, today) if overdue else 0,
        status_style=status_style(task.status),
        created_at=task.created_at,
    )


def tasks_for_employee(snapshot: Snapshot, employee_id: str) -> List[TaskResponse]:
    return [t for t in snapshot.tasks if employee_id in t.assigned_to_ids]


def tasks_for_project(snapshot: Snapshot, project_id: str) -> List[TaskResponse]:
    return [t for t in snapshot.tasks if project_id in t.project_ids]


# --- CONTEOS ---

def open_task_count(snapshot: Snapshot, employee_id: str) -> int:
    return sum(1 for t in tasks_for_employee(snapshot, employee_id) if t.status != "Done")


def project_completion(snapshot: Snapshot, project_id: str) -> int:
    """Porcentaje de tareas Done del proyecto; 0 si no tiene tareas."""
    tasks = tasks_for_project(snapshot, project_id)
    done = sum(1 for t in tasks if t.status == "Done")
    return percentage(done, len(tasks))


def employee_stats(snapshot: Snapshot, employee_id: str, today: date) -> EmployeeStats:
    tasks = tasks_for_employee(snapshot, employee_id)
    return EmployeeStats(
        total=len(tasks),
        todo=sum(1 for t in tasks if t.status == "Todo"),
        in_progress=sum(1 for t in tasks if t.status == "In Progress"),
        done=sum(1 for t in tasks if t.status == "Done"),
        blocked=sum(1 for t in tasks if t.status == "Blocked"),
        overdue=sum(1 for t in tasks if is_overdue(t, today)),
    )


def status_distribution(snapshot: Snapshot) -> List[StatusCount]:
    """Cantidad de tareas por estado sobre todo el conjunto (sin filtros)."""
    counts = {status: 0 for status in DISTRIBUTION_ORDER}
    for task in snapshot.tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    return [StatusCount(status=s, count=c) for s, c in counts.items()]


def tasks_per_employee(snapshot: Snapshot) -> List[EmployeeTaskCount]:
    """
    Done / abiertas por empleado activo, etiquetado por nombre de pila.
    Las tareas sin ningún empleado existente suman a la fila "Unassigned".
    """
    rows = []
    for emp in snapshot.employees:
        if emp.status != "Active":
            continue
        tasks = tasks_for_employee(snapshot, emp.id)
        done = sum(1 for t in tasks if t.status == "Done")
        rows.append(EmployeeTaskCount(
            employee_id=emp.id,
            label=first_name(emp.name),
            done=done,
            open=len(tasks) - done,
            total=len(tasks),
        ))

    known = {e.id for e in snapshot.employees}
    orphans = [t for t in snapshot.tasks if not any(i in known for i in t.assigned_to_ids)]
    if orphans:
        done = sum(1 for t in orphans if t.status == "Done")
        rows.append(EmployeeTaskCount(
            label=UNASSIGNED, done=done, open=len(orphans) - done, total=len(orphans)
        ))
    return rows


def project_progress(snapshot: Snapshot) -> List[ProjectProgress]:
    rows = []
    for project in snapshot.projects:
        tasks = tasks_for_project(snapshot, project.id)
        done = sum(1 for t in tasks if t.status == "Done")
        rows.append(ProjectProgress(
            project_id=project.id,
            name=project.name,
            done=done,
            total=len(tasks),
            completion=percentage(done, len(tasks)),
        ))

    known = {p.id for p in snapshot.projects}
    orphans = [t for t in snapshot.tasks if not any(i in known for i in t.project_ids)]
    if orphans:
        done = sum(1 for t in orphans if t.status == "Done")
        rows.append(ProjectProgress(
            name=UNASSIGNED, done=done, total=len(orphans),
            completion=percentage(done, len(orphans)),
        ))
    return rows


# --- FILTROS Y AGRUPACIONES ---

def filter_tasks(
    tasks: List[TaskResponse],
    employee_id: Optional[str] = None,
    project_id: Optional[str] = None,
    status: Optional[str] = None,
    due_date: Optional[date] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> List[TaskResponse]:
    """
    Filtros de la lista de tareas y del perfil. Los rangos aplican sobre
    la fecha de entrega; una tarea sin fecha no entra en un rango.
    Resultado ordenado por creación, más reciente primero.
    """
    result = []
    for task in tasks:
        if employee_id and employee_id not in task.assigned_to_ids:
            continue
        if project_id and project_id not in task.project_ids:
            continue
        if status and task.status != status:
            continue
        if due_date and task.due_date != due_date:
            continue
        if date_from and (task.due_date is None or task.due_date < date_from):
            continue
        if date_to and (task.due_date is None or task.due_date > date_to):
            continue
        result.append(task)
    return sorted(result, key=lambda t: t.created_at, reverse=True)


def week_start(day: date) -> date:
    """Domingo que inicia la semana de `day`."""
    # weekday(): lunes=0 ... domingo=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def weekly_summary(
    snapshot: Snapshot, employee_id: str, limit: int = WEEKLY_GROUPS_LIMIT
) -> List[WeeklyGroup]:
    """Tareas del empleado agrupadas por semana de creación, más reciente primero."""
    weeks: Dict[date, List[TaskResponse]] = {}
    for task in tasks_for_employee(snapshot, employee_id):
        weeks.setdefault(week_start(created_date(task)), []).append(task)

    groups = []
    for start in sorted(weeks, reverse=True)[:limit]:
        tasks = weeks[start]
        groups.append(WeeklyGroup(
            week_start=start,
            week_end=start + timedelta(days=6),
            done=sum(1 for t in tasks if t.status == "Done"),
            total=len(tasks),
            task_titles=[t.title for t in tasks],
        ))
    return groups


def plan_summary(items: List[PlanItem]) -> PlanSummary:
    phases: "OrderedDict[str, List[PlanItem]]" = OrderedDict()
    for item in items:
        phases.setdefault(item.phase.strip() or UNCATEGORIZED, []).append(item)

    overall = round_half_up(sum(i.progress for i in items) / len(items)) if items else 0
    return PlanSummary(
        overall_progress=overall,
        done=sum(1 for i in items if i.status == "Done"),
        total=len(items),
        status_counts=[
            StatusCount(status=s, count=sum(1 for i in items if i.status == s))
            for s in PLAN_ITEM_STATUSES
        ],
        phases=[PhaseGroup(phase=name, items=group) for name, group in phases.items()],
    )


# --- VISTAS COMPUESTAS ---

def open_blockers(snapshot: Snapshot, today: date) -> List[BlockerView]:
    """Bloqueos abiertos con días transcurridos y nombre de quien reportó."""
    employee_names = _names(snapshot, "employees")
    return [
        BlockerView(
            id=b.id,
            task_title=b.task_title,
            description=b.description,
            employee_name=employee_names.get(b.employee_id, "Unknown"),
            reported_date=b.reported_date,
            days_open=days_since(b.reported_date, today),
        )
        for b in snapshot.blockers if b.status == "Open"
    ]


def dashboard(snapshot: Snapshot, today: date) -> Dashboard:
    employee_names = _names(snapshot, "employees")
    project_names = _names(snapshot, "projects")

    stats = DashboardStats(
        active_projects=sum(1 for p in snapshot.projects if p.status == "Active"),
        open_tasks=sum(1 for t in snapshot.tasks if t.status != "Done"),
        due_today=sum(1 for t in snapshot.tasks if t.due_date == today and t.status != "Done"),
        blocked_tasks=sum(1 for t in snapshot.tasks if t.status == "Blocked"),
    )

    overdue = sorted(
        (t for t in snapshot.tasks if is_overdue(t, today)), key=lambda t: t.due_date
    )
    recent = sorted(snapshot.tasks, key=lambda t: t.created_at, reverse=True)[:RECENT_TASKS_LIMIT]

    return Dashboard(
        stats=stats,
        overdue_tasks=[task_view(t, employee_names, project_names, today) for t in overdue],
        active_blockers=open_blockers(snapshot, today),
        recent_tasks=[task_view(t, employee_names, project_names, today) for t in recent],
    )


def employee_profile(
    snapshot: Snapshot,
    employee_id: str,
    today: date,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Optional[EmployeeProfile]:
    employee = next((e for e in snapshot.employees if e.id == employee_id), None)
    if employee is None:
        return None

    tasks = filter_tasks(
        snapshot.tasks, employee_id=employee_id,
        status=status, date_from=date_from, date_to=date_to,
    )
    return EmployeeProfile(
        employee=employee,
        stats=employee_stats(snapshot, employee_id, today),
        open_tasks=open_task_count(snapshot, employee_id),
        tasks=[
            task_view(t, _names(snapshot, "employees"), _names(snapshot, "projects"), today)
            for t in tasks
        ],
        weekly_summary=weekly_summary(snapshot, employee_id),
    )


def team_summary(snapshot: Snapshot, today: date) -> TeamSummary:
    """
    Carga por empleado activo, avance por proyecto, tareas vencidas y
    bloqueadas, bloqueos abiertos y totales por estado.
    """
    employee_names = _names(snapshot, "employees")
    project_names = _names(snapshot, "projects")

    workloads = []
    for emp in snapshot.employees:
        if emp.status != "Active":
            continue
        stats = employee_stats(snapshot, emp.id, today)
        workloads.append(EmployeeWorkload(
            employee_id=emp.id, name=emp.name, role=emp.role, **stats.model_dump()
        ))

    projects = []
    for project in snapshot.projects:
        tasks = tasks_for_project(snapshot, project.id)
        done = sum(1 for t in tasks if t.status == "Done")
        projects.append(ProjectHealth(
            project_id=project.id,
            name=project.name,
            status=project.status,
            deadline=project.deadline,
            done=done,
            total=len(tasks),
            completion=percentage(done, len(tasks)),
            overdue=sum(1 for t in tasks if is_overdue(t, today)),
        ))

    overdue = sorted(
        (t for t in snapshot.tasks if is_overdue(t, today)), key=lambda t: t.due_date
    )
    blocked = [t for t in snapshot.tasks if t.status == "Blocked"]

    return TeamSummary(
        today=today,
        active_members=len(workloads),
        employees=workloads,
        projects=projects,
        overdue_tasks=[task_view(t, employee_names, project_names, today) for t in overdue],
        blocked_tasks=[task_view(t, employee_names, project_names, today) for t in blocked],
        open_blockers=open_blockers(snapshot, today),
        total_tasks=len(snapshot.tasks),
        status_counts=status_distribution(snapshot),
    )
