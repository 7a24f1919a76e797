import csv
import io
from datetime import date

from ..schemas import Snapshot
from ..services import aggregation

EMPLOYEE_HEADERS = ["Name", "Role", "Email", "Status", "Joined", "Total Tasks", "Open", "Done", "Overdue"]
TASK_HEADERS = [
    "Title", "Projects", "Assignees", "Status", "Priority",
    "Due Date", "Overdue", "Created At", "Updated At",
]


def _date(value) -> str:
    return value.isoformat() if value else ""


def employees_csv(snapshot: Snapshot, today: date) -> str:
    """Una fila por empleado con sus conteos de tareas."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EMPLOYEE_HEADERS)

    for emp in snapshot.employees:
        stats = aggregation.employee_stats(snapshot, emp.id, today)
        writer.writerow([
            emp.name,
            emp.role,
            emp.email,
            emp.status,
            _date(emp.joined_date),
            stats.total,
            stats.total - stats.done,
            stats.done,
            stats.overdue,
        ])
    return output.getvalue()


def tasks_csv(snapshot: Snapshot, today: date) -> str:
    """Una fila por tarea; proyectos y asignados con nombres resueltos."""
    employee_names = {e.id: e.name for e in snapshot.employees}
    project_names = {p.id: p.name for p in snapshot.projects}

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(TASK_HEADERS)

    for task in aggregation.filter_tasks(snapshot.tasks):
        writer.writerow([
            task.title,
            aggregation.project_label(task, project_names),
            aggregation.assignee_label(task, employee_names),
            task.status,
            task.priority,
            _date(task.due_date),
            "Yes" if aggregation.is_overdue(task, today) else "No",
            task.created_at,
            task.updated_at,
        ])
    return output.getvalue()
