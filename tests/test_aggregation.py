import time
from datetime import date

import pytest

from scrumcmd.schemas import (
    BlockerResponse, EmployeeResponse, PlanItem, ProjectResponse, Snapshot, TaskResponse,
)
from scrumcmd.services import aggregation

TODAY = date(2024, 1, 20)


def task(task_id, status="Todo", assigned="", projects="", due=None, created="2024-01-15T09:00:00.000Z", title=None):
    return TaskResponse(
        id=task_id,
        title=title or f"Task {task_id}",
        status=status,
        project_id=projects,
        assigned_to_id=assigned,
        due_date=due,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def snapshot():
    return Snapshot(
        employees=[
            EmployeeResponse(id="e1", name="Ana Torres"),
            EmployeeResponse(id="e2", name="Luis Pérez"),
            EmployeeResponse(id="e3", name="Rosa Díaz", status="Inactive"),
        ],
        projects=[
            ProjectResponse(id="p1", name="Portal"),
            ProjectResponse(id="p2", name="API", status="On Hold"),
        ],
        tasks=[
            task("t1", "Done", "e1", "p1", due=date(2024, 1, 10)),
            task("t2", "In Progress", "e1,e2", "p1,p2", due=date(2024, 1, 18)),
            task("t3", "Blocked", "e2", "p2", due=TODAY),
            task("t4", "Todo", "", "", due=date(2024, 1, 25)),
            task("t5", "Todo", "ghost", "gone"),
        ],
        blockers=[
            BlockerResponse(
                id="b1", employee_id="e2", project_id="p2", task_title="Task t3",
                description="esperando infraestructura", reported_date=date(2024, 1, 17),
            ),
            BlockerResponse(
                id="b2", employee_id="e1", project_id="p1", task_title="Task t1",
                description="resuelto", reported_date=date(2024, 1, 5), status="Resolved",
            ),
        ],
    )


# --- CONTEOS ---

def test_open_task_count_uses_decoded_assignees(snapshot):
    assert aggregation.open_task_count(snapshot, "e1") == 1
    assert aggregation.open_task_count(snapshot, "e2") == 2
    assert aggregation.open_task_count(snapshot, "nobody") == 0


def test_overdue_excludes_done():
    assert not aggregation.is_overdue(task("x", "Done", due=date(2024, 1, 1)), TODAY)
    assert aggregation.is_overdue(task("x", "Blocked", due=date(2024, 1, 19)), TODAY)
    assert not aggregation.is_overdue(task("x", "Todo", due=TODAY), TODAY)
    assert not aggregation.is_overdue(task("x", "Todo"), TODAY)


def test_days_since_uses_calendar_dates():
    assert aggregation.days_since(date(2024, 1, 17), TODAY) == 3
    assert aggregation.days_since(TODAY, TODAY) == 0
    assert aggregation.days_since(date(2023, 12, 31), date(2024, 3, 1)) == 61


def test_project_completion_counts_multi_project_tasks(snapshot):
    assert aggregation.project_completion(snapshot, "p1") == 50
    assert aggregation.project_completion(snapshot, "p2") == 0


def test_project_completion_without_tasks_is_zero():
    assert aggregation.project_completion(Snapshot(), "p1") == 0


def test_project_completion_rounds_half_up():
    tasks = [task(f"t{i}", "Done" if i == 0 else "Todo", projects="p1") for i in range(8)]
    # 100 / 8 = 12.5
    assert aggregation.project_completion(Snapshot(tasks=tasks), "p1") == 13


def test_employee_stats(snapshot):
    stats = aggregation.employee_stats(snapshot, "e2", TODAY)
    assert stats.total == 2
    assert stats.in_progress == 1
    assert stats.blocked == 1
    assert stats.done == 0
    assert stats.overdue == 1


def test_status_distribution_covers_every_status(snapshot):
    counts = {row.status: row.count for row in aggregation.status_distribution(snapshot)}
    assert counts == {"Done": 1, "In Progress": 1, "Blocked": 1, "Todo": 2}


def test_status_distribution_on_empty_snapshot():
    rows = aggregation.status_distribution(Snapshot())
    assert [r.status for r in rows] == ["Done", "In Progress", "Blocked", "Todo"]
    assert all(r.count == 0 for r in rows)


def test_tasks_per_employee_active_only_with_unassigned_row(snapshot):
    rows = aggregation.tasks_per_employee(snapshot)
    by_label = {row.label: row for row in rows}

    assert list(by_label) == ["Ana", "Luis", "Unassigned"]
    assert (by_label["Ana"].done, by_label["Ana"].open) == (1, 1)
    assert (by_label["Luis"].done, by_label["Luis"].open) == (0, 2)
    # t4 sin asignados y t5 con un empleado inexistente
    assert by_label["Unassigned"].total == 2


def test_project_progress_includes_unassigned_bucket(snapshot):
    rows = aggregation.project_progress(snapshot)
    assert [(r.name, r.total, r.completion) for r in rows] == [
        ("Portal", 2, 50),
        ("API", 2, 0),
        ("Unassigned", 2, 0),
    ]


# --- ETIQUETAS ---

def test_labels_ignore_dangling_ids(snapshot):
    employees = {e.id: e.name for e in snapshot.employees}
    projects = {p.id: p.name for p in snapshot.projects}

    assert aggregation.assignee_label(task("x", assigned="e1,ghost,e2"), employees) == "Ana Torres, Luis Pérez"
    assert aggregation.assignee_label(task("x", assigned="ghost"), employees) == "Unassigned"
    assert aggregation.project_label(task("x"), projects) == "Unassigned"


def test_status_style_falls_back_to_default():
    assert aggregation.status_style("Done") == "success"
    assert aggregation.status_style("Archived") == "default"
    assert aggregation.status_style(None) == "default"


# --- FILTROS Y AGRUPACIONES ---

def test_filter_tasks(snapshot):
    tasks = snapshot.tasks
    assert {t.id for t in aggregation.filter_tasks(tasks, employee_id="e2")} == {"t2", "t3"}
    assert {t.id for t in aggregation.filter_tasks(tasks, project_id="p2")} == {"t2", "t3"}
    assert [t.id for t in aggregation.filter_tasks(tasks, status="Blocked")] == ["t3"]
    assert [t.id for t in aggregation.filter_tasks(tasks, due_date=TODAY)] == ["t3"]

    ranged = aggregation.filter_tasks(tasks, date_from=date(2024, 1, 15), date_to=date(2024, 1, 20))
    assert {t.id for t in ranged} == {"t2", "t3"}


def test_filter_tasks_sorts_newest_first():
    tasks = [
        task("old", created="2024-01-01T08:00:00.000Z"),
        task("new", created="2024-01-10T08:00:00.000Z"),
    ]
    assert [t.id for t in aggregation.filter_tasks(tasks)] == ["new", "old"]


def test_week_start_is_sunday():
    assert aggregation.week_start(date(2024, 1, 2)) == date(2023, 12, 31)
    assert aggregation.week_start(date(2024, 1, 7)) == date(2024, 1, 7)
    assert aggregation.week_start(date(2024, 1, 13)) == date(2024, 1, 7)


def test_weekly_grouping_order():
    snapshot = Snapshot(
        employees=[EmployeeResponse(id="e1", name="Ana Torres")],
        tasks=[
            task("t1", "Done", "e1", created="2024-01-02T10:00:00.000Z"),
            task("t2", "Todo", "e1", created="2024-01-09T10:00:00.000Z"),
            task("t3", "Done", "e1", created="2024-01-16T10:00:00.000Z"),
        ],
    )
    groups = aggregation.weekly_summary(snapshot, "e1")

    assert [g.week_start for g in groups] == [date(2024, 1, 14), date(2024, 1, 7), date(2023, 12, 31)]
    assert groups[0].week_end == date(2024, 1, 20)
    assert [(g.done, g.total) for g in groups] == [(1, 1), (0, 1), (1, 1)]


def test_weekly_grouping_caps_at_four_weeks():
    created = ["2024-01-02", "2024-01-09", "2024-01-16", "2024-01-23", "2024-01-30"]
    snapshot = Snapshot(tasks=[
        task(f"t{i}", assigned="e1", created=f"{day}T10:00:00.000Z") for i, day in enumerate(created)
    ])
    groups = aggregation.weekly_summary(snapshot, "e1")
    assert len(groups) == 4
    assert groups[0].week_start == date(2024, 1, 28)
    assert groups[-1].week_start == date(2024, 1, 7)


def test_plan_summary_groups_by_phase():
    items = [
        PlanItem(id="a", phase="Design", status="Done", progress=100),
        PlanItem(id="b", phase="", status="In Progress", progress=25),
        PlanItem(id="c", phase="Design", status="Not Started", progress=0),
    ]
    summary = aggregation.plan_summary(items)

    assert summary.overall_progress == 42
    assert summary.done == 1
    assert [p.phase for p in summary.phases] == ["Design", "Uncategorized"]
    assert [i.id for i in summary.phases[0].items] == ["a", "c"]
    counts = {c.status: c.count for c in summary.status_counts}
    assert counts == {"Not Started": 1, "In Progress": 1, "Done": 1, "Blocked": 0}


def test_plan_summary_empty():
    summary = aggregation.plan_summary([])
    assert summary.overall_progress == 0
    assert summary.phases == []


# --- VISTAS COMPUESTAS ---

def test_dashboard(snapshot):
    board = aggregation.dashboard(snapshot, TODAY)

    assert board.stats.active_projects == 1
    assert board.stats.open_tasks == 4
    assert board.stats.due_today == 1
    assert board.stats.blocked_tasks == 1

    assert [t.id for t in board.overdue_tasks] == ["t2"]
    assert board.overdue_tasks[0].days_overdue == 2
    assert board.overdue_tasks[0].assignee_label == "Ana Torres, Luis Pérez"

    assert [b.id for b in board.active_blockers] == ["b1"]
    assert board.active_blockers[0].days_open == 3
    assert board.active_blockers[0].employee_name == "Luis Pérez"


def test_dashboard_recent_tasks_capped_at_eight():
    tasks = [task(f"t{i}", created=f"2024-01-{i + 1:02d}T10:00:00.000Z") for i in range(10)]
    board = aggregation.dashboard(Snapshot(tasks=tasks), TODAY)
    assert [t.id for t in board.recent_tasks] == [f"t{i}" for i in range(9, 1, -1)]


def test_dashboard_on_empty_snapshot():
    board = aggregation.dashboard(Snapshot(), TODAY)
    assert board.stats.open_tasks == 0
    assert board.overdue_tasks == []
    assert board.recent_tasks == []


def test_employee_profile(snapshot):
    profile = aggregation.employee_profile(snapshot, "e1", TODAY, status="Done")
    assert profile.employee.name == "Ana Torres"
    assert profile.stats.total == 2
    assert profile.open_tasks == 1
    assert [t.id for t in profile.tasks] == ["t1"]
    assert aggregation.employee_profile(snapshot, "ghost", TODAY) is None


def test_team_summary(snapshot):
    summary = aggregation.team_summary(snapshot, TODAY)

    assert summary.today == TODAY
    assert summary.active_members == 2
    by_name = {e.name: e for e in summary.employees}
    assert list(by_name) == ["Ana Torres", "Luis Pérez"]
    ana, luis = by_name["Ana Torres"], by_name["Luis Pérez"]
    assert (ana.total, ana.done, ana.in_progress, ana.overdue) == (2, 1, 1, 1)
    assert (luis.total, luis.blocked, luis.in_progress, luis.overdue) == (2, 1, 1, 1)

    assert [(p.name, p.status, p.completion, p.overdue) for p in summary.projects] == [
        ("Portal", "Active", 50, 1),
        ("API", "On Hold", 0, 1),
    ]
    assert [t.id for t in summary.overdue_tasks] == ["t2"]
    assert [t.id for t in summary.blocked_tasks] == ["t3"]
    assert [b.id for b in summary.open_blockers] == ["b1"]
    assert summary.total_tasks == 5
    assert {c.status: c.count for c in summary.status_counts}["Todo"] == 2


def test_team_summary_on_empty_snapshot():
    summary = aggregation.team_summary(Snapshot(), TODAY)
    assert summary.active_members == 0
    assert summary.employees == []
    assert summary.total_tasks == 0


@pytest.fixture
def local_tz(monkeypatch):
    """Zona local UTC-4 durante la prueba."""
    if not hasattr(time, "tzset"):
        pytest.skip("tzset no disponible")
    monkeypatch.setenv("TZ", "VET+4")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


def test_weekly_grouping_uses_local_calendar_day(local_tz):
    # Domingo 02:00 UTC es sábado 22:00 local: pertenece a la semana anterior
    task_ = task("t1", "Todo", "e1", created="2024-01-14T02:00:00.000Z")
    assert aggregation.created_date(task_) == date(2024, 1, 13)

    groups = aggregation.weekly_summary(
        Snapshot(employees=[EmployeeResponse(id="e1", name="Ana Torres")], tasks=[task_]), "e1"
    )
    assert groups[0].week_start == date(2024, 1, 7)
