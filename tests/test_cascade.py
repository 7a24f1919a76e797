"""
Cascadas de borrado y reportes de avance, probadas de punta a punta.
"""
from datetime import date, datetime, timezone

from scrumcmd.main import app
from scrumcmd.services.clock import FixedClock, get_clock

TODAY = date(2024, 1, 20)
LATER = FixedClock(datetime(2024, 1, 22, 15, 30, 0, tzinfo=timezone.utc))


async def get_task(api, task_id):
    response = await api.get(f"/tasks/{task_id}")
    assert response.status_code == 200
    return response.json()


# --- BORRADO DE EMPLEADO ---

async def test_delete_employee_unassigns_tasks(api, make_employee, make_task):
    e1 = await make_employee("Ana Torres")
    e2 = await make_employee("Luis Pérez")
    t1 = await make_task("Deploy API", assigned_to_id=f"{e1['id']},{e2['id']}")
    t2 = await make_task("Solo Ana", assigned_to_ids=[e1["id"]])
    t3 = await make_task("Solo Luis", assigned_to_id=e2["id"])

    app.dependency_overrides[get_clock] = lambda: LATER
    response = await api.delete(f"/employees/{e1['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    after_t1 = await get_task(api, t1["id"])
    assert after_t1["assigned_to_id"] == e2["id"]
    assert after_t1["assigned_to_ids"] == [e2["id"]]
    assert after_t1["updated_at"] == "2024-01-22T15:30:00.000Z"
    assert after_t1["updated_at"] >= after_t1["created_at"]

    after_t2 = await get_task(api, t2["id"])
    assert after_t2["assigned_to_id"] == ""

    # Una tarea que no lo referenciaba no se toca
    after_t3 = await get_task(api, t3["id"])
    assert after_t3["updated_at"] == t3["updated_at"]

    listed = (await api.get("/tasks")).json()
    assert listed["meta"]["total"] == 3

    missing = await api.get(f"/employees/{e1['id']}")
    assert missing.status_code == 404


async def test_delete_missing_employee_is_not_found(api):
    response = await api.delete("/employees/nope")
    assert response.status_code == 404
    assert response.json()["detail"] == "Empleado no encontrado"


async def test_unassigned_task_shows_in_reports(api, make_employee, make_task):
    e1 = await make_employee("Ana Torres")
    await make_task("Huérfana", assigned_to_id=e1["id"])
    await api.delete(f"/employees/{e1['id']}")

    rows = (await api.get("/reports/tasks-per-employee")).json()
    assert rows == [{"employee_id": None, "label": "Unassigned", "done": 0, "open": 1, "total": 1}]


# --- BORRADO DE PROYECTO ---

async def test_delete_project_orphans_tasks(api, make_project, make_task):
    p1 = await make_project("Portal")
    p2 = await make_project("API")
    only = await make_task("Solo Portal", project_id=p1["id"])
    shared = await make_task("Compartida", project_ids=[p2["id"], p1["id"]])

    response = await api.delete(f"/projects/{p1['id']}")
    assert response.status_code == 200

    orphan = await get_task(api, only["id"])
    assert orphan["project_id"] == ""
    assert (await get_task(api, shared["id"]))["project_id"] == p2["id"]

    listed = (await api.get("/tasks")).json()
    assert {t["id"] for t in listed["data"]} == {only["id"], shared["id"]}

    progress = (await api.get("/projects/progress")).json()
    assert progress[-1]["name"] == "Unassigned"
    assert progress[-1]["total"] == 1

    csv_text = (await api.get("/reports/export/tasks.csv")).text
    assert "Solo Portal,Unassigned,Unassigned" in csv_text


async def test_delete_missing_project_is_not_found(api):
    assert (await api.delete("/projects/nope")).status_code == 404


# --- REPORTES DE AVANCE ---

async def report(api, **fields):
    payload = {"employee_id": "e1", "project_id": "p1", "task_title": "Deploy API", "progress": 50}
    payload.update(fields)
    response = await api.post("/daily-updates", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test_progress_report_with_blocker_creates_one_blocker(api, make_employee, make_project, make_task):
    emp = await make_employee("Ana Torres")
    project = await make_project("Portal")
    task = await make_task("Deploy API", project_id=project["id"], assigned_to_id=emp["id"])

    result = await report(
        api, employee_id=emp["id"], project_id=project["id"],
        task_title="Deploy API", blockers="waiting on infra",
    )

    assert result["matched_task_id"] == task["id"]
    assert result["task_status"] == "Blocked"
    assert (await get_task(api, task["id"]))["status"] == "Blocked"

    blockers = (await api.get("/blockers", params={"status": "Open"})).json()
    assert blockers["meta"]["total"] == 1
    blocker = blockers["data"][0]
    assert blocker["status"] == "Open"
    assert blocker["task_title"] == "Deploy API"
    assert blocker["description"] == "waiting on infra"
    assert blocker["reported_date"] == TODAY.isoformat()


async def test_progress_report_infers_status(api, make_project, make_task):
    project = await make_project("Portal")
    task = await make_task("Deploy API", project_id=project["id"])

    result = await report(api, project_id=project["id"], task_title="deploy api", progress=40)
    assert result["task_status"] == "In Progress"

    result = await report(api, project_id=project["id"], task_title="DEPLOY API", progress=100)
    assert result["task_status"] == "Done"
    assert (await get_task(api, task["id"]))["status"] == "Done"

    # Cadena vacía no es bloqueo
    result = await report(api, project_id=project["id"], progress=100, blockers="")
    assert result["blocker"] is None
    assert (await api.get("/blockers")).json()["meta"]["total"] == 0


async def test_progress_report_whitespace_blocker_still_blocks(api, make_project, make_task):
    project = await make_project("Portal")
    task = await make_task("Deploy API", project_id=project["id"])

    result = await report(api, project_id=project["id"], progress=40, blockers="   ")

    assert result["task_status"] == "Blocked"
    assert result["blocker"]["description"] == "   "
    assert (await get_task(api, task["id"]))["status"] == "Blocked"
    assert (await api.get("/blockers")).json()["meta"]["total"] == 1


async def test_progress_report_without_match_is_informational(api, make_project, make_task):
    project = await make_project("Portal")
    other = await make_project("API")
    task = await make_task("Deploy API", project_id=other["id"])

    result = await report(api, project_id=project["id"], progress=100)

    assert result["matched_task_id"] is None
    assert result["task_status"] is None
    assert (await get_task(api, task["id"]))["status"] == "Todo"

    updates = (await api.get("/daily-updates")).json()
    assert updates["meta"]["total"] == 1
    assert updates["data"][0]["date"] == TODAY.isoformat()


async def test_resolve_blocker_leaves_task_blocked(api, make_project, make_task):
    project = await make_project("Portal")
    task = await make_task("Deploy API", project_id=project["id"])
    result = await report(api, project_id=project["id"], blockers="sin acceso a prod")

    response = await api.patch(f"/blockers/{result['blocker']['id']}/resolve")
    assert response.status_code == 200
    resolved = response.json()
    assert resolved["status"] == "Resolved"
    assert resolved["resolved_date"] == "2024-01-20T10:00:00.000Z"

    assert (await get_task(api, task["id"]))["status"] == "Blocked"


async def test_resolve_missing_blocker_is_not_found(api):
    assert (await api.patch("/blockers/nope/resolve")).status_code == 404
