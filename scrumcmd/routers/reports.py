from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from .. import crud, schemas
from ..database import get_db
from ..services import aggregation, analysis
from ..services.clock import Clock, get_clock
from ..utils import csv_export
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/reports", tags=["Reports"])

def _csv_response(content: str, filename: str) -> StreamingResponse:
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )

@router.get("/dashboard", response_model=schemas.Dashboard)
async def read_dashboard(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Dashboard**

    Indicadores generales, tareas vencidas, bloqueos abiertos
    y las 8 tareas más recientes.
    """
    snapshot = await crud.load_snapshot(db)
    return aggregation.dashboard(snapshot, clock.today())

@router.get("/tasks-per-employee", response_model=List[schemas.EmployeeTaskCount])
async def read_tasks_per_employee(
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    snapshot = await crud.load_snapshot(db)
    return aggregation.tasks_per_employee(snapshot)

@router.get("/status-distribution", response_model=List[schemas.StatusCount])
async def read_status_distribution(
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    snapshot = await crud.load_snapshot(db)
    return aggregation.status_distribution(snapshot)

@router.get("/analysis", response_model=schemas.AnalysisReport)
async def read_team_analysis(
    prompt_type: schemas.AnalysisPromptType = "sprint_health",
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Asistente Scrum**

    Informe en Markdown (`sprint_health`, `risk_report`, `standup_notes`,
    `workload_check`) generado a partir del resumen del equipo.
    Sin `ANTHROPIC_API_KEY` devuelve un aviso y el resumen igual se incluye.
    """
    snapshot = await crud.load_snapshot(db)
    summary = aggregation.team_summary(snapshot, clock.today())
    report = await analysis.analyze_team(summary, prompt_type)
    return {
        "prompt_type": prompt_type,
        "configured": bool(analysis.api_key()),
        "report": report,
        "summary": summary
    }

# --- EXPORTACIONES ---

@router.get("/export/employees.csv")
async def export_employees(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    snapshot = await crud.load_snapshot(db)
    today = clock.today()
    content = csv_export.employees_csv(snapshot, today)
    return _csv_response(content, f"empleados_{today.isoformat()}.csv")

@router.get("/export/tasks.csv")
async def export_tasks(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    snapshot = await crud.load_snapshot(db)
    today = clock.today()
    content = csv_export.tasks_csv(snapshot, today)
    return _csv_response(content, f"tareas_{today.isoformat()}.csv")
