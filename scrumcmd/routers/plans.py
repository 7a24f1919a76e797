from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from .. import crud, schemas
from ..database import get_db
from ..services import aggregation
from ..services.clock import Clock, get_clock
from ..services.gantt import gantt_layout
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/project-plans", tags=["Project Plans"])

@router.get("", response_model=schemas.PaginatedResponse[schemas.ProjectPlanResponse])
async def read_plans(
    page: int = 1,
    limit: int = 50,
    project_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    return await crud.get_plans(db, page, limit, project_id)

@router.post("", response_model=schemas.ProjectPlanResponse, status_code=201)
async def create_plan(
    plan: schemas.ProjectPlanCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Crear Plan de Proyecto**

    Sin `items` se crea con las fases por defecto
    (Discovery, Design, Development, Testing, Launch).
    """
    return await crud.create_plan(db, plan, clock)

@router.put("/{plan_id}", response_model=schemas.ProjectPlanResponse)
async def update_plan(
    plan_id: str,
    plan: schemas.ProjectPlanUpdate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Actualizar Plan**

    Estado y progreso de cada ítem se sincronizan: progreso 0 es
    Not Started, 100 es Done, el resto In Progress (o Blocked).
    """
    updated = await crud.update_plan(db, plan_id, plan)
    if not updated:
        raise HTTPException(status_code=404, detail="Plan no encontrado")
    return updated

@router.delete("/{plan_id}", response_model=schemas.StatusResponse)
async def delete_plan(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    if not await crud.delete_plan(db, plan_id):
        raise HTTPException(status_code=404, detail="Plan no encontrado")
    return {"success": True}

@router.get("/{plan_id}/gantt", response_model=schemas.GanttChart)
async def read_plan_gantt(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """**Diagrama de Gantt** (solo ítems con fecha de inicio y fin)."""
    plan = await crud.get_plan(db, plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan no encontrado")
    items = schemas.ProjectPlanResponse.model_validate(plan).items
    return gantt_layout(items, clock.today())

@router.get("/{plan_id}/summary", response_model=schemas.PlanSummary)
async def read_plan_summary(
    plan_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    plan = await crud.get_plan(db, plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan no encontrado")
    items = schemas.ProjectPlanResponse.model_validate(plan).items
    return aggregation.plan_summary(items)
