from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from .. import crud, schemas
from ..database import get_db
from ..services import cascade
from ..services.clock import Clock, get_clock
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(tags=["Daily Updates"])

@router.get("/daily-updates", response_model=schemas.PaginatedResponse[schemas.DailyUpdateResponse])
async def read_daily_updates(
    page: int = 1,
    limit: int = 50,
    employee_id: Optional[str] = None,
    project_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    return await crud.get_daily_updates(db, page, limit, employee_id, project_id)

@router.post("/daily-updates", response_model=schemas.ProgressReportResult, status_code=201)
async def submit_daily_update(
    update: schemas.DailyUpdateCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Reportar Avance**

    Busca la tarea por título dentro del proyecto y actualiza su estado.
    Si se reporta un bloqueo se crea un registro abierto. Un título sin
    coincidencia no es error: `matched_task_id` vuelve vacío.
    """
    return await cascade.submit_progress_update(db, update, clock)

@router.get("/blockers", response_model=schemas.PaginatedResponse[schemas.BlockerResponse])
async def read_blockers(
    page: int = 1,
    limit: int = 50,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    return await crud.get_blockers(db, page, limit, status)

@router.patch("/blockers/{blocker_id}/resolve", response_model=schemas.BlockerResponse)
async def resolve_blocker(
    blocker_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """**Resolver Bloqueo** (no cambia el estado de la tarea)."""
    blocker = await cascade.resolve_blocker(db, blocker_id, clock)
    if not blocker:
        raise HTTPException(status_code=404, detail="Bloqueo no encontrado")
    return blocker
