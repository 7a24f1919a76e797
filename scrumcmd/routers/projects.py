from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from .. import crud, schemas
from ..database import get_db
from ..services import aggregation, cascade
from ..services.clock import Clock, get_clock
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/projects", tags=["Projects"])

@router.get("", response_model=schemas.PaginatedResponse[schemas.ProjectResponse])
async def read_projects(
    page: int = 1,
    limit: int = 50,
    search: Optional[str] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Listar Proyectos**"""
    return await crud.get_projects(db, page, limit, search, status)

@router.post("", response_model=schemas.ProjectResponse, status_code=201)
async def create_project(
    project: schemas.ProjectCreate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Crear Nuevo Proyecto**"""
    return await crud.create_project(db, project)

@router.get("/progress", response_model=List[schemas.ProjectProgress])
async def read_project_progress(
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Avance por Proyecto**

    Porcentaje de tareas completadas por proyecto, más el grupo
    "Unassigned" para tareas sin proyecto vigente.
    """
    snapshot = await crud.load_snapshot(db)
    return aggregation.project_progress(snapshot)

@router.get("/{project_id}", response_model=schemas.ProjectResponse)
async def read_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    project = await crud.get_project(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Proyecto no encontrado")
    return project

@router.put("/{project_id}", response_model=schemas.ProjectResponse)
async def update_project(
    project_id: str,
    project: schemas.ProjectCreate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    updated = await crud.update_project(db, project_id, project)
    if not updated:
        raise HTTPException(status_code=404, detail="Proyecto no encontrado")
    return updated

@router.patch("/{project_id}/status", response_model=schemas.ProjectResponse)
async def update_project_status(
    project_id: str,
    payload: schemas.ProjectStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    updated = await crud.update_project_status(db, project_id, payload.status)
    if not updated:
        raise HTTPException(status_code=404, detail="Proyecto no encontrado")
    return updated

@router.delete("/{project_id}", response_model=schemas.StatusResponse)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Eliminar Proyecto**

    Las tareas vinculadas se desvinculan, nunca se eliminan.
    """
    if not await cascade.delete_project(db, project_id, clock):
        raise HTTPException(status_code=404, detail="Proyecto no encontrado")
    return {"success": True}
