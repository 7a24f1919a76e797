from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import date
from .. import crud, schemas
from ..database import get_db
from ..services.clock import Clock, get_clock
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/tasks", tags=["Tasks"])

@router.get("", response_model=schemas.PaginatedResponse[schemas.TaskResponse])
async def read_tasks(
    page: int = 1,
    limit: int = 100,
    project_id: Optional[str] = None,
    employee_id: Optional[str] = None,
    status: Optional[str] = None,
    search: Optional[str] = None,
    due_date: Optional[date] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Listar Tareas**

    Incluye las tareas sin proyecto ni asignados (quedan con
    `project_id` / `assigned_to_id` vacíos).
    """
    return await crud.get_tasks(
        db, page, limit, project_id, employee_id, status, search,
        due_date=due_date, date_from=date_from, date_to=date_to
    )

@router.post("", response_model=schemas.TaskResponse, status_code=201)
async def create_task(
    task: schemas.TaskCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """**Crear Tarea** (varios proyectos y asignados permitidos)."""
    try:
        return await crud.create_task(db, task, clock)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{task_id}", response_model=schemas.TaskResponse)
async def read_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    task = await crud.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return task

@router.put("/{task_id}", response_model=schemas.TaskResponse)
async def update_task(
    task_id: str,
    task: schemas.TaskCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """**Actualizar Tarea** (fila completa, refresca `updated_at`)."""
    try:
        updated = await crud.update_task(db, task_id, task, clock)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return updated

@router.patch("/{task_id}/status", response_model=schemas.TaskResponse)
async def update_task_status(
    task_id: str,
    payload: schemas.TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Actualizar Estado de Tarea**

    Útil para tableros Kanban (mover de Todo a Done).
    """
    task = await crud.update_task_status(db, task_id, payload.status, clock)
    if not task:
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return task

@router.delete("/{task_id}", response_model=schemas.StatusResponse)
async def delete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Eliminar Tarea** (junto con sus notas)."""
    if not await crud.delete_task(db, task_id):
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return {"success": True}

# --- NOTAS ---

@router.get("/{task_id}/notes", response_model=List[schemas.TaskNoteResponse])
async def read_task_notes(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    if not await crud.get_task(db, task_id):
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return await crud.get_task_notes(db, task_id)

@router.post("/{task_id}/notes", response_model=schemas.TaskNoteResponse, status_code=201)
async def add_task_note(
    task_id: str,
    note: schemas.TaskNoteCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    new_note = await crud.create_task_note(db, task_id, note, clock)
    if not new_note:
        raise HTTPException(status_code=404, detail="Tarea no encontrada")
    return new_note
