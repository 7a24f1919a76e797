from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from datetime import date
from .. import crud, schemas
from ..database import get_db
from ..services import aggregation, cascade
from ..services.clock import Clock, get_clock
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/employees", tags=["Employees"])

@router.get("", response_model=schemas.PaginatedResponse[schemas.EmployeeResponse])
async def read_employees(
    page: int = 1,
    limit: int = 50,
    search: Optional[str] = None,
    status: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Listar Empleados** (búsqueda por nombre y filtro por estado)."""
    return await crud.get_employees(db, page, limit, search, status)

@router.post("", response_model=schemas.EmployeeResponse, status_code=201)
async def create_employee(
    employee: schemas.EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """**Registrar Empleado**"""
    return await crud.create_employee(db, employee, clock)

@router.get("/{employee_id}", response_model=schemas.EmployeeResponse)
async def read_employee(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    employee = await crud.get_employee(db, employee_id)
    if not employee:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return employee

@router.put("/{employee_id}", response_model=schemas.EmployeeResponse)
async def update_employee(
    employee_id: str,
    employee: schemas.EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Actualizar Empleado** (fila completa)."""
    updated = await crud.update_employee(db, employee_id, employee)
    if not updated:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return updated

@router.patch("/{employee_id}/status", response_model=schemas.EmployeeResponse)
async def update_employee_status(
    employee_id: str,
    payload: schemas.EmployeeStatusUpdate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    updated = await crud.update_employee_status(db, employee_id, payload.status)
    if not updated:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return updated

@router.post("/{employee_id}/toggle-status", response_model=schemas.EmployeeResponse)
async def toggle_employee_status(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Activar / Desactivar Empleado**"""
    updated = await crud.toggle_employee_status(db, employee_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return updated

@router.delete("/{employee_id}", response_model=schemas.StatusResponse)
async def delete_employee(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Eliminar Empleado**

    Lo quita de todas las tareas asignadas. Las tareas se conservan.
    """
    if not await cascade.delete_employee(db, employee_id, clock):
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return {"success": True}

@router.get("/{employee_id}/profile", response_model=schemas.EmployeeProfile)
async def read_employee_profile(
    employee_id: str,
    status: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Perfil de Empleado**

    Estadísticas, tareas filtradas y resumen semanal de las últimas 4 semanas.
    """
    snapshot = await crud.load_snapshot(db)
    profile = aggregation.employee_profile(
        snapshot, employee_id, clock.today(),
        status=status, date_from=date_from, date_to=date_to
    )
    if not profile:
        raise HTTPException(status_code=404, detail="Empleado no encontrado")
    return profile
