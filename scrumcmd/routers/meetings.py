from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from .. import crud, schemas
from ..database import get_db
from ..services.clock import Clock, get_clock
from ..utils.minutes_pdf import MinutesPDFGenerator
from scrum_common.security import get_current_user, UserPayload

router = APIRouter(prefix="/meetings", tags=["Meetings"])

@router.get("", response_model=schemas.PaginatedResponse[schemas.MeetingResponse])
async def read_meetings(
    page: int = 1,
    limit: int = 50,
    project_id: Optional[str] = None,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    """**Listar Minutas** (más recientes primero)."""
    return await crud.get_meetings(db, page, limit, project_id)

@router.post("", response_model=schemas.MeetingResponse, status_code=201)
async def create_meeting(
    meeting: schemas.MeetingCreate,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    return await crud.create_meeting(db, meeting, clock)

@router.put("/{meeting_id}", response_model=schemas.MeetingResponse)
async def update_meeting(
    meeting_id: str,
    meeting: schemas.MeetingCreate,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    updated = await crud.update_meeting(db, meeting_id, meeting)
    if not updated:
        raise HTTPException(status_code=404, detail="Minuta no encontrada")
    return updated

@router.delete("/{meeting_id}", response_model=schemas.StatusResponse)
async def delete_meeting(
    meeting_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserPayload = Depends(get_current_user)
):
    if not await crud.delete_meeting(db, meeting_id):
        raise HTTPException(status_code=404, detail="Minuta no encontrada")
    return {"success": True}

@router.get("/{meeting_id}/pdf")
async def download_meeting_pdf(
    meeting_id: str,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
    user: UserPayload = Depends(get_current_user)
):
    """
    **Descargar Minuta en PDF**

    Asistentes y proyecto se muestran por nombre; los IDs que ya no
    existen se omiten.
    """
    meeting = await crud.get_meeting(db, meeting_id)
    if not meeting:
        raise HTTPException(status_code=404, detail="Minuta no encontrada")

    snapshot = await crud.load_snapshot(db)
    generator = MinutesPDFGenerator(
        employee_names={e.id: e.name for e in snapshot.employees},
        project_names={p.id: p.name for p in snapshot.projects},
    )
    pdf = generator.generate(meeting, clock.today())

    filename = f"minuta_{meeting.date.isoformat()}_{meeting.id}.pdf"
    return StreamingResponse(
        pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
