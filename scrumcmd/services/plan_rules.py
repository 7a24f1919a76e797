"""
Máquina de estados de los ítems de un plan de proyecto.

Estado y progreso se mantienen sincronizados en cada escritura del plan:
    progress == 0   <=> Not Started
    progress == 100 <=> Done
    0 < progress < 100 -> In Progress, salvo que se pida Blocked
"""
from typing import Dict, List, Optional

from ..schemas import PlanItem

NOT_STARTED = "Not Started"
IN_PROGRESS = "In Progress"
DONE = "Done"
BLOCKED = "Blocked"

# Plantilla inicial de un plan nuevo (fase, tarea)
DEFAULT_PHASES = [
    ("Discovery", "Requirements gathering & stakeholder interviews"),
    ("Discovery", "Market research & competitive analysis"),
    ("Design", "Architecture & tech stack decisions"),
    ("Design", "UI/UX wireframes & mockups"),
    ("Development", "Sprint 1 - Core features"),
    ("Development", "Sprint 2 - Secondary features"),
    ("Development", "Sprint 3 - Integrations & polish"),
    ("Testing", "QA & bug fixes"),
    ("Testing", "UAT & stakeholder sign-off"),
    ("Launch", "Production deployment & monitoring"),
    ("Launch", "Documentation & handoff"),
]


def default_items() -> List[PlanItem]:
    """Ítems por defecto, cada uno con ID nuevo."""
    return [PlanItem(phase=phase, task=task) for phase, task in DEFAULT_PHASES]


def derive_status(progress: int, requested: Optional[str] = None) -> str:
    """Estado que corresponde a un progreso dado."""
    if progress <= 0:
        return NOT_STARTED
    if progress >= 100:
        return DONE
    if requested == BLOCKED:
        return BLOCKED
    return IN_PROGRESS


def progress_for_status(status: str, progress: int) -> int:
    """Progreso que corresponde a un cambio explícito de estado."""
    if status == DONE:
        return 100
    if status == NOT_STARTED:
        return 0
    # In Progress / Blocked necesitan un valor intermedio
    if 0 < progress < 100:
        return progress
    return 5 if progress <= 0 else 95


def reconcile_item(previous: Optional[PlanItem], incoming: PlanItem) -> PlanItem:
    """
    Aplica la transición correspondiente a lo que cambió:
    - cambió el progreso -> el estado se deriva del progreso
    - cambió solo el estado -> el progreso se ajusta al estado
    - nada cambió -> se re-deriva (corrige datos viejos inconsistentes)
    """
    if previous is None:
        previous = PlanItem(id=incoming.id)

    progress = incoming.progress
    status = incoming.status

    if progress != previous.progress:
        status = derive_status(progress, status)
    elif status != previous.status:
        progress = progress_for_status(status, progress)
        status = derive_status(progress, status)
    else:
        status = derive_status(progress, status)

    return incoming.model_copy(update={"status": status, "progress": progress})


def reconcile_items(previous: List[PlanItem], incoming: List[PlanItem]) -> List[PlanItem]:
    """Reconcilia una lista completa emparejando por ID de ítem."""
    by_id: Dict[str, PlanItem] = {item.id: item for item in previous}
    return [reconcile_item(by_id.get(item.id), item) for item in incoming]
