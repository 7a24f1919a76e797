from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional, Generic, TypeVar, Literal
from datetime import date as Date

from .services import codec
from .utils.ids import new_id

T = TypeVar("T")

# --- CATÁLOGOS ---

EmployeeStatus = Literal["Active", "Inactive"]
ProjectStatus = Literal["Active", "On Hold", "Completed"]
TaskStatus = Literal["Todo", "In Progress", "Done", "Blocked"]
Priority = Literal["Low", "Medium", "High", "Critical"]
PlanItemStatus = Literal["Not Started", "In Progress", "Done", "Blocked"]

PLAN_ITEM_STATUSES = ("Not Started", "In Progress", "Done", "Blocked")

# --- UTILIDADES ---

class MetaData(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T]
    meta: MetaData

class StatusResponse(BaseModel):
    success: bool = True

def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value

# --- ACCESO ---

class LoginRequest(BaseModel):
    username: str
    password: str

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# --- EMPLEADOS ---

class EmployeeBase(BaseModel):
    name: str = Field(..., min_length=1, description="Nombre completo")
    role: str = ""
    email: str = ""
    status: EmployeeStatus = "Active"
    joined_date: Optional[Date] = Field(None, description="Por defecto, hoy")
    avatar_url: Optional[str] = None

    _joined_blank = field_validator("joined_date", mode="before")(_blank_to_none)

class EmployeeCreate(EmployeeBase):
    pass

class EmployeeStatusUpdate(BaseModel):
    status: EmployeeStatus

class EmployeeResponse(BaseModel):
    id: str
    name: str
    role: str = ""
    email: str = ""
    status: str = "Active"
    joined_date: Optional[Date] = None
    avatar_url: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

# --- PROYECTOS ---

class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, description="Nombre del proyecto")
    description: str = ""
    start_date: Optional[Date] = None
    deadline: Optional[Date] = None
    priority: Priority = "Medium"
    owner_id: Optional[str] = None
    status: ProjectStatus = "Active"

    _dates_blank = field_validator("start_date", "deadline", mode="before")(_blank_to_none)

class ProjectCreate(ProjectBase):
    pass

class ProjectStatusUpdate(BaseModel):
    status: ProjectStatus

class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    start_date: Optional[Date] = None
    deadline: Optional[Date] = None
    priority: str = "Medium"
    owner_id: Optional[str] = None
    status: str = "Active"
    model_config = ConfigDict(from_attributes=True)

# --- TAREAS ---

class TaskBase(BaseModel):
    """
    Las referencias se aceptan en formato delimitado ("p1,p2")
    o como lista; la lista tiene prioridad si viene en el JSON.
    """
    title: str = Field(..., min_length=1, description="Título de la tarea")
    description: str = ""
    status: TaskStatus = "Todo"
    priority: Priority = "Medium"
    due_date: Optional[Date] = None

    project_id: str = Field("", description="IDs de proyecto separados por coma")
    assigned_to_id: str = Field("", description="IDs de empleado separados por coma")
    project_ids: Optional[List[str]] = None
    assigned_to_ids: Optional[List[str]] = None

    _due_blank = field_validator("due_date", mode="before")(_blank_to_none)

    @model_validator(mode="after")
    def _sync_references(self):
        if self.project_ids is None:
            self.project_ids = codec.decode(self.project_id)
        else:
            self.project_ids = codec.decode(codec.encode(self.project_ids))
        if self.assigned_to_ids is None:
            self.assigned_to_ids = codec.decode(self.assigned_to_id)
        else:
            self.assigned_to_ids = codec.decode(codec.encode(self.assigned_to_ids))
        self.project_id = codec.encode(self.project_ids)
        self.assigned_to_id = codec.encode(self.assigned_to_ids)
        return self

class TaskCreate(TaskBase):
    pass

class TaskStatusUpdate(BaseModel):
    status: TaskStatus

class TaskResponse(BaseModel):
    id: str
    title: str
    description: str = ""
    status: str = "Todo"
    priority: str = "Medium"
    due_date: Optional[Date] = None
    project_id: str = ""
    assigned_to_id: str = ""
    project_ids: List[str] = []
    assigned_to_ids: List[str] = []
    created_at: str
    updated_at: str
    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def _fill_references(self):
        # Acepta cualquiera de las dos formas al construir instantáneas a mano
        if not self.project_ids:
            self.project_ids = codec.decode(self.project_id)
        if not self.assigned_to_ids:
            self.assigned_to_ids = codec.decode(self.assigned_to_id)
        self.project_id = codec.encode(self.project_ids)
        self.assigned_to_id = codec.encode(self.assigned_to_ids)
        return self

class TaskNoteCreate(BaseModel):
    content: str = Field(..., min_length=1)

class TaskNoteResponse(BaseModel):
    id: str
    task_id: str
    content: str
    created_at: str
    model_config = ConfigDict(from_attributes=True)

# --- REPORTES DE AVANCE Y BLOQUEOS ---

class DailyUpdateCreate(BaseModel):
    employee_id: str = Field(..., min_length=1)
    project_id: str = Field(..., min_length=1)
    task_title: str = Field(..., min_length=1)
    date: Optional[Date] = Field(None, description="Por defecto, hoy")
    yesterday: str = ""
    today: str = ""
    blockers: Optional[str] = Field(None, description="Texto del bloqueo, si existe")
    progress: int = Field(0, ge=0, le=100)

    _date_blank = field_validator("date", mode="before")(_blank_to_none)

class DailyUpdateResponse(BaseModel):
    id: str
    employee_id: str
    project_id: str
    task_title: str
    date: Date
    yesterday: str = ""
    today: str = ""
    blockers: Optional[str] = None
    progress: int
    created_at: str
    model_config = ConfigDict(from_attributes=True)

class BlockerResponse(BaseModel):
    id: str
    employee_id: str
    project_id: str
    task_title: str
    description: str
    reported_date: Date
    status: str = "Open"
    resolved_date: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)

class ProgressReportResult(BaseModel):
    """Resultado de registrar un avance: qué tarea se tocó y si hubo bloqueo."""
    update: DailyUpdateResponse
    matched_task_id: Optional[str] = None
    task_status: Optional[str] = None
    blocker: Optional[BlockerResponse] = None

# --- MINUTAS ---

class MeetingBase(BaseModel):
    title: str = Field(..., min_length=1)
    date: Date
    project_id: str = ""
    attendee_ids: str = Field("", description="IDs de empleado separados por coma")
    attendee_id_list: Optional[List[str]] = None
    agenda: str = ""
    notes: str = ""
    action_items: str = ""
    decisions: str = ""

    @model_validator(mode="after")
    def _sync_attendees(self):
        if self.attendee_id_list is None:
            self.attendee_id_list = codec.decode(self.attendee_ids)
        else:
            self.attendee_id_list = codec.decode(codec.encode(self.attendee_id_list))
        self.attendee_ids = codec.encode(self.attendee_id_list)
        return self

class MeetingCreate(MeetingBase):
    pass

class MeetingResponse(BaseModel):
    id: str
    title: str
    date: Date
    project_id: str = ""
    attendee_ids: str = ""
    attendee_id_list: List[str] = []
    agenda: str = ""
    notes: str = ""
    action_items: str = ""
    decisions: str = ""
    created_at: str
    model_config = ConfigDict(from_attributes=True)

# --- PLANES DE PROYECTO ---

class PlanItem(BaseModel):
    id: str = Field(default_factory=new_id)
    phase: str = ""
    task: str = ""
    start_date: Optional[Date] = None
    end_date: Optional[Date] = None
    owner: str = Field("", description="ID de empleado o vacío")
    status: PlanItemStatus = "Not Started"
    progress: int = Field(0, ge=0, le=100)

    _dates_blank = field_validator("start_date", "end_date", mode="before")(_blank_to_none)

class ProjectPlanCreate(BaseModel):
    title: str = Field(..., min_length=1)
    project_id: str = ""
    items: Optional[List[PlanItem]] = Field(None, description="Si se omite, se usan las fases por defecto")

class ProjectPlanUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    project_id: Optional[str] = None
    items: Optional[List[PlanItem]] = None

class ProjectPlanResponse(BaseModel):
    id: str
    title: str
    project_id: str = ""
    items: List[PlanItem] = []
    created_at: str
    model_config = ConfigDict(from_attributes=True)

# --- VISTAS DERIVADAS ---

class Snapshot(BaseModel):
    """Conjunto completo de entidades leído en una sola consulta."""
    employees: List[EmployeeResponse] = []
    projects: List[ProjectResponse] = []
    tasks: List[TaskResponse] = []
    blockers: List[BlockerResponse] = []

class TaskView(BaseModel):
    """Tarea con etiquetas resueltas para mostrar."""
    id: str
    title: str
    status: str
    priority: str
    due_date: Optional[Date] = None
    project_label: str
    assignee_label: str
    is_overdue: bool = False
    days_overdue: int = 0
    status_style: str = "default"
    created_at: str

class BlockerView(BaseModel):
    id: str
    task_title: str
    description: str
    employee_name: str
    reported_date: Date
    days_open: int

class DashboardStats(BaseModel):
    active_projects: int = 0
    open_tasks: int = 0
    due_today: int = 0
    blocked_tasks: int = 0

class Dashboard(BaseModel):
    stats: DashboardStats
    overdue_tasks: List[TaskView] = []
    active_blockers: List[BlockerView] = []
    recent_tasks: List[TaskView] = []

class EmployeeStats(BaseModel):
    total: int = 0
    todo: int = 0
    in_progress: int = 0
    done: int = 0
    blocked: int = 0
    overdue: int = 0

class WeeklyGroup(BaseModel):
    week_start: Date
    week_end: Date
    done: int
    total: int
    task_titles: List[str] = []

class EmployeeProfile(BaseModel):
    employee: EmployeeResponse
    stats: EmployeeStats
    open_tasks: int = 0
    tasks: List[TaskView] = []
    weekly_summary: List[WeeklyGroup] = []

class EmployeeTaskCount(BaseModel):
    employee_id: Optional[str] = None
    label: str
    done: int = 0
    open: int = 0
    total: int = 0

class StatusCount(BaseModel):
    status: str
    count: int

class ProjectProgress(BaseModel):
    project_id: Optional[str] = None
    name: str
    done: int = 0
    total: int = 0
    completion: int = 0

class GanttMonth(BaseModel):
    label: str
    left: float
    width: float

class GanttBar(BaseModel):
    item_id: str
    task: str
    status: str
    progress: int
    left: float
    width: float

class GanttChart(BaseModel):
    axis_start: Optional[Date] = None
    axis_end: Optional[Date] = None
    total_days: int = 0
    months: List[GanttMonth] = []
    bars: List[GanttBar] = []
    today_marker: Optional[float] = None

class PhaseGroup(BaseModel):
    phase: str
    items: List[PlanItem] = []

class PlanSummary(BaseModel):
    overall_progress: int = 0
    done: int = 0
    total: int = 0
    status_counts: List[StatusCount] = []
    phases: List[PhaseGroup] = []

# --- ANÁLISIS DEL EQUIPO ---

AnalysisPromptType = Literal["sprint_health", "risk_report", "standup_notes", "workload_check"]

class EmployeeWorkload(BaseModel):
    employee_id: str
    name: str
    role: str = ""
    total: int = 0
    done: int = 0
    in_progress: int = 0
    todo: int = 0
    blocked: int = 0
    overdue: int = 0

class ProjectHealth(BaseModel):
    project_id: str
    name: str
    status: str
    deadline: Optional[Date] = None
    done: int = 0
    total: int = 0
    completion: int = 0
    overdue: int = 0

class TeamSummary(BaseModel):
    """Resumen de datos del equipo que se entrega al asistente."""
    today: Date
    active_members: int = 0
    employees: List[EmployeeWorkload] = []
    projects: List[ProjectHealth] = []
    overdue_tasks: List[TaskView] = []
    blocked_tasks: List[TaskView] = []
    open_blockers: List[BlockerView] = []
    total_tasks: int = 0
    status_counts: List[StatusCount] = []

class AnalysisReport(BaseModel):
    prompt_type: AnalysisPromptType
    configured: bool
    report: str
    summary: TeamSummary
