from sqlalchemy import Column, Integer, String, Date, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
from .database import Base
from .services import codec

class Employee(Base):
    """Miembro del equipo. Las tareas lo referencian solo por ID."""
    __tablename__ = "employees"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    status = Column(String, default="Active") # Active, Inactive
    joined_date = Column(Date, nullable=True)
    avatar_url = Column(String, nullable=True)

class Project(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    start_date = Column(Date, nullable=True)
    deadline = Column(Date, nullable=True)

    priority = Column(String, default="Medium") # Low, Medium, High, Critical
    owner_id = Column(String, nullable=True) # ID de Employee (no se valida)
    status = Column(String, default="Active") # Active, On Hold, Completed

# --- TAREAS ---

class TaskProject(Base):
    """Vínculo ordenado tarea -> proyecto (reemplaza la columna "id1,id2")."""
    __tablename__ = "task_projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

class TaskAssignee(Base):
    """Vínculo ordenado tarea -> empleado."""
    __tablename__ = "task_assignees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(String, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

class Task(Base):
    __tablename__ = "tasks"

    id = Column(String, primary_key=True, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")

    status = Column(String, default="Todo", index=True) # Todo, In Progress, Done, Blocked
    priority = Column(String, default="Medium")

    due_date = Column(Date, nullable=True)

    # Marcas ISO-8601 (updated_at >= created_at)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)

    # Relaciones
    project_links = relationship(
        "TaskProject", order_by=TaskProject.position,
        cascade="all, delete-orphan", lazy="selectin"
    )
    assignee_links = relationship(
        "TaskAssignee", order_by=TaskAssignee.position,
        cascade="all, delete-orphan", lazy="selectin"
    )

    @property
    def project_ids(self):
        return [link.project_id for link in self.project_links]

    @project_ids.setter
    def project_ids(self, ids):
        self.project_links = [
            TaskProject(project_id=pid, position=i) for i, pid in enumerate(ids)
        ]

    @property
    def assigned_to_ids(self):
        return [link.employee_id for link in self.assignee_links]

    @assigned_to_ids.setter
    def assigned_to_ids(self, ids):
        self.assignee_links = [
            TaskAssignee(employee_id=eid, position=i) for i, eid in enumerate(ids)
        ]

    # Formato delimitado que expone la API
    @property
    def project_id(self):
        return codec.encode(self.project_ids)

    @property
    def assigned_to_id(self):
        return codec.encode(self.assigned_to_ids)

class TaskNote(Base):
    """Nota de seguimiento. Solo se agregan, nunca se editan."""
    __tablename__ = "task_notes"

    id = Column(String, primary_key=True, index=True)
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(String, nullable=False)

# --- REPORTES DIARIOS Y BLOQUEOS ---

class DailyUpdate(Base):
    """Registro informativo de un reporte de avance."""
    __tablename__ = "daily_updates"

    id = Column(String, primary_key=True, index=True)
    employee_id = Column(String, nullable=False, index=True)
    project_id = Column(String, nullable=False)
    task_title = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    yesterday = Column(Text, nullable=False, default="")
    today = Column(Text, nullable=False, default="")
    blockers = Column(Text, nullable=True)
    progress = Column(Integer, nullable=False, default=0)
    created_at = Column(String, nullable=False)

class Blocker(Base):
    __tablename__ = "blockers"

    id = Column(String, primary_key=True, index=True)
    employee_id = Column(String, nullable=False)
    project_id = Column(String, nullable=False)

    # Copia del título al momento del reporte, no es una referencia viva
    task_title = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    reported_date = Column(Date, nullable=False)
    status = Column(String, default="Open") # Open, Resolved
    resolved_date = Column(String, nullable=True)

# --- REUNIONES Y PLANES ---

class MeetingAttendee(Base):
    __tablename__ = "meeting_attendees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    meeting_id = Column(String, ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False, index=True)
    employee_id = Column(String, nullable=False)
    position = Column(Integer, nullable=False, default=0)

class MeetingMinutes(Base):
    __tablename__ = "meetings"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    project_id = Column(String, nullable=False, default="")

    agenda = Column(Text, nullable=False, default="")
    notes = Column(Text, nullable=False, default="")
    action_items = Column(Text, nullable=False, default="")
    decisions = Column(Text, nullable=False, default="")

    created_at = Column(String, nullable=False)

    attendee_links = relationship(
        "MeetingAttendee", order_by=MeetingAttendee.position,
        cascade="all, delete-orphan", lazy="selectin"
    )

    @property
    def attendee_id_list(self):
        return [link.employee_id for link in self.attendee_links]

    @attendee_id_list.setter
    def attendee_id_list(self, ids):
        self.attendee_links = [
            MeetingAttendee(employee_id=eid, position=i) for i, eid in enumerate(ids)
        ]

    @property
    def attendee_ids(self):
        return codec.encode(self.attendee_id_list)

class ProjectPlan(Base):
    __tablename__ = "project_plans"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    project_id = Column(String, nullable=False, default="")

    # Lista ordenada de PlanItem (JSON)
    items = Column(JSON, nullable=False, default=list)

    created_at = Column(String, nullable=False)
