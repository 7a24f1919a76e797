"""
Informes del asistente Scrum (salud del sprint, riesgos, daily, carga).

El resumen del equipo se arma con `aggregation.team_summary`, se convierte
a texto y se envía al modelo junto con la plantilla del informe pedido.
Sin ANTHROPIC_API_KEY no se llama a la API y se devuelve un aviso.
"""
import logging
import os

from anthropic import AsyncAnthropic, APIError

from ..schemas import TeamSummary

logger = logging.getLogger("scrumcmd-service.analysis")

ANALYSIS_MODEL = os.getenv("ANALYSIS_MODEL", "claude-sonnet-4-20250514")
ANALYSIS_MAX_TOKENS = int(os.getenv("ANALYSIS_MAX_TOKENS", "2048"))

MISSING_KEY_MESSAGE = (
    "⚠️ **API Key Missing**\n\n"
    "Please configure `ANTHROPIC_API_KEY` in your environment to use AI features."
)
FAILED_MESSAGE = "❌ **Failed to generate analysis.** Please check your API key and try again."
EMPTY_MESSAGE = "Analysis complete, but no text returned."

PROMPT_TEMPLATES = {
    "sprint_health": """You are an expert Agile Scrum Master. Based on the team data below, generate a **Sprint Health Report** in Markdown.

Include:
1. **Overall Health Score** (0-100) with a one-line justification
2. **Progress Summary**: how each project is tracking against its deadline
3. **Key Wins**: what's going well (tasks completed, blockers resolved)
4. **Concerns**: overdue items, blocked work, capacity issues
5. **Action Items**: 3-5 specific, actionable recommendations

Keep it concise and actionable. Use bullet points.""",

    "risk_report": """You are a risk analyst for a software team. Based on the data below, generate a **Risk Assessment Report** in Markdown.

Include:
1. **🔴 Critical Risks**: projects/tasks that need immediate attention (overdue, blocked, near-deadline with low completion)
2. **🟡 Warnings**: potential issues that could escalate
3. **🟢 On Track**: things going well
4. **Mitigation Plan**: specific actions for each critical risk

Prioritize by severity. Name the people, projects and tasks.""",

    "standup_notes": """You are a Scrum Master generating today's standup summary. Based on the team data below, create **Daily Standup Notes** in Markdown.

Format it as:
1. **📋 Team Overview**: quick 1-line status
2. **Per-Person Update**: for each active team member, what they're working on (In Progress), what's blocked and what's overdue
3. **🚨 Items Needing Attention**: anything the PM should act on today
4. **Today's Priorities**: what the team should focus on

Keep each person's section to 2-3 lines max.""",

    "workload_check": """You are a resource manager. Based on the team data below, generate a **Workload Distribution Analysis** in Markdown.

Include:
1. **Workload Heatmap**: rank team members from most to least loaded (task counts + priority weighting)
2. **🔥 Overloaded**: who has too much on their plate
3. **💤 Available Capacity**: who could take on more work
4. **Rebalancing Suggestions**: specific task reassignments
5. **Capacity Planning Note**: can the team handle more work?

Name tasks that could be reassigned and suggest who should take them.""",
}


def _lines(rows, empty: str) -> str:
    return "\n".join(rows) if rows else f"  {empty}"


def render_summary(summary: TeamSummary) -> str:
    """Texto plano del resumen, una sección por bloque."""
    team = [
        f"  - {e.name} ({e.role}): {e.total} total | {e.done} done, {e.in_progress} in progress, "
        f"{e.todo} todo, {e.blocked} blocked, {e.overdue} overdue"
        for e in summary.employees
    ]
    projects = [
        f"  - {p.name} ({p.status}): {p.completion}% complete ({p.done}/{p.total} tasks) | "
        f"Deadline: {p.deadline.isoformat() if p.deadline else 'none'} | {p.overdue} overdue"
        for p in summary.projects
    ]
    overdue = [
        f'  - "{t.title}" -> {t.assignee_label} | {t.days_overdue}d overdue | Priority: {t.priority}'
        for t in summary.overdue_tasks
    ]
    blocked = [
        f'  - "{t.title}" -> {t.assignee_label} | Priority: {t.priority}'
        for t in summary.blocked_tasks
    ]
    blockers = [
        f'  - "{b.description}" reported by {b.employee_name} ({b.days_open}d ago)'
        for b in summary.open_blockers
    ]
    totals = " | ".join(f"{c.status}: {c.count}" for c in summary.status_counts)

    return "\n\n".join([
        f"TODAY: {summary.today.isoformat()}",
        f"TEAM ({summary.active_members} active members):\n{_lines(team, '(none)')}",
        f"PROJECTS ({len(summary.projects)} total):\n{_lines(projects, '(none)')}",
        f"OVERDUE TASKS ({len(summary.overdue_tasks)}):\n{_lines(overdue, 'None, all on track!')}",
        f"BLOCKED TASKS ({len(summary.blocked_tasks)}):\n{_lines(blocked, 'None')}",
        f"OPEN BLOCKERS ({len(summary.open_blockers)}):\n{_lines(blockers, 'None')}",
        f"TASK SUMMARY:\n  Total: {summary.total_tasks} | {totals}",
    ])


def build_prompt(summary: TeamSummary, prompt_type: str) -> str:
    return f"{PROMPT_TEMPLATES[prompt_type]}\n\n---\n\n**TEAM DATA:**\n\n{render_summary(summary)}"


def api_key() -> str:
    return os.getenv("ANTHROPIC_API_KEY", "")


async def analyze_team(summary: TeamSummary, prompt_type: str = "sprint_health") -> str:
    """
    Genera el informe en Markdown. Los fallos de la API no se propagan:
    se registran y se devuelve un mensaje para mostrar al usuario.
    """
    key = api_key()
    if not key:
        return MISSING_KEY_MESSAGE

    client = AsyncAnthropic(api_key=key)
    try:
        response = await client.messages.create(
            model=ANALYSIS_MODEL,
            max_tokens=ANALYSIS_MAX_TOKENS,
            messages=[
                {"role": "user", "content": build_prompt(summary, prompt_type)}
            ]
        )
    except APIError as e:
        logger.error(f"❌ Análisis '{prompt_type}' falló: {e}")
        return FAILED_MESSAGE

    text = "".join(block.text for block in response.content if block.type == "text")
    logger.info(f"✨ Análisis '{prompt_type}' generado")
    return text or EMPTY_MESSAGE
