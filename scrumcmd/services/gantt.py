from datetime import date, timedelta
from typing import List

from ..schemas import GanttBar, GanttChart, GanttMonth, PlanItem

AXIS_PADDING_DAYS = 2
MIN_BAR_WIDTH = 1.0

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _next_month(day: date) -> date:
    if day.month == 12:
        return date(day.year + 1, 1, 1)
    return date(day.year, day.month + 1, 1)


def month_segments(axis_start: date, axis_end: date, total_days: int) -> List[GanttMonth]:
    """Encabezados de mes ("Jan 24") recortados al eje."""
    months = []
    cursor = axis_start.replace(day=1)
    while cursor <= axis_end:
        start = max(0, (cursor - axis_start).days)
        end = min(total_days, (_next_month(cursor) - axis_start).days)
        months.append(GanttMonth(
            label=f"{_MONTHS[cursor.month - 1]} {cursor.year % 100:02d}",
            left=start / total_days * 100,
            width=(end - start) / total_days * 100,
        ))
        cursor = _next_month(cursor)
    return months


def gantt_layout(items: List[PlanItem], today: date) -> GanttChart:
    """
    Calcula la línea de tiempo de un plan.

    Solo entran al gráfico los ítems con fecha de inicio y fin; los demás
    siguen en la vista de tabla. El eje se extiende 2 días a cada lado y
    cada barra mide al menos 1% para que las de duración cero sean visibles.
    """
    dated = [i for i in items if i.start_date and i.end_date]
    if not dated:
        return GanttChart()

    all_dates = [i.start_date for i in dated] + [i.end_date for i in dated]
    axis_start = min(all_dates) - timedelta(days=AXIS_PADDING_DAYS)
    axis_end = max(all_dates) + timedelta(days=AXIS_PADDING_DAYS)
    total_days = max(1, (axis_end - axis_start).days)

    bars = []
    for item in dated:
        start = (item.start_date - axis_start).days
        end = (item.end_date - axis_start).days
        bars.append(GanttBar(
            item_id=item.id,
            task=item.task,
            status=item.status,
            progress=item.progress,
            left=start / total_days * 100,
            width=max(MIN_BAR_WIDTH, (end - start) / total_days * 100),
        ))

    today_percent = (today - axis_start).days / total_days * 100
    marker = today_percent if 0 <= today_percent <= 100 else None

    return GanttChart(
        axis_start=axis_start,
        axis_end=axis_end,
        total_days=total_days,
        months=month_segments(axis_start, axis_end, total_days),
        bars=bars,
        today_marker=marker,
    )
