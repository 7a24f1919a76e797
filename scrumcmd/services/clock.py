from datetime import date, datetime, timezone
from typing import Optional


class Clock:
    """Fuente de "ahora" y "hoy" inyectable en servicios y endpoints."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def timestamp(self) -> str:
        # ISO-8601 con milisegundos y sufijo Z
        return self.now().isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def today(self) -> date:
        # Fecha calendario local del servidor
        return datetime.now().date()


class FixedClock(Clock):
    """Reloj congelado (pruebas y scripts de carga)."""

    def __init__(self, now: datetime, today: Optional[date] = None):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        self._now = now
        self._today = today or now.date()

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._today


_default_clock = Clock()


def get_clock() -> Clock:
    """Dependencia FastAPI; las pruebas la reemplazan con FixedClock."""
    return _default_clock
