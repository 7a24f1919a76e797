"""
Codificación de referencias múltiples.

Las relaciones muchos-a-muchos (tarea↔empleados, tarea↔proyectos,
reunión↔asistentes) viajan por la API como una cadena de IDs separados
por coma. Este módulo convierte en ambos sentidos y no sabe a qué
entidad pertenecen los IDs.
"""
from typing import Iterable, List, Optional

DELIMITER = ","


def decode(raw: Optional[str]) -> List[str]:
    """
    "a,b" -> ["a", "b"].

    Descarta segmentos vacíos ("" -> [], "a,,b" -> ["a", "b"]),
    conserva el orden y no elimina duplicados.
    """
    if not raw:
        return []
    return [part for part in raw.split(DELIMITER) if part]


def encode(ids: Iterable[str]) -> str:
    """["a", "b"] -> "a,b". Una secuencia vacía produce ""."""
    return DELIMITER.join(i for i in ids if i)


def remove(raw: Optional[str], target_id: str) -> str:
    """Quita todas las apariciones de un ID y re-codifica."""
    return encode(i for i in decode(raw) if i != target_id)
