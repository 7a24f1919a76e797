"""
Marcado mínimo de las secciones de una minuta.

    ## Título          -> heading
    - elemento         -> item
    - [ ] pendiente    -> todo (checked=False)
    - [x] hecho        -> todo (checked=True)
    | a | b |          -> fila de tabla (las filas |---| se descartan)
    cualquier otra     -> paragraph

Las filas de tabla consecutivas se agrupan en un solo bloque "table".
"""
import re
from typing import List, NamedTuple, Optional

_TODO = re.compile(r"^[-*]\s+\[( |x|X)\]\s*(.*)$")
_ITEM = re.compile(r"^[-*]\s+(.*)$")
_SEPARATOR_CELL = re.compile(r"^:?-{3,}:?$")


class Block(NamedTuple):
    kind: str
    text: str = ""
    checked: Optional[bool] = None
    rows: Optional[List[List[str]]] = None


def _split_row(line: str) -> List[str]:
    return [cell.strip() for cell in line.strip().strip("|").split("|")]


def _is_separator(cells: List[str]) -> bool:
    return all(_SEPARATOR_CELL.match(c) for c in cells if c) and any(cells)


def parse(text: Optional[str]) -> List[Block]:
    blocks: List[Block] = []
    table: List[List[str]] = []

    def flush_table():
        if table:
            blocks.append(Block(kind="table", rows=list(table)))
            table.clear()

    for raw in (text or "").splitlines():
        line = raw.strip()

        if line.startswith("|"):
            cells = _split_row(line)
            if not _is_separator(cells):
                table.append(cells)
            continue
        flush_table()

        if not line:
            continue
        if line.startswith("## "):
            blocks.append(Block(kind="heading", text=line[3:].strip()))
            continue

        todo = _TODO.match(line)
        if todo:
            blocks.append(Block(kind="todo", text=todo.group(2), checked=todo.group(1) != " "))
            continue

        item = _ITEM.match(line)
        if item:
            blocks.append(Block(kind="item", text=item.group(1)))
            continue

        blocks.append(Block(kind="paragraph", text=line))

    flush_table()
    return blocks
