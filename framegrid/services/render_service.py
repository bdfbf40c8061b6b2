"""Описание перерисовки холста: изображение, рамка выделения, линии сетки.

Функция чистая: UI интерпретирует список команд сам.
"""
from __future__ import annotations

from typing import List, Optional, Tuple

from framegrid.models.frame_model import DrawCommand
from framegrid.models.geometry_model import GridSpec, Rect
from framegrid.services.geometry_service import sanitize_grid_spec

SELECTION_COLOR = "red"
SELECTION_WIDTH = 4
GRID_COLOR = "#000"
GRID_WIDTH = 1


def build_draw_commands(
    display_size: Tuple[int, int],
    selection: Optional[Rect],
    grid: GridSpec,
) -> List[DrawCommand]:
    width, height = display_size
    commands = [DrawCommand("image", (0, 0, width, height))]
    if selection is None:
        return commands

    sel = selection
    commands.append(DrawCommand("rect", (sel.x, sel.y, sel.right, sel.bottom), SELECTION_COLOR, SELECTION_WIDTH))

    grid = sanitize_grid_spec(grid.horizontal, grid.vertical)
    cell_w = sel.width / grid.horizontal
    cell_h = sel.height / grid.vertical
    for i in range(grid.horizontal + 1):
        x = sel.x + i * cell_w
        commands.append(DrawCommand("line", (x, sel.y, x, sel.bottom), GRID_COLOR, GRID_WIDTH))
    for j in range(grid.vertical + 1):
        y = sel.y + j * cell_h
        commands.append(DrawCommand("line", (sel.x, y, sel.right, y), GRID_COLOR, GRID_WIDTH))
    return commands
