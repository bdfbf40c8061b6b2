"""Геометрия: перевод прямоугольников между пространствами, сетка, ограничение границами.

Принципы:
- SRP: только чистые функции, без состояния и без зависимостей от UI.
- Единственный источник истины для всех масштабных преобразований координат.
"""
from __future__ import annotations

import math
from typing import List, Tuple

from framegrid.models.geometry_model import CoordinateSpace, GridCell, GridSpec, Rect, Size, SpaceScales


def round_half_up(value: float) -> int:
    # Deterministic rounding (avoids Python's banker's rounding at .5).
    # Chained scale ratios leave float noise like 312.49999999999994.
    value = round(value, 9)
    if value >= 0:
        return int(math.floor(value + 0.5))
    return int(math.ceil(value - 0.5))


def _units_per_source_pixel(space: CoordinateSpace, scales: SpaceScales) -> float:
    if space is CoordinateSpace.SOURCE:
        return 1.0
    if space is CoordinateSpace.NORMALIZED:
        return 1.0 / scales.scale_factor
    return scales.display_scale / scales.scale_factor


def scale_ratio(from_space: CoordinateSpace, to_space: CoordinateSpace, scales: SpaceScales) -> float:
    """Множитель, переводящий длину из `from_space` в `to_space`."""
    return _units_per_source_pixel(to_space, scales) / _units_per_source_pixel(from_space, scales)


def map_rectangle(rect: Rect, to_space: CoordinateSpace, scales: SpaceScales) -> Rect:
    """Линейно масштабирует `rect` из его пространства в `to_space`.

    display → source эквивалентно display → normalized → source:
    коэффициенты перемножаются, поэтому композиция даёт тот же результат.
    """
    k = scale_ratio(rect.space, to_space, scales)
    return Rect(rect.x * k, rect.y * k, rect.width * k, rect.height * k, to_space)


def grid_cells(region: Rect, grid: GridSpec) -> List[GridCell]:
    """Делит `region` на vertical × horizontal равных ячеек в порядке строк.

    Размер ячейки дробный. Вырожденный регион даёт ячейки нулевой площади.
    """
    grid = sanitize_grid_spec(grid.horizontal, grid.vertical)
    cell_w = region.width / grid.horizontal
    cell_h = region.height / grid.vertical
    cells: List[GridCell] = []
    for row in range(grid.vertical):
        for col in range(grid.horizontal):
            cells.append(
                GridCell(
                    row=row,
                    col=col,
                    rect=Rect(region.x + col * cell_w, region.y + row * cell_h, cell_w, cell_h, region.space),
                )
            )
    return cells


def clamp_to_bounds(rect: Rect, bounds: Size) -> Rect:
    """Обрезает прямоугольник границами [0, bounds.width] × [0, bounds.height]."""
    x0 = min(max(0.0, rect.x), bounds.width)
    y0 = min(max(0.0, rect.y), bounds.height)
    x1 = min(max(0.0, rect.right), bounds.width)
    y1 = min(max(0.0, rect.bottom), bounds.height)
    return Rect(x0, y0, max(0.0, x1 - x0), max(0.0, y1 - y0), rect.space)


def bounding_box(ax: float, ay: float, bx: float, by: float, space: CoordinateSpace = CoordinateSpace.DISPLAY) -> Rect:
    """Осевой прямоугольник, натянутый на две точки."""
    return Rect(min(ax, bx), min(ay, by), abs(bx - ax), abs(by - ay), space)


def fit_within(width: float, height: float, max_width: float, max_height: float) -> Tuple[float, float]:
    """Ограничивает размер рамкой max_width × max_height с сохранением пропорций.

    Сначала ограничивается ширина, затем высота (порядок как у экранного холста).
    """
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    aspect = width / height
    w, h = float(width), float(height)
    if w > max_width:
        w = float(max_width)
        h = max_width / aspect
    if h > max_height:
        h = float(max_height)
        w = max_height * aspect
    return w, h


def _coerce_dimension(value: object) -> int:
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return value if value >= 1 else 1
    if isinstance(value, float):
        if not math.isfinite(value) or value != int(value):
            return 1
        return max(1, int(value))
    if isinstance(value, str):
        try:
            return _coerce_dimension(int(value.strip()))
        except ValueError:
            return 1
    return 1


def sanitize_grid_spec(horizontal: object, vertical: object) -> GridSpec:
    """Любое неположительное или нецелое значение заменяется на 1."""
    return GridSpec(horizontal=_coerce_dimension(horizontal), vertical=_coerce_dimension(vertical))
