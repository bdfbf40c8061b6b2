"""Геометрические примитивы: прямоугольники, пространства координат, сетка.

Принципы:
- SRP: только данные; преобразования живут в `services.geometry_service`.
- Неизменяемость: все модели `frozen=True`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CoordinateSpace(str, Enum):
    """Пространство, в котором заданы координаты прямоугольника."""
    DISPLAY = "display"
    NORMALIZED = "normalized"
    SOURCE = "source"


@dataclass(frozen=True)
class Rect:
    """Осевой прямоугольник: (x, y) — левый верхний угол.

    Координаты могут быть дробными; округление выполняется только
    на финальном растровом шаге.
    """
    x: float
    y: float
    width: float
    height: float
    space: CoordinateSpace = CoordinateSpace.DISPLAY

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class SpaceScales:
    """Коэффициенты связи пространств для одного загруженного изображения.

    Fields:
        scale_factor: DPI-коэффициент, source / normalized.
        display_scale: display / normalized (ограничение размером экрана).
    """
    scale_factor: float = 1.0
    display_scale: float = 1.0


@dataclass(frozen=True)
class GridSpec:
    """Число колонок (`horizontal`) и строк (`vertical`); оба >= 1 после `sanitize`."""
    horizontal: int = 1
    vertical: int = 1

    @property
    def cell_count(self) -> int:
        return self.horizontal * self.vertical


@dataclass(frozen=True)
class GridCell:
    """Ячейка сетки с индексом (row, col) и границами в пространстве региона."""
    row: int
    col: int
    rect: Rect
