"""Редактор области: машина состояний для рисования и изменения размера выделения.

Состояния: idle → drawing (якорь зафиксирован) → idle;
idle/drawing → resizing(corner) при нажатии возле угла выделения → idle.
Все координаты — в пространстве экрана; каждое обновление ограничивается холстом.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence, Tuple

from framegrid.models.geometry_model import Rect, Size
from framegrid.services.geometry_service import bounding_box, clamp_to_bounds


class EditState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    RESIZING = "resizing"


class Corner(str, Enum):
    TOP_LEFT = "top-left"
    BOTTOM_RIGHT = "bottom-right"


class RegionEditor:
    """Хранит единственное выделение и режим рисования.

    Tie-break: если выделение настолько мало, что области обоих угловых
    маркеров пересекаются, побеждает левый верхний (он проверяется последним).
    """
    def __init__(self, canvas_size: Size = Size(0, 0), handle_size: float = 10.0) -> None:
        self._canvas = canvas_size
        self._handle_size = handle_size
        self._selection: Optional[Rect] = None
        self._draw_mode: bool = False
        self._state: EditState = EditState.IDLE
        self._corner: Optional[Corner] = None
        self._anchor: Optional[Tuple[float, float]] = None

    # ---- Public API ----
    @property
    def selection(self) -> Optional[Rect]:
        return self._selection

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def corner(self) -> Optional[Corner]:
        return self._corner

    @property
    def draw_mode(self) -> bool:
        return self._draw_mode

    @property
    def canvas_size(self) -> Size:
        return self._canvas

    def set_canvas_size(self, size: Size) -> None:
        """Новый холст (новое изображение): выделение сбрасывается."""
        self._canvas = size
        self.clear_selection()

    def set_draw_mode(self, enabled: bool) -> None:
        """Включает/выключает режим рисования; выключение в idle/drawing стирает выделение."""
        was = self._draw_mode
        self._draw_mode = bool(enabled)
        if was and not self._draw_mode and self._state is not EditState.RESIZING:
            self.clear_selection()

    def toggle_draw_mode(self) -> bool:
        self.set_draw_mode(not self._draw_mode)
        return self._draw_mode

    def clear_selection(self) -> None:
        self._selection = None
        self._state = EditState.IDLE
        self._corner = None
        self._anchor = None

    # ---- Pointer events ----
    def pointer_down(self, x: float, y: float) -> EditState:
        sel = self._selection
        corner = self.hit_test(x, y)
        if corner is not None and sel is not None:
            self._state = EditState.RESIZING
            self._corner = corner
            # the opposite corner stays fixed
            if corner is Corner.BOTTOM_RIGHT:
                self._anchor = (sel.x, sel.y)
            else:
                self._anchor = (sel.right, sel.bottom)
            return self._state

        if not self._draw_mode:
            return self._state

        px, py = self._clamp_point(x, y)
        self._anchor = (px, py)
        self._selection = Rect(px, py, 0.0, 0.0)
        self._state = EditState.DRAWING
        self._corner = None
        return self._state

    def pointer_move(self, x: float, y: float) -> Optional[Rect]:
        if self._anchor is None:
            return self._selection
        ax, ay = self._anchor
        px, py = self._clamp_point(x, y)

        if self._state is EditState.DRAWING:
            self._selection = clamp_to_bounds(bounding_box(ax, ay, px, py), self._canvas)
        elif self._state is EditState.RESIZING:
            if self._corner is Corner.BOTTOM_RIGHT:
                rect = Rect(ax, ay, max(0.0, px - ax), max(0.0, py - ay))
            else:
                nx, ny = min(px, ax), min(py, ay)
                rect = Rect(nx, ny, ax - nx, ay - ny)
            self._selection = clamp_to_bounds(rect, self._canvas)
        return self._selection

    def pointer_up(self) -> EditState:
        self._state = EditState.IDLE
        self._corner = None
        self._anchor = None
        return self._state

    # Touch maps 1:1 onto the pointer events, first touch point only.
    def touch_start(self, touches: Sequence[Tuple[float, float]]) -> EditState:
        if not touches:
            return self._state
        return self.pointer_down(*touches[0])

    def touch_move(self, touches: Sequence[Tuple[float, float]]) -> Optional[Rect]:
        if not touches:
            return self._selection
        return self.pointer_move(*touches[0])

    def touch_end(self) -> EditState:
        return self.pointer_up()

    def hit_test(self, x: float, y: float) -> Optional[Corner]:
        """Проверяет оба угловых маркера текущего выделения; левый верхний побеждает."""
        sel = self._selection
        if sel is None:
            return None
        h = self._handle_size
        hit: Optional[Corner] = None
        if abs(x - sel.right) < h and abs(y - sel.bottom) < h:
            hit = Corner.BOTTOM_RIGHT
        if abs(x - sel.x) < h and abs(y - sel.y) < h:
            hit = Corner.TOP_LEFT
        return hit

    # ---- Helpers ----
    def _clamp_point(self, x: float, y: float) -> Tuple[float, float]:
        return (
            min(max(0.0, float(x)), float(self._canvas.width)),
            min(max(0.0, float(y)), float(self._canvas.height)),
        )
