"""Модели кадров и результатов упаковки последовательности."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from framegrid.models.geometry_model import Rect


@dataclass(frozen=True)
class Frame:
    """Один извлечённый кадр (ячейка сетки).

    Fields:
        row, col: Позиция в сетке.
        image: Растровые данные (RGBA) размером округлённой ячейки.
        source_rect: Границы ячейки в исходных пикселях, без округления.
    """
    row: int
    col: int
    image: Image.Image
    source_rect: Rect

    @property
    def source_width(self) -> float:
        return self.source_rect.width

    @property
    def source_height(self) -> float:
        return self.source_rect.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


# Row-major: row 0 left→right, then row 1, ...
FrameSequence = List[Frame]


@dataclass(frozen=True)
class LoopDescriptor:
    """Декларативное описание зацикленной анимации для предпросмотра.

    Fields:
        frames: Кадры, уменьшенные до размера предпросмотра, в порядке показа.
        width, height: Размер области предпросмотра.
        steps: Число шагов цикла (по кадру на шаг).
        total_duration: Длительность одного прохода цикла, сек.
    """
    frames: Tuple[Image.Image, ...]
    width: int
    height: int
    steps: int
    total_duration: float

    @property
    def frame_interval(self) -> float:
        return self.total_duration / self.steps if self.steps else 0.0

    def keyframes(self) -> List[Tuple[float, int]]:
        """Пары (процент времени, индекс кадра); последний ключ возвращает к кадру 0."""
        if not self.steps:
            return []
        step = 100.0 / self.steps
        keys = [(step * i, i) for i in range(self.steps)]
        keys.append((100.0, 0))
        return keys

    def frame_at(self, elapsed: float) -> Image.Image:
        """Кадр, видимый через `elapsed` секунд от начала цикла."""
        if not self.frames:
            raise IndexError("пустой цикл")
        if self.total_duration <= 0:
            return self.frames[0]
        t = elapsed % self.total_duration
        idx = min(int(t / self.frame_interval), self.steps - 1)
        return self.frames[idx]


@dataclass(frozen=True)
class ExportResult:
    """Итог экспорта: файл записан (`ok`) либо ошибка кодека/ввода-вывода."""
    ok: bool
    path: Optional[Path] = None
    frame_count: int = 0
    error: Optional[str] = None
    skipped: bool = False

    @classmethod
    def nothing_to_do(cls) -> "ExportResult":
        return cls(ok=False, skipped=True)


@dataclass(frozen=True)
class DrawCommand:
    """Команда перерисовки холста (рисует UI, сервис только описывает).

    kind: "image" | "rect" | "line".
    coords: (x0, y0, x1, y1) в пространстве экрана.
    """
    kind: str
    coords: Tuple[float, float, float, float]
    color: str = ""
    width: int = 0
