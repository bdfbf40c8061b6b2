"""Извлечение кадров: выделение на экране → регион в исходных пикселях → сетка кадров.

Принципы:
- Чистая функция от (выделение, сетка, изображение, коэффициенты): повторный вызов
  с теми же входами даёт попиксельно идентичный результат, кэша нет.
- Нет выделения / вырожденный регион → пустая последовательность, без исключений.
"""
from __future__ import annotations

import logging
import math
from typing import Optional

from PIL import Image

from framegrid.models.frame_model import Frame, FrameSequence
from framegrid.models.geometry_model import CoordinateSpace, GridSpec, Rect
from framegrid.models.image_model import NormalizedImage
from framegrid.services.dpi_service import scales_of
from framegrid.services.geometry_service import grid_cells, map_rectangle, round_half_up, sanitize_grid_spec

LOG = logging.getLogger(__name__)


class NoImageLoadedError(RuntimeError):
    """Извлечение вызвано до загрузки изображения."""


class FrameExtractor:
    def __init__(self, resample: Image.Resampling = Image.Resampling.BILINEAR) -> None:
        self._resample = resample

    def source_region(self, selection: Rect, normalized: NormalizedImage) -> Rect:
        """Переводит выделение (экран) в пространство исходных пикселей."""
        return map_rectangle(selection, CoordinateSpace.SOURCE, scales_of(normalized))

    def extract(
        self,
        selection: Optional[Rect],
        grid: GridSpec,
        normalized: Optional[NormalizedImage],
    ) -> FrameSequence:
        """Возвращает vertical × horizontal кадров в порядке строк.

        Raises:
            NoImageLoadedError: если изображение не загружено.
        """
        if normalized is None:
            raise NoImageLoadedError("Изображение не загружено")
        if selection is None or selection.is_empty():
            LOG.debug("No selection, nothing to extract")
            return []
        if grid.horizontal < 1 or grid.vertical < 1:
            LOG.debug("Non-positive grid %s, nothing to extract", grid)
            return []
        grid = sanitize_grid_spec(grid.horizontal, grid.vertical)

        region = self.source_region(selection, normalized)
        src = normalized.image.pil_image
        frames: FrameSequence = []
        for cell in grid_cells(region, grid):
            if cell.rect.is_empty():
                return []
            frames.append(Frame(row=cell.row, col=cell.col, image=self._render_cell(src, cell.rect), source_rect=cell.rect))
        LOG.debug("Extracted %d frames from region %s", len(frames), region)
        return frames

    def _render_cell(self, src: Image.Image, rect: Rect) -> Image.Image:
        """Рендерит ячейку в растр округлённого размера, читая только пиксели внутри изображения.

        Части ячейки за пределами изображения остаются прозрачными.
        """
        out_w = max(1, round_half_up(rect.width))
        out_h = max(1, round_half_up(rect.height))
        out = Image.new("RGBA", (out_w, out_h), (0, 0, 0, 0))

        img_w, img_h = src.size
        x0 = max(0.0, rect.x)
        y0 = max(0.0, rect.y)
        x1 = min(float(img_w), rect.right)
        y1 = min(float(img_h), rect.bottom)
        if x1 <= x0 or y1 <= y0:
            return out

        kx = out_w / rect.width
        ky = out_h / rect.height
        ox = int(math.floor((x0 - rect.x) * kx))
        oy = int(math.floor((y0 - rect.y) * ky))
        dw = min(out_w - ox, max(1, round_half_up((x1 - x0) * kx)))
        dh = min(out_h - oy, max(1, round_half_up((y1 - y0) * ky)))
        if dw <= 0 or dh <= 0:
            return out

        # fractional source box, resampled into the integer destination size
        part = src.resize((dw, dh), self._resample, box=(x0, y0, x1, y1))
        out.paste(part, (ox, oy))
        return out
