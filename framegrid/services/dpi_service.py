"""DPI-нормализация загруженного изображения.

Эвристика, а не измерение: изображения шире порога считаются сканами 300 DPI,
остальные — экранными 72 DPI. Метаданные (EXIF/DPI) не читаются.
"""
from __future__ import annotations

import logging

from framegrid.config import AppConfig
from framegrid.models.geometry_model import SpaceScales
from framegrid.models.image_model import ImageData, NormalizedImage
from framegrid.services.geometry_service import fit_within, round_half_up

LOG = logging.getLogger(__name__)


class DpiNormalizer:
    def __init__(self, config: AppConfig | None = None) -> None:
        self._config = config or AppConfig()

    def classify(self, natural_width: int) -> int:
        """Возвращает предполагаемое DPI источника по его ширине."""
        if natural_width > self._config.print_width_threshold:
            return self._config.print_dpi
        return self._config.screen_dpi

    def normalize(self, image: ImageData) -> NormalizedImage:
        """Вычисляет коэффициент масштаба, логический и экранный размеры.

        Сообщение о классификации пишется в лог и сохраняется в результате;
        на извлечение кадров оно не влияет.
        """
        cfg = self._config
        assumed_dpi = self.classify(image.width)
        scale_factor = assumed_dpi / cfg.screen_dpi

        if scale_factor != 1.0:
            logical_w = round_half_up(image.width / scale_factor)
            logical_h = round_half_up(image.height / scale_factor)
        else:
            logical_w, logical_h = image.width, image.height

        fit_w, fit_h = fit_within(logical_w, logical_h, cfg.max_display_width, cfg.max_display_height)
        display_w = max(1, round_half_up(fit_w)) if logical_w else 0
        display_h = max(1, round_half_up(fit_h)) if logical_h else 0
        display_scale = fit_w / logical_w if logical_w else 1.0

        if scale_factor != 1.0:
            message = (
                f"Предполагается {assumed_dpi} DPI (печать): пересчёт к {cfg.screen_dpi} DPI, "
                f"логический размер {logical_w}×{logical_h}"
            )
        else:
            message = (
                f"Предполагается {assumed_dpi} DPI (экран): пересчёт не требуется, "
                f"логический размер {logical_w}×{logical_h}"
            )
        LOG.info(message)

        return NormalizedImage(
            image=image,
            assumed_dpi=assumed_dpi,
            scale_factor=scale_factor,
            logical_width=logical_w,
            logical_height=logical_h,
            display_width=display_w,
            display_height=display_h,
            display_scale=display_scale,
            message=message,
        )


def scales_of(normalized: NormalizedImage) -> SpaceScales:
    return SpaceScales(scale_factor=normalized.scale_factor, display_scale=normalized.display_scale)
