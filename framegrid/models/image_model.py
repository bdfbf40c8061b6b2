"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу (None для изображений из памяти).
        pil_image: Загруженное изображение PIL (RGBA).
        width: Натуральная ширина (пространство исходных пикселей), px.
        height: Натуральная высота, px.
        mode: Режим PIL, например "RGBA".
        size_bytes: Размер файла, если доступен.
    """
    path: Optional[Path]
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]


@dataclass(frozen=True)
class NormalizedImage:
    """Результат DPI-нормализации одного загруженного изображения.

    Fields:
        image: Исходное изображение.
        assumed_dpi: Предполагаемое разрешение источника (72 или 300).
        scale_factor: Пикселей источника на единицу нормализованного пространства.
        logical_width, logical_height: Размер после нормализации, до ограничения экраном.
        display_width, display_height: Размер экранного холста.
        display_scale: display / logical (<= 1).
        message: Человекочитаемое описание классификации.
    """
    image: ImageData
    assumed_dpi: int
    scale_factor: float
    logical_width: int
    logical_height: int
    display_width: int
    display_height: int
    display_scale: float
    message: str

    @property
    def converted(self) -> bool:
        return self.scale_factor != 1.0

    @property
    def display_size(self) -> tuple[int, int]:
        return self.display_width, self.display_height
