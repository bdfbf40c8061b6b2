"""Сессия нарезки: единый явный интерфейс ядра для UI.

UI держит ссылку на `FrameGridSession` и вызывает методы; выделение, сетка и
изображение живут здесь и передаются в сервисы по значению при каждом вызове.
"""
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from PIL import Image

from framegrid.config import AppConfig
from framegrid.models.frame_model import DrawCommand, ExportResult, FrameSequence, LoopDescriptor
from framegrid.models.geometry_model import CoordinateSpace, GridSpec, Rect, Size
from framegrid.models.image_model import ImageData, NormalizedImage
from framegrid.services.dpi_service import DpiNormalizer, scales_of
from framegrid.services.export_service import SequencePackager, Target
from framegrid.services.extract_service import FrameExtractor
from framegrid.services.geometry_service import map_rectangle, sanitize_grid_spec
from framegrid.services.image_service import ImageService
from framegrid.services.region_service import EditState, RegionEditor
from framegrid.services.render_service import build_draw_commands


class FrameGridSession:
    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self.config = config or AppConfig()
        self._image_service = ImageService()
        self._normalizer = DpiNormalizer(self.config)
        self._extractor = FrameExtractor()
        self._packager = SequencePackager(
            frame_interval=self.config.frame_interval,
            preview_max_width=self.config.preview_max_width,
            preview_duration=self.config.preview_duration,
        )
        self._editor = RegionEditor(handle_size=self.config.handle_size)
        self._grid = sanitize_grid_spec(self.config.default_grid_horizontal, self.config.default_grid_vertical)
        self._normalized: Optional[NormalizedImage] = None
        self._last_sequence: FrameSequence = []

    # ---- Image ----
    def load_image(self, file_path: str | Path) -> NormalizedImage:
        """Загружает файл; при ошибке текущее изображение остаётся прежним."""
        return self.set_image(self._image_service.load_image(file_path))

    def load_pil(self, image: Image.Image) -> NormalizedImage:
        return self.set_image(self._image_service.from_pil(image))

    def set_image(self, image: ImageData) -> NormalizedImage:
        """Заменяет изображение целиком; выделение и последняя последовательность сбрасываются."""
        self._normalized = self._normalizer.normalize(image)
        self._editor.set_canvas_size(Size(self._normalized.display_width, self._normalized.display_height))
        self._last_sequence = []
        return self._normalized

    @property
    def normalized(self) -> Optional[NormalizedImage]:
        return self._normalized

    def display_image(self) -> Optional[Image.Image]:
        """Изображение, отмасштабированное до экранного холста."""
        if self._normalized is None:
            return None
        n = self._normalized
        return n.image.pil_image.resize(n.display_size, Image.Resampling.LANCZOS)

    # ---- Grid / selection ----
    @property
    def grid_spec(self) -> GridSpec:
        return self._grid

    def set_grid_spec(self, horizontal: object, vertical: object) -> GridSpec:
        self._grid = sanitize_grid_spec(horizontal, vertical)
        return self._grid

    @property
    def selection(self) -> Optional[Rect]:
        return self._editor.selection

    @property
    def edit_state(self) -> EditState:
        return self._editor.state

    @property
    def draw_mode(self) -> bool:
        return self._editor.draw_mode

    def set_draw_mode(self, enabled: bool) -> None:
        self._editor.set_draw_mode(enabled)

    def toggle_draw_mode(self) -> bool:
        return self._editor.toggle_draw_mode()

    def clear_selection(self) -> None:
        self._editor.clear_selection()

    def pointer_down(self, x: float, y: float) -> EditState:
        return self._editor.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> Optional[Rect]:
        return self._editor.pointer_move(x, y)

    def pointer_up(self) -> EditState:
        return self._editor.pointer_up()

    def touch_start(self, touches) -> EditState:
        return self._editor.touch_start(touches)

    def touch_move(self, touches) -> Optional[Rect]:
        return self._editor.touch_move(touches)

    def touch_end(self) -> EditState:
        return self._editor.touch_end()

    def source_selection(self) -> Optional[Rect]:
        """Выделение в пространстве исходных пикселей (или None)."""
        sel = self._editor.selection
        if sel is None or self._normalized is None:
            return None
        return map_rectangle(sel, CoordinateSpace.SOURCE, scales_of(self._normalized))

    def draw_commands(self) -> List[DrawCommand]:
        if self._normalized is None:
            return []
        return build_draw_commands(self._normalized.display_size, self._editor.selection, self._grid)

    # ---- Frames / export ----
    def extract_frames(self) -> FrameSequence:
        frames = self._extractor.extract(self._editor.selection, self._grid, self._normalized)
        self._last_sequence = frames
        return frames

    @property
    def last_sequence(self) -> FrameSequence:
        return list(self._last_sequence)

    def export_archive(self, target: Target, frames: Optional[FrameSequence] = None) -> ExportResult:
        """Архив из переданных кадров либо из свежего извлечения."""
        if frames is None:
            frames = self._frames_for_export()
        return self._packager.export_archive(frames, target)

    def export_animation_file(self, target: Target, frames: Optional[FrameSequence] = None) -> ExportResult:
        if frames is None:
            frames = self._frames_for_export()
        return self._packager.export_animation(frames, target)

    def _frames_for_export(self) -> FrameSequence:
        if self._normalized is None or self._editor.selection is None:
            return []
        return self.extract_frames()

    def build_preview(self, frames: Optional[FrameSequence] = None) -> Optional[LoopDescriptor]:
        """Предпросмотр из переданной либо последней сгенерированной последовательности."""
        return self._packager.build_preview(self._last_sequence if frames is None else frames)
