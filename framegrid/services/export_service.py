"""Упаковка последовательности кадров: zip-архив, анимированный GIF, описание цикла.

Три независимых потребителя `FrameSequence`. Пустая или отсутствующая
последовательность — ничего не делаем (никаких частичных файлов).
"""
from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, Optional, Sequence, Union

import numpy as np
from PIL import Image

from framegrid.models.frame_model import ExportResult, Frame, LoopDescriptor
from framegrid.services.geometry_service import fit_within, round_half_up

LOG = logging.getLogger(__name__)

Target = Union[str, Path, BinaryIO]

# GIF carries 1-bit transparency
GIF_ALPHA_THRESHOLD = 128


def frame_filename(index: int) -> str:
    """Имя файла кадра в архиве; нумерация с 1 в порядке строк."""
    return f"frame_{index + 1}.png"


class SequencePackager:
    def __init__(self, frame_interval: float = 0.2, preview_max_width: int = 200, preview_duration: float = 2.0) -> None:
        self._frame_interval = frame_interval
        self._preview_max_width = preview_max_width
        self._preview_duration = preview_duration

    # ---- Archive ----
    def export_archive(self, frames: Optional[Sequence[Frame]], target: Target) -> ExportResult:
        """Пишет кадры как `frame_1.png … frame_N.png` в один zip (deflate)."""
        if not frames:
            LOG.debug("Archive export skipped: empty sequence")
            return ExportResult.nothing_to_do()

        # build in memory first so a failure never leaves a partial file behind
        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for index, frame in enumerate(frames):
                    png = io.BytesIO()
                    frame.image.save(png, format="PNG")
                    zf.writestr(frame_filename(index), png.getvalue())
        except (OSError, ValueError) as exc:
            LOG.exception("Archive encoding failed")
            return ExportResult(ok=False, error=str(exc))

        return self._write(buffer.getvalue(), target, len(frames))

    # ---- Animated GIF ----
    def export_animation(
        self,
        frames: Optional[Sequence[Frame]],
        target: Target,
        frame_interval: Optional[float] = None,
    ) -> ExportResult:
        """Кодирует кадры (размер ячейки) в зацикленный GIF с фиксированным интервалом.

        Ошибка кодека возвращается в `ExportResult.error`, не повторяется и не пробрасывается.

        Pillow склеивает подряд идущие одинаковые кадры в один, суммируя их
        длительность: `n_frames` файла может быть меньше `frame_count`, но
        общая длительность цикла всегда N × interval.
        """
        if not frames:
            LOG.debug("Animation export skipped: empty sequence")
            return ExportResult.nothing_to_do()

        interval = self._frame_interval if frame_interval is None else frame_interval
        duration_ms = max(1, round_half_up(interval * 1000))
        size = frames[0].image.size
        images = [self._prepare_gif_frame(f.image, size) for f in frames]

        buffer = io.BytesIO()
        try:
            images[0].save(
                buffer,
                format="GIF",
                save_all=True,
                append_images=images[1:],
                duration=duration_ms,
                loop=0,
                disposal=2,
            )
        except (OSError, ValueError) as exc:
            LOG.exception("GIF encoding failed")
            return ExportResult(ok=False, error=str(exc))

        return self._write(buffer.getvalue(), target, len(frames))

    # ---- Loop preview ----
    def build_preview(
        self,
        frames: Optional[Sequence[Frame]],
        max_width: Optional[int] = None,
        total_duration: Optional[float] = None,
    ) -> Optional[LoopDescriptor]:
        """Собирает описание зацикленного предпросмотра; без файлового ввода-вывода."""
        if not frames:
            LOG.debug("Preview skipped: empty sequence")
            return None

        cap = self._preview_max_width if max_width is None else max_width
        duration = self._preview_duration if total_duration is None else total_duration
        cell_w, cell_h = frames[0].image.size
        fit_w, fit_h = fit_within(cell_w, cell_h, cap, float("inf"))
        width = max(1, round_half_up(fit_w))
        height = max(1, round_half_up(fit_h))

        previews = tuple(
            f.image.copy() if f.image.size == (width, height) else f.image.resize((width, height), Image.Resampling.LANCZOS)
            for f in frames
        )
        return LoopDescriptor(frames=previews, width=width, height=height, steps=len(previews), total_duration=duration)

    # ---- Helpers ----
    def _prepare_gif_frame(self, image: Image.Image, size: tuple[int, int]) -> Image.Image:
        """Приводит кадр к общему размеру и бинаризует альфа-канал."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        if rgba.size != size:
            rgba = rgba.resize(size, Image.Resampling.LANCZOS)
        arr = np.array(rgba, dtype=np.uint8)
        arr[..., 3] = np.where(arr[..., 3] >= GIF_ALPHA_THRESHOLD, 255, 0).astype(np.uint8)
        return Image.fromarray(arr)

    def _write(self, payload: bytes, target: Target, frame_count: int) -> ExportResult:
        if isinstance(target, (str, Path)):
            path = Path(target)
            try:
                path.write_bytes(payload)
            except OSError as exc:
                LOG.exception("Failed to write %s", path)
                return ExportResult(ok=False, path=path, error=str(exc))
            LOG.info("Wrote %s (%d frames)", path, frame_count)
            return ExportResult(ok=True, path=path, frame_count=frame_count)

        try:
            target.write(payload)
        except (OSError, ValueError) as exc:
            LOG.exception("Failed to write export stream")
            return ExportResult(ok=False, error=str(exc))
        return ExportResult(ok=True, frame_count=frame_count)
