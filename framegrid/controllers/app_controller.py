"""Контроллер приложения: оркестрация UI и сессии нарезки.

SOLID:
- SRP: класс управляет связями между UI и ядром (без логики геометрии и кодеков).
- DIP: UI обращается к ядру только через методы `FrameGridSession`.
Clean Code:
- Обработчики компактны; экспорт выполняется в фоне, UI опрашивает результат.
"""
from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from tkinter import TclError, filedialog, messagebox
from typing import Callable, Optional

import customtkinter as ctk

from framegrid.models.frame_model import ExportResult, FrameSequence
from framegrid.models.geometry_model import CoordinateSpace, Rect
from framegrid.services.dpi_service import scales_of
from framegrid.services.geometry_service import map_rectangle
from framegrid.services.session_service import FrameGridSession
from framegrid.ui.bottom_bar import BottomBar
from framegrid.ui.image_viewer import ImageViewer
from framegrid.ui.sidebar import Sidebar

LOG = logging.getLogger(__name__)

POLL_INTERVAL_MS = 50


def run_export(export: Callable[..., ExportResult], target: str, frames: FrameSequence) -> ExportResult:
    """Выполняет экспорт в фоновом потоке; любая ошибка превращается в `ExportResult`."""
    try:
        return export(target, frames=frames)
    except Exception as exc:  # the worker must always report back to the poller
        LOG.exception("Export to %s failed", target)
        return ExportResult(ok=False, error=str(exc) or type(exc).__name__)


@dataclass
class AppController:
    """Связывает элементы UI с ядром.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Загрузка изображений, события указателя, параметры сетки.
    - Экспорт ZIP/GIF в фоне: не более одного экспорта одновременно.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    session: FrameGridSession = field(default_factory=FrameGridSession)

    _export_results: "queue.Queue[ExportResult]" = field(default_factory=queue.Queue)
    _export_started: Optional[float] = None

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_grid_change = self._handle_grid_change
        self.sidebar.on_toggle_draw = self._handle_toggle_draw
        self.sidebar.on_clear_selection = self._handle_clear_selection
        self.sidebar.on_generate = self._handle_generate
        self.sidebar.on_preview = self._handle_preview
        self.sidebar.on_export_archive = self._handle_export_archive
        self.sidebar.on_export_animation = self._handle_export_animation

        self.viewer.on_pointer_down = self._handle_pointer_down
        self.viewer.on_pointer_move = self._handle_pointer_move
        self.viewer.on_pointer_up = self._handle_pointer_up
        self.viewer.on_cursor_move = self._handle_cursor_move

        grid = self.session.grid_spec
        self.sidebar.set_grid_values(grid.horizontal, grid.vertical)

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        try:
            normalized = self.session.load_image(file_path)
        except (FileNotFoundError, ValueError) as exc:
            LOG.warning("Cannot load %s: %s", file_path, exc)
            messagebox.showerror("Ошибка", str(exc), parent=self.window)
            return

        self.viewer.set_image(self.session.display_image())
        self.sidebar.set_image_info(normalized)
        self.sidebar.set_draw_mode(self.session.draw_mode)
        self.sidebar.set_preview_available(False)
        self.sidebar.set_status("")
        self.bottom.play(None)
        self._redraw()

    def _handle_grid_change(self, horizontal: str, vertical: str) -> None:
        grid = self.session.set_grid_spec(horizontal, vertical)
        # reflect clamped values back into the inputs
        self.sidebar.set_grid_values(grid.horizontal, grid.vertical)
        self._redraw()

    def _handle_toggle_draw(self) -> None:
        enabled = self.session.toggle_draw_mode()
        self.sidebar.set_draw_mode(enabled)
        self._redraw()

    def _handle_clear_selection(self) -> None:
        self.session.clear_selection()
        self._redraw()

    def _handle_pointer_down(self, x: float, y: float) -> None:
        self.session.pointer_down(x, y)
        self._redraw()

    def _handle_pointer_move(self, x: float, y: float) -> None:
        self.session.pointer_move(x, y)
        self._redraw()

    def _handle_pointer_up(self) -> None:
        self.session.pointer_up()
        self._redraw()

    def _handle_cursor_move(self, x: Optional[float], y: Optional[float]) -> None:
        normalized = self.session.normalized
        if x is None or y is None or normalized is None:
            self.sidebar.update_cursor_info(None, None)
            return
        point = map_rectangle(Rect(x, y, 0, 0), CoordinateSpace.SOURCE, scales_of(normalized))
        self.sidebar.update_cursor_info(point.x, point.y)

    def _handle_generate(self) -> None:
        if self.session.normalized is None:
            return
        frames = self.session.extract_frames()
        self.sidebar.set_preview_available(bool(frames))
        if frames:
            w, h = frames[0].size
            self.sidebar.set_status(f"Кадров: {len(frames)} ({w}×{h} px)")
        else:
            self.sidebar.set_status("Нет выделения — кадры не созданы")

    def _handle_preview(self) -> None:
        self.bottom.play(self.session.build_preview())

    def _handle_export_archive(self) -> None:
        self._start_export(self.session.config.archive_name, ".zip", self.session.export_archive)

    def _handle_export_animation(self) -> None:
        self._start_export(self.session.config.animation_name, ".gif", self.session.export_animation_file)

    # ---- Helpers ----
    def _redraw(self) -> None:
        self.viewer.render(self.session.draw_commands())
        selection = self.session.selection
        has_selection = selection is not None and not selection.is_empty()
        self.sidebar.set_selection_available(has_selection and self._export_started is None)

    def _start_export(
        self,
        default_name: str,
        extension: str,
        export: Callable[..., ExportResult],
    ) -> None:
        if self._export_started is not None:
            return
        frames: FrameSequence = self.session.extract_frames() if self.session.normalized else []
        if not frames:
            return
        try:
            target = filedialog.asksaveasfilename(
                title="Сохранить",
                initialfile=default_name,
                defaultextension=extension,
                filetypes=((extension.upper().lstrip("."), f"*{extension}"), ("All files", "*.*")),
            )
        except TclError:
            return
        if not target:
            return

        while not self._export_results.empty():
            self._export_results.get_nowait()
        self._export_started = time.monotonic()
        self.sidebar.set_export_busy(True)
        self.sidebar.set_status("Экспорт…")

        def worker() -> None:
            self._export_results.put(run_export(export, target, frames))

        threading.Thread(target=worker, daemon=True).start()
        self.window.after(POLL_INTERVAL_MS, self._poll_export)

    def _poll_export(self) -> None:
        try:
            result = self._export_results.get_nowait()
        except queue.Empty:
            started = self._export_started
            if started is not None and time.monotonic() - started > self.session.config.export_timeout:
                LOG.warning("Export still running after %.0fs, re-enabling controls", self.session.config.export_timeout)
                self._finish_export(None)
                return
            self.window.after(POLL_INTERVAL_MS, self._poll_export)
            return
        self._finish_export(result)

    def _finish_export(self, result: Optional[ExportResult]) -> None:
        self._export_started = None
        selection = self.session.selection
        self.sidebar.set_export_busy(False, selection is not None and not selection.is_empty())
        self._redraw()
        if result is None:
            self.sidebar.set_status("Экспорт не завершился вовремя")
        elif result.ok:
            self.sidebar.set_status(f"Сохранено: {result.path} ({result.frame_count} кадров)")
        elif not result.skipped:
            self.sidebar.set_status(f"Ошибка экспорта: {result.error}")
