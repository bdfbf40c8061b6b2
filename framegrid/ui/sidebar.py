"""Боковая панель: открытие файла, информация, сетка, режим рисования, экспорт.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через компактные методы `get_*`, события через `on_*`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk

from framegrid.models.image_model import NormalizedImage


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, сетка, кадры, экспорт."""
    def __init__(self, master: ctk.CTk, grid_size: Tuple[int, int] = (5, 5), **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_grid_change: Optional[Callable[[str, str], None]] = None
        self.on_toggle_draw: Optional[Callable[[], None]] = None
        self.on_clear_selection: Optional[Callable[[], None]] = None
        self.on_generate: Optional[Callable[[], None]] = None
        self.on_preview: Optional[Callable[[], None]] = None
        self.on_export_archive: Optional[Callable[[], None]] = None
        self.on_export_animation: Optional[Callable[[], None]] = None

        # File
        self._title = ctk.CTkLabel(self, text="Инструменты", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 4), sticky="w")

        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=self._emit(lambda: self.on_open_file))
        self._open_btn.grid(row=1, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=2, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")
        self._dpi_val = ctk.StringVar(value="—")
        self._cursor_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, wraplength=250, anchor="w", justify="left")
        self._info_dpi = ctk.CTkLabel(self, textvariable=self._dpi_val, wraplength=250, anchor="w", justify="left")
        self._info_cursor = ctk.CTkLabel(self, textvariable=self._cursor_val, anchor="w", justify="left")

        self._info_path.grid(row=3, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dpi.grid(row=6, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_cursor.grid(row=7, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Grid section
        self._grid_title = ctk.CTkLabel(self, text="Сетка", font=ctk.CTkFont(size=16, weight="bold"))
        self._grid_title.grid(row=8, column=0, padx=8, pady=(8, 4), sticky="w")

        grid_row = ctk.CTkFrame(self, fg_color="transparent")
        grid_row.grid(row=9, column=0, padx=8, pady=(0, 8), sticky="ew")
        grid_row.grid_columnconfigure((1, 3), weight=1)
        self._h_val = ctk.StringVar(value=str(grid_size[0]))
        self._v_val = ctk.StringVar(value=str(grid_size[1]))
        ctk.CTkLabel(grid_row, text="По горизонтали").grid(row=0, column=0, padx=(0, 4), sticky="w")
        self._h_entry = ctk.CTkEntry(grid_row, textvariable=self._h_val, width=48)
        self._h_entry.grid(row=0, column=1, padx=(0, 8), sticky="ew")
        ctk.CTkLabel(grid_row, text="По вертикали").grid(row=1, column=0, padx=(0, 4), pady=(4, 0), sticky="w")
        self._v_entry = ctk.CTkEntry(grid_row, textvariable=self._v_val, width=48)
        self._v_entry.grid(row=1, column=1, padx=(0, 8), pady=(4, 0), sticky="ew")
        for entry in (self._h_entry, self._v_entry):
            entry.bind("<Return>", self._emit_grid_change)
            entry.bind("<FocusOut>", self._emit_grid_change)

        # Selection
        self._draw_btn = ctk.CTkButton(self, text="Нарисовать рамку", command=self._emit(lambda: self.on_toggle_draw))
        self._draw_btn.grid(row=10, column=0, padx=8, pady=(4, 4), sticky="ew")
        self._clear_btn = ctk.CTkButton(self, text="Сбросить выделение", command=self._emit(lambda: self.on_clear_selection))
        self._clear_btn.grid(row=11, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Frames / export
        self._frames_title = ctk.CTkLabel(self, text="Кадры", font=ctk.CTkFont(size=16, weight="bold"))
        self._frames_title.grid(row=12, column=0, padx=8, pady=(8, 4), sticky="w")

        self._generate_btn = ctk.CTkButton(self, text="Сгенерировать кадры", command=self._emit(lambda: self.on_generate))
        self._generate_btn.grid(row=13, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._preview_btn = ctk.CTkButton(self, text="Анимация (предпросмотр)", command=self._emit(lambda: self.on_preview))
        self._preview_btn.grid(row=14, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._zip_btn = ctk.CTkButton(self, text="Скачать ZIP…", command=self._emit(lambda: self.on_export_archive))
        self._zip_btn.grid(row=15, column=0, padx=8, pady=(0, 4), sticky="ew")
        self._gif_btn = ctk.CTkButton(self, text="Скачать GIF…", command=self._emit(lambda: self.on_export_animation))
        self._gif_btn.grid(row=16, column=0, padx=8, pady=(0, 4), sticky="ew")

        self._status_val = ctk.StringVar(value="")
        self._status = ctk.CTkLabel(self, textvariable=self._status_val, wraplength=250, anchor="w", justify="left")
        self._status.grid(row=17, column=0, padx=8, pady=(4, 8), sticky="ew")

        # filler
        self.grid_rowconfigure(99, weight=1)

        self.set_selection_available(False)
        self.set_preview_available(False)

    # ---- Public API ----
    def set_image_info(self, normalized: NormalizedImage) -> None:
        """Отображает метаданные загруженного изображения и результат DPI-классификации."""
        data = normalized.image
        self._path_val.set(str(data.path) if data.path else "—")
        self._size_val.set(self._format_size(data.size_bytes))
        self._dims_val.set(
            f"{data.width} × {data.height} px → {normalized.logical_width} × {normalized.logical_height} "
            f"→ {normalized.display_width} × {normalized.display_height}"
        )
        self._dpi_val.set(normalized.message)

    def update_cursor_info(self, x: Optional[float], y: Optional[float]) -> None:
        """Координаты курсора в исходных пикселях."""
        if x is None or y is None:
            self._cursor_val.set("—")
            return
        self._cursor_val.set(f"({int(x)}, {int(y)})")

    def get_grid_values(self) -> Tuple[str, str]:
        """Сырые значения полей сетки; проверку выполняет сессия."""
        return self._h_val.get(), self._v_val.get()

    def set_grid_values(self, horizontal: int, vertical: int) -> None:
        self._h_val.set(str(horizontal))
        self._v_val.set(str(vertical))

    def set_draw_mode(self, enabled: bool) -> None:
        self._draw_btn.configure(text="Завершить рамку" if enabled else "Нарисовать рамку")

    def set_selection_available(self, available: bool) -> None:
        state = "normal" if available else "disabled"
        for btn in (self._generate_btn, self._zip_btn, self._gif_btn, self._clear_btn):
            btn.configure(state=state)

    def set_preview_available(self, available: bool) -> None:
        self._preview_btn.configure(state="normal" if available else "disabled")

    def set_export_busy(self, busy: bool, selection_available: bool = True) -> None:
        """Блокирует кнопки экспорта, пока идёт запись файла."""
        state = "disabled" if busy or not selection_available else "normal"
        self._zip_btn.configure(state=state)
        self._gif_btn.configure(state=state)

    def set_status(self, text: str) -> None:
        self._status_val.set(text)

    # ---- Helpers ----
    def _emit(self, getter: Callable[[], Optional[Callable[[], None]]]) -> Callable[[], None]:
        def handler() -> None:
            callback = getter()
            if callback:
                callback()
        return handler

    def _emit_grid_change(self, _event: object | None = None) -> None:
        if self.on_grid_change:
            self.on_grid_change(*self.get_grid_values())

    def _format_size(self, size_bytes: Optional[int]) -> str:
        if size_bytes is None:
            return "—"
        thresholds = [("Б", 1024), ("КБ", 1024**2), ("МБ", 1024**3), ("ГБ", 1024**4)]
        for label, limit in thresholds:
            if size_bytes < limit:
                if label == "Б":
                    return f"{size_bytes} {label}"
                value = size_bytes / (limit // 1024)
                return f"{value:.1f} {label}"
        value = size_bytes / (1024**4)
        return f"{value:.1f} ГБ"
