"""Виджет холста: экранная копия изображения, рамка выделения и сетка.

Принципы:
- SRP: отвечает только за представление и приём событий указателя.
- Состояние выделения живёт в сессии; виджет рисует готовый список команд.
"""
from __future__ import annotations

from typing import Callable, List, Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from framegrid.models.frame_model import DrawCommand


class ImageViewer(ctk.CTkFrame):
    """Канва фиксированного экранного размера; координаты событий — пространство экрана."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg(), cursor="crosshair")
        self._canvas.grid(row=0, column=0, sticky="nw")

        self._display_image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        self.on_pointer_down: Optional[Callable[[float, float], None]] = None
        self.on_pointer_move: Optional[Callable[[float, float], None]] = None
        self.on_pointer_up: Optional[Callable[[], None]] = None
        self.on_cursor_move: Optional[Callable[[Optional[float], Optional[float]], None]] = None

        self._canvas.bind("<ButtonPress-1>", self._on_press)
        self._canvas.bind("<B1-Motion>", self._on_drag)
        self._canvas.bind("<ButtonRelease-1>", self._on_release)
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", self._on_mouse_leave)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает экранную копию изображения и подгоняет размер канвы."""
        self._display_image = image
        if image is None:
            self._tk_image = None
            self._canvas.delete("all")
            return
        self._tk_image = ImageTk.PhotoImage(image)
        self._canvas.configure(width=image.width, height=image.height)

    def render(self, commands: List[DrawCommand]) -> None:
        """Перерисовывает канву по списку команд."""
        self._canvas.delete("all")
        for cmd in commands:
            x0, y0, x1, y1 = cmd.coords
            if cmd.kind == "image":
                if self._tk_image is not None:
                    self._canvas.create_image(x0, y0, image=self._tk_image, anchor="nw")
            elif cmd.kind == "rect":
                self._canvas.create_rectangle(x0, y0, x1, y1, outline=cmd.color, width=cmd.width)
            elif cmd.kind == "line":
                self._canvas.create_line(x0, y0, x1, y1, fill=cmd.color, width=cmd.width)

    # ---- Internals ----
    def _on_press(self, event: tk.Event) -> None:
        if self._display_image is None or self.on_pointer_down is None:
            return
        self._canvas.focus_set()
        self.on_pointer_down(event.x, event.y)

    def _on_drag(self, event: tk.Event) -> None:
        if self._display_image is None or self.on_pointer_move is None:
            return
        self.on_pointer_move(event.x, event.y)

    def _on_release(self, _event: tk.Event) -> None:
        if self.on_pointer_up:
            self.on_pointer_up()

    def _on_mouse_move(self, event: tk.Event) -> None:
        if self._display_image is None or self.on_cursor_move is None:
            return
        if 0 <= event.x < self._display_image.width and 0 <= event.y < self._display_image.height:
            self.on_cursor_move(event.x, event.y)
        else:
            self.on_cursor_move(None, None)

    def _on_mouse_leave(self, _event: tk.Event) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(None, None)

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"
