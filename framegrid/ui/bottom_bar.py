from __future__ import annotations

from typing import Optional

import customtkinter as ctk

from framegrid.models.frame_model import LoopDescriptor


class BottomBar(ctk.CTkFrame):
    """Полоса предпросмотра: проигрывает `LoopDescriptor` по кругу через `after()`."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        self._label = ctk.CTkLabel(self, text="Предпросмотр")
        self._label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="w")

        self._preview = ctk.CTkLabel(self, text="—")
        self._preview.grid(row=0, column=1, padx=6, pady=8, sticky="w")

        self._info_val = ctk.StringVar(value="")
        self._info = ctk.CTkLabel(self, textvariable=self._info_val, anchor="w")
        self._info.grid(row=0, column=2, padx=(6, 12), pady=8, sticky="e")

        self._loop: Optional[LoopDescriptor] = None
        self._photos: list[ctk.CTkImage] = []
        self._index = 0
        self._after_id: Optional[str] = None

    # public API (sync from controller)
    def play(self, loop: Optional[LoopDescriptor]) -> None:
        """Запускает новый цикл, предыдущий останавливается."""
        self.stop()
        self._loop = loop
        if loop is None or not loop.frames:
            self._preview.configure(image=None, text="—")
            self._info_val.set("")
            return
        self._photos = [ctk.CTkImage(light_image=img, dark_image=img, size=(loop.width, loop.height)) for img in loop.frames]
        self._index = 0
        self._info_val.set(f"{loop.steps} кадров · {loop.total_duration:.1f} с · {loop.width}×{loop.height}")
        self._tick()

    def stop(self) -> None:
        if self._after_id is not None:
            self.after_cancel(self._after_id)
            self._after_id = None

    # helpers
    def _tick(self) -> None:
        if self._loop is None or not self._photos:
            return
        self._preview.configure(image=self._photos[self._index], text="")
        self._index = (self._index + 1) % len(self._photos)
        delay_ms = max(1, int(round(self._loop.frame_interval * 1000)))
        self._after_id = self.after(delay_ms, self._tick)
