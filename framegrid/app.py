import customtkinter as ctk

from framegrid.config import AppConfig
from framegrid.controllers.app_controller import AppController
from framegrid.services.session_service import FrameGridSession
from framegrid.ui.image_viewer import ImageViewer
from framegrid.ui.sidebar import Sidebar
from framegrid.ui.bottom_bar import BottomBar


class FrameGridApp(ctk.CTk):
    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        config = config or AppConfig()
        self.title("Image Grid Analyzer")
        self.minsize(config.max_display_width + 320, config.max_display_height + 120)

        # root layout: left canvas, right sidebar, preview strip below
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self, grid_size=(config.default_grid_horizontal, config.default_grid_vertical))
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            viewer=self._viewer,
            sidebar=self._sidebar,
            bottom=self._bottom,
            window=self,
            session=FrameGridSession(config),
        )
        self._controller.bind_events()
