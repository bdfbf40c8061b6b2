from pathlib import Path
from unittest.mock import MagicMock

import pytest
from PIL import Image

pytest.importorskip("tkinter")
pytest.importorskip("customtkinter")

from framegrid.controllers.app_controller import AppController, run_export  # noqa: E402
from framegrid.models.frame_model import ExportResult  # noqa: E402
from framegrid.services.session_service import FrameGridSession  # noqa: E402


def _controller() -> AppController:
    session = FrameGridSession()
    session.load_pil(Image.new("RGB", (400, 300)))
    session.set_draw_mode(True)
    session.pointer_down(10, 10)
    session.pointer_move(110, 90)
    session.pointer_up()
    return AppController(viewer=MagicMock(), sidebar=MagicMock(), bottom=MagicMock(), window=MagicMock(), session=session)


def test_unexpected_export_error_becomes_failed_result() -> None:
    def exploding(target, frames):
        raise RuntimeError("codec crashed")

    result = run_export(exploding, "out.gif", [])
    assert not result.ok and not result.skipped
    assert result.error == "codec crashed"


def test_successful_export_result_passes_through() -> None:
    expected = ExportResult(ok=True, path=Path("out.zip"), frame_count=2)
    assert run_export(lambda target, frames: expected, "out.zip", []) is expected


def test_finishing_export_restores_selection_controls() -> None:
    controller = _controller()
    controller._export_started = 0.0
    controller._redraw()
    controller.sidebar.set_selection_available.assert_called_with(False)

    controller._finish_export(ExportResult(ok=True, path=Path("out.zip"), frame_count=25))
    assert controller._export_started is None
    controller.sidebar.set_selection_available.assert_called_with(True)
    controller.sidebar.set_export_busy.assert_called_with(False, True)


def test_timed_out_export_reports_status() -> None:
    controller = _controller()
    controller._export_started = 0.0
    controller._finish_export(None)
    controller.sidebar.set_status.assert_called_with("Экспорт не завершился вовремя")
