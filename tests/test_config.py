import logging

import pytest
from PIL import Image

from framegrid.config import AppConfig
from framegrid.services.session_service import FrameGridSession


def test_defaults_match_canvas_and_export_conventions() -> None:
    cfg = AppConfig()
    assert (cfg.max_display_width, cfg.max_display_height) == (800, 600)
    assert cfg.handle_size == 10
    assert (cfg.screen_dpi, cfg.print_dpi) == (72, 300)
    assert cfg.frame_interval == 0.2
    assert cfg.archive_name == "image_sequence.zip"
    assert cfg.animation_name == "animation.gif"


def test_from_env_overrides_typed_fields() -> None:
    cfg = AppConfig.from_env(
        {
            "FRAMEGRID_MAX_DISPLAY_WIDTH": "1024",
            "FRAMEGRID_FRAME_INTERVAL": "0.5",
            "FRAMEGRID_ANIMATION_NAME": "loop.gif",
            "UNRELATED": "x",
        }
    )
    assert cfg.max_display_width == 1024
    assert cfg.frame_interval == 0.5
    assert cfg.animation_name == "loop.gif"
    assert cfg.max_display_height == 600


def test_from_env_ignores_malformed_values(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="framegrid.config"):
        cfg = AppConfig.from_env({"FRAMEGRID_HANDLE_SIZE": "wide"})
    assert cfg.handle_size == 10
    assert "FRAMEGRID_HANDLE_SIZE" in caplog.text


@pytest.mark.parametrize("raw", ["0", "-5", "nan", "inf"])
@pytest.mark.parametrize(
    "name",
    ["SCREEN_DPI", "PRINT_DPI", "MAX_DISPLAY_WIDTH", "MAX_DISPLAY_HEIGHT", "FRAME_INTERVAL", "EXPORT_TIMEOUT", "DEFAULT_GRID_VERTICAL"],
)
def test_from_env_rejects_non_positive_numbers(caplog, name: str, raw: str) -> None:
    with caplog.at_level(logging.WARNING, logger="framegrid.config"):
        cfg = AppConfig.from_env({"FRAMEGRID_" + name: raw})
    assert cfg == AppConfig()
    assert "FRAMEGRID_" + name in caplog.text


def test_zero_overrides_leave_the_core_usable() -> None:
    cfg = AppConfig.from_env({"FRAMEGRID_SCREEN_DPI": "0", "FRAMEGRID_MAX_DISPLAY_WIDTH": "0"})
    session = FrameGridSession(cfg)
    session.load_pil(Image.new("RGB", (400, 300)))
    session.set_grid_spec(2, 2)
    session.set_draw_mode(True)
    session.pointer_down(10, 10)
    session.pointer_move(110, 90)
    session.pointer_up()
    assert len(session.extract_frames()) == 4
