import pytest

from framegrid.models.geometry_model import GridSpec, Rect
from framegrid.services.render_service import GRID_COLOR, SELECTION_COLOR, build_draw_commands


def test_without_selection_only_image_is_drawn() -> None:
    commands = build_draw_commands((320, 200), None, GridSpec(3, 3))
    assert [c.kind for c in commands] == ["image"]


def test_selection_outline_then_grid_lines() -> None:
    commands = build_draw_commands((320, 200), Rect(10, 20, 90, 60), GridSpec(3, 2))
    rect = commands[1]
    assert rect.kind == "rect" and rect.color == SELECTION_COLOR and rect.width == 4
    assert rect.coords == (10, 20, 100, 80)

    lines = commands[2:]
    vertical = lines[:4]
    horizontal = lines[4:]
    assert len(vertical) == 4 and len(horizontal) == 3
    assert [c.coords[0] for c in vertical] == pytest.approx([10, 40, 70, 100])
    assert [c.coords[1] for c in horizontal] == pytest.approx([20, 50, 80])
    assert all(c.color == GRID_COLOR and c.width == 1 for c in lines)


def test_bad_grid_is_drawn_as_single_cell() -> None:
    commands = build_draw_commands((100, 100), Rect(0, 0, 50, 50), GridSpec(0, -2))
    assert [c.kind for c in commands].count("line") == 4
