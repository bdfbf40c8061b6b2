import pytest

from framegrid.models.geometry_model import Rect, Size
from framegrid.services.region_service import Corner, EditState, RegionEditor


def _drawn(x0: float, y0: float, x1: float, y1: float, canvas: Size = Size(400, 300)) -> RegionEditor:
    editor = RegionEditor(canvas)
    editor.set_draw_mode(True)
    editor.pointer_down(x0, y0)
    editor.pointer_move(x1, y1)
    editor.pointer_up()
    return editor


def _assert_inside(rect: Rect, canvas: Size) -> None:
    assert rect.x >= 0 and rect.y >= 0
    assert rect.width >= 0 and rect.height >= 0
    assert rect.right <= canvas.width
    assert rect.bottom <= canvas.height


def test_draw_creates_bounding_box_of_anchor_and_pointer() -> None:
    editor = RegionEditor(Size(400, 300))
    editor.set_draw_mode(True)
    assert editor.pointer_down(100, 100) is EditState.DRAWING
    assert editor.selection == Rect(100, 100, 0, 0)
    editor.pointer_move(50, 40)
    assert editor.selection == Rect(50, 40, 50, 60)
    assert editor.pointer_up() is EditState.IDLE
    assert editor.selection == Rect(50, 40, 50, 60)


def test_pointer_down_without_draw_mode_does_nothing() -> None:
    editor = RegionEditor(Size(400, 300))
    assert editor.pointer_down(10, 10) is EditState.IDLE
    editor.pointer_move(50, 50)
    assert editor.selection is None


def test_selection_is_always_clamped_to_canvas() -> None:
    canvas = Size(400, 300)
    editor = RegionEditor(canvas)
    editor.set_draw_mode(True)
    editor.pointer_down(390, 290)
    for x, y in [(500, -20), (-100, 1000), (0, 0), (400, 300), (1e6, -1e6)]:
        rect = editor.pointer_move(x, y)
        assert rect is not None
        _assert_inside(rect, canvas)
    editor.pointer_move(500, -20)
    assert editor.selection == Rect(390, 0, 10, 290)


def test_new_draw_replaces_previous_selection() -> None:
    editor = _drawn(10, 10, 60, 60)
    editor.pointer_down(200, 200)
    editor.pointer_move(250, 220)
    assert editor.selection == Rect(200, 200, 50, 20)


def test_resize_bottom_right_keeps_top_left_fixed() -> None:
    editor = _drawn(100, 100, 200, 180)
    assert editor.pointer_down(203, 178) is EditState.RESIZING
    assert editor.corner is Corner.BOTTOM_RIGHT
    assert editor.pointer_move(250, 260) == Rect(100, 100, 150, 160)
    assert editor.pointer_move(50, 50) == Rect(100, 100, 0, 0)
    assert editor.pointer_move(500, 500) == Rect(100, 100, 300, 200)
    editor.pointer_up()
    assert editor.state is EditState.IDLE


def test_resize_top_left_keeps_bottom_right_fixed() -> None:
    editor = _drawn(100, 100, 200, 180)
    editor.pointer_down(98, 102)
    assert editor.corner is Corner.TOP_LEFT
    assert editor.pointer_move(20, 30) == Rect(20, 30, 180, 150)
    assert editor.pointer_move(-50, -50) == Rect(0, 0, 200, 180)
    assert editor.pointer_move(300, 300) == Rect(200, 180, 0, 0)


def test_overlapping_handles_resolve_to_top_left() -> None:
    editor = _drawn(100, 100, 104, 104)
    assert editor.hit_test(102, 102) is Corner.TOP_LEFT
    editor.pointer_down(102, 102)
    assert editor.corner is Corner.TOP_LEFT


def test_hit_test_misses_outside_handle_radius() -> None:
    editor = _drawn(100, 100, 200, 180)
    assert editor.hit_test(150, 140) is None
    assert editor.hit_test(210, 180) is None
    assert RegionEditor(Size(10, 10)).hit_test(0, 0) is None


def test_turning_draw_mode_off_clears_selection() -> None:
    editor = _drawn(10, 10, 60, 60)
    assert editor.toggle_draw_mode() is False
    assert editor.selection is None
    assert editor.state is EditState.IDLE


def test_new_canvas_clears_selection() -> None:
    editor = _drawn(10, 10, 60, 60)
    editor.set_canvas_size(Size(100, 100))
    assert editor.selection is None
    assert editor.canvas_size == Size(100, 100)


def test_touch_uses_first_touch_point_only() -> None:
    editor = RegionEditor(Size(400, 300))
    editor.set_draw_mode(True)
    assert editor.touch_start([]) is EditState.IDLE
    editor.touch_start([(10, 10), (300, 300)])
    editor.touch_move([(60, 70), (5, 5)])
    assert editor.selection == Rect(10, 10, 50, 60)
    assert editor.touch_end() is EditState.IDLE


@pytest.mark.parametrize("corner_point", [(150, 150), (50, 50)])
@pytest.mark.parametrize("moves", [[(0, 0)], [(-5, 310), (405, -1)], [(123.4, 56.7), (1000, 1000)]])
def test_resize_never_leaves_canvas(corner_point, moves) -> None:
    canvas = Size(400, 300)
    editor = _drawn(50, 50, 150, 150, canvas)
    assert editor.pointer_down(*corner_point) is EditState.RESIZING
    for x, y in moves:
        _assert_inside(editor.pointer_move(x, y), canvas)


def test_pointer_down_after_clear_does_not_resize() -> None:
    editor = _drawn(100, 100, 200, 180)
    editor.clear_selection()
    assert editor.pointer_down(100, 100) is EditState.DRAWING
    assert editor.corner is None
