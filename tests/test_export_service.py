import io
import zipfile
from pathlib import Path

import pytest
from PIL import Image, ImageSequence

from framegrid.models.frame_model import Frame
from framegrid.models.geometry_model import CoordinateSpace, Rect
from framegrid.services.export_service import SequencePackager, frame_filename

COLORS = [(255, 0, 0, 255), (0, 255, 0, 255), (0, 0, 255, 255)]


def _frames(n: int = 3, size: tuple[int, int] = (20, 10)) -> list[Frame]:
    w, h = size
    return [
        Frame(
            row=0,
            col=i,
            image=Image.new("RGBA", size, COLORS[i % len(COLORS)]),
            source_rect=Rect(i * w, 0, w, h, CoordinateSpace.SOURCE),
        )
        for i in range(n)
    ]


def test_frame_filename_is_one_based() -> None:
    assert frame_filename(0) == "frame_1.png"
    assert frame_filename(9) == "frame_10.png"


def test_archive_names_frames_in_order(tmp_path: Path) -> None:
    target = tmp_path / "image_sequence.zip"
    result = SequencePackager().export_archive(_frames(3), target)
    assert result.ok and result.path == target and result.frame_count == 3

    with zipfile.ZipFile(target) as zf:
        assert zf.namelist() == ["frame_1.png", "frame_2.png", "frame_3.png"]
        with zf.open("frame_2.png") as fh:
            img = Image.open(fh)
            img.load()
    assert img.size == (20, 10)
    assert img.convert("RGBA").getpixel((0, 0)) == COLORS[1]


def test_archive_single_frame_keeps_naming() -> None:
    buffer = io.BytesIO()
    result = SequencePackager().export_archive(_frames(1), buffer)
    assert result.ok
    with zipfile.ZipFile(io.BytesIO(buffer.getvalue())) as zf:
        assert zf.namelist() == ["frame_1.png"]


@pytest.mark.parametrize("frames", [None, []])
def test_empty_sequence_writes_nothing(tmp_path: Path, frames) -> None:
    packager = SequencePackager()
    zip_result = packager.export_archive(frames, tmp_path / "a.zip")
    gif_result = packager.export_animation(frames, tmp_path / "a.gif")
    assert zip_result.skipped and not zip_result.ok
    assert gif_result.skipped and not gif_result.ok
    assert packager.build_preview(frames) is None
    assert list(tmp_path.iterdir()) == []


def test_animation_is_looping_gif_with_fixed_interval(tmp_path: Path) -> None:
    target = tmp_path / "animation.gif"
    result = SequencePackager().export_animation(_frames(3), target)
    assert result.ok and result.frame_count == 3

    with Image.open(target) as gif:
        assert gif.format == "GIF"
        assert gif.size == (20, 10)
        assert gif.n_frames == 3
        assert gif.info["duration"] == 200
        assert gif.info["loop"] == 0


def test_animation_interval_override() -> None:
    buffer = io.BytesIO()
    SequencePackager().export_animation(_frames(2), buffer, frame_interval=0.5)
    with Image.open(io.BytesIO(buffer.getvalue())) as gif:
        assert gif.info["duration"] == 500


def test_encoder_failure_is_reported_not_raised(tmp_path: Path, monkeypatch) -> None:
    def broken_save(self, *args, **kwargs):
        raise OSError("encoder exploded")

    monkeypatch.setattr(Image.Image, "save", broken_save)
    target = tmp_path / "animation.gif"
    result = SequencePackager().export_animation(_frames(2), target)
    assert not result.ok and not result.skipped
    assert result.error == "encoder exploded"
    assert not target.exists()


def test_gif_frame_alpha_is_binarized() -> None:
    img = Image.new("RGBA", (2, 1))
    img.putpixel((0, 0), (10, 10, 10, 100))
    img.putpixel((1, 0), (10, 10, 10, 200))
    out = SequencePackager()._prepare_gif_frame(img, (2, 1))
    assert out.getpixel((0, 0))[3] == 0
    assert out.getpixel((1, 0))[3] == 255


def test_preview_caps_width_and_keeps_aspect() -> None:
    loop = SequencePackager().build_preview(_frames(3, size=(400, 300)))
    assert loop is not None
    assert (loop.width, loop.height) == (200, 150)
    assert all(f.size == (200, 150) for f in loop.frames)
    assert loop.steps == 3
    assert loop.total_duration == pytest.approx(2.0)
    assert loop.frame_interval == pytest.approx(2.0 / 3)
    assert loop.keyframes()[-1] == (100.0, 0)
    assert [idx for _, idx in loop.keyframes()] == [0, 1, 2, 0]
    assert loop.frame_at(0.0) is loop.frames[0]
    assert loop.frame_at(0.7) is loop.frames[1]
    assert loop.frame_at(2.1) is loop.frames[0]


def test_preview_does_not_upscale_small_cells() -> None:
    loop = SequencePackager(preview_max_width=200).build_preview(_frames(2, size=(50, 40)))
    assert loop is not None
    assert (loop.width, loop.height) == (50, 40)


def test_identical_cells_keep_total_loop_duration() -> None:
    frames = [
        Frame(row=0, col=i, image=Image.new("RGBA", (8, 8), COLORS[0]), source_rect=Rect(i * 8, 0, 8, 8, CoordinateSpace.SOURCE))
        for i in range(3)
    ]
    buffer = io.BytesIO()
    result = SequencePackager().export_animation(frames, buffer)
    assert result.ok and result.frame_count == 3
    with Image.open(io.BytesIO(buffer.getvalue())) as gif:
        total = sum(frame.info["duration"] for frame in ImageSequence.Iterator(gif))
    assert total == 3 * 200


def test_closed_stream_target_is_reported_not_raised() -> None:
    buffer = io.BytesIO()
    buffer.close()
    result = SequencePackager().export_archive(_frames(2), buffer)
    assert not result.ok and not result.skipped
    assert result.error
