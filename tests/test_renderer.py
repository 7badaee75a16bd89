import math

import numpy as np
import pytest

from plasmafractal.core.canvas import CanvasSize, PixelBuffer
from plasmafractal.core.color import scalar_to_color, scalar_to_color_array
from plasmafractal.core.displacement import AttenuatedDisplacer
from plasmafractal.core.renderer import GridCell, PlasmaRenderer, clamp_unit, generate, render_image

from .utils import ConstantDisplacer, RecordingWriter, ScriptedRandom

SIZES = [(1, 1), (1, 7), (2, 2), (3, 5), (4, 4), (16, 9), (33, 17), (64, 64)]


@pytest.mark.parametrize("width,height", SIZES)
@pytest.mark.parametrize("base_size", [2.0, 1.0])
def test_every_pixel_written_exactly_once(width, height, base_size):
    writer = RecordingWriter()
    stats = PlasmaRenderer(seed=1, base_size=base_size).generate(width, height, writer)

    coords = writer.coordinates()
    assert len(coords) == width * height
    assert set(coords) == {(x, y) for x in range(width) for y in range(height)}
    assert stats.pixels == width * height


@pytest.mark.parametrize("width,height", SIZES)
def test_recursion_depth_is_bounded(width, height):
    renderer = PlasmaRenderer(seed=2, base_size=1.0)
    stats = renderer.generate(width, height, RecordingWriter())
    assert stats.max_depth <= math.ceil(math.log2(max(width, height)))
    assert renderer.last_stats is stats


def test_same_seed_same_image():
    first = RecordingWriter()
    second = RecordingWriter()
    PlasmaRenderer(seed=42).generate(37, 23, first)
    PlasmaRenderer(seed=42).generate(37, 23, second)
    assert first.pixels == second.pixels


def test_different_seed_different_image():
    a = PlasmaRenderer(seed=1).render_image(32, 32)
    b = PlasmaRenderer(seed=2).render_image(32, 32)
    assert not np.array_equal(a, b)


def test_reseed_restarts_sequence():
    renderer = PlasmaRenderer(seed=5)
    first = renderer.render_image(16, 16)
    renderer.reseed(5)
    assert np.array_equal(renderer.render_image(16, 16), first)


def test_scalar_field_matches_generate():
    buffer = PixelBuffer(CanvasSize(19, 11))
    PlasmaRenderer(seed=9).generate(19, 11, buffer)
    field = PlasmaRenderer(seed=9).scalar_field(19, 11)
    np.testing.assert_allclose(scalar_to_color_array(field), buffer.pixels)


def test_render_image_wrapper_matches_method():
    expected = PlasmaRenderer(seed=4).render_image(20, 12)
    image = render_image(20, 12, seed=4)
    assert image.shape == (12, 20, 3)
    assert image.dtype == np.uint8
    np.testing.assert_array_equal(image, expected)


def test_module_generate_uses_seed():
    first = RecordingWriter()
    second = RecordingWriter()
    generate(8, 8, first, seed=11)
    generate(8, 8, second, seed=11)
    assert first.pixels == second.pixels


def test_four_by_four_without_displacement():
    rng = ScriptedRandom([0.2, 0.8, 0.4, 0.6], default=0.5)
    writer = RecordingWriter()
    PlasmaRenderer(rng=rng).generate(4, 4, writer)

    # Quadrant averages: TL 0.4, TR 0.6, BR 0.5, BL 0.45, each a 2x2 block
    expected = {
        (0, 0): (0.8, 0.2, 0.2), (1, 0): (0.8, 0.2, 0.2), (0, 1): (0.8, 0.2, 0.2), (1, 1): (0.8, 0.2, 0.2),
        (2, 0): (0.8, 0.6, 0.2), (3, 0): (0.8, 0.6, 0.2), (2, 1): (0.8, 0.6, 0.2), (3, 1): (0.8, 0.6, 0.2),
        (2, 2): (1.0, 0.4, 0.0), (3, 2): (1.0, 0.4, 0.0), (2, 3): (1.0, 0.4, 0.0), (3, 3): (1.0, 0.4, 0.0),
        (0, 2): (0.9, 0.3, 0.1), (1, 2): (0.9, 0.3, 0.1), (0, 3): (0.9, 0.3, 0.1), (1, 3): (0.9, 0.3, 0.1),
    }
    got = {(x, y): color for x, y, color in writer.pixels}
    assert got.keys() == expected.keys()
    for coord, color in expected.items():
        assert got[coord] == pytest.approx(color), coord
    # Four corners plus one displacement draw for the single split
    assert rng.calls == 5


def test_pixel_sized_cells_are_bilinear_without_displacement():
    corners = (0.2, 0.8, 0.4, 0.6)
    writer = RecordingWriter()
    PlasmaRenderer(rng=ScriptedRandom(corners, default=0.5), base_size=1.0).generate(4, 4, writer)

    c1, c2, c3, c4 = corners
    for x, y, color in writer.pixels:
        u = (x + 0.5) / 4
        v = (y + 0.5) / 4
        c = c1 * (1 - u) * (1 - v) + c2 * u * (1 - v) + c3 * u * v + c4 * (1 - u) * v
        assert color == pytest.approx(scalar_to_color(c))


@pytest.mark.parametrize("offset", [-10.0, 10.0])
def test_displaced_middle_is_clamped(offset):
    renderer = PlasmaRenderer(seed=3, displacer=ConstantDisplacer(offset), base_size=1.0)
    field = renderer.scalar_field(32, 32)
    assert field.min() >= 0.0
    assert field.max() <= 1.0


@pytest.mark.parametrize("value,expected", [(-3.0, 0.0), (-0.0, 0.0), (0.25, 0.25), (1.0, 1.0), (7.5, 1.0)])
def test_clamp_unit(value, expected):
    assert clamp_unit(value) == expected


def test_edges_are_plain_averages_and_never_clamped():
    cell = GridCell(0.0, 0.0, 8.0, 8.0, (1.4, 1.8, -0.2, 0.6))
    assert cell.edges() == pytest.approx((1.6, 0.8, 0.2, 1.0))

    top_left, top_right, bottom_right, bottom_left = cell.split(0.5)
    assert top_left.corners == pytest.approx((1.4, 1.6, 0.5, 1.0))
    assert top_right.corners == pytest.approx((1.6, 1.8, 0.8, 0.5))
    assert bottom_right.corners == pytest.approx((0.5, 0.8, -0.2, 0.2))
    assert bottom_left.corners == pytest.approx((1.0, 0.5, 0.2, 0.6))


def test_split_geometry():
    cell = GridCell(2.0, 4.0, 6.0, 3.0, (0.0, 0.0, 0.0, 0.0), depth=1)
    children = cell.split(0.0)
    assert [(c.x, c.y, c.width, c.height) for c in children] == [
        (2.0, 4.0, 3.0, 1.5),
        (5.0, 4.0, 3.0, 1.5),
        (5.0, 5.5, 3.0, 1.5),
        (2.0, 5.5, 3.0, 1.5),
    ]
    assert all(c.depth == 2 for c in children)


def test_pixel_span_starts_at_truncated_origin():
    assert GridCell(0.0, 0.0, 1.5, 1.5, (0, 0, 0, 0)).pixel_span() == (range(0, 1), range(0, 1))
    assert GridCell(1.5, 0.0, 1.5, 1.5, (0, 0, 0, 0)).pixel_span() == (range(1, 3), range(0, 1))
    assert GridCell(1.5, 0.75, 1.5, 0.75, (0, 0, 0, 0)).pixel_span() == (range(1, 3), range(0, 1))
    xs, ys = GridCell(2.25, 0.0, 0.75, 0.5, (0, 0, 0, 0)).pixel_span()
    assert xs == range(2, 3)
    assert len(ys) == 0


def test_three_by_three_placement_without_displacement():
    rng = ScriptedRandom([0.2, 0.8, 0.4, 0.6], default=0.5)
    field = PlasmaRenderer(rng=rng).scalar_field(3, 3)

    # One split into 1.5 x 1.5 quadrants: TL 0.4, TR 0.6, BR 0.5, BL 0.45.
    # Quadrants starting at 1.5 own their truncated origin at pixel 1.
    expected = [
        [0.4, 0.6, 0.6],
        [0.45, 0.5, 0.5],
        [0.45, 0.5, 0.5],
    ]
    np.testing.assert_allclose(field, expected)


def test_five_by_three_generate_matches_owning_cell():
    writer = RecordingWriter()
    PlasmaRenderer(rng=ScriptedRandom([0.2, 0.8, 0.4, 0.6], default=0.5)).generate(5, 3, writer)
    got = {(x, y): color for x, y, color in writer.pixels}
    assert len(got) == 15

    # 5x3 splits into 2.5 x 1.5 quadrants, then into 1.25 x 0.75 cells
    cells = []
    for quadrant in GridCell(0.0, 0.0, 5.0, 3.0, (0.2, 0.8, 0.4, 0.6)).split(0.5):
        cells.extend(quadrant.split(quadrant.average()))
    covered = 0
    for cell in cells:
        xs, ys = cell.pixel_span()
        if xs and ys:
            assert (xs.start, ys.start) == (math.floor(cell.x), math.floor(cell.y))
        for py in ys:
            for px in xs:
                covered += 1
                assert got[(px, py)] == pytest.approx(scalar_to_color(cell.average())), (px, py)
    assert covered == 15


def test_attenuated_mode_covers_canvas():
    writer = RecordingWriter()
    PlasmaRenderer(seed=8, displacer=AttenuatedDisplacer()).generate(10, 6, writer)
    assert len(set(writer.coordinates())) == 60


@pytest.mark.parametrize("width,height", [(0, 4), (4, 0), (-1, 3), (2.5, 2)])
def test_invalid_canvas_rejected_before_drawing(width, height):
    rng = ScriptedRandom()
    writer = RecordingWriter()
    with pytest.raises(ValueError):
        PlasmaRenderer(rng=rng).generate(width, height, writer)
    assert writer.pixels == []
    assert rng.calls == 0


def test_invalid_base_size():
    with pytest.raises(ValueError):
        PlasmaRenderer(base_size=0)
