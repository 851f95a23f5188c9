from __future__ import annotations

import pytest
from PIL import Image

from picture_batch.errors import ConfigurationError
from picture_batch.operations import (
    Arc,
    Draw,
    Ellipse,
    OperationKind,
    Rectangle,
    Rotate,
    Scale,
    Text,
    build_operation,
    build_operations,
)


def test_rotate_clockwise_expands_canvas() -> None:
    image = Image.new("RGB", (4, 2), (255, 255, 255))
    image.putpixel((0, 0), (255, 0, 0))

    out = Rotate(angle=90).apply(image)

    assert out.size == (2, 4)
    assert out.getpixel((1, 0)) == (255, 0, 0)


def test_rotate_zero_is_a_copy() -> None:
    image = Image.new("RGB", (4, 2))
    out = Rotate(angle=360).apply(image)
    assert out is not image
    assert out.size == (4, 2)


@pytest.mark.parametrize(
    ("scale", "expected"),
    [
        (Scale(width="50%", height="50%"), (5, 2)),
        (Scale(width="20", height="20"), (20, 20)),
        (Scale(width="20", height="20", proportions="fit"), (20, 8)),
        (Scale(width="20", height="20", proportions="cover"), (50, 20)),
        (Scale(width="20", height="1", proportions="width"), (20, 8)),
        (Scale(width="1", height="8", proportions="height"), (20, 8)),
    ],
)
def test_scale_sizes(scale: Scale, expected: tuple[int, int]) -> None:
    out = scale.apply(Image.new("RGB", (10, 4)))
    assert out.size == expected


def test_scale_rejects_bad_values() -> None:
    with pytest.raises(ConfigurationError):
        Scale(width="abc")
    with pytest.raises(ConfigurationError):
        Scale(width="-5%")
    with pytest.raises(ConfigurationError):
        Scale(proportions="stretch")


def test_draw_composites_primitive_at_location() -> None:
    image = Image.new("RGB", (20, 20), (255, 255, 255))
    draw = Draw(xloc=5, yloc=5, primitives=(Rectangle(width=4, height=4, fill="red"),))

    out = draw.apply(image)

    assert out.mode == "RGB"
    assert out.getpixel((6, 6)) == (255, 0, 0)
    assert out.getpixel((0, 0)) == (255, 255, 255)
    assert out.getpixel((10, 10)) == (255, 255, 255)
    assert image.getpixel((6, 6)) == (255, 255, 255)


def test_draw_ellipse_and_arc_render_inside_their_box() -> None:
    ellipse = Ellipse(width=10, height=10, fill="blue").render()
    assert ellipse.size == (10, 10)
    assert ellipse.getpixel((5, 5)) == (0, 0, 255, 255)
    assert ellipse.getpixel((0, 0))[3] == 0

    pie = Arc(width=10, height=10, start=0, stop=90, type="pie", fill="green").render()
    # The first quadrant (upper right in image coordinates) is filled.
    assert pie.getpixel((7, 3))[3] == 255
    assert pie.getpixel((2, 7))[3] == 0


def test_text_renders_something() -> None:
    layer = Text(string="Hi", point=12, color="black").render()
    assert layer.width > 0 and layer.height > 0
    assert layer.getextrema()[3][1] > 0


def test_primitives_are_config_only() -> None:
    assert Rectangle(width=1, height=1).kind is OperationKind.CONFIG_ONLY
    assert Text(string="x").kind is OperationKind.CONFIG_ONLY
    assert Draw().kind is OperationKind.TRANSFORM


def test_unknown_color_is_a_config_error() -> None:
    with pytest.raises(ConfigurationError):
        Rectangle(width=1, height=1, fill="not-a-color")


def test_build_operations_from_tables() -> None:
    ops = build_operations(
        [
            {"type": "rotate", "angle": 90},
            {"type": "scale", "width": 100, "height": "50%", "proportions": "fit"},
            {
                "type": "draw",
                "xloc": 1,
                "yloc": 2,
                "primitives": [
                    {"type": "rectangle", "width": 3, "height": 4, "fill": "red"},
                    {"type": "text", "string": "hello", "point": 9},
                ],
            },
            {"type": "ellipse", "width": 3, "height": 3},
        ]
    )

    assert ops[0] == Rotate(angle=90.0)
    assert ops[1] == Scale(width="100", height="50%", proportions="fit")
    draw = ops[2]
    assert isinstance(draw, Draw)
    assert (draw.xloc, draw.yloc) == (1, 2)
    assert [type(p) for p in draw.primitives] == [Rectangle, Text]
    assert ops[3].kind is OperationKind.CONFIG_ONLY


def test_build_operation_errors() -> None:
    with pytest.raises(ConfigurationError):
        build_operation({"type": "blur"})
    with pytest.raises(ConfigurationError):
        build_operation({"angle": 90})
    with pytest.raises(ConfigurationError):
        build_operation({"type": "rotate", "angle": "ninety"})
