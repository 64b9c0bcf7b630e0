"""
Tests for core.models.canvas

Test Coverage:
- PreviewCanvas.blank(): Empty layer stack
- add_layer(), remove_layer(), get_layer()
- flatten(): Alpha compositing bottom to top
"""
import pytest
from PIL import Image

from tile_preview.core.models.canvas import PreviewCanvas
from tile_preview.core.models.geometry import Dimensions


@pytest.fixture
def canvas():
    return PreviewCanvas.blank(Dimensions(20, 10), title="Test", resolution=300.0)


def test_blank_has_no_layers(canvas):
    """A blank canvas carries size and metadata only."""
    assert canvas.layers == []
    assert canvas.size == Dimensions(20, 10)
    assert canvas.title == "Test"
    assert canvas.resolution == 300.0


def test_base_layer_when_no_layers_raises(canvas):
    with pytest.raises(LookupError):
        canvas.base_layer


def test_add_layer_is_transparent_and_canvas_sized(canvas):
    layer = canvas.add_layer("Tiles")

    assert layer.image.mode == "RGBA"
    assert layer.image.size == (20, 10)
    assert layer.image.getextrema()[3] == (0, 0)
    assert canvas.base_layer is layer


def test_add_layer_stacks_on_top(canvas):
    bottom = canvas.add_layer("Tiles")
    top = canvas.add_layer("Tile Highlight")

    assert canvas.layers == [bottom, top]
    assert canvas.get_layer("Tile Highlight") is top
    assert canvas.get_layer("missing") is None


def test_remove_layer(canvas):
    canvas.add_layer("Tiles")
    extra = canvas.add_layer("Extra")

    canvas.remove_layer(extra)

    assert [layer.name for layer in canvas.layers] == ["Tiles"]


def test_flatten_composites_top_layer_over_bottom(canvas):
    """Opaque pixels on the top layer win; transparent ones show through."""
    bottom = canvas.add_layer("Tiles")
    bottom.image.paste(Image.new("RGBA", (20, 10), (0, 255, 0, 255)))
    top = canvas.add_layer("Mark")
    top.image.putpixel((0, 0), (255, 0, 255, 255))

    flat = canvas.flatten()

    assert flat.getpixel((0, 0)) == (255, 0, 255, 255)
    assert flat.getpixel((5, 5)) == (0, 255, 0, 255)


def test_flatten_does_not_modify_layers(canvas):
    bottom = canvas.add_layer("Tiles")
    top = canvas.add_layer("Mark")
    top.image.putpixel((1, 1), (255, 0, 255, 255))

    canvas.flatten()

    assert bottom.image.getpixel((1, 1)) == (0, 0, 0, 0)


def test_discard_clears_layers(canvas):
    canvas.add_layer("Tiles")
    canvas.discard()
    assert canvas.layers == []
