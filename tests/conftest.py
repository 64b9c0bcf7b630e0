import pytest
import sys
from pathlib import Path

import numpy as np
from PIL import Image

# Add src to sys.path so we can import tile_preview
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from tile_preview.document.models import Document, Layer, LayerGroup  # noqa: E402
from tile_preview.host.memory import InMemoryHost, RecordingNotifier  # noqa: E402


def gradient_image(width: int, height: int, *, blue: int = 128) -> Image.Image:
    """RGBA image where every pixel is distinct: R encodes x, G encodes y."""
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[..., 0] = (np.arange(width) % 256)[np.newaxis, :]
    arr[..., 1] = (np.arange(height) % 256)[:, np.newaxis]
    arr[..., 2] = blue
    arr[..., 3] = 255
    return Image.fromarray(arr)


def transparent_image(width: int, height: int) -> Image.Image:
    return Image.new("RGBA", (width, height), (0, 0, 0, 0))


def patch_image(width: int, height: int, box, color=(255, 0, 0, 255)) -> Image.Image:
    """Transparent image with one opaque rectangle."""
    img = transparent_image(width, height)
    img.paste(Image.new("RGBA", (box[2] - box[0], box[3] - box[1]), color), box[:2])
    return img


# Common test fixtures
@pytest.fixture
def tile_64():
    """64x64 gradient tile."""
    return gradient_image(64, 64)


@pytest.fixture
def image_document(tile_64):
    """Single-layer 64x64 document."""
    return Document.from_image(tile_64, name="texture.png")


@pytest.fixture
def layered_document():
    """100x80 document: background plus a 30x20 red patch layer at (10, 5)."""
    background = Layer(name="Background", image=gradient_image(100, 80))
    patch = Layer(name="Patch", image=patch_image(100, 80, (10, 5, 40, 25)))
    return Document(width=100, height=80, layers=[background, patch], name="layered.psd")


@pytest.fixture
def group_document():
    """100x80 document whose active node is a group of two patches."""
    background = Layer(name="Background", image=gradient_image(100, 80))
    a = Layer(name="A", image=patch_image(100, 80, (10, 10, 30, 30), (255, 0, 0, 255)))
    b = Layer(name="B", image=patch_image(100, 80, (20, 20, 50, 40), (0, 0, 255, 255)))
    group = LayerGroup(name="Group 1", children=[a, b])
    return Document(width=100, height=80, layers=[background, group], name="grouped.psd")


@pytest.fixture
def notifier():
    """Notifier that answers yes and records calls."""
    return RecordingNotifier()


@pytest.fixture
def make_host():
    """Factory for an in-memory host holding one document."""
    def _create(document=None, **kwargs):
        return InMemoryHost([document] if document is not None else [], **kwargs)
    return _create
