"""
Tests for preview.session

Test Coverage:
- End-to-end previews for image, layer and selection sources
- State history and terminal states (DONE / ABORTED / CANCELLED)
- Host settings restored on every exit path
- Errors reported through the notifier exactly once
"""
import pytest
from PIL import Image, ImageDraw

from conftest import gradient_image
from tile_preview.core.errors import (
    AnnotationError,
    CompositeFailureError,
    EmptySourceError,
    InvalidConfigError,
    NoDocumentError,
    UnsupportedHostError,
)
from tile_preview.core.models.geometry import Dimensions
from tile_preview.document.models import Document, Selection
from tile_preview.host.environment import RulerUnits
from tile_preview.host.memory import RecordingNotifier
from tile_preview.preview import session as session_module
from tile_preview.preview.config import TileConfig
from tile_preview.preview.output.annotator import HIGHLIGHT_COLOR, HIGHLIGHT_LAYER_NAME
from tile_preview.preview.session import (
    MINIMUM_HOST_VERSION,
    PreviewSession,
    SessionState,
    run_preview,
)

FULL_HISTORY = [
    SessionState.START,
    SessionState.VALIDATE_ENVIRONMENT,
    SessionState.RESOLVE_SOURCE,
    SessionState.PLAN_GRID,
    SessionState.COMPOSITE,
    SessionState.ANNOTATE,
    SessionState.DONE,
]


def assert_environment_restored(host, document):
    assert host.get_ruler_units() is RulerUnits.INCHES
    assert host.active_document is document


# ─────────────────────────────────────────────────────────────────────────────
# Successful previews
# ─────────────────────────────────────────────────────────────────────────────

class TestSuccessfulPreview:

    def test_whole_image_two_by_three(self, image_document, make_host, notifier):
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=3, gap=0), notifier)

        assert result.succeeded
        assert result.canvas.size == Dimensions(192, 128)
        assert list(result.history) == FULL_HISTORY
        assert notifier.alerts == []

    def test_two_by_two_with_gap(self, make_host):
        doc = Document.from_image(gradient_image(50, 50))
        result = run_preview(make_host(doc), TileConfig(rows=2, cols=2, gap=10))

        assert result.canvas.size == Dimensions(110, 110)
        alpha = result.canvas.base_layer.image.getchannel("A")
        assert alpha.getpixel((55, 20)) == 0

    def test_default_config_is_five_by_five(self, image_document, make_host):
        result = run_preview(make_host(image_document))

        assert result.plan.rows == 5 and result.plan.cols == 5
        assert result.canvas.size == Dimensions(320, 320)

    def test_preview_is_highlighted_and_handed_to_host(self, image_document, make_host):
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2))

        assert host.previews == [result.canvas]
        assert result.canvas.get_layer(HIGHLIGHT_LAYER_NAME) is not None
        assert result.canvas.flatten().getpixel((0, 0)) == HIGHLIGHT_COLOR

    def test_preview_takes_title_and_resolution(self, image_document, make_host):
        image_document.resolution = 300.0

        result = run_preview(make_host(image_document), TileConfig(rows=1, cols=1))

        assert result.canvas.title == "Tile Preview"
        assert result.canvas.resolution == 300.0

    def test_environment_restored_after_success(self, image_document, make_host):
        host = make_host(image_document)

        run_preview(host, TileConfig(rows=2, cols=2))

        assert_environment_restored(host, image_document)

    def test_layer_source(self, layered_document, make_host):
        result = run_preview(make_host(layered_document), TileConfig(rows=2, cols=2, gap=1))

        assert result.source.layer_name == "Patch"
        assert result.canvas.size == Dimensions(61, 41)

    def test_selection_source(self, layered_document, make_host):
        layered_document.selection = Selection.rectangle(0, 0, 10, 10)

        result = run_preview(make_host(layered_document), TileConfig(rows=3, cols=3))

        assert result.canvas.size == Dimensions(30, 30)

    def test_confirmed_group(self, group_document, make_host, notifier):
        host = make_host(group_document)

        result = run_preview(host, TileConfig(rows=2, cols=2), notifier)

        assert result.succeeded
        assert result.source.from_group is True
        assert len(notifier.prompts) == 1
        assert result.canvas.size == Dimensions(80, 60)
        assert group_document.layers[1].name == "Group 1"
        assert len(group_document.layers) == 2


# ─────────────────────────────────────────────────────────────────────────────
# Cancelled and aborted previews
# ─────────────────────────────────────────────────────────────────────────────

class TestCancelled:

    def test_declined_group_ends_cancelled(self, group_document, make_host):
        host = make_host(group_document)
        notifier = RecordingNotifier([False])

        result = run_preview(host, TileConfig(rows=2, cols=2), notifier)

        assert result.cancelled
        assert result.state is SessionState.CANCELLED
        assert result.canvas is None
        assert result.reason == "cancelled"
        assert host.previews == []
        assert notifier.alerts == []
        assert_environment_restored(host, group_document)

    def test_group_without_notifier_is_declined(self, group_document, make_host):
        result = run_preview(make_host(group_document))

        assert result.cancelled


class TestAborted:

    def test_empty_selection(self, image_document, make_host, notifier):
        image_document.selection = Selection.rectangle(10, 10, 10, 30)
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2), notifier)

        assert result.aborted
        assert isinstance(result.error, EmptySourceError)
        assert result.canvas is None
        assert result.history[-2] is SessionState.RESOLVE_SOURCE
        assert host.previews == []
        assert_environment_restored(host, image_document)

    def test_error_is_alerted_once(self, image_document, make_host, notifier):
        image_document.selection = Selection.rectangle(10, 10, 10, 30)

        run_preview(make_host(image_document), notifier=notifier)

        assert len(notifier.alerts) == 1
        title, message = notifier.alerts[0]
        assert title == "Empty Selection"
        assert "selection is empty" in message

    def test_unsupported_host_version(self, image_document, make_host, notifier):
        host = make_host(image_document, version=MINIMUM_HOST_VERSION - 1)

        result = run_preview(host, notifier=notifier)

        assert isinstance(result.error, UnsupportedHostError)
        assert list(result.history) == [
            SessionState.START,
            SessionState.VALIDATE_ENVIRONMENT,
            SessionState.ABORTED,
        ]
        assert notifier.alerts[0][0] == "Incorrect Version"
        # Environment never touched
        assert host.get_ruler_units() is RulerUnits.INCHES

    def test_no_document(self, make_host, notifier):
        result = run_preview(make_host(), notifier=notifier)

        assert isinstance(result.error, NoDocumentError)
        assert result.reason == "no_document"
        assert notifier.alerts[0][0] == "No Files Open"

    def test_invalid_config_reported_at_planning(self, image_document, make_host):
        result = run_preview(make_host(image_document), TileConfig(rows=0))

        assert isinstance(result.error, InvalidConfigError)
        assert result.history[-2] is SessionState.PLAN_GRID
        assert result.source is not None
        assert result.plan is None

    def test_composite_failure(self, image_document, make_host, monkeypatch):
        def failing_composite(*args, **kwargs):
            raise CompositeFailureError("out of memory")

        monkeypatch.setattr(session_module, "composite_plan", failing_composite)
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2))

        assert isinstance(result.error, CompositeFailureError)
        assert result.history[-2] is SessionState.COMPOSITE
        assert result.canvas is None
        assert_environment_restored(host, image_document)

    def test_annotation_failure_keeps_composite_on_error(self, image_document, make_host, monkeypatch):
        def failing_annotate(canvas, tile):
            raise AnnotationError("cannot draw", canvas=canvas)

        monkeypatch.setattr(session_module, "annotate", failing_annotate)
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2))

        assert result.aborted
        assert result.canvas is None
        assert result.error.canvas.size == Dimensions(128, 128)
        assert result.history[-2] is SessionState.ANNOTATE
        assert host.previews == []
        assert_environment_restored(host, image_document)

    def test_out_of_memory_while_pasting_aborts(self, image_document, make_host, notifier, monkeypatch):
        real_paste = Image.Image.paste

        def paste_fails_on_canvas(self, *args, **kwargs):
            # Only the 128x128 preview canvas, not the document buffers
            if self.size == (128, 128):
                raise MemoryError("no room for tile")
            return real_paste(self, *args, **kwargs)

        monkeypatch.setattr(Image.Image, "paste", paste_fails_on_canvas)
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2), notifier)

        assert result.aborted
        assert isinstance(result.error, CompositeFailureError)
        assert isinstance(result.error.__cause__, MemoryError)
        assert result.history[-2] is SessionState.COMPOSITE
        assert len(notifier.alerts) == 1
        assert_environment_restored(host, image_document)

    def test_out_of_memory_while_highlighting_aborts(self, image_document, make_host, notifier, monkeypatch):
        def out_of_memory(self, *args, **kwargs):
            raise MemoryError("no room for outline")

        monkeypatch.setattr(ImageDraw.ImageDraw, "rectangle", out_of_memory)
        host = make_host(image_document)

        result = run_preview(host, TileConfig(rows=2, cols=2), notifier)

        assert result.aborted
        assert result.state.is_terminal
        assert isinstance(result.error, AnnotationError)
        assert result.history[-2] is SessionState.ANNOTATE
        assert [layer.name for layer in result.error.canvas.layers] == ["Tiles"]
        assert notifier.alerts[0][0] == "Unable to highlight"
        assert host.previews == []


# ─────────────────────────────────────────────────────────────────────────────
# Session lifecycle
# ─────────────────────────────────────────────────────────────────────────────

class TestLifecycle:

    def test_session_runs_only_once(self, image_document, make_host):
        session = PreviewSession(make_host(image_document), TileConfig(rows=1, cols=1))
        session.run()

        with pytest.raises(RuntimeError, match="already ran"):
            session.run()

    def test_state_tracks_history(self, image_document, make_host):
        session = PreviewSession(make_host(image_document))
        assert session.state is SessionState.START

        session.run()

        assert session.state is SessionState.DONE
        assert session.state.is_terminal
        assert list(session.history) == FULL_HISTORY

    def test_unexpected_errors_propagate_after_restoring_environment(
        self, image_document, make_host, monkeypatch
    ):
        def broken_plan(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr(session_module, "plan_grid", broken_plan)
        host = make_host(image_document)

        with pytest.raises(RuntimeError, match="boom"):
            run_preview(host)

        assert_environment_restored(host, image_document)

    def test_units_are_pixels_while_running(self, image_document, make_host, monkeypatch):
        host = make_host(image_document)
        seen = []
        real_plan_grid = session_module.plan_grid

        def spying_plan(tile, config):
            seen.append(host.get_ruler_units())
            return real_plan_grid(tile, config)

        monkeypatch.setattr(session_module, "plan_grid", spying_plan)

        run_preview(host, TileConfig(rows=1, cols=1))

        assert seen == [RulerUnits.PIXELS]
