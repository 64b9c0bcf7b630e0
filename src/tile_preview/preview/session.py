"""
Module: preview.session

Purpose:
    Orchestrate one tile preview from start to finish.
    Validate → Resolve → Plan → Composite → Annotate

    The session is a linear state machine. Each step either completes or
    fails; a failure moves straight to ABORTED with the originating error
    and nothing is retried. Declining a confirmation moves to CANCELLED,
    which is a clean exit rather than a failure. Host settings altered by
    the session are restored on every exit path.

Key Functions:
    - run_preview(): Convenience entry point

Key Classes:
    - SessionState: States of the preview state machine
    - SessionResult: Terminal state plus output
    - PreviewSession: The orchestrator

Dependencies:
    - preview.source: Source resolution
    - preview.layout: Grid planning
    - preview.output: Compositing and highlighting
    - host: Environment guard and notifications

Used By:
    - cli: Command line host
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from tile_preview.core.errors import (
    NoDocumentError,
    TilePreviewError,
    UnsupportedHostError,
    UserCancelled,
)
from tile_preview.core.models.canvas import DEFAULT_CANVAS_TITLE, PreviewCanvas
from tile_preview.core.models.source import ResolvedSource
from tile_preview.document.models import Document
from tile_preview.host.environment import HostEnvironment, Notifier, scoped_environment

from .config import TileConfig
from .layout import GridPlan, plan_grid
from .output import annotate, composite_plan
from .source import resolve_source

logger = logging.getLogger(__name__)

MINIMUM_HOST_VERSION = 16


class SessionState(Enum):
    """States of a preview session, in pipeline order."""

    START = "start"
    VALIDATE_ENVIRONMENT = "validate_environment"
    RESOLVE_SOURCE = "resolve_source"
    PLAN_GRID = "plan_grid"
    COMPOSITE = "composite"
    ANNOTATE = "annotate"
    DONE = "done"
    ABORTED = "aborted"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.DONE, SessionState.ABORTED, SessionState.CANCELLED)


@dataclass(frozen=True)
class SessionResult:
    """
    Outcome of a preview session (immutable).

    Attributes:
        state: Terminal state (DONE, ABORTED or CANCELLED)
        canvas: Finished preview, only set when DONE
        error: Error that ended the session, if any
        source: Resolved tile, if resolution completed
        plan: Grid plan, if planning completed
        history: Every state the session passed through
        elapsed: Wall time in seconds

    Example:
        >>> result = run_preview(host, TileConfig(rows=2, cols=3))
        >>> result.succeeded, result.canvas.size
        (True, Dimensions(192x128))
    """

    state: SessionState
    canvas: Optional[PreviewCanvas]
    error: Optional[TilePreviewError]
    source: Optional[ResolvedSource]
    plan: Optional[GridPlan]
    history: tuple[SessionState, ...]
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.state is SessionState.DONE

    @property
    def cancelled(self) -> bool:
        return self.state is SessionState.CANCELLED

    @property
    def aborted(self) -> bool:
        return self.state is SessionState.ABORTED

    @property
    def reason(self) -> Optional[str]:
        """Error kind for ABORTED and CANCELLED sessions."""
        return self.error.kind if self.error is not None else None


class PreviewSession:
    """
    Single-use orchestrator for one tile preview.

    The host and its active document are treated as exclusively owned
    while ``run()`` executes. Without a notifier, errors are only logged
    and tiling a layer group is treated as declined.

    Attributes:
        host: Host application supplying the document
        config: Tiling configuration
        notifier: Alerts and confirmation prompts
    """

    def __init__(
        self,
        host: HostEnvironment,
        config: Optional[TileConfig] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.host = host
        self.config = config if config is not None else TileConfig()
        self.notifier = notifier
        self._state = SessionState.START
        self._history: List[SessionState] = [SessionState.START]
        self._source: Optional[ResolvedSource] = None
        self._plan: Optional[GridPlan] = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def history(self) -> tuple[SessionState, ...]:
        return tuple(self._history)

    def run(self) -> SessionResult:
        """
        Run every step of the preview.

        Returns:
            SessionResult in a terminal state. Pipeline errors are captured
            in the result and reported once through the notifier; they are
            not raised.

        Raises:
            RuntimeError: If the session has already run
        """
        if self._state is not SessionState.START:
            raise RuntimeError(f"Preview session already ran (state: {self._state.value})")

        start_time = time.perf_counter()
        canvas: Optional[PreviewCanvas] = None
        error: Optional[TilePreviewError] = None

        try:
            canvas = self._run_steps()
            self._advance(SessionState.DONE)
        except UserCancelled as e:
            error = e
            self._advance(SessionState.CANCELLED)
            logger.info(f"Preview cancelled: {e}")
        except TilePreviewError as e:
            error = e
            self._advance(SessionState.ABORTED)
            logger.warning(f"Preview aborted during {self._history[-2].value}: {e.kind}")
            self._report(e)

        elapsed = time.perf_counter() - start_time
        if canvas is not None:
            logger.info(f"Tile preview completed in {elapsed:.2f}s")

        return SessionResult(
            state=self._state,
            canvas=canvas,
            error=error,
            source=self._source,
            plan=self._plan,
            history=self.history,
            elapsed=elapsed,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Steps
    # ─────────────────────────────────────────────────────────────────────────

    def _run_steps(self) -> PreviewCanvas:
        self._advance(SessionState.VALIDATE_ENVIRONMENT)
        document = self._validate_environment()

        with scoped_environment(self.host):
            self._advance(SessionState.RESOLVE_SOURCE)
            self._source = resolve_source(document, self._confirm_callback())

            self._advance(SessionState.PLAN_GRID)
            self._plan = plan_grid(self._source.dimensions, self.config)

            self._advance(SessionState.COMPOSITE)
            canvas = composite_plan(
                self._source.image,
                self._plan,
                title=DEFAULT_CANVAS_TITLE,
                resolution=document.resolution,
            )

            self._advance(SessionState.ANNOTATE)
            annotate(canvas, self._plan.tile)

            self.host.open_preview(canvas)

        return canvas

    def _validate_environment(self) -> Document:
        if self.host.version < MINIMUM_HOST_VERSION:
            raise UnsupportedHostError(
                f"Tile Preview requires host version {MINIMUM_HOST_VERSION} or higher "
                f"(found {self.host.version})."
            )
        document = self.host.active_document
        if document is None:
            raise NoDocumentError("There is no open file to preview.")
        return document

    # ─────────────────────────────────────────────────────────────────────────
    # Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def _advance(self, state: SessionState) -> None:
        logger.debug(f"Session {self._state.value} -> {state.value}")
        self._state = state
        self._history.append(state)

    def _confirm_callback(self):
        return self.notifier.confirm if self.notifier is not None else None

    def _report(self, error: TilePreviewError) -> None:
        if self.notifier is not None:
            self.notifier.alert(error.message, error.title)


def run_preview(
    host: HostEnvironment,
    config: Optional[TileConfig] = None,
    notifier: Optional[Notifier] = None,
) -> SessionResult:
    """
    Build a tile preview from the host's active document.

    Args:
        host: Host application
        config: Tiling configuration (defaults: 5x5, no gap)
        notifier: Alerts and confirmation prompts

    Returns:
        SessionResult in a terminal state

    Example:
        >>> result = run_preview(InMemoryHost([doc]), TileConfig(rows=2, cols=2, gap=10))
        >>> result.plan.canvas
        Dimensions(110x110)
    """
    return PreviewSession(host, config, notifier).run()
