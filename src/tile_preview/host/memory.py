"""
Module: host.memory

Purpose:
    In-memory host and notifier implementations, used by the command
    line tool and by tests.

Key Classes:
    - InMemoryHost: Holds documents and received previews in lists
    - RecordingNotifier: Scripted confirm answers, records every call
    - LoggingNotifier: Sends alerts to the log, fixed confirm answer
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from tile_preview.core.models.canvas import PreviewCanvas
from tile_preview.document.models import Document

from .environment import HostEnvironment, Notifier, RulerUnits

logger = logging.getLogger(__name__)

DEFAULT_HOST_VERSION = 16


class InMemoryHost(HostEnvironment):
    """
    Host that keeps everything in memory.

    Opening a preview moves focus to it, leaving ``active_document``
    as None until a document is activated again.

    Example:
        >>> host = InMemoryHost([doc])
        >>> host.active_document is doc
        True
    """

    def __init__(
        self,
        documents: Optional[Iterable[Document]] = None,
        *,
        version: int = DEFAULT_HOST_VERSION,
        ruler_units: RulerUnits = RulerUnits.INCHES,
    ):
        self.documents: List[Document] = list(documents or [])
        self.previews: List[PreviewCanvas] = []
        self.focused_preview: Optional[PreviewCanvas] = None
        self._version = version
        self._ruler_units = ruler_units
        self._active: Optional[Document] = self.documents[-1] if self.documents else None

    @property
    def version(self) -> int:
        return self._version

    @property
    def active_document(self) -> Optional[Document]:
        return self._active

    def activate(self, document: Document) -> None:
        if not any(d is document for d in self.documents):
            self.documents.append(document)
        self._active = document
        self.focused_preview = None

    def get_ruler_units(self) -> RulerUnits:
        return self._ruler_units

    def set_ruler_units(self, units: RulerUnits) -> None:
        self._ruler_units = units

    def open_preview(self, canvas: PreviewCanvas) -> None:
        self.previews.append(canvas)
        self.focused_preview = canvas
        self._active = None
        logger.info(f"Opened preview '{canvas.title}' ({canvas.width}x{canvas.height})")


class RecordingNotifier(Notifier):
    """
    Notifier that records calls instead of showing dialogs.

    Attributes:
        alerts: (title, message) for every alert
        prompts: (title, message) for every confirmation
    """

    def __init__(self, answers: Iterable[bool] = (), *, default: bool = True):
        self._answers = list(answers)
        self._default = default
        self.alerts: List[Tuple[str, str]] = []
        self.prompts: List[Tuple[str, str]] = []

    def alert(self, message: str, title: str) -> None:
        self.alerts.append((title, message))

    def confirm(self, message: str, title: str) -> bool:
        self.prompts.append((title, message))
        if self._answers:
            return self._answers.pop(0)
        return self._default


class LoggingNotifier(Notifier):
    """Notifier for non-interactive use: alerts go to the log."""

    def __init__(self, assume_yes: bool = False):
        self.assume_yes = assume_yes

    def alert(self, message: str, title: str) -> None:
        logger.warning(f"{title}: {' '.join(message.splitlines())}")

    def confirm(self, message: str, title: str) -> bool:
        answer = "yes" if self.assume_yes else "no"
        logger.info(f"{title} {' '.join(message.splitlines())} -> {answer}")
        return self.assume_yes
