"""
Module: host.environment

Purpose:
    Abstract interfaces for the host application that supplies documents
    and displays previews, plus a scoped guard that restores host state
    after a preview session.

Key Classes:
    - RulerUnits: Host measurement units
    - HostEnvironment: Abstract host application
    - Notifier: Abstract alert/confirm dialogs

Key Functions:
    - scoped_environment(): Switch to pixel units for the duration of a
      block and restore units and focus on every exit path

Used By:
    - preview.session: Environment guard and error reporting
    - host.memory: In-memory implementations
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from enum import Enum
from typing import TYPE_CHECKING, Generator, Optional

if TYPE_CHECKING:
    from tile_preview.core.models.canvas import PreviewCanvas
    from tile_preview.document.models import Document

logger = logging.getLogger(__name__)


class RulerUnits(Enum):
    """Measurement units a host may be configured to use."""

    PIXELS = "px"
    INCHES = "in"
    CENTIMETERS = "cm"
    MILLIMETERS = "mm"
    POINTS = "pt"
    PICAS = "pc"
    PERCENT = "%"


class HostEnvironment(ABC):
    """
    Host application that owns documents.

    A preview session treats the host as exclusively owned while it runs.
    """

    @property
    @abstractmethod
    def version(self) -> int:
        """Major version of the host application."""

    @property
    @abstractmethod
    def active_document(self) -> Optional[Document]:
        """Document that currently has focus, or None if nothing is open."""

    @abstractmethod
    def activate(self, document: Document) -> None:
        """Give focus to a document."""

    @abstractmethod
    def get_ruler_units(self) -> RulerUnits:
        """Current ruler units preference."""

    @abstractmethod
    def set_ruler_units(self, units: RulerUnits) -> None:
        """Change the ruler units preference."""

    @abstractmethod
    def open_preview(self, canvas: PreviewCanvas) -> None:
        """
        Display a finished preview canvas.

        Typically opens it as a new document, which moves focus away
        from the source document.
        """


class Notifier(ABC):
    """User-facing alerts and yes/no prompts."""

    @abstractmethod
    def alert(self, message: str, title: str) -> None:
        """Show an informational or error message."""

    @abstractmethod
    def confirm(self, message: str, title: str) -> bool:
        """Ask a yes/no question. Returns True for yes."""


@contextmanager
def scoped_environment(
    host: HostEnvironment,
    units: RulerUnits = RulerUnits.PIXELS,
) -> Generator[None, None, None]:
    """
    Context manager that applies temporary host settings.

    Records the current ruler units and active document, switches to
    ``units``, and restores both when the block exits, whether it
    completes, raises, or is cancelled.

    Example:
        >>> with scoped_environment(host):
        ...     run_preview_steps()
        >>> host.get_ruler_units() is original_units
        True
    """
    original_units = host.get_ruler_units()
    original_document = host.active_document
    host.set_ruler_units(units)
    logger.debug(f"Ruler units {original_units.value} -> {units.value}")
    try:
        yield
    finally:
        host.set_ruler_units(original_units)
        if original_document is not None:
            host.activate(original_document)
        logger.debug(f"Restored ruler units {original_units.value} and document focus")
