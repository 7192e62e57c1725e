"""Exceptions raised while bundling declaration files."""

from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from dtsbundle_engine.models import Diagnostic


class BundleError(Exception):
    """Base class for all fatal bundling failures."""


class EmitterError(BundleError):
    """The compiler reported diagnostics (or skipped emission) for a bundled file."""

    def __init__(self, message: str, diagnostics: Optional[List["Diagnostic"]] = None):
        super().__init__(message)
        self.diagnostics: List["Diagnostic"] = list(diagnostics or [])


class StreamError(BundleError):
    """Writing or closing the output stream failed."""

    def __init__(self, message: str, cause: OSError):
        super().__init__(message)
        self.cause = cause


class FrontendError(BundleError):
    """The compiler frontend could not be started."""
