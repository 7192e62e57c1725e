"""dtsbundle engine - bundles per-module TypeScript declarations into one file."""

from .bundle import BundleResult, generate
from .errors import BundleError, EmitterError, FrontendError, StreamError
from .models import BundleConfig

__all__ = [
    "BundleConfig",
    "BundleError",
    "BundleResult",
    "EmitterError",
    "FrontendError",
    "StreamError",
    "generate",
]
