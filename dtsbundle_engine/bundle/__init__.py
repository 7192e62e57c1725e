from .orchestrator import BundleOrchestrator, generate
from .schema import BundleResult
from .writer import OutputAssembler, indent_text

__all__ = [
    "BundleOrchestrator",
    "BundleResult",
    "OutputAssembler",
    "generate",
    "indent_text",
]
