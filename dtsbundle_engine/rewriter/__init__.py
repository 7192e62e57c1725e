"""Text-preserving source rewriting over tree-sitter trees."""

from .source_rewriter import RewriteContext, Substitution, identity, rewrite
from .module_references import is_module_specifier, module_reference_replacer

__all__ = [
    "RewriteContext",
    "Substitution",
    "identity",
    "rewrite",
    "is_module_specifier",
    "module_reference_replacer",
]
