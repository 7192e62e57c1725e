from .syntax import is_require_target, previous_token
from .tree_sitter_parser import TreeSitterParser, has_external_module_indicator

__all__ = [
    "TreeSitterParser",
    "has_external_module_indicator",
    "is_require_target",
    "previous_token",
]
