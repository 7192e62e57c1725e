"""Replacer that re-homes a declaration file's module references under the bundle namespace."""

from typing import Optional

from tree_sitter import Node as TSNode

from dtsbundle_engine.module_id import is_relative, join_module_id
from dtsbundle_engine.parser.syntax import is_require_target
from .source_rewriter import Replacement, Replacer, Substitution

HORIZONTAL_WHITESPACE = b" \t"


def module_reference_replacer(module_id: str, source: bytes) -> Replacer:
    """
    Build the replacer used when wrapping a declaration file in ``declare module '<module_id>'``.

    - Relative ``require('./x')``, ``from './x'`` and ``import './x'`` targets become
      namespace-qualified ids joined against ``module_id``.
    - ``declare`` keywords are dropped, since the content is already inside an
      ambient module block.
    """

    def replace(node: TSNode) -> Replacement:
        if node.type == "declare" and not node.is_named:
            return Substitution("", _skip_horizontal_whitespace(source, node.end_byte))

        if node.type == "string" and is_module_specifier(node):
            return _rewrite_specifier(node, module_id)

        return None

    return replace


def is_module_specifier(node: TSNode) -> bool:
    """True for the string literal naming the target module of an import, export or require."""
    parent = node.parent
    if parent is None:
        return False

    if parent.type == "import_require_clause" or is_require_target(node):
        return True

    if parent.type in ("import_statement", "export_statement"):
        specifier = parent.child_by_field_name("source")
        return specifier is not None and (specifier.start_byte, specifier.end_byte) == (
            node.start_byte,
            node.end_byte,
        )

    return False


def _rewrite_specifier(node: TSNode, module_id: str) -> Optional[str]:
    literal = node.text.decode("utf-8")
    if len(literal) < 2:
        return None

    quote, path = literal[0], literal[1:-1]
    if not is_relative(path):
        return None

    return f"{quote}{join_module_id(module_id, path)}{quote}"


def _skip_horizontal_whitespace(source: bytes, offset: int) -> int:
    while offset < len(source) and source[offset] in HORIZONTAL_WHITESPACE:
        offset += 1
    return offset
