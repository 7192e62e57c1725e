"""Tree-sitter parser for TypeScript declaration text."""

from typing import Union

import tree_sitter_typescript as tstypescript
from tree_sitter import Node as TSNode
from tree_sitter import Language, Parser, Tree

from dtsbundle_engine.models import CompiledFile
from .syntax import is_require_target, iter_strings

# Error recovery can split an import-equals statement into an ERROR and an expression statement
IMPORT_STATEMENT_SHAPES = ("import_statement", "ERROR", "expression_statement")


class TreeSitterParser:
    """Parse TypeScript declaration files into tree-sitter trees."""

    def __init__(self):
        self._language = Language(tstypescript.language_typescript())
        self.language_name = "typescript"
        self.parser = Parser(self._language)

    def get_language(self) -> str:
        return self.language_name

    def parse(self, text: Union[str, bytes]) -> Tree:
        if isinstance(text, str):
            text = text.encode("utf-8")
        return self.parser.parse(text)

    def parse_declaration(self, file_name: str, text: str, is_declaration_file: bool = False) -> CompiledFile:
        """Parse declaration text and classify it as a module or an ambient script."""
        tree = self.parse(text)
        return CompiledFile(
            file_name=file_name,
            text=text,
            tree=tree,
            is_declaration_file=is_declaration_file,
            is_external_module=has_external_module_indicator(tree),
        )


def has_external_module_indicator(tree: Tree) -> bool:
    """
    True when a top-level statement exports or imports another module.

    ``import x = N.M;`` only aliases a namespace and does not count.
    """
    for child in tree.root_node.children:
        if child.type == "export_statement":
            return True
        if child.type in IMPORT_STATEMENT_SHAPES and imports_module(child):
            return True
    return False


def imports_module(statement: TSNode) -> bool:
    if statement.child_by_field_name("source") is not None:
        return True
    if any(child.type == "import_require_clause" for child in statement.children):
        return True
    return any(is_require_target(string) for string in iter_strings(statement))
