"""Text-preserving rewrite of a tree-sitter tree.

The rewriter copies the original source through byte for byte and only
replaces the spans of nodes the replacer asks for. Whitespace, comments and
every node the replacer ignores come out exactly as they went in.
"""

from dataclasses import dataclass, field
from typing import Callable, List, NamedTuple, Optional, Union

from tree_sitter import Node as TSNode
from tree_sitter import Tree


class Substitution(NamedTuple):
    """Replacement text for the span from a node's start to ``end_byte``.

    Lets a replacer consume bytes that trail the node (such as the space after a
    removed keyword). ``end_byte`` must not reach into the next node.
    """

    text: str
    end_byte: int


Replacement = Union[None, str, Substitution]
Replacer = Callable[[TSNode], Replacement]


@dataclass
class RewriteContext:
    """Traversal state: how much of ``source`` has been flushed, and what was written."""

    source: bytes
    position: int = 0
    chunks: List[bytes] = field(default_factory=list)

    def read_through(self, offset: int) -> None:
        """Copy original bytes up to ``offset``."""
        if offset > self.position:
            self.chunks.append(self.source[self.position : offset])
            self.position = offset

    def substitute(self, text: str, end_byte: int) -> None:
        self.chunks.append(text.encode("utf-8"))
        self.position = max(self.position, end_byte)

    def getvalue(self) -> str:
        return b"".join(self.chunks).decode("utf-8")


def rewrite(tree: Tree, source: Union[str, bytes], replacer: Replacer) -> str:
    """
    Return ``source`` with every node the replacer matches swapped for its replacement.

    Nodes are offered to ``replacer`` depth first, in document order. A matched
    node's subtree is not visited. A replacer that always returns None gives
    back the source unchanged.

    Args:
        tree: Tree parsed from exactly ``source``
        source: Original text
        replacer: Called with each node; returns None to keep it

    Returns:
        The rewritten text
    """
    if isinstance(source, str):
        source = source.encode("utf-8")

    context = RewriteContext(source)
    _visit(tree.root_node, replacer, context)
    context.read_through(len(source))
    return context.getvalue()


def _visit(node: TSNode, replacer: Replacer, context: RewriteContext) -> None:
    # Already consumed by a Substitution that ran past its node
    if node.start_byte < context.position:
        return

    context.read_through(node.start_byte)

    replacement = replacer(node)
    if replacement is None:
        for child in node.children:
            _visit(child, replacer, context)
    elif isinstance(replacement, Substitution):
        context.substitute(replacement.text, max(node.end_byte, replacement.end_byte))
    else:
        context.substitute(replacement, node.end_byte)


def identity(node: TSNode) -> Optional[str]:
    return None
