"""Token-level helpers over tree-sitter trees.

tree-sitter-typescript recovers some valid declaration forms (such as
``export import a = require('./a');``) with ERROR nodes, so checks that must
hold for those forms look at the token sequence rather than the node shape.
"""

import re
from typing import List, Optional

from tree_sitter import Node as TSNode

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][\w$]*$")


def previous_token(node: TSNode) -> Optional[TSNode]:
    """The leaf token preceding ``node`` in document order, skipping comments and missing tokens."""
    current: Optional[TSNode] = node
    while True:
        while current.prev_sibling is None:
            current = current.parent
            if current is None:
                return None
        current = current.prev_sibling
        while current.child_count:
            current = current.children[-1]
        if current.type != "comment" and not current.is_missing:
            return current


def previous_tokens(node: TSNode, count: int) -> List[bytes]:
    """Text of up to ``count`` tokens before ``node``, nearest first."""
    texts: List[bytes] = []
    current: Optional[TSNode] = node
    while len(texts) < count:
        current = previous_token(current)
        if current is None:
            break
        texts.append(current.text)
    return texts


def is_require_target(node: TSNode) -> bool:
    """
    True for the string in ``import x = require('<string>')``.

    Also matches ``import type x = ...`` and an ``export`` in front, whatever
    shape the parser gave the statement.
    """
    tokens = previous_tokens(node, 6)
    if tokens[:3] != [b"(", b"require", b"="] or len(tokens) < 5:
        return False
    if not IDENTIFIER_PATTERN.match(tokens[3].decode("utf-8", "replace")):
        return False
    return tokens[4] == b"import" or tokens[4:6] == [b"type", b"import"]


def iter_strings(node: TSNode):
    """Yield every ``string`` node under ``node``, in document order."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "string":
            yield current
            continue
        stack.extend(reversed(current.children))
