import ast
import re
import sys
from typing import Any, cast

from unfold.core.nodes import Node, Parameter, iter_fields


def unparse(tree: ast.AST) -> str:
    if sys.version_info >= (3, 9):
        return ast.unparse(tree)

    # TODO: remove together with Python 3.8 support.
    import astunparse

    return astunparse.unparse(tree)


def unindent(source: str) -> str:
    """
    Shift source to the left so that it starts with zero indentation.
    """
    source = source.rstrip("\n ").lstrip("\n")
    # Casting to Match here because this particular regex always matches
    indent = cast(re.Match, re.match(r"([ \t])*", source)).group(0)
    lines = source.split("\n")
    shifted_lines = []
    for line in lines:
        line = line.rstrip()
        if len(line) > 0:
            if not line.startswith(indent):
                raise ValueError("Inconsistent indent at line " + repr(line))
            shifted_lines.append(line[len(indent) :])
        else:
            shifted_lines.append(line)
    return "\n".join(shifted_lines)


def _expr_equal(node1: Any, node2: Any) -> bool:
    if node1 is node2:
        return True

    if type(node1) != type(node2):
        return False
    if isinstance(node1, tuple):
        if len(node1) != len(node2):
            return False
        for elem1, elem2 in zip(node1, node2):
            if not _expr_equal(elem1, elem2):
                return False
    elif isinstance(node1, Parameter):
        # Parameters are only equal to themselves
        return False
    elif isinstance(node1, Node):
        for field, value1 in iter_fields(node1):
            value2 = getattr(node2, field)
            if not _expr_equal(value1, value2):
                return False
    else:
        if node1 != node2:
            return False

    return True


def expr_equal(node1: Node, node2: Node) -> bool:
    """
    Test two expression trees for structural equality.
    Parameters are compared by identity, all the other nodes by their fields.
    """
    return _expr_equal(node1, node2)
