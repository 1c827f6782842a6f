import difflib
import pprint

from unfold.core.nodes import Node, Parameter, iter_fields
from unfold.tools import expr_equal


def dump(node):
    """
    Returns a nested list representation of an expression tree,
    suitable for printing.
    """
    if isinstance(node, Parameter):
        return repr(node)
    elif isinstance(node, Node):
        return [type(node).__name__] + [
            (field, dump(value)) for field, value in iter_fields(node)]
    elif isinstance(node, tuple):
        return [dump(elem) for elem in node]
    else:
        return node


def print_diff(test, expected):
    print("\n" + "=" * 40 + " expected:\n\n" + expected)
    print("\n" + "=" * 40 + " result:\n\n" + test)
    print("\n")

    expected_lines = expected.split("\n")
    test_lines = test.split("\n")

    for line in difflib.unified_diff(
        expected_lines, test_lines, fromfile="expected", tofile="test"
    ):
        print(line)


def assert_expr_equal(test_expr, expected_expr):
    """
    Check that test_expr is equal to expected_expr,
    printing helpful error message if they are not equal
    """

    equal = expr_equal(test_expr, expected_expr)
    if not equal:
        print_diff(pprint.pformat(dump(test_expr)), pprint.pformat(dump(expected_expr)))

    assert equal


def contains_node(tree, predicate):
    """
    Returns ``True`` if any node in ``tree`` (including the constants' payloads)
    satisfies ``predicate``.
    """
    if isinstance(tree, tuple):
        return any(contains_node(elem, predicate) for elem in tree)
    if not isinstance(tree, Node):
        return False
    if predicate(tree):
        return True
    return any(contains_node(value, predicate) for _, value in iter_fields(tree))
