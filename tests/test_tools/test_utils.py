import ast

import pytest

from unfold.core.members import Attribute, Item
from unfold.core.nodes import BinaryOp, Call, Constant, Lambda, MemberAccess, Parameter
from unfold.tools import Dispatcher, unindent, unparse, expr_equal


def test_unindent():
    src = """
        def sample_fn(x, y, foo='bar', **kw):
            if (foo == 'bar'):
                return (x + y)
            else:
                return kw['zzz']
        """

    expected_src = """def sample_fn(x, y, foo='bar', **kw):
    if (foo == 'bar'):
        return (x + y)
    else:
        return kw['zzz']"""

    assert unindent(src) == expected_src


def test_unindent_unexpected_indentation():
    src = """
        def sample_fn(x, y, foo='bar', **kw):
            if (foo == 'bar'):
                return (x + y)
          else:
                return kw['zzz']
        """

    with pytest.raises(ValueError):
        unindent(src)


def test_unparse():
    tree = ast.parse("lambda x: x + 1", mode="eval").body
    assert unparse(tree).strip("()\n") == "lambda x: x + 1"


def test_expr_equal():
    x = Parameter("x")
    globals_ = dict(a=1)

    def make_tree(op="+", key="a", value=1, param=x):
        return Lambda(
            [x],
            BinaryOp(op, param, Call(abs, [MemberAccess(Constant(globals_), Item(key))])))

    tree = make_tree()

    assert expr_equal(tree, tree)
    assert expr_equal(tree, make_tree())

    # Different operator
    assert not expr_equal(tree, make_tree(op="-"))
    # Different member
    assert not expr_equal(tree, make_tree(key="b"))
    # A different parameter with the same name
    assert not expr_equal(tree, make_tree(param=Parameter("x")))


def test_expr_equal_parameters_by_identity():
    x1 = Parameter("x")
    x2 = Parameter("x")
    assert expr_equal(x1, x1)
    assert not expr_equal(x1, x2)


def test_expr_equal_constant_types():
    assert expr_equal(Constant(1), Constant(1))
    assert not expr_equal(Constant(1), Constant(1.0))
    assert not expr_equal(Constant(1), Constant(True))


def test_expr_equal_members():
    owner = object()
    assert expr_equal(
        MemberAccess(None, Attribute("a", owner=owner)),
        MemberAccess(None, Attribute("a", owner=owner)))
    assert not expr_equal(
        MemberAccess(None, Attribute("a", owner=owner)),
        MemberAccess(None, Attribute("a", owner=object())))
    assert not expr_equal(
        MemberAccess(Constant(owner), Attribute("a")),
        MemberAccess(Constant(owner), Item("a")))


def test_expr_equal_sequences():
    assert not expr_equal(
        Call(abs, [Constant(1)]),
        Call(abs, [Constant(1), Constant(2)]))


def test_dispatcher():
    class handlers:
        @staticmethod
        def handle_Constant(node):
            return "constant"

        @staticmethod
        def handle(node):
            return "other"

    dispatcher = Dispatcher(handlers)
    node = Constant(1)
    assert dispatcher(node, node) == "constant"
    node = Parameter("x")
    assert dispatcher(node, node) == "other"


def test_dispatcher_default_handler():
    class handlers:
        @staticmethod
        def handle_Constant(node):
            return "constant"

    dispatcher = Dispatcher(handlers, default_handler=lambda node: "default")
    node = Parameter("x")
    assert dispatcher(node, node) == "default"

    with pytest.raises(ValueError):
        Dispatcher(handlers)


def test_dispatcher_function():
    dispatcher = Dispatcher(lambda node: type(node).__name__)
    node = Constant(1)
    assert dispatcher(node, node) == "Constant"


def test_dispatcher_ast_types():
    class handlers:
        @staticmethod
        def handle_Name(node):
            return node.id

        @staticmethod
        def handle(node):
            return None

    dispatcher = Dispatcher(handlers, node_types=ast)
    node = ast.Name(id="x", ctx=ast.Load())
    assert dispatcher(node, node) == "x"
    node = ast.Constant(value=1)
    assert dispatcher(node, node) is None
