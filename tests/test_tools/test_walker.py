import copy

import pytest

from unfold.core.members import Attribute
from unfold.core.nodes import (
    BinaryOp, Call, Constant, Lambda, MemberAccess, Parameter, TupleLiteral)
from unfold.tools import expr_walker, expr_inspector

from tests.utils import assert_expr_equal


def make_tree():
    x = Parameter("x")
    y = Parameter("y")
    tree = Lambda(
        [x, y],
        BinaryOp(
            "+",
            BinaryOp("*", x, Constant(4)),
            Call(abs, [BinaryOp("-", y, Constant(1))])))
    return tree


def test_inspector():
    @expr_inspector
    def collect_numbers(state, node, **kwds):
        if isinstance(node, Constant):
            return state.with_(numbers=state.numbers | {node.value})
        else:
            return state

    state = collect_numbers(dict(numbers=frozenset()), make_tree())
    assert state.numbers == set([1, 4])


def test_inspector_class():
    @expr_inspector
    class collect_names:
        @staticmethod
        def handle_Parameter(state, node, **_):
            return state.with_(names=state.names + (node.name,))

    state = collect_names(dict(names=()), make_tree())
    # Parameters are visited in the declaration list and in the body
    assert state.names == ("x", "y", "x", "y")


def test_walk_tuple():
    @expr_inspector
    def count_nodes(state, node, **kwds):
        return state.with_(count=state.count + 1)

    state = count_nodes(dict(count=0), (Constant(1), Constant(2)))
    assert state.count == 2


def test_walker():
    @expr_walker
    def process_numbers(state, node, **kwds):
        if isinstance(node, Constant):
            return state.with_(numbers=state.numbers | {node.value}), Constant(node.value + 1)
        else:
            return state, node

    tree = make_tree()
    tree_ref = copy.deepcopy(tree)
    state, new_tree = process_numbers(dict(numbers=frozenset()), tree)

    assert state.numbers == set([1, 4])

    x, y = tree.params
    assert_expr_equal(
        new_tree,
        Lambda(
            [x, y],
            BinaryOp(
                "+",
                BinaryOp("*", x, Constant(5)),
                Call(abs, [BinaryOp("-", y, Constant(2))]))))

    # The source tree is not changed
    assert new_tree is not tree
    assert tree.body.left.right.value == tree_ref.body.left.right.value == 4


def test_unchanged_tree_is_reused():
    @expr_walker
    def do_nothing(state, node, **kwds):
        return state, node

    tree = make_tree()
    _, new_tree = do_nothing(dict(), tree)
    assert new_tree is tree


def test_unchanged_subtree_is_reused():
    @expr_walker
    class change_multiplication:
        @staticmethod
        def handle_BinaryOp(state, node, **_):
            if node.op == "*":
                return state, BinaryOp("*", node.right, node.left)
            return state, node

    tree = make_tree()
    _, new_tree = change_multiplication(dict(), tree)
    assert new_tree is not tree
    assert new_tree.body.right is tree.body.right
    assert new_tree.params is tree.params


def test_constant_payload_is_not_walked():
    inner = Lambda([], Constant(1))

    @expr_inspector
    def count_constants(state, node, **kwds):
        if isinstance(node, Constant):
            return state.with_(count=state.count + 1)
        return state

    state = count_constants(dict(count=0), Call(len, [Constant(inner)]))
    assert state.count == 1


def test_member_access_without_expression():
    tree = MemberAccess(None, Attribute("pi", owner=object()))

    @expr_walker
    def do_nothing(state, node, **kwds):
        return state, node

    _, new_tree = do_nothing(dict(), tree)
    assert new_tree is tree


def test_skip_fields():
    @expr_inspector
    def count_nodes(state, node, skip_fields, **kwds):
        if isinstance(node, Call):
            skip_fields()
        return state.with_(count=state.count + 1)

    state = count_nodes(dict(count=0), make_tree())
    # Lambda, x, y, +, *, x, 4, Call
    assert state.count == 8


def test_walk_field():
    @expr_walker
    class swap_tuple:
        @staticmethod
        def handle_TupleLiteral(state, node, walk_field, **_):
            state, elements = walk_field(state, node.elements)
            return state.with_(swapped=True), TupleLiteral(reversed(elements))

        @staticmethod
        def handle_Constant(state, node, **_):
            return state, Constant(-node.value)

    state, new_tree = swap_tuple(
        dict(swapped=False), TupleLiteral([Constant(1), Constant(2)]))
    assert state.swapped
    assert_expr_equal(new_tree, TupleLiteral([Constant(-2), Constant(-1)]))


def test_wrong_return_type():
    @expr_walker
    def return_number(state, node, **kwds):
        return state, 1

    with pytest.raises(TypeError):
        return_number(dict(), Constant(1))


def test_wrong_root_type():
    @expr_inspector
    def do_nothing(state, node, **kwds):
        return state

    with pytest.raises(TypeError):
        do_nothing(dict(), 1)


def test_ctx():
    @expr_inspector
    def collect_large(state, node, ctx, **kwds):
        if isinstance(node, Constant) and node.value > ctx.threshold:
            return state.with_(large=state.large | {node.value})
        return state

    state = collect_large(dict(large=frozenset()), make_tree(), ctx=dict(threshold=2))
    assert state.large == {4}
