"""
Compilation of expression trees into Python callables.
"""
import ast
import logging
import sys
import typing

from unfold.core.gensym import GenSym
from unfold.core.members import Attribute, Item, Member
from unfold.core.nodes import (
    BINARY_OPERATORS,
    BOOL_OPERATORS,
    COMPARE_OPERATORS,
    UNARY_OPERATORS,
    Node,
    Lambda,
)
from unfold.core.reify import reify
from unfold.core.scope import analyze_scope
from unfold.errors import MemberLookupError, UnsupportedExpressionShape
from unfold.tools import Dispatcher, ImmutableADict, ImmutableDict, unparse
from unfold.typing import PyExprT


logger = logging.getLogger(__name__)

SOURCE_ATTRIBUTE = "__unfold_source__"


def _reify(state, value):
    node, gen_sym, binding = reify(value, state.gen_sym)
    return state.with_(gen_sym=gen_sym, bindings=state.bindings | binding), node


def _compile_sequence(state, nodes):
    new_nodes = []
    for node in nodes:
        state, new_node = _compile(state, node)
        new_nodes.append(new_node)
    return state, new_nodes


def _make_subscript(value: PyExprT, index: PyExprT) -> ast.Subscript:
    # Python 3.8 expects the index wrapped into ``ast.Index``
    if sys.version_info < (3, 9):
        index = ast.Index(value=index)
    return ast.Subscript(value=value, slice=index, ctx=ast.Load())


def _compile_member(state, obj_node: PyExprT, member: Member):
    if isinstance(member, Attribute):
        return state, ast.Attribute(value=obj_node, attr=member.name, ctx=ast.Load())
    elif isinstance(member, Item):
        state, key_node = _reify(state, member.key)
        return state, _make_subscript(obj_node, key_node)
    else:
        raise UnsupportedExpressionShape("Cannot compile a member of type " + str(type(member)))


def _make_arguments(names: typing.List[str]) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=name, annotation=None) for name in names],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


class _compile_node:

    @staticmethod
    def handle_Constant(state, node):
        return _reify(state, node.value)

    @staticmethod
    def handle_Parameter(state, node):
        # Free parameters are rejected before the compilation starts.
        return state, ast.Name(id=state.names[node], ctx=ast.Load())

    @staticmethod
    def handle_MemberAccess(state, node):
        if node.expr is None:
            if node.member.owner is None:
                raise MemberLookupError("A static read of {member} requires an owner".format(
                    member=node.member))
            state, obj_node = _reify(state, node.member.owner)
        else:
            state, obj_node = _compile(state, node.expr)
        return _compile_member(state, obj_node, node.member)

    @staticmethod
    def handle_Call(state, node):
        state, func = _reify(state, node.callee)
        state, args = _compile_sequence(state, node.args)
        return state, ast.Call(func=func, args=args, keywords=[])

    @staticmethod
    def handle_Invoke(state, node):
        state, func = _compile(state, node.func)
        state, args = _compile_sequence(state, node.args)
        return state, ast.Call(func=func, args=args, keywords=[])

    @staticmethod
    def handle_Lambda(state, node):
        outer_names = state.names
        names = outer_names
        gen_sym = state.gen_sym
        param_names = []
        for param in node.params:
            name, gen_sym = gen_sym(param.name)
            names = names.with_item(param, name)
            param_names.append(name)

        state, body = _compile(state.with_(gen_sym=gen_sym, names=names), node.body)
        state = state.with_(names=outer_names)

        return state, ast.Lambda(args=_make_arguments(param_names), body=body)

    @staticmethod
    def handle_BinaryOp(state, node):
        state, left = _compile(state, node.left)
        state, right = _compile(state, node.right)
        return state, ast.BinOp(left=left, op=BINARY_OPERATORS[node.op](), right=right)

    @staticmethod
    def handle_UnaryOp(state, node):
        state, operand = _compile(state, node.operand)
        return state, ast.UnaryOp(op=UNARY_OPERATORS[node.op](), operand=operand)

    @staticmethod
    def handle_Compare(state, node):
        state, left = _compile(state, node.left)
        state, right = _compile(state, node.right)
        return state, ast.Compare(
            left=left, ops=[COMPARE_OPERATORS[node.op]()], comparators=[right])

    @staticmethod
    def handle_BoolOp(state, node):
        state, values = _compile_sequence(state, node.values)
        return state, ast.BoolOp(op=BOOL_OPERATORS[node.op](), values=values)

    @staticmethod
    def handle_Conditional(state, node):
        state, (test, body, orelse) = _compile_sequence(
            state, (node.test, node.body, node.orelse))
        return state, ast.IfExp(test=test, body=body, orelse=orelse)

    @staticmethod
    def handle_Subscript(state, node):
        state, value = _compile(state, node.expr)
        state, index = _compile(state, node.index)
        return state, _make_subscript(value, index)

    @staticmethod
    def handle_TupleLiteral(state, node):
        state, elements = _compile_sequence(state, node.elements)
        return state, ast.Tuple(elts=elements, ctx=ast.Load())

    @staticmethod
    def handle(state, node):
        raise UnsupportedExpressionShape("Cannot compile " + repr(node))


_compile_dispatcher = Dispatcher(_compile_node)


def _compile(state, node: Node):
    return _compile_dispatcher(node, state, node)


def compile_expression(node: Node) -> typing.Callable:
    """
    Compiles an expression tree into a Python function.
    If ``node`` is a :py:class:`~unfold.core.nodes.Lambda`, the function takes its parameters;
    otherwise the function takes no arguments and returns the value of ``node``.

    The generated source of the function is saved in its ``__unfold_source__`` attribute.
    """
    if not isinstance(node, Lambda):
        node = Lambda((), node)

    free = analyze_scope(node).free
    if len(free) > 0:
        raise ValueError(
            "Cannot compile an expression with free parameters: "
            + ", ".join(sorted(param.name for param in free)))

    state = ImmutableADict(gen_sym=GenSym(), names=ImmutableDict(), bindings=ImmutableDict())
    state, lambda_node = _compile(state, node)

    expression = ast.Expression(body=lambda_node)
    ast.fix_missing_locations(expression)
    code_object = compile(expression, "<unfold>", "eval", dont_inherit=True)

    globals_ = dict(state.bindings)
    func = eval(code_object, globals_)

    source = unparse(lambda_node)
    logger.debug("Compiled expression: %s", source)

    # ``inspect.getsource()`` cannot find the source of the generated function,
    # so it is saved for ``quote()`` to discover.
    vars(func)[SOURCE_ATTRIBUTE] = source

    return func
