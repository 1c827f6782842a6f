"""
Quoting of Python functions: building expression trees out of their source.
"""
import ast
import builtins
import inspect
import logging
import sys
import typing
from collections import OrderedDict

from unfold.core.compiler import SOURCE_ATTRIBUTE
from unfold.core.members import Attribute, Item
from unfold.core.nodes import (
    BINARY_OPERATORS,
    BOOL_OPERATORS,
    COMPARE_OPERATORS,
    UNARY_OPERATORS,
    BinaryOp,
    BoolOp,
    Call,
    Compare,
    Conditional,
    Constant,
    Invoke,
    Lambda,
    MemberAccess,
    Node,
    Parameter,
    Subscript,
    TupleLiteral,
    UnaryOp,
)
from unfold.core.resolve import try_resolve_constant_path
from unfold.errors import UnsupportedExpressionShape
from unfold.tools import Dispatcher, ImmutableADict, ImmutableDict, unindent
from unfold.typing import PyFunctionNodeT


logger = logging.getLogger(__name__)


def _invert(operators):
    return {op_type: symbol for symbol, op_type in operators.items()}


BINARY_SYMBOLS = _invert(BINARY_OPERATORS)
UNARY_SYMBOLS = _invert(UNARY_OPERATORS)
COMPARE_SYMBOLS = _invert(COMPARE_OPERATORS)
BOOL_SYMBOLS = _invert(BOOL_OPERATORS)


def getsource(func: typing.Callable) -> str:
    """
    Returns the source of a function ``func``.
    Falls back to ``inspect.getsource()`` for regular functions,
    but can also return the source of a compiled expression.
    """

    if hasattr(func, SOURCE_ATTRIBUTE):
        # An attribute created in ``compile_expression()``
        return getattr(func, SOURCE_ATTRIBUTE)
    else:
        return unindent(inspect.getsource(func))


def get_closure(func: typing.Callable) -> OrderedDict:
    """
    Extracts names and closure cells of closure variables from a function.
    Returns a dictionary mapping names to ``Cell`` objects
    (containing the actual value in the attribute ``cell_contents``).
    """
    closure_names = func.__code__.co_freevars
    closure_vals = func.__closure__
    if len(closure_names) == 0:
        closure_vals = tuple()
    return OrderedDict((name, val) for name, val in zip(closure_names, closure_vals))


def _find_lambda(func: typing.Callable, module: ast.Module) -> ast.Lambda:
    code = func.__code__
    argnames = list(code.co_varnames[: code.co_argcount])
    candidates = [
        node for node in ast.walk(module)
        if type(node) == ast.Lambda
        and [arg.arg for arg in node.args.posonlyargs + node.args.args] == argnames]

    if len(candidates) != 1:
        raise ValueError(
            "Cannot unambiguously locate the source of a lambda "
            "(found {num} candidates); define it on a separate line".format(num=len(candidates)))

    return candidates[0]


def _get_body(tree: PyFunctionNodeT) -> ast.expr:
    if type(tree) == ast.Lambda:
        return tree.body

    statements = tree.body
    if (
        len(statements) > 1
        and type(statements[0]) == ast.Expr
        and type(statements[0].value) == ast.Constant
        and type(statements[0].value.value) == str
    ):
        # skipping the docstring
        statements = statements[1:]

    if len(statements) != 1 or type(statements[0]) != ast.Return or statements[0].value is None:
        raise ValueError("A quoted function must consist of a single return statement")

    return statements[0].value


def _get_arg_names(arguments: ast.arguments) -> typing.List[str]:
    if (
        arguments.vararg is not None
        or arguments.kwarg is not None
        or len(arguments.kwonlyargs) > 0
        or len(arguments.defaults) > 0
    ):
        raise ValueError(
            "A quoted function can only have positional parameters without default values")
    return [arg.arg for arg in arguments.posonlyargs + arguments.args]


def get_function_tree(func: typing.Callable) -> PyFunctionNodeT:
    """
    Returns the syntax tree of ``func``: either an ``ast.Lambda`` or an ``ast.FunctionDef``.
    """
    src = getsource(func)
    try:
        module = ast.parse(src)
    except SyntaxError as exc:
        raise ValueError("Cannot parse the source of " + repr(func)) from exc

    # The name of the code object is kept even if the function was renamed
    if func.__code__.co_name == "<lambda>":
        return _find_lambda(func, module)

    tree = module.body[0]
    if type(tree) == ast.AsyncFunctionDef:
        raise ValueError("A quoted function cannot be an async coroutine")
    elif type(tree) != ast.FunctionDef:
        raise ValueError("Cannot find the definition of " + repr(func))

    return tree


class _quote_node:

    @staticmethod
    def handle_Constant(ctx, node):
        return Constant(node.value)

    @staticmethod
    def handle_Name(ctx, node):
        name = node.id
        if type(node.ctx) != ast.Load:
            raise UnsupportedExpressionShape("Cannot quote an assignment to " + repr(name))

        if name in ctx.scope:
            return ctx.scope[name]
        elif name in ctx.closure:
            return MemberAccess(Constant(ctx.closure[name]), Attribute("cell_contents"))
        elif name in ctx.globals:
            return MemberAccess(Constant(ctx.globals), Item(name))
        elif name in ctx.builtins:
            return MemberAccess(Constant(ctx.builtins), Item(name))
        else:
            raise NameError(name)

    @staticmethod
    def handle_Attribute(ctx, node):
        return MemberAccess(_quote(ctx, node.value), Attribute(node.attr))

    @staticmethod
    def handle_Subscript(ctx, node):
        expr = _quote(ctx, node.value)
        index = node.slice
        # Python 3.8 wraps the index into ``ast.Index``
        if sys.version_info < (3, 9) and type(index) == ast.Index:
            index = index.value

        if type(index) == ast.Constant:
            return MemberAccess(expr, Item(index.value))
        else:
            return Subscript(expr, _quote(ctx, index))

    @staticmethod
    def handle_Call(ctx, node):
        if len(node.keywords) > 0:
            raise UnsupportedExpressionShape("Cannot quote calls with keyword arguments")
        if any(type(arg) == ast.Starred for arg in node.args):
            raise UnsupportedExpressionShape("Cannot quote calls with starred arguments")

        func = _quote(ctx, node.func)
        args = [_quote(ctx, arg) for arg in node.args]

        resolved, callee = try_resolve_constant_path(func)
        if resolved and callable(callee):
            return Call(callee, args)
        else:
            return Invoke(func, args)

    @staticmethod
    def handle_BinOp(ctx, node):
        return BinaryOp(
            _get_symbol(BINARY_SYMBOLS, node.op),
            _quote(ctx, node.left),
            _quote(ctx, node.right))

    @staticmethod
    def handle_UnaryOp(ctx, node):
        return UnaryOp(_get_symbol(UNARY_SYMBOLS, node.op), _quote(ctx, node.operand))

    @staticmethod
    def handle_BoolOp(ctx, node):
        return BoolOp(
            _get_symbol(BOOL_SYMBOLS, node.op),
            [_quote(ctx, value) for value in node.values])

    @staticmethod
    def handle_Compare(ctx, node):
        operands = [_quote(ctx, operand) for operand in [node.left] + node.comparators]
        comparisons = [
            Compare(_get_symbol(COMPARE_SYMBOLS, op), left, right)
            for op, left, right in zip(node.ops, operands[:-1], operands[1:])]

        # The expressions are pure, so evaluating the middle operands twice is fine
        if len(comparisons) == 1:
            return comparisons[0]
        else:
            return BoolOp("and", comparisons)

    @staticmethod
    def handle_IfExp(ctx, node):
        return Conditional(
            _quote(ctx, node.test), _quote(ctx, node.body), _quote(ctx, node.orelse))

    @staticmethod
    def handle_Tuple(ctx, node):
        return TupleLiteral([_quote(ctx, elt) for elt in node.elts])

    @staticmethod
    def handle_Lambda(ctx, node):
        params = [Parameter(name) for name in _get_arg_names(node.args)]
        scope = ctx.scope | {param.name: param for param in params}
        return Lambda(params, _quote(ctx.with_(scope=scope), node.body))

    @staticmethod
    def handle(ctx, node):
        raise UnsupportedExpressionShape("Cannot quote {name} nodes".format(name=type(node).__name__))


def _get_symbol(symbols, op: ast.AST) -> str:
    if type(op) not in symbols:
        raise UnsupportedExpressionShape(
            "Cannot quote the operator {name}".format(name=type(op).__name__))
    return symbols[type(op)]


_quote_dispatcher = Dispatcher(_quote_node, node_types=ast)


def _quote(ctx, node: ast.AST) -> Node:
    return _quote_dispatcher(node, ctx, node)


def quote(func: typing.Callable) -> Lambda:
    """
    Builds an expression tree out of a Python function
    (a lambda, or a function consisting of a single ``return`` statement).

    Global, builtin and closure variables are captured as member accesses
    into the corresponding namespaces,
    so that their values are read when the tree is unfolded or compiled.
    Calls of functions known at quoting time become
    :py:class:`~unfold.core.nodes.Call` nodes.
    """
    tree = get_function_tree(func)
    arg_names = _get_arg_names(tree.args)
    body = _get_body(tree)

    annotations = getattr(func, "__annotations__", {})
    params = [Parameter(name, type=annotations.get(name)) for name in arg_names]

    # Builtins can be either a dict or a module
    builtins_ = func.__globals__.get("__builtins__", builtins)
    if not isinstance(builtins_, dict):
        builtins_ = vars(builtins_)

    ctx = ImmutableADict(
        scope=ImmutableDict((param.name, param) for param in params),
        closure=get_closure(func),
        globals=func.__globals__,
        builtins=builtins_,
    )

    logger.debug("Quoting %s", func.__qualname__)

    return Lambda(params, _quote(ctx, body), returns=annotations.get("return"))
