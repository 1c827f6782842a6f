import functools
import typing

from unfold.components import inline_splices
from unfold.core.compiler import compile_expression
from unfold.core.nodes import Node
from unfold.core.quote import quote
from unfold.tags import splice_marker


def _as_expression(expression: typing.Union[Node, typing.Callable]) -> Node:
    if isinstance(expression, Node):
        return expression
    elif callable(expression):
        return quote(expression)
    else:
        raise TypeError(
            "Expected an expression tree or a function, got " + str(type(expression)))


def new(expression: typing.Union[Node, typing.Callable]) -> Node:
    """
    Returns the expression tree unchanged, or quotes it if it is a Python function.
    """
    return _as_expression(expression)


def unfold(expression: typing.Union[Node, typing.Callable], max_depth: typing.Optional[int] = None) -> Node:
    """
    Returns a new expression tree with every call to :py:func:`use`
    (or another splice marker) replaced by the body of the function
    passed as its first argument, with the rest of the arguments substituted for its parameters.
    If ``expression`` is a Python function, it is quoted first.

    The function passed to ``use`` must be a constant path:
    a global, builtin or closure variable, or an attribute or an item of one,
    holding an expression tree (see :py:func:`new`).
    """
    return inline_splices(_as_expression(expression), max_depth=max_depth)


@splice_marker
def use(expression: typing.Union[Node, typing.Callable], *args):
    """
    Compiles the expression and calls it with the given arguments.
    Inside an unfolded expression, calls to this function are replaced by
    the body of ``expression`` (see :py:func:`unfold`).
    """
    return compile_expression(_as_expression(expression))(*args)


def unfold_function(func: typing.Callable, max_depth: typing.Optional[int] = None) -> typing.Callable:
    """
    Quotes ``func``, unfolds the resulting tree and compiles it back into a function.
    Can be used as a decorator.
    """
    new_func = compile_expression(unfold(quote(func), max_depth=max_depth))
    # Not updating ``__dict__`` to keep the source of the compiled function.
    return functools.update_wrapper(new_func, func, updated=())
