import logging
import typing

from unfold.tags import get_splice_tag
from unfold.core.nodes import Node, Call, Lambda
from unfold.core.resolve import resolve_constant_path
from unfold.errors import (
    ArityMismatch,
    InliningDepthExceeded,
    InvalidCalleeExpression,
    MemberLookupError,
    RecursiveSplice,
    UnsupportedExpressionShape,
)
from unfold.tools import ImmutableDict, expr_walker
from unfold.typing import SubstitutionsT


logger = logging.getLogger(__name__)


def inline_splices(tree: Node, max_depth: typing.Optional[int] = None) -> Node:
    """
    Replaces every splice point in ``tree`` with the body of the spliced function,
    its parameters substituted by the (unfolded) arguments of the splice point.
    Splice points appearing in the substituted bodies are unfolded as well.

    If ``max_depth`` is given, raises :py:class:`~unfold.errors.InliningDepthExceeded`
    when splice points are nested deeper than that.
    """
    _, new_tree = _inline_splices_walker(
        dict(substitutions=ImmutableDict(), active=()),
        tree,
        ctx=dict(max_depth=max_depth),
    )
    return new_tree


@expr_walker
class _inline_splices_walker:
    @staticmethod
    def handle_Parameter(state, node, **_):
        # Parameters of the outer function (and of nested lambdas) stay as they are.
        return state, state.substitutions.get(node, node)

    @staticmethod
    def handle_Call(state, node, ctx, walk_field, **_):
        if not get_splice_tag(node.callee):
            return state, node

        func = _resolve_callee(node)
        args = node.args[1:]

        if len(func.params) != len(args):
            raise ArityMismatch(
                "The spliced function takes {params} argument(s), {args} given".format(
                    params=len(func.params), args=len(args)))

        active = state.active
        if any(active_func is func for active_func in active):
            raise RecursiveSplice("A function is spliced into its own body: " + repr(func))
        if ctx.max_depth is not None and len(active) >= ctx.max_depth:
            raise InliningDepthExceeded(
                "Splice points are nested deeper than {depth}".format(depth=ctx.max_depth))

        substitutions = _bind_parameters(state, func, args, walk_field)

        logger.debug(
            "Unfolding a splice point of depth %d with %d argument(s)", len(active) + 1, len(args))

        body_state = state.with_(substitutions=substitutions, active=active + (func,))
        _, new_body = walk_field(body_state, func.body)

        # The bindings of the spliced function are not visible outside of its body.
        return state, new_body


def _resolve_callee(node: Call) -> Lambda:
    if len(node.args) == 0:
        raise InvalidCalleeExpression("A splice point must have the function as its first argument")

    func_expr = node.args[0]
    try:
        func = resolve_constant_path(func_expr)
    except (UnsupportedExpressionShape, MemberLookupError) as exc:
        raise InvalidCalleeExpression(
            "Cannot resolve the spliced function from " + repr(func_expr)) from exc

    if not isinstance(func, Lambda):
        raise InvalidCalleeExpression(
            "The spliced function must resolve to a Lambda, got " + repr(func))

    return func


def _bind_parameters(state, func: Lambda, args: typing.Tuple[Node, ...], walk_field) -> SubstitutionsT:
    substitutions = state.substitutions
    for param, arg in zip(func.params, args):
        # Arguments are unfolded in the scope of the splice point,
        # so they cannot see the parameters of the spliced function.
        _, new_arg = walk_field(state, arg)
        substitutions = substitutions.with_item(param, new_arg)
    return substitutions
