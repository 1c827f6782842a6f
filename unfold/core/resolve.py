"""
Evaluation of constant paths: chains of member reads
starting from a constant (or from a static member).
"""
import typing

from unfold.core.nodes import Node, Constant, MemberAccess
from unfold.errors import UnsupportedExpressionShape, MemberLookupError
from unfold.tools import Dispatcher


class _resolve_constant_path:

    @staticmethod
    def handle_Constant(node: Constant):
        return node.value

    @staticmethod
    def handle_MemberAccess(node: MemberAccess):
        if node.expr is None:
            return node.member.read_static()
        obj = _resolve(node.expr)
        return node.member.read(obj)

    @staticmethod
    def handle(node: Node):
        raise UnsupportedExpressionShape(
            "A constant path can only contain constants and member accesses, got "
            + repr(node))


_resolve_dispatcher = Dispatcher(_resolve_constant_path)


def _resolve(node: Node):
    return _resolve_dispatcher(node, node)


def resolve_constant_path(node: Node) -> typing.Any:
    """
    Returns the value of the expression ``node``,
    which must be a :py:class:`~unfold.core.nodes.Constant`,
    or a :py:class:`~unfold.core.nodes.MemberAccess` with the inner expression
    being either ``None`` or a constant path itself.

    Raises :py:class:`~unfold.errors.UnsupportedExpressionShape` for other node kinds,
    and :py:class:`~unfold.errors.MemberLookupError` if one of the members cannot be read.
    """
    return _resolve(node)


def try_resolve_constant_path(node: Node) -> typing.Tuple[bool, typing.Any]:
    """
    Try to evaluate the constant path ``node``.
    Returns a pair ``(resolved, value)``, where ``resolved`` is a boolean
    and ``value`` is the resulting value if ``resolved`` is ``True``, and ``None`` otherwise.
    """
    try:
        return True, _resolve(node)
    except (UnsupportedExpressionShape, MemberLookupError):
        return False, None
