"""
Exceptions raised while resolving, unfolding, quoting or compiling expression trees.
"""


class UnfoldError(Exception):
    """
    Base class for all the errors raised by ``unfold``.
    """


class UnsupportedExpressionShape(UnfoldError, ValueError):
    """
    Raised when an expression node has a kind that cannot be handled in the current context
    (e.g. anything but a constant or a member access inside a constant path,
    or an unsupported piece of Python syntax during quoting).
    """


class MemberLookupError(UnfoldError, LookupError):
    """
    Raised when a member cannot be read off a value.
    """


class InvalidCalleeExpression(UnfoldError, ValueError):
    """
    Raised when the function expression of a splice point
    does not resolve to a :py:class:`~unfold.core.nodes.Lambda`.
    """


class ArityMismatch(UnfoldError, TypeError):
    """
    Raised when the number of arguments at a splice point differs from
    the number of parameters of the spliced function.
    """


class RecursiveSplice(UnfoldError, RecursionError):
    """
    Raised when a function is spliced into its own expansion
    (which would otherwise never terminate).
    """


class InliningDepthExceeded(UnfoldError, RecursionError):
    """
    Raised when nested splice points go deeper than the requested limit.
    """
