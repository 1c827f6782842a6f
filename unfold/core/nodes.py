"""
Expression tree nodes.

Every node lists its fields in ``_fields`` (in the same order as the constructor arguments),
so that the tree walker can traverse them generically.
Fields holding other nodes (or tuples of nodes) are children;
all other fields (operators, members, callees, names and types) are metadata.
Sequence fields are always stored as tuples.

Nodes are compared by identity; use :py:func:`~unfold.tools.expr_equal`
for structural comparison.
In particular, two :py:class:`Parameter` objects are different parameters
even if their names and types coincide.
"""
import ast
import typing

from unfold.core.members import Member


BINARY_OPERATORS = {
    "+": ast.Add,
    "-": ast.Sub,
    "*": ast.Mult,
    "/": ast.Div,
    "//": ast.FloorDiv,
    "%": ast.Mod,
    "**": ast.Pow,
    "<<": ast.LShift,
    ">>": ast.RShift,
    "|": ast.BitOr,
    "^": ast.BitXor,
    "&": ast.BitAnd,
    "@": ast.MatMult,
}

UNARY_OPERATORS = {
    "+": ast.UAdd,
    "-": ast.USub,
    "not": ast.Not,
    "~": ast.Invert,
}

COMPARE_OPERATORS = {
    "==": ast.Eq,
    "!=": ast.NotEq,
    "<": ast.Lt,
    "<=": ast.LtE,
    ">": ast.Gt,
    ">=": ast.GtE,
    "is": ast.Is,
    "is not": ast.IsNot,
    "in": ast.In,
    "not in": ast.NotIn,
}

BOOL_OPERATORS = {
    "and": ast.And,
    "or": ast.Or,
}


def _check_operator(op: str, known: typing.Mapping[str, typing.Any]) -> str:
    if op not in known:
        raise ValueError("Unknown operator: " + repr(op))
    return op


class Node:
    """
    Base class for expression tree nodes.
    """

    _fields: typing.Tuple[str, ...] = ()

    # Fields that are never traversed, even if they hold nodes
    _opaque_fields: typing.Tuple[str, ...] = ()

    def __repr__(self):
        return "{name}({fields})".format(
            name=type(self).__name__,
            fields=", ".join(
                "{field}={value}".format(field=field, value=repr(value))
                for field, value in iter_fields(self)))


def iter_fields(node: Node) -> typing.Iterator[typing.Tuple[str, typing.Any]]:
    """
    Yields pairs ``(name, value)`` for every field of ``node``.
    """
    for field in node._fields:
        yield field, getattr(node, field)


class Constant(Node):
    """
    A literal or an embedded runtime value.
    The value is opaque to the tree walkers, even if it is a node itself.
    """

    _fields = ("value",)
    _opaque_fields = ("value",)

    def __init__(self, value: typing.Any) -> None:
        self.value = value


class Parameter(Node):
    """
    A formal parameter of a :py:class:`Lambda`.
    ``type`` is the declared type of the parameter, if any.
    """

    _fields = ("name", "type")

    def __init__(self, name: str, type: typing.Any = None) -> None:
        self.name = name
        self.type = type

    def __repr__(self):
        return "<Parameter {name} at {id}>".format(name=self.name, id=hex(id(self)))


class MemberAccess(Node):
    """
    A read of ``member`` off the value of ``expr``,
    or off the member's owner if ``expr`` is ``None``.
    """

    _fields = ("expr", "member")

    def __init__(self, expr: typing.Optional[Node], member: Member) -> None:
        self.expr = expr
        self.member = member


class Call(Node):
    """
    A call of a known callable ``callee``.
    """

    _fields = ("callee", "args")

    def __init__(self, callee: typing.Callable, args: typing.Iterable[Node] = ()) -> None:
        self.callee = callee
        self.args = tuple(args)


class Invoke(Node):
    """
    A call of a callable produced by the expression ``func``.
    """

    _fields = ("func", "args")

    def __init__(self, func: Node, args: typing.Iterable[Node] = ()) -> None:
        self.func = func
        self.args = tuple(args)


class Lambda(Node):
    """
    A function definition: a tuple of parameters and a body expression.
    ``returns`` is the declared result type, if any.
    """

    _fields = ("params", "body", "returns")

    def __init__(
        self, params: typing.Iterable[Parameter], body: Node, returns: typing.Any = None
    ) -> None:
        self.params = tuple(params)
        self.body = body
        self.returns = returns


class BinaryOp(Node):

    _fields = ("op", "left", "right")

    def __init__(self, op: str, left: Node, right: Node) -> None:
        self.op = _check_operator(op, BINARY_OPERATORS)
        self.left = left
        self.right = right


class UnaryOp(Node):

    _fields = ("op", "operand")

    def __init__(self, op: str, operand: Node) -> None:
        self.op = _check_operator(op, UNARY_OPERATORS)
        self.operand = operand


class Compare(Node):
    """
    A single (non-chained) comparison.
    """

    _fields = ("op", "left", "right")

    def __init__(self, op: str, left: Node, right: Node) -> None:
        self.op = _check_operator(op, COMPARE_OPERATORS)
        self.left = left
        self.right = right


class BoolOp(Node):

    _fields = ("op", "values")

    def __init__(self, op: str, values: typing.Iterable[Node]) -> None:
        self.op = _check_operator(op, BOOL_OPERATORS)
        self.values = tuple(values)


class Conditional(Node):
    """
    ``body if test else orelse``
    """

    _fields = ("test", "body", "orelse")

    def __init__(self, test: Node, body: Node, orelse: Node) -> None:
        self.test = test
        self.body = body
        self.orelse = orelse


class Subscript(Node):
    """
    ``expr[index]`` with the index computed at runtime.
    """

    _fields = ("expr", "index")

    def __init__(self, expr: Node, index: Node) -> None:
        self.expr = expr
        self.index = index


class TupleLiteral(Node):

    _fields = ("elements",)

    def __init__(self, elements: typing.Iterable[Node]) -> None:
        self.elements = tuple(elements)


NODE_TYPES = {
    cls.__name__: cls
    for cls in (
        Constant,
        Parameter,
        MemberAccess,
        Call,
        Invoke,
        Lambda,
        BinaryOp,
        UnaryOp,
        Compare,
        BoolOp,
        Conditional,
        Subscript,
        TupleLiteral,
    )
}
