"""
High-level API
--------------

.. autofunction:: unfold
.. autofunction:: unfold_function
.. autofunction:: use
.. autofunction:: new


Expression trees
================

.. autoclass:: Node
.. autoclass:: Constant
.. autoclass:: Parameter
.. autoclass:: MemberAccess
.. autoclass:: Call
.. autoclass:: Invoke
.. autoclass:: Lambda
.. autoclass:: BinaryOp
.. autoclass:: UnaryOp
.. autoclass:: Compare
.. autoclass:: BoolOp
.. autoclass:: Conditional
.. autoclass:: Subscript
.. autoclass:: TupleLiteral
.. autoclass:: Attribute
.. autoclass:: Item


Tags
====

.. autofunction:: splice_marker


Helper functions
================

.. autofunction:: quote
.. autofunction:: compile_expression
.. autofunction:: resolve_constant_path
.. autofunction:: analyze_scope


Low-level tools
---------------

.. autofunction:: expr_walker
.. autofunction:: expr_inspector
.. autofunction:: expr_equal
.. autoclass:: Dispatcher
"""

from unfold.tools import Dispatcher, expr_walker, expr_inspector, expr_equal
from unfold.core.nodes import (
    Node,
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
from unfold.core.members import Attribute, Item
from unfold.core.resolve import resolve_constant_path
from unfold.core.scope import analyze_scope
from unfold.core.compiler import compile_expression
from unfold.core.quote import quote
from unfold.highlevelapi import unfold, unfold_function, use, new
from unfold.tags import splice_marker
from unfold.errors import (
    UnfoldError,
    UnsupportedExpressionShape,
    MemberLookupError,
    InvalidCalleeExpression,
    ArityMismatch,
    RecursiveSplice,
    InliningDepthExceeded,
)
