import ast
import typing

from unfold.core.nodes import Node, Parameter
from unfold.tools.immutable import ImmutableDict

BindingsT = typing.Dict[str, typing.Any]

SubstitutionsT = ImmutableDict[Parameter, Node]

PyExprT = ast.expr
PyFunctionNodeT = typing.Union[ast.Lambda, ast.FunctionDef]
