import ast
import typing

from unfold.core.gensym import GenSym
from unfold.typing import BindingsT


# Values of these types can be written as literals in the generated code
LITERAL_TYPES = (bool, int, float, complex, str, bytes, type(None), type(Ellipsis))


ReifyResT = typing.Tuple[typing.Union[ast.Constant, ast.Name], GenSym, BindingsT]


def reify(value: typing.Any, gen_sym: GenSym) -> ReifyResT:
    """
    Returns a Python expression node representing ``value``:
    a literal if possible, or a name bound to the value otherwise.
    Returns the node, the updated ``gen_sym``, and the new bindings.
    """
    if type(value) in LITERAL_TYPES:
        return ast.Constant(value=value, kind=None), gen_sym, {}
    else:
        name, gen_sym = gen_sym('temp')
        return ast.Name(id=name, ctx=ast.Load()), gen_sym, {name: value}
