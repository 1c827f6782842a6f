from unfold.tools.dispatcher import Dispatcher
from unfold.tools.immutable import ImmutableDict, ImmutableADict
from unfold.tools.walker import expr_walker, expr_inspector
from unfold.tools.utils import unparse, unindent, expr_equal
