from collections import namedtuple

from unfold.core.nodes import Node
from unfold.tools import expr_inspector


Scope = namedtuple("Scope", "bound used free")


@expr_inspector
class _analyze_scope:
    @staticmethod
    def handle_Lambda(state, node, walk_field, skip_fields, **_):
        params = frozenset(node.params)
        in_scope = state.in_scope

        state = state.with_(bound=state.bound | params, in_scope=in_scope | params)
        state = walk_field(state, node.body)
        state = state.with_(in_scope=in_scope)

        skip_fields()
        return state

    @staticmethod
    def handle_Parameter(state, node, **_):
        state = state.with_(used=state.used | {node})
        if node not in state.in_scope:
            state = state.with_(free=state.free | {node})
        return state


def analyze_scope(node: Node) -> Scope:
    """
    Finds the parameters declared by lambdas in the tree (``bound``),
    the parameters referenced in the tree (``used``),
    and the ones referenced outside of the lambdas declaring them (``free``).
    """
    state = _analyze_scope(
        dict(bound=frozenset(), used=frozenset(), free=frozenset(), in_scope=frozenset()),
        node,
    )
    return Scope(bound=state.bound, used=state.used, free=state.free)
